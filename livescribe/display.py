"""Console rendering of the live transcript."""
from typing import Optional

from rich.console import Group
from rich.text import Text

from livescribe.constants import STATUS_LISTENING, STATUS_TRANSCRIBING
from livescribe.reconciler import TranscriptMessage


def status_line(messages: list[TranscriptMessage], error: Optional[str]) -> Text:
    match (error, messages):
        case (str() as message, _):
            return Text(message, style="bold red")
        case (None, []):
            return Text(STATUS_LISTENING, style="dim")
        case _:
            return Text(STATUS_TRANSCRIBING, style="bold cyan")


def render_transcript(messages: list[TranscriptMessage], error: Optional[str] = None) -> Group:
    body = Text()
    for index, message in enumerate(messages):
        if index:
            body.append(" ")
        body.append(message.text, style="dim italic" if message.is_partial else "")
    return Group(status_line(messages, error), body)
