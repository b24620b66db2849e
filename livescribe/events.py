"""TranscriptEvent — the typed messages flowing from session to reconciler."""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class SessionStarted:
    pass


@dataclass(frozen=True)
class Partial:
    text: str


@dataclass(frozen=True)
class Committed:
    text: str


@dataclass(frozen=True)
class Error:
    message: str
    fatal: bool = False


TranscriptEvent = Union[SessionStarted, Partial, Committed, Error]
