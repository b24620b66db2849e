"""Entry point — wires Config → RealtimeTranscriber → console display."""
import argparse
import asyncio
import dataclasses
import logging
from pathlib import Path

from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler

from livescribe.audio.wav import WavFileSource
from livescribe.config import Config
from livescribe.constants import (
    DISPLAY_POLL_INTERVAL,
    LIVE_REFRESH_PER_SECOND,
    MSG_STARTING,
)
from livescribe.display import render_transcript
from livescribe.realtime import RealtimeTranscriber
from livescribe.session import SessionState

console = Console()


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(console=console, rich_tracebacks=True))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="livescribe",
        description="Stream a mono 16-bit WAV file to ElevenLabs Scribe realtime and print the transcript.",
    )
    parser.add_argument("wav", type=Path, help="mono 16-bit PCM WAV file")
    parser.add_argument("--language", help="language code (overrides SCRIBE_LANGUAGE)")
    parser.add_argument("--model", help="model id (overrides SCRIBE_MODEL_ID)")
    return parser.parse_args(argv)


def _apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    overrides = {
        key: value
        for key, value in (("language_code", args.language), ("model_id", args.model))
        if value
    }
    return dataclasses.replace(config, **overrides)


async def run(config: Config, wav_path: Path) -> int:
    source = WavFileSource(wav_path)
    transcriber = RealtimeTranscriber(config)
    match await transcriber.setup():
        case False:
            console.print(f"[bold red]{transcriber.last_error}")
            return 1
        case True:
            pass

    reconciler = transcriber.reconciler
    transcriber.start_streaming()
    with Live(
        render_transcript(reconciler.messages()),
        console=console,
        refresh_per_second=LIVE_REFRESH_PER_SECOND,
    ) as live:
        streaming = asyncio.create_task(transcriber.stream_source(source))
        while not streaming.done():
            live.update(render_transcript(reconciler.messages(), transcriber.last_error))
            match transcriber.session.state:
                case SessionState.CLOSED:
                    streaming.cancel()
                case _:
                    pass
            await asyncio.sleep(DISPLAY_POLL_INTERVAL)
        try:
            await streaming
        except asyncio.CancelledError:
            pass
        final_text = await transcriber.finalize()
        live.update(render_transcript([], transcriber.last_error))

    console.print(final_text)
    return 0 if transcriber.last_error is None else 1


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = _apply_overrides(Config.from_env(), args)
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_STARTING)

    return asyncio.run(run(config, args.wav))


if __name__ == "__main__":
    raise SystemExit(main())
