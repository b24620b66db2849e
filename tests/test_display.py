"""TDD: console front end tests written FIRST"""
from pathlib import Path

from livescribe.display import render_transcript, status_line
from livescribe.main import _apply_overrides, _parse_args
from livescribe.reconciler import TranscriptMessage

from conftest import make_config


def test_status_line_listening_when_empty():
    line = status_line([], None)
    assert line.plain == "Listening..."


def test_status_line_transcribing_once_text_arrives():
    line = status_line([TranscriptMessage("hi", True)], None)
    assert line.plain == "Transcribing"


def test_status_line_error_wins():
    line = status_line([TranscriptMessage("hi", False)], "quota exceeded")
    assert line.plain == "quota exceeded"
    assert "red" in str(line.style)


def test_render_transcript_styles_partial():
    group = render_transcript([TranscriptMessage("hello", False), TranscriptMessage("wor", True)])
    status, body = group.renderables

    assert status.plain == "Transcribing"
    assert body.plain == "hello wor"
    assert any(span.style == "dim italic" for span in body.spans)


def test_parse_args():
    args = _parse_args(["clip.wav", "--language", "de"])
    assert args.wav == Path("clip.wav")
    assert args.language == "de"
    assert args.model is None


def test_apply_overrides_only_replaces_given_values():
    config = make_config()
    args = _parse_args(["clip.wav", "--model", "scribe_v3"])

    updated = _apply_overrides(config, args)

    assert updated.model_id == "scribe_v3"
    assert updated.language_code == config.language_code
