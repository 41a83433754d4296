"""Unit tests for :mod:`gerbil.entrypoints.cli.helpers.messages`.

This suite verifies three behaviors:

1) Emoji/ASCII glyph selection respects the *current* stderr encoding
   reported by ``click.get_text_stream("stderr")``.
2) ``_supports_character`` re-queries Click's text stream on every call.
3) ``warn``/``success``/``error`` emit styled lines to **stderr** only.
"""

import io
import sys

import click
import pytest

from gerbil.entrypoints.cli.helpers.messages import (
    _supports_character,
    caution_glyph,
    error,
    error_glyph,
    success,
    success_glyph,
    warn,
)

SET_YELLOW = "\x1b[33m"
SET_GREEN = "\x1b[32m"
SET_RED = "\x1b[31m"
SET_BOLD = "\x1b[1m"
RESET = "\x1b[0m"


class FakeTTY(io.StringIO):
    """A text stream that mimics a TTY and exposes a controllable encoding."""

    def __init__(self, encoding: str):
        super().__init__()
        self._encoding = encoding

    @property
    def encoding(self) -> str:
        """Declared character encoding (e.g., ``'ascii'`` or ``'utf-8'``)."""
        return self._encoding

    def isatty(self) -> bool:
        """Report a TTY so Click keeps ANSI styling."""
        return True


@pytest.mark.parametrize(
    ("encoding", "expected"),
    [
        ("ascii", ("[!]", "[OK]", "[X]")),
        ("utf-8", ("⚠️", "✅", "❌")),
    ],
)
def test_glyphs_respect_stream_encoding(monkeypatch, encoding, expected):
    """Glyph helpers choose emoji vs ASCII according to the stderr encoding."""
    stream = FakeTTY(encoding)
    monkeypatch.setattr(click, "get_text_stream", lambda name: stream)

    assert (caution_glyph(), success_glyph(), error_glyph()) == expected


def test_supports_character_requeries_stream_each_call(monkeypatch):
    """_supports_character consults Click's stream on every call (no caching)."""
    calls: list[str] = []

    def stream_factory(name: str):  # pylint: disable=unused-argument
        enc = "ascii" if not calls else "utf-8"
        calls.append(enc)
        return FakeTTY(enc)

    monkeypatch.setattr(click, "get_text_stream", stream_factory)

    assert _supports_character("⚠️") is False
    assert _supports_character("⚠️") is True
    assert calls == ["ascii", "utf-8"]


@pytest.mark.parametrize(
    ("encoding", "glyph", "color_code", "func"),
    [
        ("ascii", "[!]", SET_YELLOW, warn),
        ("utf-8", "⚠️", SET_YELLOW, warn),
        ("ascii", "[OK]", SET_GREEN, success),
        ("utf-8", "✅", SET_GREEN, success),
        ("ascii", "[X]", SET_RED, error),
        ("utf-8", "❌", SET_RED, error),
    ],
)
def test_messages_emit_styled_stderr(monkeypatch, encoding, glyph, color_code, func):
    """warn/success/error write bold, colored lines to stderr with the right glyph."""
    stream = FakeTTY(encoding)
    monkeypatch.setattr(click, "get_text_stream", lambda name: stream)
    monkeypatch.setattr(sys, "stderr", stream, raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("CLICOLOR", "1")

    func("2 failure(s) across 1 scenario file(s).")

    out = stream.getvalue()
    assert glyph in out
    assert SET_BOLD in out
    assert color_code in out
    assert RESET in out


def test_error_writes_to_stderr_only(monkeypatch, capsys):
    """error() writes to stderr and leaves stdout for scenario reports."""
    stream = FakeTTY("utf-8")
    monkeypatch.setattr(click, "get_text_stream", lambda name: stream)

    error("scenario.py aborted")

    captured = capsys.readouterr()
    assert "scenario.py aborted" in captured.err
    assert captured.out == ""
