"""Terminal message helpers for the GERBIL CLI.

Small helpers for rendering user-visible lines with emoji→ASCII fallbacks.
Messages write to stderr so stdout stays reserved for scenario reports.
"""

import click

GLYPHS = {
    "caution": ("⚠️", "[!]"),
    "success": ("✅", "[OK]"),
    "error": ("❌", "[X]"),
}


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on stderr.

    The stream is looked up on every call so a changed stderr is honoured.
    """
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _glyph(kind: str) -> str:
    emoji, fallback = GLYPHS[kind]
    return emoji if _supports_character(emoji) else fallback


def caution_glyph() -> str:
    """Return "⚠️" when stderr can encode it, otherwise "[!]"."""
    return _glyph("caution")


def success_glyph() -> str:
    """Return "✅" when stderr can encode it, otherwise "[OK]"."""
    return _glyph("success")


def error_glyph() -> str:
    """Return "❌" when stderr can encode it, otherwise "[X]"."""
    return _glyph("error")


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to **stderr** with a caution glyph.

    Example:
        ``⚠️  2 scenario file(s) reported failures.``
    """
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to **stderr** with a success glyph.

    Example:
        ``✅  3 scenario file(s) passed.``
    """
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to **stderr** with an error glyph.

    Example:
        ``❌  tests/math.py aborted: RuntimeError: fixture missing``
    """
    click.secho(f"{error_glyph()}  {msg}", fg="red", bold=True, err=True)
