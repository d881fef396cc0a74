"""Run raw CQ-coded messages sent by the bot owner."""

from __future__ import annotations

PREFIX = "run"


def unescape_cq(text: str) -> str:
    """Undo the escaping of CQ-code text."""
    return text.replace("&#91;", "[").replace("&#93;", "]").replace("&amp;", "&")


def parse_run(text: str) -> str | None:
    """The message a "run<CQ code>" command asks to send, or None for other text."""
    if not text.startswith(PREFIX):
        return None
    return unescape_cq(text[len(PREFIX):].strip())