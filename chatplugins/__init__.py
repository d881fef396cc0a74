"""Building blocks for chat-bot plugins: emoji mixing, request handling, gacha, fortunes, song guessing and more."""

__version__ = "0.1.0"