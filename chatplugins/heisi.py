"""Picture links packed as 10-byte records, picked at random per category."""

from __future__ import annotations

import random
from pathlib import Path
from typing import Any

ITEM_SIZE = 10
_BASE = "http://hs.heisiwu.com/wp-content/uploads/"
_EXTENSIONS = {0: ".jpg", 1: ".png", 2: ".webp"}

FILES: dict[str, str] = {
    "来点黑丝": "heisi.bin",
    "来点白丝": "baisi.bin",
    "来点jk": "jk.bin",
    "来点巨乳": "jur.bin",
    "来点足控": "zuk.bin",
    "来点网红": "mcn.bin",
}


def decode_item(item: bytes) -> str:
    """Turn one 10-byte record into its picture URL."""
    if len(item) != ITEM_SIZE:
        raise ValueError(f"item must be {ITEM_SIZE} bytes, got {len(item)}")
    year = ((item[0] >> 4) & 0x0F) + 2021
    month = item[0] & 0x0F
    if year == 2021:
        num = int.from_bytes(item[1:5], "big")
        digest = item[5:9].hex()
        return (
            f"{_BASE}{year:4d}/{month:02d}/{year:4d}{month:02d}16{num:06d}"
            f"-611a3{digest:>8}.jpg"
        )
    d = int.from_bytes(item[1:9], "big")
    scaled = bool(item[9] & 0x80)
    num = item[9] & 0x7F
    url = f"{_BASE}{year:4d}/{month:02d}/{d & 0x0FFFFFFFFFFFFFFF:015x}"
    if num > 0:
        url += f"-{num}"
    if scaled:
        url += "-scaled"
    ext = (d >> 60) & 0x0F
    if ext not in _EXTENSIONS:
        raise ValueError("invalid ext")
    return url + _EXTENSIONS[ext]


def split_items(data: bytes) -> list[bytes]:
    """Cut packed data into 10-byte records."""
    if len(data) % ITEM_SIZE:
        raise ValueError("invalid data")
    return [data[i:i + ITEM_SIZE] for i in range(0, len(data), ITEM_SIZE)]


class Gallery:
    """The packed records of every category."""

    def __init__(self, items: dict[str, list[bytes]]) -> None:
        self._items = items

    @classmethod
    def load(cls, folder: str | Path) -> "Gallery":
        base = Path(folder)
        items = {}
        for command, filename in FILES.items():
            try:
                items[command] = split_items((base / filename).read_bytes())
            except ValueError:
                raise ValueError(f"invalid data {filename}") from None
        return cls(items)

    def pick(self, command: str, rng: Any = None) -> str:
        """A random picture URL for one of the commands."""
        try:
            items = self._items[command]
        except KeyError:
            raise ValueError(f"unknown command: {command!r}") from None
        if not items:
            raise LookupError(f"no pictures for {command!r}")
        rng = rng if rng is not None else random.Random()
        return decode_item(items[rng.randrange(len(items))])