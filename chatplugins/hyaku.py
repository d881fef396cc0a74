"""Ogura Hyakunin Isshu: the hundred poems, one at a time."""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass

BED = "https://gitcode.net/u011570312/OguraHyakuninIsshu/-/raw/master/"
CSV_NAME = "小倉百人一首.csv"
POEM_COUNT = 100

_NUMBER_RE = re.compile(r"[+-]?[0-9]+")
_REQUEST_RE = re.compile(r"百人一首之[\t\n\f\r ]?([0-9]+)")

_FIELDS = (
    ("●", "番号"),
    ("◉", "歌人"),
    ("○", "上の句"),
    ("○", "下の句"),
    ("◎", "上の句ひらがな"),
    ("◎", "下の句ひらがな"),
)


@dataclass(frozen=True)
class Poem:
    """One poem of the collection as stored in its CSV row."""

    number: str
    poet: str
    upper: str
    lower: str
    upper_kana: str
    lower_kana: str

    def __str__(self) -> str:
        values = (
            self.number,
            self.poet,
            self.upper,
            self.lower,
            self.upper_kana,
            self.lower_kana,
        )
        return "".join(
            f"{mark}{label}：{value}\n" for (mark, label), value in zip(_FIELDS, values)
        )


def load_poems(text: str) -> list[Poem]:
    """Parse the collection's CSV (with a title row) into its hundred poems, in order."""
    records = list(csv.reader(io.StringIO(text)))[1:]
    if len(records) != POEM_COUNT:
        raise ValueError("invalid csvfile")
    poems: list[Poem] = []
    for position, record in enumerate(records, start=1):
        if len(record) != len(_FIELDS):
            raise ValueError("invalid csvfile")
        if not _NUMBER_RE.fullmatch(record[0]):
            raise ValueError(f"invalid poem number: {record[0]!r}")
        if int(record[0]) != position:
            raise ValueError("invalid csvfile")
        poems.append(Poem(*record))
    return poems


def image_names(number: int) -> tuple[str, str]:
    """The two picture files of poem number (1 to 100)."""
    if not 1 <= number <= POEM_COUNT:
        raise ValueError("超出范围")
    return f"img/{number:03d}.jpg", f"img/{number:03d}.png"


def parse_request(text: str) -> int | None:
    """The poem asked for: 1 to 100, 0 for a random one, None when text is no request."""
    if text == "百人一首":
        return 0
    m = _REQUEST_RE.fullmatch(text)
    if m is None:
        return None
    number = int(m.group(1))
    if not 1 <= number <= POEM_COUNT:
        raise ValueError("超出范围")
    return number