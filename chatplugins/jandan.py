"""Random funny pictures collected from a picture board."""

from __future__ import annotations

import re
import sqlite3
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import lxml.html

API = "http://jandan.net/pic"

_ISO_POLY = 0xD800000000000000
_MASK = 0xFFFFFFFFFFFFFFFF


def _make_table() -> list[int]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ _ISO_POLY if crc & 1 else crc >> 1
        table.append(crc)
    return table


_TABLE = _make_table()

_CURRENT_XPATH = "//*[@id='comments']/div[2]/div/span[@class='current-comment-page']/text()"
_PICTURE_XPATH = "//*[@class='view_img_link']"
_PREVIOUS_XPATH = (
    "//*[@id='comments']/div[@class='comments']/div[@class='cp-pagenavi']"
    "/a[@class='previous-comment-page']"
)
_DIGITS_RE = re.compile(r"\d+")


def crc64_iso(data: bytes) -> int:
    """CRC-64 with the ISO polynomial, as used for picture ids."""
    crc = _MASK
    for byte in data:
        crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK


def picture_id(url: str) -> int:
    """The id under which a picture URL is stored."""
    return crc64_iso(url.encode("utf-8"))


def _signed(value: int) -> int:
    return value - (1 << 64) if value >= 1 << 63 else value


class PictureStore:
    """Picture URLs kept in a SQLite file."""

    def __init__(self, path: str | Path) -> None:
        self._db = sqlite3.connect(str(path), check_same_thread=False)
        self._lock = threading.Lock()
        with self._lock:
            self._db.execute(
                "CREATE TABLE IF NOT EXISTS picture (id INTEGER PRIMARY KEY NOT NULL, url TEXT NOT NULL)"
            )
            self._db.commit()

    def __enter__(self) -> "PictureStore":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def contains(self, picture: int) -> bool:
        with self._lock:
            row = self._db.execute(
                "SELECT 1 FROM picture WHERE id = ?", (_signed(picture),)
            ).fetchone()
        return row is not None

    def insert(self, picture: int, url: str) -> None:
        with self._lock:
            self._db.execute(
                "INSERT OR REPLACE INTO picture (id, url) VALUES (?, ?)",
                (_signed(picture), url),
            )
            self._db.commit()

    def count(self) -> int:
        with self._lock:
            (n,) = self._db.execute("SELECT COUNT(*) FROM picture").fetchone()
        return int(n)

    def random(self) -> str:
        """The URL of a random picture."""
        with self._lock:
            row = self._db.execute(
                "SELECT url FROM picture ORDER BY RANDOM() LIMIT 1"
            ).fetchone()
        if row is None:
            raise LookupError("no pictures stored")
        return row[0]

    def close(self) -> None:
        self._db.close()


@dataclass(frozen=True)
class Page:
    """What one board page holds."""

    pictures: list[str]
    current: int | None
    previous: str | None


def parse_page(html: str) -> Page:
    """Picture URLs, the current page number and the link to the older page."""
    doc = lxml.html.fromstring(html)
    current = None
    texts = doc.xpath(_CURRENT_XPATH)
    if texts:
        m = _DIGITS_RE.search(str(texts[0]))
        if m:
            current = int(m.group())
    pictures = []
    for element in doc.xpath(_PICTURE_XPATH):
        values = list(element.attrib.values())
        if values:
            pictures.append("https:" + values[0])
    previous = None
    links = doc.xpath(_PREVIOUS_XPATH)
    if links:
        values = list(links[0].attrib.values())
        if len(values) > 1:
            previous = "https:" + values[1]
    return Page(pictures, current, previous)


def update(store: PictureStore, fetch: Callable[[str], str], start_url: str = API) -> int:
    """Walk back through the board storing new pictures until a known one appears.

    fetch(url) returns a page's HTML. Returns the number of pictures added.
    """
    page = parse_page(fetch(start_url))
    if page.current is None:
        raise ValueError("page carries no page number")
    total = page.current
    added = 0
    for number in range(total):
        for url in page.pictures:
            key = picture_id(url)
            if store.contains(key):
                return added
            store.insert(key, url)
            added += 1
        if number != total - 1:
            if page.previous is None:
                raise ValueError("page carries no link to older pictures")
            page = parse_page(fetch(page.previous))
    return added