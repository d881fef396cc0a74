"""Cold jokes picked at random from a SQLite collection."""

from __future__ import annotations

import sqlite3
from pathlib import Path


class JokeStore:
    """A table of jokes in a SQLite file."""

    def __init__(self, path: str | Path) -> None:
        self._db = sqlite3.connect(str(path))
        self._db.execute(
            "CREATE TABLE IF NOT EXISTS jokes (id INTEGER PRIMARY KEY NOT NULL, text TEXT NOT NULL)"
        )
        self._db.commit()

    def __enter__(self) -> "JokeStore":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def add(self, text: str) -> int:
        """Store a joke and return its id."""
        cursor = self._db.execute("INSERT INTO jokes (text) VALUES (?)", (text,))
        self._db.commit()
        return int(cursor.lastrowid)

    def count(self) -> int:
        (n,) = self._db.execute("SELECT COUNT(*) FROM jokes").fetchone()
        return int(n)

    def pick(self) -> str:
        """Return one joke at random."""
        row = self._db.execute("SELECT text FROM jokes ORDER BY RANDOM() LIMIT 1").fetchone()
        if row is None:
            raise LookupError("no jokes stored")
        return row[0]

    def close(self) -> None:
        self._db.close()


def tell_joke(store: JokeStore, name: str) -> str:
    """Pick a joke and put name where it says %name."""
    return store.pick().replace("%name", name)