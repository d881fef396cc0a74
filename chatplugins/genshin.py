"""Simulated ten-pull gacha drawn from a zip archive of card art."""

from __future__ import annotations

import io
import random
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image

PREFIX_LENGTH = len("Genshin/")
CANVAS_SIZE = (1920, 1080)
CANVAS_COLOR = (50, 50, 50, 255)
CARD_STEP = 146
CARD_LEFT = 230
REPLY_ICON_POS = (1270, 945)

_NAME_RE = re.compile(r"_(.*)\.png")
_STAR_FILES = {"ThreeStar.png": 3, "FourStar.png": 4, "FiveStar.png": 5}
_BACKGROUNDS = {5: "five_bg.jpg", 4: "four_bg.jpg", 3: "three_bg.jpg"}
_UINT64 = 0xFFFFFFFFFFFFFFFF


def is_five_star_mode(value: int) -> bool:
    """Whether a stored setting selects the five-star pool."""
    return value & 1 == 1


def set_mode(value: int, five_star: bool) -> int:
    """Return the setting with its pool bit switched."""
    if five_star:
        return (value | 1) & _UINT64
    return value & (_UINT64 - 1)


def item_name(filename: str) -> str:
    """The display name of a card file such as "five/Fire_Diluc.png"."""
    m = _NAME_RE.search(filename)
    if m is None:
        raise ValueError(f"not a card file name: {filename!r}")
    return m.group(1)


def reply_text(names: list[str], kind: int, previous: str) -> str:
    """Announce five-star characters (kind 1) or weapons (kind 2)."""
    if kind == 1:
        head = "★五星角色★\n"
    elif kind == 2 and previous:
        head = "\n★五星武器★\n"
    else:
        head = "★五星武器★\n"
    return head + "".join(f"{name} * " for name in names)


class GachaArchive:
    """Card art, backgrounds and icons read from a zip archive."""

    def __init__(self, archive: zipfile.ZipFile) -> None:
        self._zip = archive
        self._files: dict[str, zipfile.ZipInfo] = {}
        self._folders: dict[str, list[str]] = {}
        self.stars: dict[int, str] = {}
        for info in archive.infolist():
            if info.is_dir():
                continue
            name = info.filename[PREFIX_LENGTH:]
            self._files[name] = info
            cut = name.rfind("/")
            if cut < 0:
                continue
            folder = name[:cut]
            if not folder:
                continue
            self._folders.setdefault(folder, []).append(name)
            if folder == "gacha" and name[cut + 1:] in _STAR_FILES:
                self.stars[_STAR_FILES[name[cut + 1:]]] = name

    @classmethod
    def open(cls, path: str | Path) -> "GachaArchive":
        return cls(zipfile.ZipFile(path))

    def __enter__(self) -> "GachaArchive":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def entries(self, folder: str) -> list[str]:
        """Files inside one folder, in archive order."""
        return list(self._folders.get(folder, ()))

    def read(self, name: str) -> bytes:
        """Contents of a file, named without the archive's top folder."""
        try:
            info = self._files[name]
        except KeyError:
            raise KeyError(f"no such file in archive: {name!r}") from None
        return self._zip.read(info)

    def element_icon(self, name: str) -> str:
        """The element icon belonging to a card, e.g. "Fire.png" for "five/Fire_X.png"."""
        start = name.rfind("/") + 1
        end = name.find("_")
        if end < start:
            raise ValueError(f"card name has no element: {name!r}")
        icon = name[start:end] + ".png"
        if icon not in self._files:
            raise KeyError(f"no such file in archive: {icon!r}")
        return icon

    def close(self) -> None:
        self._zip.close()


@dataclass(frozen=True)
class Pull:
    """One card drawn from the pool."""

    stars: int
    weapon: bool
    path: str

    @property
    def name(self) -> str:
        return item_name(self.path)


def summary(pulls: list[Pull]) -> str:
    """Text naming the five-star results; empty when there are none."""
    text = ""
    characters = [p.name for p in pulls if p.stars == 5 and not p.weapon]
    if characters:
        text += reply_text(characters, 1, text)
    weapons = [p.name for p in pulls if p.stars == 5 and p.weapon]
    if weapons:
        text += reply_text(weapons, 2, text)
    return text


class Gacha:
    """Draws cards with the pool's odds and renders the result."""

    def __init__(self, archive: GachaArchive, rng: Any = None) -> None:
        self.archive = archive
        self.rng = rng if rng is not None else random.Random()
        self.total = 0

    def _pick(self, folder: str, stars: int, weapon: bool) -> Pull:
        items = self.archive.entries(folder)
        if not items:
            raise LookupError(f"no entries in folder {folder!r}")
        return Pull(stars, weapon, items[self.rng.randrange(len(items))])

    def _five(self) -> Pull:
        if self.rng.randrange(2) == 0:
            return self._pick("five", 5, False)
        return self._pick("five2", 5, True)

    def _four(self) -> Pull:
        if self.rng.randrange(2) == 0:
            return self._pick("four", 4, False)
        return self._pick("four2", 4, True)

    def draw(self, count: int, five_star_mode: bool) -> list[Pull]:
        """Draw count cards, ordered for display."""
        drawn: list[Pull] = []
        if self.total % 9 == 0:
            drawn.append(self._five())
            count -= 1
        if five_star_mode:
            drawn.extend(self._five() for _ in range(count))
        else:
            for _ in range(count):
                a = self.rng.randrange(1000)
                if a <= 800:
                    drawn.append(self._pick("Three", 3, True))
                elif a <= 885:
                    drawn.append(self._pick("four", 4, False))
                elif a <= 970:
                    drawn.append(self._pick("four2", 4, True))
                elif a <= 985:
                    drawn.append(self._pick("five", 5, False))
                else:
                    drawn.append(self._pick("five2", 5, True))
            threes = [i for i, p in enumerate(drawn) if p.stars == 3]
            if threes and not any(p.stars == 4 for p in drawn):
                del drawn[threes[-1]]
                drawn.append(self._four())
            self.total += 1
        order = [(5, False), (4, False), (5, True), (4, True), (3, True)]
        return [p for key in order for p in drawn if (p.stars, p.weapon) == key]

    def _image(self, name: str) -> Image.Image:
        with Image.open(io.BytesIO(self.archive.read(name))) as im:
            return im.convert("RGBA")

    @staticmethod
    def _over(canvas: Image.Image, image: Image.Image, pos: tuple[int, int]) -> None:
        canvas.paste(image, pos, image)

    def render(self, pulls: list[Pull]) -> Image.Image:
        """Compose the result picture of a draw."""
        canvas = Image.new("RGBA", CANVAS_SIZE, CANVAS_COLOR)
        self._over(canvas, self._image("bg0.jpg"), (0, 0))
        for number, pull in enumerate(pulls):
            pos = (CARD_LEFT + CARD_STEP * number, 0)
            self._over(canvas, self._image(_BACKGROUNDS[pull.stars]), pos)
            self._over(canvas, self._image(pull.path), pos)
            self._over(canvas, self._image(self.archive.stars[pull.stars]), pos)
            self._over(canvas, self._image(self.archive.element_icon(pull.path)), pos)
        self._over(canvas, self._image("Reply.png"), REPLY_ICON_POS)
        return canvas