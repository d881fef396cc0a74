"""Daily fortune slips drawn onto a background picture."""

from __future__ import annotations

import hashlib
import io
from datetime import date
from pathlib import Path
from typing import Any, BinaryIO
from zipfile import ZipFile

from PIL import Image, ImageDraw, ImageFont

TABLE: tuple[str, ...] = (
    "车万", "DC4", "爱因斯坦", "星空列车", "樱云之恋", "富婆妹", "李清歌", "公主连结",
    "原神", "明日方舟", "碧蓝航线", "碧蓝幻想", "战双", "阴阳师", "赛马娘", "东方归言录",
    "奇异恩典", "夏日口袋", "ASoul",
)
DEFAULT_KIND = "车万"


def background_index(name: str) -> int:
    """Return the setting value of a background kind."""
    try:
        return TABLE.index(name)
    except ValueError:
        raise ValueError("没有这个底图哦～") from None


def background_for_setting(value: int) -> str:
    """Return the background kind stored in a setting, defaulting to the first."""
    v = value & 0xFF
    return TABLE[v] if v < len(TABLE) else DEFAULT_KIND


def rows_num(total: int, div: int) -> int:
    """Number of groups of div needed to hold total items."""
    return -(-total // div)


def offset(total: int, now: int, distance: float) -> float:
    """Offset of item now (1-based) among total items, spaced by distance."""
    half = total // 2
    if total % 2 == 0:
        return (now - half - 1) * distance
    return (now - half - 1.5) * distance


def text_positions(
    text: str, char_width: float, char_height: float
) -> list[tuple[str, float, float]]:
    """Lay the slip text out in vertical columns of at most nine characters."""
    chars = list(text)
    n = len(chars)
    columns = rows_num(n, 9)
    out: list[tuple[str, float, float]] = []
    if columns == 2:
        div = rows_num(n, 2)
        for i, ch in enumerate(chars):
            col = rows_num(i + 1, div)
            in_col = min(n - (col - 1) * div, div)
            row = i % div + 1
            if col == 2:
                row += 9 - in_col
            out.append(
                (ch, 115 - offset(columns, col, char_width), offset(9, row, char_height) + 320.0)
            )
        return out
    for i, ch in enumerate(chars):
        col = rows_num(i + 1, 9)
        in_col = min(n - (col - 1) * 9, 9)
        row = i % 9 + 1
        out.append(
            (ch, 115 - offset(columns, col, char_width), offset(in_col, row, char_height) + 320.0)
        )
    return out


def daily_index(user_id: int, count: int, day: date | None = None) -> int:
    """Pick an index below count that stays the same for a user all day."""
    if count <= 0:
        raise ValueError("nothing to choose from")
    day = day or date.today()
    digest = hashlib.md5(f"{user_id}:{day.isoformat()}".encode()).digest()
    return int.from_bytes(digest[:8], "big") % count


def cache_name(zipfile: str, index: int, title: str, text: str) -> str:
    """Name of the cached picture for one background and slip."""
    return hashlib.md5(f"{zipfile}{index}{title}{text}".encode()).hexdigest()


def random_image(
    zip_path: str | Path, user_id: int, day: date | None = None
) -> tuple[Image.Image, int]:
    """Open today's background for a user from a zip archive."""
    with ZipFile(zip_path) as archive:
        infos = archive.infolist()
        index = daily_index(user_id, len(infos), day)
        with archive.open(infos[index]) as handle:
            image = Image.open(handle)
            image.load()
    return image, index


def _load_font(path: str | Path | None, size: float) -> Any:
    if path is None:
        try:
            return ImageFont.load_default(size=size)
        except TypeError:
            return ImageFont.load_default()
    return ImageFont.truetype(str(path), int(size))


def _ascent(font: Any) -> float:
    try:
        return font.getmetrics()[0]
    except AttributeError:
        return font.getbbox("A")[3]


def _height(font: Any, sample: str) -> float:
    box = font.getbbox(sample)
    return box[3] - box[1]


def draw(
    background: Image.Image,
    title: str,
    text: str,
    font_path: str | Path | None,
    out: BinaryIO,
) -> int:
    """Draw the slip on the background, write a PNG to out, return bytes written."""
    width, height = background.size
    canvas = Image.new("RGBA", (height, width), (0, 0, 0, 0))
    canvas.paste(background.convert("RGBA"), (0, 0))
    pen = ImageDraw.Draw(canvas)

    title_font = _load_font(font_path, 45)
    title_width = pen.textlength(title, font=title_font)
    pen.text(
        (140 - title_width / 2, 112 - _ascent(title_font)),
        title,
        fill=(255, 255, 255, 255),
        font=title_font,
    )

    body_font = _load_font(font_path, 23)
    step_x = pen.textlength("测", font=body_font) + 10
    step_y = _height(body_font, "测") + 10
    ascent = _ascent(body_font)
    for ch, x, y in text_positions(text, step_x, step_y):
        pen.text((x, y - ascent), ch, fill=(0, 0, 0, 255), font=body_font)

    data = _png_bytes(canvas)
    out.write(data)
    return len(data)


def _png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()