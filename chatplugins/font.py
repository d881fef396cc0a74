"""Render arbitrary text into a picture with a chosen font."""

from __future__ import annotations

import base64
import io
import re
from pathlib import Path
from typing import Any

from PIL import Image, ImageDraw, ImageFont

DEFAULT_FONT = "regular.ttf"

FONTS: dict[str, str] = {
    "用终末体": "syumatu.ttf",
    "用终末变体": "nisi.ttf",
    "用紫罗兰体": "VioletEvergarden.ttf",
    "用樱酥体": "sakura.ttf",
    "用Consolas体": "consolas.ttf",
    "用苹方体": DEFAULT_FONT,
}

_COMMAND_RE = re.compile(r"(用.+)?渲染文字([\s\S]+)")


def parse_command(text: str) -> tuple[str, str] | None:
    """Split "(用<font>)渲染文字<text>" into (font choice, text)."""
    m = _COMMAND_RE.fullmatch(text)
    if m is None:
        return None
    return m.group(1) or "", m.group(2)


def resolve_font(choice: str, font_dir: str | Path) -> Path:
    """Map a font choice to its file; unknown choices get the default font."""
    return Path(font_dir) / FONTS.get(choice, DEFAULT_FONT)


def _load_font(path: str | Path | None, size: float) -> Any:
    if path is None:
        try:
            return ImageFont.load_default(size=size)
        except TypeError:
            return ImageFont.load_default()
    return ImageFont.truetype(str(path), int(size))


def _wrap(draw: ImageDraw.ImageDraw, text: str, font: Any, limit: float) -> list[str]:
    lines: list[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for ch in paragraph:
            if current and draw.textlength(current + ch, font=font) > limit:
                lines.append(current)
                current = ch
            else:
                current += ch
        lines.append(current)
    return lines


def render_to_base64(
    text: str, font_path: str | Path | None, width: int, font_size: float
) -> bytes:
    """Draw text black on white, wrapped to width, and return base64 PNG bytes."""
    font = _load_font(font_path, font_size)
    margin = int(font_size)
    probe = ImageDraw.Draw(Image.new("RGB", (1, 1)))
    lines = _wrap(probe, text, font, max(width - 2 * margin, 1))
    box = probe.textbbox((0, 0), "测Ay", font=font)
    line_height = max(box[3] - box[1], int(font_size)) + int(font_size) // 2
    height = 2 * margin + line_height * len(lines)
    image = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(image)
    for number, line in enumerate(lines):
        draw.text((margin, margin + number * line_height), line, fill="black", font=font)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue())