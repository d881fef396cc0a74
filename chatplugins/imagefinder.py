"""Keyword picture search on a public illustration index."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote_plus

import requests

SEARCH_URL = "https://api.pixivel.moe/v2/pixiv/illust/search/{keyword}?page=0"
REFERER = "https://pixivel.moe/"
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/94.0.4606.61 Safari/537.36"
)

_HREF_RE = re.compile(r'<a href=".*">')


class SearchError(Exception):
    """The search service reported an error."""


def format_tags(tags: Iterable[Mapping[str, Any]]) -> str:
    """Each tag on its own line as "#name" or "#name (translation)"."""
    parts: list[str] = []
    for tag in tags:
        name = str(tag.get("name") or "")
        translation = str(tag.get("translation") or "")
        line = f"\n#{name}"
        if translation:
            line += f" ({translation})"
        parts.append(line)
    return "".join(parts)


def clean_description(html: str) -> str:
    """Strip line-break and link markup from a description."""
    text = html.replace("<br />", "\n").replace("</a>", "")
    return _HREF_RE.sub("", text)


def parse_result(data: bytes | str) -> list[dict[str, Any]]:
    """The illustrations of a search answer; raises when the service reports an error."""
    parsed = json.loads(data)
    if parsed.get("error"):
        raise SearchError(str(parsed.get("message") or ""))
    illusts = (parsed.get("data") or {}).get("illusts") or []
    return list(illusts)


def search_illusts(keyword: str, session: Any = None) -> list[dict[str, Any]]:
    """Search the index for a keyword."""
    http = session if session is not None else requests.Session()
    url = SEARCH_URL.format(keyword=quote_plus(keyword))
    response = http.get(
        url, headers={"Referer": REFERER, "User-Agent": USER_AGENT}, timeout=30
    )
    try:
        if response.status_code != 200:
            raise requests.HTTPError(f"code {response.status_code}")
        body = response.content
    finally:
        response.close()
    return parse_result(body)


def format_illust(illust: Mapping[str, Any], user_name: str, user_id: int | str) -> str:
    """Caption text of one illustration."""
    return (
        f"{illust.get('width', 0)}x{illust.get('height', 0)}\n"
        f"标题: {illust.get('title', '')}\n"
        f"副标题: {illust.get('altTitle', '')}\n"
        f"ID: {illust.get('id', 0)}\n"
        f"画师: {user_name} ({user_id})\n"
        f"分级:{illust.get('sanity', 0)}\n"
        f"{clean_description(str(illust.get('description') or ''))}"
        f"{format_tags(illust.get('tags') or [])}"
    )