"""GitHub repository search."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import requests

API_URL = "https://api.github.com/search/repositories"
OPENGRAPH_PREFIX = "https://opengraph.githubassets.com/0/"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/88.0.4324.182 Safari/537.36"
)

_COMMAND_RE = re.compile(r">github[\t\n\f\r ](-.{1,10}? )?(.*)")


class HTTPStatusError(Exception):
    """The server answered with a status other than 200."""


def not_null(text: str) -> str:
    """Return text, or "None" when it is empty."""
    return text if text else "None"


def parse_command(text: str) -> tuple[str, str] | None:
    """Split ">github [-x ]query" into (option, query)."""
    m = _COMMAND_RE.fullmatch(text)
    if m is None:
        return None
    return m.group(1) or "", m.group(2)


def net_get(url: str, headers: Mapping[str, str] | None = None, session: Any = None) -> bytes:
    """GET url and return the body, raising on any status but 200."""
    http = session if session is not None else requests.Session()
    response = http.get(url, headers=dict(headers or {}), timeout=30)
    try:
        body = response.content
        if response.status_code != 200:
            raise HTTPStatusError(f"code {response.status_code}")
    finally:
        response.close()
    return body


def search_repo(query: str, session: Any = None) -> dict[str, Any]:
    """Return the best matching repository of a search."""
    url = f"{API_URL}?{urlencode({'q': query})}"
    info = json.loads(net_get(url, {"User-Agent": USER_AGENT}, session))
    if _int(info.get("total_count")) == 0 or not info.get("items"):
        raise LookupError("没有找到这样的仓库")
    return info["items"][0]


def opengraph_url(full_name: str) -> str:
    return OPENGRAPH_PREFIX + full_name


def _int(value: Any) -> int:
    if isinstance(value, (bool, int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value))
        except ValueError:
            return 0
    return 0


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def format_repo(repo: Mapping[str, Any]) -> str:
    """Text summary of a repository."""
    license_info = repo.get("license")
    license_key = _str(license_info.get("key")) if isinstance(license_info, Mapping) else ""
    return (
        f"{_str(repo.get('full_name'))}\n"
        f"Description: {_str(repo.get('description'))}\n"
        f"Star/Fork/Issue: {_int(repo.get('watchers'))}/{_int(repo.get('forks'))}"
        f"/{_int(repo.get('open_issues'))}\n"
        f"Language: {not_null(_str(repo.get('language')))}\n"
        f"License: {not_null(license_key.upper())}\n"
        f"Last pushed: {_str(repo.get('pushed_at'))}\n"
        f"Jump: {_str(repo.get('html_url'))}\n"
    )