"""Hearthstone card search and deck pictures from a card database site."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import requests

SITE = "https://hs.fbigame.com"
AJAX = "https://hs.fbigame.com/ajax.php?"
PARAMS = (
    "mod=get_cards_list&"
    "mode=-1&"
    "extend=-1&"
    "mutil_extend=&"
    "hero=-1&"
    "rarity=-1&"
    "cost=-1&"
    "mutil_cost=&"
    "techlevel=-1&"
    "type=-1&"
    "collectible=-1&"
    "isbacon=-1&"
    "page=1&"
    "search_type=1&"
    "deckmode=normal"
)
CARD_IMAGE_URL = "https://res.fbigame.com/hs/v13/{card_id}.png?auth_key={auth_key}"
USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 6.0; Nexus 5 Build/MRA58N) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/86.0.4240.198 Mobile Safari/537.36"
)
MAX_CARDS = 5

_HASH_MARK = 'var hash = "'
_DECK_RE = re.compile(r"[\s\S]*?(AAE[a-zA-Z0-9/+=]{70,})[\s\S]*")


def extract_hash(page: str) -> str:
    """The page hash the site embeds in its front page script."""
    _, mark, rest = page.partition(_HASH_MARK)
    if not mark:
        raise ValueError("page carries no hash")
    return rest.split('"', 1)[0]


def search_url(page_hash: str, query: str) -> str:
    return f"{AJAX}{PARAMS}&hash={page_hash}&search={query}"


def deck_url(page_hash: str, code: str) -> str:
    return (
        f"{AJAX}{PARAMS}mod=general_deck_image&deck_code={code}"
        f"&deck_text=&hash={page_hash}&search={code}"
    )


def find_deck_code(text: str) -> str | None:
    """The deck code contained in a message, if any."""
    m = _DECK_RE.fullmatch(text)
    return m.group(1) if m else None


def _get(url: str, session: Any) -> bytes:
    http = session if session is not None else requests.Session()
    response = http.get(
        url, headers={"Referer": SITE, "User-Agent": USER_AGENT}, timeout=30
    )
    try:
        if response.status_code != 200:
            raise requests.HTTPError(f"code {response.status_code}")
        return response.content
    finally:
        response.close()


def _page_hash(session: Any) -> str:
    return extract_hash(_get(SITE, session).decode("utf-8", "replace"))


def search_cards(query: str, session: Any = None) -> list[dict[str, Any]]:
    """Cards matching a search, at most MAX_CARDS of them."""
    url = search_url(_page_hash(session), query)
    data = json.loads(_get(url, session))
    cards = data.get("list") if isinstance(data, dict) else None
    if not isinstance(cards, list):
        return []
    return cards[:MAX_CARDS]


def deck_image(code: str, session: Any = None) -> str:
    """A base64:// picture of a deck."""
    url = deck_url(_page_hash(session), code)
    data = json.loads(_get(url, session))
    img = data.get("img") if isinstance(data, dict) else None
    return "base64://" + (img if isinstance(img, str) else "")


def card_image(
    card_id: str, auth_key: str, cache_dir: str | Path, session: Any = None
) -> Path:
    """The cached picture of a card, downloaded when it is not cached yet."""
    target = Path(cache_dir) / card_id
    if not target.exists():
        url = CARD_IMAGE_URL.format(card_id=card_id, auth_key=auth_key)
        target.write_bytes(_get(url, session))
    return target