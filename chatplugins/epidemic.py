"""City epidemic statistics looked up from the public news feed."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import requests

TXURL = (
    "https://api.inews.qq.com/newsqa/v1/query/inner/publish/modules/list"
    "?modules=statisGradeCityDetail,diseaseh5Shelf"
)


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    return 0


def _format_any(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


@dataclass
class Area:
    """Epidemic figures of one region, with its sub-regions."""

    name: str = ""
    today_confirm: int = 0
    wzz_add: Any = None
    now_confirm: int = 0
    confirm: int = 0
    dead: int = 0
    heal: int = 0
    grade: str = ""
    wzz: int = 0
    children: list["Area"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Area":
        today = data.get("today") or {}
        total = data.get("total") or {}
        return cls(
            name=str(data.get("name") or ""),
            today_confirm=_int(today.get("confirm")),
            wzz_add=today.get("wzz_add"),
            now_confirm=_int(total.get("nowConfirm")),
            confirm=_int(total.get("confirm")),
            dead=_int(total.get("dead")),
            heal=_int(total.get("heal")),
            grade=str(total.get("grade") or ""),
            wzz=_int(total.get("wzz")),
            children=[cls.from_dict(c) for c in data.get("children") or [] if c is not None],
        )


def find_city(area: Area | None, name: str) -> Area | None:
    """Search the tree depth first for a region called name."""
    if area is None:
        return None
    if area.name == name:
        return area
    for child in area.children:
        if child.name == name:
            return child
        found = find_city(child, name)
        if found is not None:
            return found
    return None


def parse_response(data: bytes | str, city: str) -> tuple[Area | None, str]:
    """Return the city's figures (or None) and the feed's update time."""
    parsed = json.loads(data)
    shelf = ((parsed.get("data") or {}).get("diseaseh5Shelf")) or {}
    tree = shelf.get("areaTree") or []
    if not tree:
        raise ValueError("epidemic data has no area tree")
    root = Area.from_dict(tree[0]) if tree[0] is not None else None
    return find_city(root, city), str(shelf.get("lastUpdateTime") or "")


def query_epidemic(city: str, session: Any = None) -> tuple[Area | None, str]:
    """Fetch the feed and look up one city."""
    if not city:
        raise ValueError("你还没有输入城市名字呢！")
    http = session if session is not None else requests.Session()
    response = http.get(TXURL, timeout=30)
    try:
        if response.status_code != 200:
            raise requests.HTTPError(f"code {response.status_code}")
        body = response.content
    finally:
        response.close()
    return parse_response(body, city)


def format_report(area: Area, update_time: str) -> str:
    """Render the reply text for one region."""
    return (
        f"【{area.name}】疫情数据\n"
        f"新增人数：{area.today_confirm}\n"
        f"现有确诊：{area.now_confirm}\n"
        f"累计确诊：{area.confirm}\n"
        f"治愈人数：{area.heal}\n"
        f"死亡人数：{area.dead}\n"
        f"无症状人数：{area.wzz}\n"
        f"新增无症状：{_format_any(area.wzz_add)}\n"
        f"更新时间：\n『{update_time}』"
    )