"""Friend requests and group invitations: auto-approval settings and flag codes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

_APPLY = 0b001
_INVITE = 0b010
_MASTER_OFF = 0b100

_FULL = 0x4E00
_TAIL = 0x3D00
_WS = r"[\t\n\f\r ]"

_DECISION_RE = re.compile(rf"(同意|拒绝)(申请|邀请){_WS}*([一-踀]{{4}}){_WS}*(.*)")
_TOGGLE_RE = re.compile(r"(开启|关闭)自动同意(申请|邀请|主人)")
_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass
class AutoApprove:
    """Which requests the bot accepts on its own."""

    apply: bool = False
    invite: bool = False
    master_off: bool = False

    @classmethod
    def from_int(cls, value: int) -> "AutoApprove":
        return cls(
            apply=bool(value & _APPLY),
            invite=bool(value & _INVITE),
            master_off=bool(value & _MASTER_OFF),
        )

    def to_int(self) -> int:
        return (
            (_APPLY if self.apply else 0)
            | (_INVITE if self.invite else 0)
            | (_MASTER_OFF if self.master_off else 0)
        )

    def should_approve(self, kind: str, is_superuser: bool) -> bool:
        """Whether a request of kind "申请" (friend) or "邀请" (group) is accepted."""
        if kind == "申请":
            enabled = self.apply
        elif kind == "邀请":
            enabled = self.invite
        else:
            raise ValueError(f"unknown request kind: {kind!r}")
        return enabled or (not self.master_off and is_superuser)

    def apply_toggle(self, action: str, target: str) -> None:
        """Apply a "开启"/"关闭" switch to "申请", "邀请" or "主人"."""
        if action not in ("开启", "关闭"):
            raise ValueError(f"unknown action: {action!r}")
        on = action == "开启"
        if target == "申请":
            self.apply = on
        elif target == "邀请":
            self.invite = on
        elif target == "主人":
            self.master_off = not on
        else:
            raise ValueError(f"unknown target: {target!r}")


def base16384_encode(data: bytes) -> str:
    """Encode bytes as base16384 text: 7 bytes to 4 CJK characters."""
    out: list[str] = []
    for start in range(0, len(data), 7):
        chunk = data[start:start + 7]
        size = len(chunk)
        value = int.from_bytes(chunk.ljust(7, b"\0"), "big")
        count = 4 if size == 7 else -(-size * 8 // 14)
        out.extend(
            chr(_FULL + ((value >> (42 - 14 * i)) & 0x3FFF)) for i in range(count)
        )
        if size < 7:
            out.append(chr(_TAIL + size))
    return "".join(out)


def base16384_decode(text: str) -> bytes:
    """Decode base16384 text back to bytes."""
    tail = 0
    if text and _TAIL + 1 <= ord(text[-1]) <= _TAIL + 6:
        tail = ord(text[-1]) - _TAIL
        text = text[:-1]
    values = []
    for ch in text:
        code = ord(ch)
        if not _FULL <= code <= _FULL + 0x3FFF:
            raise ValueError(f"invalid base16384 character: {ch!r}")
        values.append(code - _FULL)
    groups = [values[i:i + 4] for i in range(0, len(values), 4)]
    out = bytearray()
    for number, group in enumerate(groups):
        last = number == len(groups) - 1
        if last and tail:
            if len(group) != -(-tail * 8 // 14):
                raise ValueError("base16384 tail does not match its length marker")
        elif len(group) != 4:
            raise ValueError("truncated base16384 text")
        value = 0
        for i, part in enumerate(group):
            value |= part << (42 - 14 * i)
        chunk = value.to_bytes(7, "big")
        out += chunk[:tail] if last and tail else chunk
    return bytes(out)


def encode_flag(flag: str | int) -> str:
    """Encode a numeric request flag as four base16384 characters."""
    if isinstance(flag, str):
        if not _INT_RE.fullmatch(flag):
            raise ValueError(f"invalid flag: {flag!r}")
        flag = int(flag)
    if not -(1 << 63) <= flag < (1 << 63):
        raise ValueError(f"flag out of range: {flag}")
    raw = (flag & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "big")
    return base16384_encode(raw[1:])


def decode_flag(text: str) -> str:
    """Turn four base16384 characters back into the numeric flag string."""
    raw = base16384_decode(text)[:7].ljust(7, b"\0")
    return str(int.from_bytes(b"\0" + raw, "big", signed=True))


def parse_decision(text: str) -> tuple[bool, str, str, str] | None:
    """Parse "同意/拒绝 申请/邀请 <flag> [reason]" into (approve, kind, flag, reason)."""
    m = _DECISION_RE.fullmatch(text)
    if m is None:
        return None
    return m.group(1) == "同意", m.group(2), decode_flag(m.group(3)), m.group(4)


def parse_toggle(text: str) -> tuple[str, str] | None:
    """Parse "开启/关闭自动同意申请/邀请/主人" into (action, target)."""
    m = _TOGGLE_RE.fullmatch(text)
    if m is None:
        return None
    return m.group(1), m.group(2)


def _when(when: datetime | int | float) -> str:
    if not isinstance(when, datetime):
        when = datetime.fromtimestamp(when)
    return when.strftime("%Y-%m-%d %H:%M:%S")


def format_group_invite(
    when: datetime | int | float,
    username: str,
    userid: int,
    groupname: str,
    groupid: int,
    flag_text: str,
    approved: bool,
) -> list[str]:
    """Build the forwarded nodes reporting a group invitation to the owner."""
    body = (
        f"收到来自\n用户:[{username}]({userid})的群聊邀请"
        f"\n群聊:[{groupname}]({groupid})"
    )
    now = _when(when)
    if approved:
        return [f"已自动同意在{now}{body}\nflag:{flag_text}"]
    return [
        f"在{now}{body}\n请在下方复制flag并在前面加上:\n同意/拒绝邀请，来决定同意还是拒绝",
        flag_text,
    ]


def format_friend_request(
    when: datetime | int | float,
    username: str,
    userid: int,
    comment: str,
    flag_text: str,
    approved: bool,
) -> list[str]:
    """Build the forwarded nodes reporting a friend request to the owner."""
    body = f"收到来自\n用户:[{username}]({userid})\n的好友请求:{comment}"
    now = _when(when)
    if approved:
        return [f"已自动同意在{now}{body}\nflag:{flag_text}"]
    return [
        f"在{now}{body}\n请在下方复制flag并在前面加上:\n同意/拒绝申请，来决定同意还是拒绝",
        flag_text,
    ]