from datetime import datetime

import pytest

from chatplugins.event import (
    AutoApprove,
    base16384_decode,
    base16384_encode,
    decode_flag,
    encode_flag,
    format_friend_request,
    format_group_invite,
    parse_decision,
    parse_toggle,
)

WHEN = datetime(2022, 11, 10, 8, 30, 5)


def test_auto_approve_from_int():
    a = AutoApprove.from_int(0b101)
    assert (a.apply, a.invite, a.master_off) == (True, False, True)


@pytest.mark.parametrize("value", range(8))
def test_auto_approve_round_trip(value):
    assert AutoApprove.from_int(value).to_int() == value


def test_toggle_apply_and_invite():
    a = AutoApprove()
    a.apply_toggle("开启", "申请")
    a.apply_toggle("开启", "邀请")
    assert a.to_int() == 0b011
    a.apply_toggle("关闭", "申请")
    assert a.apply is False and a.invite is True


def test_toggle_master_is_inverted():
    a = AutoApprove()
    a.apply_toggle("关闭", "主人")
    assert a.master_off is True
    a.apply_toggle("开启", "主人")
    assert a.master_off is False


def test_toggle_invalid():
    with pytest.raises(ValueError):
        AutoApprove().apply_toggle("开启", "别的")


def test_should_approve():
    a = AutoApprove(invite=True)
    assert a.should_approve("邀请", False) is True
    assert a.should_approve("申请", False) is False
    assert a.should_approve("申请", True) is True
    a.master_off = True
    assert a.should_approve("申请", True) is False
    with pytest.raises(ValueError):
        a.should_approve("other", True)


def test_base16384_zero_block():
    assert base16384_encode(b"\x00" * 7) == "\u4e00" * 4


def test_base16384_tail_marker():
    assert base16384_encode(b"\x00") == "\u4e00\u3d01"


@pytest.mark.parametrize("size", range(0, 22))
def test_base16384_round_trip(size):
    data = bytes((i * 37 + 11) % 256 for i in range(size))
    encoded = base16384_encode(data)
    assert base16384_decode(encoded) == data
    assert all(0x3D00 <= ord(c) <= 0x8DFF for c in encoded)


def test_base16384_decode_invalid():
    with pytest.raises(ValueError):
        base16384_decode("abc")


@pytest.mark.parametrize("flag", [0, 1, 1234567890123, (1 << 56) - 1])
def test_flag_round_trip(flag):
    encoded = encode_flag(str(flag))
    assert len(encoded) == 4
    assert all("一" <= c <= "踀" for c in encoded)
    assert decode_flag(encoded) == str(flag)


def test_flag_drops_top_byte():
    flag = (5 << 56) + 42
    assert decode_flag(encode_flag(flag)) == "42"


def test_flag_invalid():
    with pytest.raises(ValueError):
        encode_flag("12ab")
    with pytest.raises(ValueError):
        encode_flag(1 << 63)


def test_parse_decision():
    es = encode_flag("987654321")
    assert parse_decision(f"同意申请 {es} 欢迎") == (True, "申请", "987654321", "欢迎")
    assert parse_decision(f"拒绝邀请{es}") == (False, "邀请", "987654321", "")
    assert parse_decision("同意申请 abcd") is None


def test_parse_toggle():
    assert parse_toggle("开启自动同意邀请") == ("开启", "邀请")
    assert parse_toggle("关闭自动同意主人") == ("关闭", "主人")
    assert parse_toggle("开启自动同意邀请!") is None


def test_group_invite_approved():
    nodes = format_group_invite(WHEN, "alice", 10001, "grp", 20002, "FLAG", True)
    assert nodes == [
        "已自动同意在2022-11-10 08:30:05收到来自\n用户:[alice](10001)的群聊邀请"
        "\n群聊:[grp](20002)\nflag:FLAG"
    ]


def test_group_invite_pending():
    nodes = format_group_invite(WHEN, "alice", 10001, "grp", 20002, "FLAG", False)
    assert len(nodes) == 2
    assert nodes[1] == "FLAG"
    assert nodes[0].startswith("在2022-11-10 08:30:05收到来自")
    assert nodes[0].endswith("同意/拒绝邀请，来决定同意还是拒绝")


def test_friend_request_formats():
    approved = format_friend_request(WHEN, "bob", 3, "hi", "FLAG", True)
    assert approved == [
        "已自动同意在2022-11-10 08:30:05收到来自\n用户:[bob](3)\n的好友请求:hi\nflag:FLAG"
    ]
    pending = format_friend_request(WHEN, "bob", 3, "hi", "FLAG", False)
    assert pending[1] == "FLAG"
    assert "\n的好友请求:hi\n" in pending[0]
    assert pending[0].endswith("同意/拒绝申请，来决定同意还是拒绝")