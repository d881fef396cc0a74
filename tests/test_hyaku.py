import csv
import io

import pytest

from chatplugins.hyaku import Poem, image_names, load_poems, parse_request

HEADER = ["番号", "歌人", "上の句", "下の句", "上の句ひらがな", "下の句ひらがな"]


def make_csv(rows):
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(HEADER)
    writer.writerows(rows)
    return buffer.getvalue()


def full_rows():
    return [[str(i), f"poet{i}", f"up{i}", f"low{i}", f"uk{i}", f"lk{i}"] for i in range(1, 101)]


def test_load_poems_reads_all_in_order():
    poems = load_poems(make_csv(full_rows()))
    assert len(poems) == 100
    assert poems[0] == Poem("1", "poet1", "up1", "low1", "uk1", "lk1")
    assert [p.number for p in poems] == [str(i) for i in range(1, 101)]


def test_poem_text_layout():
    poem = Poem("1", "poet", "a", "b", "c", "d")
    assert str(poem) == (
        "●番号：1\n◉歌人：poet\n○上の句：a\n○下の句：b\n"
        "◎上の句ひらがな：c\n◎下の句ひらがな：d\n"
    )


def test_load_poems_rejects_wrong_count():
    with pytest.raises(ValueError):
        load_poems(make_csv(full_rows()[:99]))


def test_load_poems_rejects_wrong_columns():
    rows = full_rows()
    rows[5] = rows[5][:5]
    with pytest.raises(ValueError):
        load_poems(make_csv(rows))


def test_load_poems_rejects_out_of_order():
    rows = full_rows()
    rows[0][0], rows[1][0] = rows[1][0], rows[0][0]
    with pytest.raises(ValueError):
        load_poems(make_csv(rows))


def test_image_names():
    assert image_names(7) == ("img/007.jpg", "img/007.png")
    assert image_names(100) == ("img/100.jpg", "img/100.png")


@pytest.mark.parametrize("bad", [0, 101])
def test_image_names_range(bad):
    with pytest.raises(ValueError):
        image_names(bad)


def test_parse_request():
    assert parse_request("百人一首") == 0
    assert parse_request("百人一首之12") == 12
    assert parse_request("百人一首之 3") == 3
    assert parse_request("你好") is None
    assert parse_request("百人一首之x") is None


def test_parse_request_out_of_range():
    with pytest.raises(ValueError):
        parse_request("百人一首之101")
    with pytest.raises(ValueError):
        parse_request("百人一首之0")