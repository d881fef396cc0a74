import pytest

from chatplugins.funny import JokeStore, tell_joke


def test_add_count_pick(tmp_path):
    with JokeStore(tmp_path / "jokes.db") as store:
        assert store.count() == 0
        texts = {"one", "two", "three"}
        for t in texts:
            store.add(t)
        assert store.count() == len(texts)
        for _ in range(10):
            assert store.pick() in texts


def test_empty_pick(tmp_path):
    with JokeStore(tmp_path / "jokes.db") as store:
        with pytest.raises(LookupError):
            store.pick()


def test_tell_joke_replaces_name(tmp_path):
    with JokeStore(tmp_path / "jokes.db") as store:
        store.add("%name真可爱，%name!")
        assert tell_joke(store, "小明") == "小明真可爱，小明!"


def test_persistence(tmp_path):
    path = tmp_path / "jokes.db"
    with JokeStore(path) as store:
        first = store.add("a")
        second = store.add("b")
    assert second > first
    with JokeStore(path) as store:
        assert store.count() == 2