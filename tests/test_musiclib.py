import json
import subprocess
from pathlib import Path
from unittest import mock

import pytest

from chatplugins.musiclib import (
    CUT_TIMES,
    Config,
    DefaultList,
    ListInfo,
    MusicLibraryError,
    PlaylistBinding,
    add_default_list,
    cut_music,
    delete_playlist,
    get_lists,
    local_music,
    music_lottery,
    parse_ovooa,
    set_music_path,
)


class FixedRng:
    def __init__(self, *values):
        self.values = list(values)

    def randrange(self, n):
        value = self.values.pop(0)
        assert 0 <= value < n
        return value


class Entry:
    def __init__(self, name, directory=False):
        self.name = name
        self._dir = directory

    def is_dir(self):
        return self._dir


def make_library(tmp_path):
    root = tmp_path / "music"
    (root / "alpha").mkdir(parents=True)
    (root / "alpha" / "a - b.mp3").write_bytes(b"x")
    (root / "alpha" / "c - d.mp3").write_bytes(b"x")
    (root / "beta").mkdir()
    (root / "beta" / "e - f.mp3").write_bytes(b"x")
    (root / "note.txt").write_text("ignored")
    config = Config(
        music_path=root.as_posix() + "/",
        playlist=[PlaylistBinding("beta", 42), PlaylistBinding("gamma", 7)],
    )
    return config, root


def test_config_round_trip(tmp_path):
    path = tmp_path / "config.json"
    config = Config(
        music_path="/songs/",
        local=True,
        cookie="token",
        playlist=[PlaylistBinding("歌单", 5)],
        defaultlist=[DefaultList(100, "歌单")],
    )
    config.save(path)
    assert Config.load(path) == config


def test_config_saved_keys(tmp_path):
    path = tmp_path / "config.json"
    Config(defaultlist=[DefaultList(9, "x")]).save(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert set(data) == {"musicPath", "local", "api", "cookie", "playlist", "defaultlist"}
    assert data["defaultlist"] == [{"gid": 9, "name": "x"}]


def test_config_load_creates_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.json"
    config = Config.load(path)
    assert path.exists()
    assert config.api and config.local
    assert config.playlist == [PlaylistBinding("FM", 3136952023)]
    assert config.music_path.endswith("/data/guessmusic/music/")
    assert Config.load(path) == config


def test_default_for():
    config = Config(defaultlist=[DefaultList(1, "a"), DefaultList(2, "b"), DefaultList(1, "c")])
    assert config.default_for(1) == "a"
    assert config.default_for(2) == "b"
    assert config.default_for(3) is None


def test_get_lists(tmp_path):
    config, _ = make_library(tmp_path)
    assert get_lists(config) == [ListInfo("alpha", 2, 0), ListInfo("beta", 1, 42)]


def test_get_lists_empty_library(tmp_path):
    config = Config(music_path=(tmp_path / "empty").as_posix() + "/")
    with pytest.raises(MusicLibraryError):
        get_lists(config)
    assert (tmp_path / "empty").is_dir()


def test_set_music_path(tmp_path):
    config = Config()
    raw = str(tmp_path / "new").replace("/", "\\") if False else (tmp_path / "new").as_posix()
    stored = set_music_path(config, raw.replace("/", "\\"))
    assert stored == raw + "/"
    assert config.music_path == stored
    assert Path(stored).is_dir()


def test_add_default_list(tmp_path):
    config, _ = make_library(tmp_path)
    add_default_list(config, 55, "beta")
    assert config.default_for(55) == "beta"
    with pytest.raises(LookupError):
        add_default_list(config, 55, "missing")
    with pytest.raises(PermissionError):
        add_default_list(config, 0, "beta")


def test_delete_playlist_by_name(tmp_path):
    config, root = make_library(tmp_path)
    info = delete_playlist(config, "beta")
    assert info.name == "beta"
    assert not (root / "beta").exists()
    assert [p.name for p in config.playlist] == ["gamma"]


def test_delete_playlist_by_id_keeps_folder(tmp_path):
    config, root = make_library(tmp_path)
    info = delete_playlist(config, "42")
    assert info.name == "beta"
    assert (root / "beta").is_dir()
    assert [p.name for p in config.playlist] == ["gamma"]


def test_delete_playlist_unknown(tmp_path):
    config, _ = make_library(tmp_path)
    with pytest.raises(LookupError):
        delete_playlist(config, "nothing")


def test_local_music_skips_folders():
    entries = [Entry("sub", True), Entry("song.mp3")]
    assert local_music(entries, FixedRng(0, 1)) == "song.mp3"


def test_local_music_single_entries():
    assert local_music([Entry("only.mp3")]) == "only.mp3"
    assert local_music([Entry("dir", True)]) == ""
    assert local_music([]) == ""


def test_music_lottery_local(tmp_path):
    config, _ = make_library(tmp_path)
    folder, name = music_lottery(config, "alpha", FixedRng(1))
    assert folder.endswith("/alpha/")
    assert name == "c - d.mp3"


def test_music_lottery_unknown_list(tmp_path):
    config, _ = make_library(tmp_path)
    with pytest.raises(LookupError):
        music_lottery(config, "nothing")


def test_music_lottery_uses_downloader(tmp_path):
    config, _ = make_library(tmp_path)
    config.api = True
    calls = []

    def downloader(playlist_id, folder):
        calls.append((playlist_id, folder))
        return "new - song.mp3"

    folder, name = music_lottery(config, "beta", FixedRng(0), downloader)
    assert name == "new - song.mp3"
    assert calls == [(42, folder)]


def test_music_lottery_download_failure_falls_back(tmp_path):
    config, _ = make_library(tmp_path)
    config.api = True

    def downloader(playlist_id, folder):
        raise RuntimeError("offline")

    _, name = music_lottery(config, "beta", FixedRng(2), downloader)
    assert name == "e - f.mp3"


def test_music_lottery_empty_playlist(tmp_path):
    config, root = make_library(tmp_path)
    (root / "empty").mkdir()
    with pytest.raises(MusicLibraryError):
        music_lottery(config, "empty")


def test_parse_ovooa():
    assert parse_ovooa(json.dumps({"code": 1, "text": "", "data": {"id": 31}})) == 31
    with pytest.raises(MusicLibraryError, match="bad list"):
        parse_ovooa(json.dumps({"code": -1, "text": "bad list"}))


def test_cut_music_builds_command(tmp_path):
    done = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
    with mock.patch("chatplugins.musiclib.subprocess.run", return_value=done) as run:
        clips = cut_music(tmp_path / "song.mp3", tmp_path / "out")
    assert clips == [tmp_path / "out" / f"{i}.wav" for i in range(len(CUT_TIMES))]
    args = run.call_args.args[0]
    assert args[:4] == ["ffmpeg", "-y", "-i", str(tmp_path / "song.mp3")]
    assert args[-1] == "-hide_banner"
    assert args[4:8] == ["-ss", "00:00:05", "-t", "10"]
    assert (tmp_path / "out").is_dir()


def test_cut_music_failure(tmp_path):
    failed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="boom")
    with mock.patch("chatplugins.musiclib.subprocess.run", return_value=failed):
        with pytest.raises(MusicLibraryError, match="boom"):
            cut_music(tmp_path / "song.mp3", tmp_path / "out")