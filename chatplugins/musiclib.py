"""Local song library for the guessing game: configuration, playlists and clips."""

from __future__ import annotations

import json
import os
import random
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

CUT_TIMES: tuple[str, ...] = ("00:00:05", "00:00:30", "00:01:00")
"""Start points (h:m:s) of the three ten-second clips."""

CLIP_SECONDS = "10"
DEFAULT_PLAYLIST_NAME = "FM"
DEFAULT_PLAYLIST_ID = 3136952023


class MusicLibraryError(Exception):
    """A library operation failed."""


@dataclass
class PlaylistBinding:
    """A local playlist bound to an online playlist id."""

    name: str = ""
    id: int = 0


@dataclass
class DefaultList:
    """The playlist a group guesses from by default."""

    group_id: int = 0
    name: str = ""


@dataclass
class ListInfo:
    """A local playlist folder."""

    name: str = ""
    number: int = 0
    id: int = 0


def _with_slash(path: str) -> str:
    return path if path.endswith("/") else path + "/"


@dataclass
class Config:
    """Settings of the song library."""

    music_path: str = ""
    local: bool = False
    api: bool = False
    cookie: str = ""
    playlist: list[PlaylistBinding] = field(default_factory=list)
    defaultlist: list[DefaultList] = field(default_factory=list)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        return cls(
            music_path=str(data.get("musicPath") or ""),
            local=bool(data.get("local")),
            api=bool(data.get("api")),
            cookie=str(data.get("cookie") or ""),
            playlist=[
                PlaylistBinding(str(p.get("name") or ""), int(p.get("id") or 0))
                for p in data.get("playlist") or []
            ],
            defaultlist=[
                DefaultList(int(d.get("gid") or 0), str(d.get("name") or ""))
                for d in data.get("defaultlist") or []
            ],
        )

    def _to_dict(self) -> dict[str, Any]:
        return {
            "musicPath": self.music_path,
            "local": self.local,
            "api": self.api,
            "cookie": self.cookie,
            "playlist": [{"name": p.name, "id": p.id} for p in self.playlist],
            "defaultlist": [{"gid": d.group_id, "name": d.name} for d in self.defaultlist],
        }

    @classmethod
    def load(cls, path: str | Path) -> "Config":
        """Read the settings file, creating it with defaults when it is missing."""
        file = Path(path)
        if file.exists():
            with file.open(encoding="utf-8") as handle:
                return cls._from_dict(json.load(handle))
        config = cls(
            music_path=_with_slash((Path.cwd() / "data" / "guessmusic" / "music").as_posix()),
            api=True,
            local=True,
            playlist=[PlaylistBinding(DEFAULT_PLAYLIST_NAME, DEFAULT_PLAYLIST_ID)],
        )
        config.save(file)
        return config

    def save(self, path: str | Path) -> None:
        """Write the settings as JSON."""
        with Path(path).open("w", encoding="utf-8") as handle:
            json.dump(self._to_dict(), handle, ensure_ascii=False)
            handle.write("\n")

    def default_for(self, group_id: int) -> str | None:
        """The default playlist of a group, if one is set."""
        for entry in self.defaultlist:
            if entry.group_id == group_id:
                return entry.name
        return None


def _sorted_entries(path: Path) -> list[os.DirEntry]:
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)


def get_lists(config: Config) -> list[ListInfo]:
    """The playlist folders in the library, in name order."""
    bound = {p.name: p.id for p in config.playlist if p.id != 0}
    root = Path(config.music_path)
    root.mkdir(parents=True, exist_ok=True)
    entries = _sorted_entries(root)
    if not entries:
        raise MusicLibraryError("所设置的歌库不存在任何歌单！")
    lists: list[ListInfo] = []
    for entry in entries:
        if not entry.is_dir():
            continue
        try:
            count = len(_sorted_entries(root / entry.name))
        except OSError:
            continue
        lists.append(ListInfo(entry.name, count, bound.get(entry.name, 0)))
    return lists


def set_music_path(config: Config, path: str) -> str:
    """Point the library at a new folder, creating it; returns the stored path."""
    music_path = _with_slash(path.replace("\\", "/"))
    try:
        os.makedirs(music_path, exist_ok=True)
    except OSError as exc:
        raise MusicLibraryError(f"生成文件夹ERROR:\n{exc}") from exc
    config.music_path = music_path
    return music_path


def add_default_list(config: Config, group_id: int, name: str) -> None:
    """Make name the default playlist of a group."""
    if group_id == 0:
        raise PermissionError("无权设置！")
    if not any(info.name == name for info in get_lists(config)):
        raise LookupError("歌单名称错误，可以发送“歌单列表”获取歌单名称")
    config.defaultlist.append(DefaultList(group_id, name))


def delete_playlist(config: Config, name: str) -> ListInfo:
    """Remove a playlist given by folder name, or only unbind it given by id."""
    for info in get_lists(config):
        if name == info.name or name == str(info.id):
            if name == info.name:
                try:
                    shutil.rmtree(Path(config.music_path) / name)
                except OSError as exc:
                    raise MusicLibraryError(f"歌单文件删除失败：\n{exc}") from exc
            config.playlist = [p for p in config.playlist if p.name != info.name]
            return info
    raise LookupError("歌单名称错误，可以发送“歌单列表”获取歌单名称")


def local_music(entries: list[Any], rng: Any = None) -> str:
    """Pick a random file name among entries; "" when there is none."""
    if not entries:
        return ""
    if len(entries) == 1:
        return "" if entries[0].is_dir() else entries[0].name
    if all(e.is_dir() for e in entries):
        return ""
    rng = rng if rng is not None else random.Random()
    while True:
        pick = entries[rng.randrange(len(entries))]
        if not pick.is_dir():
            return pick.name


def music_lottery(
    config: Config,
    list_name: str,
    rng: Any = None,
    downloader: Callable[[int, str], str] | None = None,
) -> tuple[str, str]:
    """Choose a song from a playlist; returns (folder with trailing slash, file name).

    With an online binding and API downloads enabled, two times in three the
    song is fetched through downloader(playlist_id, folder) instead.
    """
    rng = rng if rng is not None else random.Random()
    try:
        lists = get_lists(config)
    except MusicLibraryError as exc:
        raise MusicLibraryError(f"获取列表错误,{exc}") from exc
    ids = {info.name: info.id for info in lists}
    if list_name not in ids:
        raise LookupError("指定的歌单不存在与列表当中")
    playlist_id = ids[list_name]
    folder = _with_slash(str(Path(config.music_path) / list_name).replace("\\", "/"))
    os.makedirs(folder, exist_ok=True)
    entries = _sorted_entries(Path(folder))
    online = playlist_id != 0 and config.api and downloader is not None
    if not entries:
        if not online:
            raise MusicLibraryError("本地歌单数据为0")
        try:
            downloader(playlist_id, folder)
            reason: object = None
        except Exception as exc:  # the download failing is reported below
            reason = exc
        raise MusicLibraryError(f"本地歌单数据为0,API下载歌曲失败\n{reason}")
    if not online or rng.randrange(3) == 1:
        return folder, local_music(entries, rng)
    try:
        return folder, downloader(playlist_id, folder)
    except Exception:
        return folder, local_music(entries, rng)


def parse_ovooa(data: bytes | str) -> int:
    """The song id in a random-song API answer; raises with the API's text on failure."""
    parsed = json.loads(data)
    if parsed.get("code") != 1:
        raise MusicLibraryError(str(parsed.get("text") or ""))
    return int((parsed.get("data") or {}).get("id") or 0)


def cut_music(
    music_file: str | Path,
    output_dir: str | Path,
    cut_times: tuple[str, ...] | list[str] = CUT_TIMES,
) -> list[Path]:
    """Cut ten-second clips 0.wav, 1.wav, ... from a song with ffmpeg."""
    out = Path(output_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MusicLibraryError(f"[生成歌曲目录错误]ERROR: {exc}") from exc
    clips = [out / f"{number}.wav" for number in range(len(cut_times))]
    args = ["ffmpeg", "-y", "-i", str(music_file)]
    for start, clip in zip(cut_times, clips):
        args += ["-ss", start, "-t", CLIP_SECONDS, str(clip)]
    args.append("-hide_banner")
    try:
        result = subprocess.run(args, capture_output=True, text=True)
    except OSError as exc:
        raise MusicLibraryError(f"[生成歌曲错误]ERROR: {exc}") from exc
    if result.returncode != 0:
        raise MusicLibraryError(f"[生成歌曲错误]ERROR: {result.stderr}")
    return clips