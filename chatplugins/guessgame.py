"""Rules of one round of the song guessing game."""

from __future__ import annotations

from dataclasses import dataclass

MUSIC_TYPES = "mp3;MP3;wav;WAV;amr;AMR;3gp;3GP;3gpp;3GPP;acc;ACC"
"""Accepted file suffixes; a suffix is accepted when it occurs in this text."""

CLIP_COUNT = 3
MAX_WRONG_ANSWERS = 6

_CONGRATS = "太棒了，你猜对{}了！答案是\n{}\n\n下面欣赏猜歌的歌曲"


def _suffix(name: str) -> str:
    return name.split(".")[-1]


def is_music_file(name: str) -> bool:
    """Whether the file name ends in a supported audio suffix."""
    return _suffix(name) in MUSIC_TYPES


@dataclass(frozen=True)
class SongInfo:
    """A song named "title - singer - other".  """

    filename: str
    title: str
    singer: str
    alias: str = ""

    @property
    def answer(self) -> str:
        """The answer text announced when the round ends."""
        text = f"歌名:{self.title}\n歌手:{self.singer}"
        if self.alias:
            text += "\n其他信息:\n" + self.alias.replace("&", "\n")
        return text


def parse_music_name(filename: str) -> SongInfo:
    """Split a song file name into title, singer and other information."""
    suffix = _suffix(filename)
    if suffix not in MUSIC_TYPES:
        raise ValueError(
            f"抽取到了歌曲：\n{filename}\n该歌曲不是音乐后缀，请联系bot主人修改"
        )
    info = filename.replace("." + suffix, "").split(" - ")
    if len(info) == 1:
        raise ValueError(
            f"抽取到了歌曲：\n{filename}\n该歌曲命名不符合命名规则，请联系bot主人修改"
        )
    alias = info[2] if len(info) > 2 else ""
    return SongInfo(filename, info[0], info[1], alias)


@dataclass(frozen=True)
class Outcome:
    """What the bot answers to one guess.

    clip is the number of the clip to play next, if any; play_song asks for the
    whole song to be played; finished marks the end of the round.
    """

    text: str
    clip: int | None = None
    finished: bool = False
    play_song: bool = False


def _matches(field: str, answer: str) -> bool:
    return answer in field or field.casefold() == answer.casefold()


class GuessGame:
    """State of one round: clips heard so far and wrong answers given."""

    def __init__(self, song: SongInfo, owner_id: int) -> None:
        self.song = song
        self.owner_id = owner_id
        self.clips_played = 0
        self.wrong_answers = 0
        self.finished = False

    def _end(self, text: str) -> Outcome:
        self.finished = True
        return Outcome(text, finished=True, play_song=True)

    def guess(self, text: str, user_id: int) -> Outcome:
        """Judge one "-answer" message from a player."""
        if self.finished:
            raise RuntimeError("the round is already over")
        answer = text.replace("-", "", 1)
        song = self.song
        if answer == "取消":
            if user_id == self.owner_id:
                return self._end(
                    f"游戏已取消，猜歌答案是\n{song.answer}\n\n\n下面欣赏猜歌的歌曲"
                )
            return Outcome("你无权限取消")
        if answer == "提示":
            self.clips_played += 1
            if self.clips_played >= CLIP_COUNT:
                return Outcome("已经没有提示了哦")
            return Outcome("再听这段音频，要仔细听哦", clip=self.clips_played)
        if _matches(song.title, answer):
            return self._end(_CONGRATS.format("歌曲名", song.answer))
        if _matches(song.singer, answer):
            return self._end(_CONGRATS.format("歌手名", song.answer))
        if _matches(song.alias, answer):
            return self._end(_CONGRATS.format("出处", song.answer))
        self.clips_played += 1
        if self.clips_played >= CLIP_COUNT:
            if self.wrong_answers < MAX_WRONG_ANSWERS:
                self.wrong_answers += 1
                return Outcome("答案不对哦，加油啊~")
            return self._end(
                f"次数到了，没能猜出来。答案是\n{song.answer}\n\n下面欣赏猜歌的歌曲"
            )
        self.wrong_answers += 1
        return Outcome("答案不对，再听这段音频，要仔细听哦", clip=self.clips_played)

    def timeout_clip(self) -> int | None:
        """Nobody answered in time: the next clip to play, or None when all were heard."""
        self.clips_played += 1
        if self.clips_played >= CLIP_COUNT:
            return None
        return self.clips_played