from dataclasses import dataclass
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, StrictInt, StrictStr

from .lyric_type import LyricLine, SyncedSong, UnsyncedLyricLine, UnsyncedSong, Word


class WordPayload(BaseModel):
    string: StrictStr

    def to_word(self) -> Word:
        return Word(text=self.string)


class TimeUpdate(BaseModel):
    time: StrictInt = Field(ge=0)


class SyncedLinePayload(BaseModel):
    time: StrictInt = Field(ge=0)
    words: List[WordPayload]


class SyncedSongPayload(BaseModel):
    # 必须包含该字段，允许为 null
    lyrics: Optional[List[SyncedLinePayload]]

    def to_song(self) -> SyncedSong:
        if self.lyrics is None:
            return SyncedSong(lines=None)
        return SyncedSong(
            lines=tuple(
                LyricLine(timestamp=line.time, words=tuple(w.to_word() for w in line.words))
                for line in self.lyrics
            )
        )


class UnsyncedLinePayload(BaseModel):
    words: List[WordPayload]


class UnsyncedSongPayload(BaseModel):
    lyrics: List[UnsyncedLinePayload]

    def to_song(self) -> UnsyncedSong:
        return UnsyncedSong(
            lines=tuple(
                UnsyncedLyricLine(words=tuple(w.to_word() for w in line.words))
                for line in self.lyrics
            )
        )


@dataclass(frozen=True)
class CloseSignal:
    code: Optional[int] = None


@dataclass(frozen=True)
class Unrecognized:
    raw: Any
    reason: str = ""


InboundMessage = Union[TimeUpdate, SyncedSongPayload, UnsyncedSongPayload, CloseSignal, Unrecognized]
