from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Word:
    text: str


@dataclass(frozen=True)
class LyricLine:
    timestamp: int  # 单位由调用方决定，通常为毫秒
    words: Tuple[Word, ...] = ()

    def to_line(self) -> str:
        return " ".join(word.text for word in self.words).strip()


@dataclass(frozen=True)
class UnsyncedLyricLine:
    words: Tuple[Word, ...] = ()


@dataclass(frozen=True)
class SyncedSong:
    # None 表示该歌曲没有歌词；lines 按 timestamp 升序排列
    lines: Optional[Tuple[LyricLine, ...]] = None


@dataclass(frozen=True)
class UnsyncedSong:
    lines: Tuple[UnsyncedLyricLine, ...] = ()


Song = Union[SyncedSong, UnsyncedSong]
