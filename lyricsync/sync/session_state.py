"""
会话状态机

保存当前连接载入的歌曲，并在每次播放时间更新时判断是否需要输出新的歌词行
"""

from enum import Enum
from typing import Optional, Union

from ..types.config_type import SessionConfig
from ..types.error_type import UnknownSongVariantError
from ..types.lyric_type import Song, SyncedSong, UnsyncedSong
from ..utils.logger import get_logger
from .line_formatter import format_line
from .lyric_index import resolve


class SessionPhase(str, Enum):
    NO_SONG_LOADED = "no_song_loaded"
    SYNCED_WITH_LINES = "synced_with_lines"
    SYNCED_NO_LINES = "synced_no_lines"
    UNSYNCED = "unsynced"


class _Marker(Enum):
    UNSET = "unset"
    NO_LINE_YET = "no_line_yet"
    ANNOUNCED = "announced"


UNSET = _Marker.UNSET
NO_LINE_YET = _Marker.NO_LINE_YET
ANNOUNCED = _Marker.ANNOUNCED

EmittedIndex = Union[int, _Marker]


class SessionState:
    """
    单个连接的歌词状态，每个连接独立持有一份，不在连接之间共享
    """
    def __init__(self, config: Optional[SessionConfig] = None) -> None:
        self.logger = get_logger("SessionState")
        self.config = config or SessionConfig()
        self.song: Song = SyncedSong(lines=None)
        self.phase = SessionPhase.NO_SONG_LOADED
        self.last_emitted_index: EmittedIndex = UNSET

    def load(self, song: Song) -> Optional[str]:
        """载入新歌曲并重置输出状态

        Returns:
            开启 blank_line_on_load 时返回空行分隔符，否则 None
        """
        if isinstance(song, SyncedSong):
            phase = SessionPhase.SYNCED_NO_LINES if song.lines is None else SessionPhase.SYNCED_WITH_LINES
        elif isinstance(song, UnsyncedSong):
            phase = SessionPhase.UNSYNCED
        else:
            raise UnknownSongVariantError(song)

        self.song = song
        self.phase = phase
        self.last_emitted_index = UNSET
        self.logger.debug(f"Loaded song, phase={phase.value}, lines={len(song.lines or ())}")
        return "" if self.config.blank_line_on_load else None

    def advance(self, time: int) -> Optional[str]:
        """根据播放时间计算需要显示的歌词行

        Returns:
            显示内容发生变化时返回要输出的文本，否则 None
        """
        song = self.song
        if isinstance(song, UnsyncedSong):
            return self._announce_once(self.config.unsynced_message)
        if not isinstance(song, SyncedSong):
            raise UnknownSongVariantError(song)
        if song.lines is None:
            return self._announce_once(self.config.no_lyrics_message)

        index = resolve(song.lines, time)
        current: EmittedIndex = NO_LINE_YET if index is None else index
        if current == self.last_emitted_index:
            return None
        self.last_emitted_index = current

        if index is None:
            if self.config.suppress_no_line:
                return None
            text = self.config.no_line_marker
        else:
            text = song.lines[index].to_line()
        return format_line(text, self.config.display_width)

    def _announce_once(self, message: str) -> Optional[str]:
        if self.last_emitted_index is not UNSET:
            return None
        self.last_emitted_index = ANNOUNCED
        return message
