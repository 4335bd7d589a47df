class LyricSyncError(Exception):
    """歌词同步相关错误的基类"""


class UnknownSongVariantError(LyricSyncError, TypeError):
    def __init__(self, song) -> None:
        super().__init__(f"Not a song variant: {type(song).__name__}")
        self.song = song
