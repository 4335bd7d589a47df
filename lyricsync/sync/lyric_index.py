"""
时间轴 → 歌词行 查找

根据播放时间找出当前应显示的歌词行下标
"""

from bisect import bisect_right
from typing import Optional, Sequence

from ..types.lyric_type import LyricLine


def resolve(lines: Sequence[LyricLine], query_time: int) -> Optional[int]:
    """返回最后一个 timestamp <= query_time 的歌词行下标

    Args:
        lines: 按 timestamp 升序排列的歌词行（不做校验）
        query_time: 当前播放位置

    Returns:
        行下标；列表为空或 query_time 早于第一行时返回 None。
        相同 timestamp 的多行取最靠后的一行，超过最后一行时停在最后一行。
    """
    index = bisect_right(lines, query_time, key=_timestamp) - 1
    return index if index >= 0 else None


def _timestamp(line: LyricLine) -> int:
    return line.timestamp
