from typing import Optional


def format_line(text: str, width: Optional[int] = None) -> str:
    """将文本居中补齐或截断到固定宽度

    Args:
        text: 要显示的文本
        width: 显示宽度，None 表示原样输出

    Returns:
        长度恰好为 width 的字符串（按字符计数，而非字节）
    """
    if width is None:
        return text
    if len(text) >= width:
        return text[:width]
    padding = width - len(text)
    pad_left = padding // 2
    pad_right = padding - pad_left
    return " " * pad_left + text + " " * pad_right
