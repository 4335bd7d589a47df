import json
from typing import Any, Dict, List, Tuple, Type

from pydantic import BaseModel, ValidationError

from ..types.message_type import (
    CloseSignal,
    InboundMessage,
    SyncedSongPayload,
    TimeUpdate,
    Unrecognized,
    UnsyncedSongPayload,
)

# 按优先级排列，先匹配者优先
PAYLOAD_SHAPES: List[Type[BaseModel]] = [TimeUpdate, SyncedSongPayload, UnsyncedSongPayload]


def classify_text(text: str) -> InboundMessage:
    """将一条文本消息解析为入站消息类型

    依次尝试时间更新、带时间轴歌曲、无时间轴歌曲，全部失败时返回 Unrecognized
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return Unrecognized(raw=text, reason=f"invalid JSON: {e}")
    return classify_payload(data, raw=text)


def classify_payload(data: Any, raw: Any = None) -> InboundMessage:
    errors: List[Tuple[str, str]] = []
    for shape in PAYLOAD_SHAPES:
        try:
            return shape.model_validate(data)
        except ValidationError as e:
            errors.append((shape.__name__, _summarize(e)))
    reason = "; ".join(f"{name}: {summary}" for name, summary in errors)
    return Unrecognized(raw=data if raw is None else raw, reason=reason)


def classify_frame(message: Dict[str, Any]) -> InboundMessage:
    """解析 ASGI websocket 事件 (websocket.receive / websocket.disconnect)"""
    if message.get("type") == "websocket.disconnect":
        return CloseSignal(code=message.get("code"))
    text = message.get("text")
    if text is not None:
        return classify_text(text)
    return Unrecognized(raw=message.get("bytes"), reason="binary frame")


def _summarize(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{location} {first['msg']} ({error.error_count()} errors)"
