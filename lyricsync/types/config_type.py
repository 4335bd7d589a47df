from dataclasses import dataclass, field
from typing import Any, Dict, Optional

DEFAULT_PORT = 5001
DEFAULT_HOST = "127.0.0.1"
DEFAULT_NO_LYRICS_MESSAGE = "No Lyrics found ;("
DEFAULT_UNSYNCED_MESSAGE = "This song is unsynced :("
DEFAULT_NO_LINE_MARKER = "󰎈"


@dataclass
class SessionConfig:
    display_width: Optional[int] = None
    no_lyrics_message: str = DEFAULT_NO_LYRICS_MESSAGE
    unsynced_message: str = DEFAULT_UNSYNCED_MESSAGE
    no_line_marker: str = DEFAULT_NO_LINE_MARKER
    suppress_no_line: bool = False
    blank_line_on_load: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionConfig":
        width = data.get("display_width")
        return cls(
            display_width=int(width) if width is not None else None,
            no_lyrics_message=_text_option(data, "no_lyrics_message", DEFAULT_NO_LYRICS_MESSAGE) or DEFAULT_NO_LYRICS_MESSAGE,
            unsynced_message=_text_option(data, "unsynced_message", DEFAULT_UNSYNCED_MESSAGE) or DEFAULT_UNSYNCED_MESSAGE,
            # 空字符串是合法的标记（显示空行）
            no_line_marker=_text_option(data, "no_line_marker", DEFAULT_NO_LINE_MARKER),
            suppress_no_line=bool(data.get("suppress_no_line", False)),
            blank_line_on_load=bool(data.get("blank_line_on_load", False)),
        )


@dataclass
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = False
    echo_stdout: bool = False
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerConfig":
        server_section: Dict = _section(data, "server")
        return cls(
            host=server_section.get("host") or DEFAULT_HOST,
            port=int(server_section.get("port", DEFAULT_PORT)),
            debug=bool(data.get("debug", False)),
            echo_stdout=bool(data.get("echo_stdout", False)),
            session=SessionConfig.from_dict(_section(data, "session")),
            logging=dict(_section(data, "logging")),
        )

    def session_config(self) -> SessionConfig:
        # 每个会话持有独立的副本
        return SessionConfig(**vars(self.session))


def _text_option(data: Dict[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """读取配置中的子段，缺省或 null 视为空段，其他非字典值视为配置错误"""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' section must be an object, got {type(value).__name__}")
    return value
