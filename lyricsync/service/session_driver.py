import itertools
import traceback
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect

from ..sync.session_state import SessionState
from ..types.config_type import ServerConfig
from ..types.message_type import (
    CloseSignal,
    InboundMessage,
    SyncedSongPayload,
    TimeUpdate,
    Unrecognized,
    UnsyncedSongPayload,
)
from ..utils.logger import get_logger
from .message_classifier import classify_frame

_session_counter = itertools.count(1)


class LyricSession:
    """
    一个连接对应一个 LyricSession 和一个 SessionState。
    消息严格按到达顺序处理，会话之间不共享任何状态。
    """
    def __init__(self, websocket: WebSocket, config: ServerConfig) -> None:
        self.logger = get_logger("LyricSession")
        self.websocket = websocket
        self.config = config
        self.session_id = f"session_{next(_session_counter)}"
        self.state = SessionState(config.session_config())

    async def run(self) -> None:
        """读取消息直到连接关闭或传输出错，错误不会传播到其他会话"""
        self.logger.info(f"Client connected: {self.session_id}")
        try:
            while True:
                message = await self.websocket.receive()
                if not await self.handle(classify_frame(message)):
                    break
        except WebSocketDisconnect as e:
            self.logger.info(f"Client disconnected: {self.session_id} (code={e.code})")
        except Exception as e:
            if self.config.debug:
                self.logger.error(f"websocket error in {self.session_id}: {e}\n{traceback.format_exc()}")
            else:
                self.logger.debug(f"websocket error in {self.session_id}: {e}")
        finally:
            self.logger.debug(f"Session {self.session_id} released")

    async def handle(self, inbound: InboundMessage) -> bool:
        """处理一条入站消息

        Returns:
            False 表示会话应当结束
        """
        if isinstance(inbound, TimeUpdate):
            await self.emit(self.state.advance(inbound.time))
        elif isinstance(inbound, (SyncedSongPayload, UnsyncedSongPayload)):
            await self.emit(self.state.load(inbound.to_song()))
        elif isinstance(inbound, CloseSignal):
            self.logger.info(f"Client closed connection: {self.session_id} (code={inbound.code})")
            return False
        elif isinstance(inbound, Unrecognized):
            if self.config.debug:
                self.logger.warning(f"Unknown message type: {inbound.raw!r}, {inbound.reason}")
            else:
                self.logger.warning(f"Unknown message type in {self.session_id}, ignored")
        return True

    async def emit(self, line: Optional[str]) -> None:
        if line is None:
            return
        if self.config.echo_stdout:
            print(line, flush=True)
        await self.websocket.send_text(line)
