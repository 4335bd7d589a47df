from contextlib import asynccontextmanager
from fastapi import FastAPI, WebSocket
import uvicorn
import argparse
import sys
from typing import Dict, List, Optional

from lyricsync.service.session_driver import LyricSession
from lyricsync.types.config_type import ServerConfig, DEFAULT_PORT
from lyricsync.utils.helpers import load_config, merge_dict
from lyricsync.utils.logger import get_logger, setup_logging


logger = get_logger("server_main")
DEFAULT_CONFIG_PATH = "config/config.json"
CONFIG_SECTIONS = ("server", "session", "logging")


def create_app(config: Optional[ServerConfig] = None) -> FastAPI:
    server_config = config or ServerConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Lyric sync server ready on ws://{server_config.host}:{server_config.port}/")
        yield
        logger.info("Lyric sync server shutting down")

    app = FastAPI(lifespan=lifespan)
    app.state.config = server_config

    async def lyric_socket(websocket: WebSocket):
        '''
        歌词同步 WebSocket 接口，每个连接拥有独立的会话状态。

        入站消息：
        - {"time": 12345}: 当前播放位置
        - {"lyrics": null | [{"time": ..., "words": [{"string": ...}]}]}: 带时间轴歌词
        - {"lyrics": [{"words": [{"string": ...}]}]}: 无时间轴歌词
        出站消息：
        - 需要显示的歌词行（仅在变化时发送）
        '''
        await websocket.accept()
        await LyricSession(websocket, app.state.config).run()

    app.add_api_websocket_route("/", lyric_socket)
    app.add_api_websocket_route("/ws", lyric_socket)
    return app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Real-time lyric synchronization server over WebSocket.")
    parser.add_argument("-p", "--port", type=int, default=None, help=f"Port to listen on (default {DEFAULT_PORT})")
    parser.add_argument("output_size", nargs="?", type=int, default=None, help="Fixed display width, lines are padded or trimmed")
    parser.add_argument("no_lyrics_message", nargs="?", default=None, help="Message shown when a song has no lyrics")
    parser.add_argument("--host", type=str, default=None, help="Host to bind")
    parser.add_argument("-c", "--config", type=str, default=DEFAULT_CONFIG_PATH, help="Path to JSON config file")
    parser.add_argument("--debug", action="store_true", help="Log websocket errors in detail")
    parser.add_argument("--unsynced-message", type=str, default=None, help="Message shown for songs without timing")
    parser.add_argument("--no-line-marker", type=str, default=None, help="Text shown before the first lyric line")
    parser.add_argument("--suppress-no-line", action="store_true", help="Emit nothing before the first lyric line")
    parser.add_argument("--blank-on-load", action="store_true", help="Emit an empty line whenever a new song is loaded")
    parser.add_argument("--echo-stdout", action="store_true", help="Also print emitted lines to stdout")
    return parser


def parse_config(argv: Optional[List[str]] = None) -> ServerConfig:
    """合并配置文件与命令行参数，命令行优先。配置错误直接退出进程"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        file_config = load_config(args.config)
    except ValueError as e:
        parser.error(str(e))
    for section in CONFIG_SECTIONS:
        if section in file_config and not isinstance(file_config[section], dict):
            parser.error(f"Invalid configuration: '{section}' section must be an object")

    overrides: Dict = {"server": {}, "session": {}}
    if args.port is not None:
        overrides["server"]["port"] = args.port
    if args.host is not None:
        overrides["server"]["host"] = args.host
    if args.output_size is not None:
        overrides["session"]["display_width"] = args.output_size
    if args.no_lyrics_message is not None:
        overrides["session"]["no_lyrics_message"] = args.no_lyrics_message
    if args.unsynced_message is not None:
        overrides["session"]["unsynced_message"] = args.unsynced_message
    if args.no_line_marker is not None:
        overrides["session"]["no_line_marker"] = args.no_line_marker
    if args.suppress_no_line:
        overrides["session"]["suppress_no_line"] = True
    if args.blank_on_load:
        overrides["session"]["blank_line_on_load"] = True
    if args.debug:
        overrides["debug"] = True
    if args.echo_stdout:
        overrides["echo_stdout"] = True

    try:
        config = ServerConfig.from_dict(merge_dict(file_config, overrides))
    except (TypeError, ValueError) as e:
        parser.error(f"Invalid configuration: {e}")

    if not 0 <= config.port <= 65535:
        parser.error(f"Invalid port: {config.port}")
    if config.session.display_width is not None and config.session.display_width <= 0:
        parser.error(f"Invalid output size: {config.session.display_width}")
    return config


def build_logging_config(config: ServerConfig) -> Dict:
    """根据服务器配置生成日志配置，--debug 始终覆盖配置文件中的日志级别"""
    logging_config = dict(config.logging)
    if config.debug:
        logging_config["level"] = "DEBUG"
    if config.echo_stdout:
        # stdout 留给歌词输出
        logging_config["console_stream"] = "stderr"
    return logging_config


def main(argv: Optional[List[str]] = None) -> None:
    config = parse_config(argv)
    setup_logging(build_logging_config(config))

    app = create_app(config)
    logger.info(f"Listening on {config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level="debug" if config.debug else "warning")


if __name__ == "__main__":
    main(sys.argv[1:])
