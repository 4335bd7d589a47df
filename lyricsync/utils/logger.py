"""
日志工具模块

提供统一的日志记录功能
"""

import os
import sys
from typing import Optional, Dict, Any
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler
import colorlog


# 全局日志配置
_LOGGER_INSTANCES: Dict[str, logging.Logger] = {}
_DEFAULT_CONFIG = {
    "level": "INFO",
    "file": "./logs/lyricsync.log",
    "rotation": "20 MB",
    "console_output": True,
    "console_stream": "stdout",
    "file_output": False
}


def setup_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """设置全局日志配置，并应用到已经创建的日志记录器

    Args:
        config: 日志配置字典
    """
    if config:
        _DEFAULT_CONFIG.update(config)

    if _DEFAULT_CONFIG.get("file_output", False):
        # 创建日志目录
        log_file = Path(_DEFAULT_CONFIG["file"])
        log_file.parent.mkdir(parents=True, exist_ok=True)

    for logger in _LOGGER_INSTANCES.values():
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        _configure(logger)


def get_logger(name: str) -> logging.Logger:
    """获取日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        日志记录器实例
    """
    if name in _LOGGER_INSTANCES:
        return _LOGGER_INSTANCES[name]

    logger = logging.getLogger(name)
    logger.propagate = False

    # 避免重复添加处理器
    if not logger.handlers:
        _configure(logger)

    _LOGGER_INSTANCES[name] = logger

    return logger


def _configure(logger: logging.Logger) -> None:
    logger.setLevel(getattr(logging, _DEFAULT_CONFIG["level"]))
    if _DEFAULT_CONFIG.get("console_output", True):
        logger.addHandler(_create_console_handler())
    if _DEFAULT_CONFIG.get("file_output", False):
        logger.addHandler(_create_file_handler())


def _create_console_handler() -> logging.Handler:
    """创建控制台处理器

    Returns:
        控制台日志处理器
    """
    # 彩色日志格式
    color_formatter = colorlog.ColoredFormatter(
        fmt='%(log_color)s%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    )

    # 歌词输出到 stdout 时，日志改走 stderr
    stream = sys.stderr if _DEFAULT_CONFIG.get("console_stream") == "stderr" else sys.stdout
    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(color_formatter)
    console_handler.setLevel(getattr(logging, _DEFAULT_CONFIG["level"]))

    return console_handler


def _create_file_handler() -> logging.Handler:
    """创建文件处理器

    Returns:
        文件日志处理器
    """
    rotation_size = _parse_size(_DEFAULT_CONFIG.get("rotation", "20 MB"))

    file_formatter = logging.Formatter(
        fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    log_dir = os.path.dirname(_DEFAULT_CONFIG["file"])
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)
    file_handler = RotatingFileHandler(
        filename=_DEFAULT_CONFIG["file"],
        maxBytes=rotation_size,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(file_formatter)
    file_handler.setLevel(getattr(logging, _DEFAULT_CONFIG["level"]))

    return file_handler


def _parse_size(size_str: str) -> int:
    """解析大小字符串

    Args:
        size_str: 大小字符串，如 "100 MB"

    Returns:
        字节数
    """
    size_str = size_str.strip().upper()

    if size_str.endswith("KB"):
        return int(float(size_str[:-2]) * 1024)
    elif size_str.endswith("MB"):
        return int(float(size_str[:-2]) * 1024 * 1024)
    elif size_str.endswith("GB"):
        return int(float(size_str[:-2]) * 1024 * 1024 * 1024)
    else:
        # 默认按字节处理
        return int(float(size_str))
