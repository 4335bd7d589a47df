"""
辅助工具函数

配置文件加载与合并
"""

import os
import sys
import json
from typing import Any, Dict, Optional
from pathlib import Path


def load_config(config_path: str, default_config: Optional[Dict] = None) -> Dict[str, Any]:
    """加载配置文件

    Args:
        config_path: 配置文件路径
        default_config: 默认配置

    Returns:
        配置字典

    Raises:
        ValueError: 配置文件格式不支持或内容无法解析
    """
    config = default_config or {}

    config_file = Path(config_path)
    if not config_file.exists():
        print(f"Config file not found, using defaults: {config_path}", file=sys.stderr)
        return config

    if config_file.suffix.lower() != '.json':
        raise ValueError(f"Unsupported config file format: {config_file.suffix}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            file_config = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse config file {config_path}: {e}") from e
    if file_config is not None and not isinstance(file_config, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")

    # 递归合并配置
    config = merge_dict(config, file_config or {})

    # 处理环境变量替换
    return apply_env_variables(config)


def merge_dict(base: Dict, update: Dict) -> Dict:
    """递归合并字典

    Args:
        base: 基础字典
        update: 更新字典

    Returns:
        合并后的字典
    """
    result = base.copy()

    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dict(result[key], value)
        else:
            result[key] = value

    return result


def apply_env_variables(config: Any, parent_key: str = "") -> Any:
    """递归应用环境变量替换配置中的变量，支持多层嵌套

    "$PORT" 或 "${PORT}" 形式的字符串会被替换为环境变量的值，未设置时保持原样

    Args:
        config: 配置字典或列表或值
        parent_key: 当前递归的父键路径
    Returns:
        替换后的配置
    """
    if isinstance(config, dict):
        for key, value in config.items():
            full_key = f"{parent_key}.{key}" if parent_key else key
            config[key] = apply_env_variables(value, full_key)
        return config
    elif isinstance(config, list):
        return [
            apply_env_variables(item, f"{parent_key}[{i}]")
            for i, item in enumerate(config)
        ]
    elif isinstance(config, str) and config.startswith("$"):
        env_var = config[1:]
        if env_var.startswith("{") and env_var.endswith("}"):
            env_var = env_var[1:-1]
        env_value = os.environ.get(env_var)
        if env_value is not None:
            return env_value
        else:
            print(f"Environment variable not set: {env_var} (key: {parent_key})", file=sys.stderr)
            return config
    else:
        return config
