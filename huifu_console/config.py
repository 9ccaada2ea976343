"""统一配置管理模块

控制台的运行配置集中在这里，按分组组织，支持运行时覆盖和环境变量覆盖。

配置分组：
- api: 后端API地址与请求超时
- server: 控制台Web服务监听地址
- ui: 页面刷新周期等交互参数
- log: 日志级别

使用示例：
    from huifu_console.config import config

    # 获取配置
    base_url = config.get('api.base_url')

    # 运行时覆盖
    config.set('ui.refresh_interval', 10)

    # 环境变量覆盖（优先级最高）
    # export HUIFU_CONSOLE_API_BASE_URL=http://127.0.0.1:8080/api
"""

from __future__ import annotations

import os
import threading
from typing import Any, Dict

from .exceptions import ConsoleConfigError

ENV_PREFIX = "HUIFU_CONSOLE_"

DEFAULT_CONFIG_SCHEMA = {
    "api": {
        "base_url": {"type": "string", "default": "http://127.0.0.1:8080/api", "description": "后端API基础URL"},
        "request_timeout": {"type": "float", "default": 30.0, "description": "单次请求超时（秒）"},
    },
    "server": {
        "host": {"type": "string", "default": "127.0.0.1", "description": "控制台监听地址"},
        "port": {"type": "int", "default": 9988, "description": "控制台监听端口"},
        "cdn": {"type": "string", "default": "https://fastly.jsdelivr.net/gh/wang0618/PyWebIO-assets@v1.8.2/", "description": "PyWebIO静态资源CDN"},
    },
    "ui": {
        "refresh_interval": {"type": "float", "default": 30.0, "description": "配置列表自动刷新周期（秒）"},
        "select_delay": {"type": "float", "default": 0.1, "description": "保存后回填选择框的延迟（秒）"},
    },
    "log": {
        "level": {"type": "string", "default": "INFO", "description": "日志级别"},
    },
}


def _coerce(path: str, value: Any, type_name: str) -> Any:
    if value is None:
        return None
    try:
        if type_name == "int":
            return int(value)
        if type_name == "float":
            return float(value)
    except (TypeError, ValueError) as e:
        raise ConsoleConfigError(f"配置项 {path} 的值无效: {value!r} ({e})") from e
    return str(value)


def _schema_entry(path: str) -> Dict[str, Any]:
    parts = [p for p in path.split('.') if p]
    if len(parts) != 2:
        return {}
    return DEFAULT_CONFIG_SCHEMA.get(parts[0], {}).get(parts[1], {})


class ConfigManager:
    """统一配置管理器

    优先级：环境变量 > 运行时覆盖 > 默认值。
    读取时按 schema 声明的类型转换，非法值抛出 ConsoleConfigError。
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._overrides: Dict[str, Any] = {}
        self._env_prefix = ENV_PREFIX

    def _get_env_key(self, path: str) -> str:
        """将配置路径转换为环境变量名"""
        return self._env_prefix + path.upper().replace('.', '_')

    def _get_env_value(self, path: str):
        return os.getenv(self._get_env_key(path))

    def get(self, path: str, default: Any = None) -> Any:
        """获取配置值

        Args:
            path: 配置路径，如 'api.base_url'
            default: schema 中未声明时的默认值

        Returns:
            按 schema 类型转换后的配置值
        """
        entry = _schema_entry(path)
        type_name = entry.get("type", "string")

        env_value = self._get_env_value(path)
        if env_value is not None:
            return _coerce(path, env_value, type_name)

        if path in self._overrides:
            return _coerce(path, self._overrides[path], type_name)

        if entry:
            return entry.get("default", default)
        return default

    def set(self, path: str, value: Any) -> None:
        """设置运行时配置值，只接受 schema 中声明的配置项"""
        entry = _schema_entry(path)
        if not entry:
            raise ConsoleConfigError(f"未声明的配置项: {path}")
        _coerce(path, value, entry["type"])
        self._overrides[path] = value

    def delete(self, path: str) -> None:
        """删除运行时覆盖，恢复为环境变量或默认值"""
        self._overrides.pop(path, None)

    def reset(self) -> None:
        """清空所有运行时覆盖"""
        self._overrides.clear()

    def get_all(self) -> Dict[str, Dict[str, Any]]:
        """获取所有已声明的配置"""
        return {
            category: {key: self.get(f"{category}.{key}") for key in schema}
            for category, schema in DEFAULT_CONFIG_SCHEMA.items()
        }

    def describe(self) -> str:
        """返回便于写入日志的配置摘要"""
        lines = []
        for category, values in self.get_all().items():
            for key, value in values.items():
                lines.append(f"{category}.{key}={value}")
        return ", ".join(lines)

    def get_api_config(self) -> Dict[str, Any]:
        """获取后端API配置"""
        return {
            "base_url": str(self.get("api.base_url")).rstrip('/'),
            "request_timeout": self.get("api.request_timeout"),
        }

    def get_server_config(self) -> Dict[str, Any]:
        """获取Web服务配置"""
        return {
            "host": self.get("server.host"),
            "port": self.get("server.port"),
            "cdn": self.get("server.cdn"),
        }

    def get_ui_config(self) -> Dict[str, Any]:
        """获取页面交互配置"""
        return {
            "refresh_interval": self.get("ui.refresh_interval"),
            "select_delay": self.get("ui.select_delay"),
        }


config = ConfigManager()


__all__ = [
    "config",
    "ConfigManager",
    "DEFAULT_CONFIG_SCHEMA",
    "ENV_PREFIX",
]
