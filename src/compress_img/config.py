"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class CompressionDefaults:
    """压缩相关的默认配置"""

    # 质量设置
    QUALITY: int = 80
    MIN_QUALITY: int = 1
    MAX_QUALITY: int = 100

    # 输出命名
    SUFFIX: str = "-compressed"

    # PNG 固定使用最高压缩级别
    PNG_COMPRESS_LEVEL: int = 9

    # 并发设置，1 表示严格顺序处理
    MAX_WORKERS: int = 1
    ITEM_TIMEOUT: float | None = None


@dataclass(frozen=True)
class ServerDefaults:
    """HTTP 服务相关的默认配置"""

    HOST: str = "127.0.0.1"
    PORT: int = 3333
    MAX_BODY_MB: float = 100.0

    @property
    def max_body_bytes(self) -> int:
        return int(self.MAX_BODY_MB * 1024 * 1024)


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.compression = CompressionDefaults()
        self.server = ServerDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # 压缩配置
        if quality := os.getenv("COMPRESS_IMG_QUALITY"):
            object.__setattr__(self.compression, "QUALITY", int(quality))

        if max_workers := os.getenv("COMPRESS_IMG_MAX_WORKERS"):
            object.__setattr__(self.compression, "MAX_WORKERS", int(max_workers))

        if item_timeout := os.getenv("COMPRESS_IMG_ITEM_TIMEOUT"):
            object.__setattr__(self.compression, "ITEM_TIMEOUT", float(item_timeout))

        # 服务配置
        if host := os.getenv("COMPRESS_IMG_HOST"):
            object.__setattr__(self.server, "HOST", host)

        if port := os.getenv("COMPRESS_IMG_PORT"):
            object.__setattr__(self.server, "PORT", int(port))

        if max_body_mb := os.getenv("COMPRESS_IMG_MAX_BODY_MB"):
            object.__setattr__(self.server, "MAX_BODY_MB", float(max_body_mb))

        # 日志配置
        if log_level := os.getenv("COMPRESS_IMG_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
