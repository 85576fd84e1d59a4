"""基于 Pydantic Settings 的配置管理，支持环境变量与 .env 分层加载。"""

import os
from functools import lru_cache
from typing import Any, Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "dev-secret-change-in-production"


class Settings(BaseSettings):
    """
    全局配置。环境变量前缀 APP_，优先级：环境变量 > .env > 默认值。
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: Literal["development", "staging", "production"] = "development"
    host: str = "0.0.0.0"
    port: int = 8072
    log_level: str = "INFO"
    # 日志目录，按小时轮转；app.log 为全部级别，error.log 仅 ERROR
    log_dir: str = "./logs"

    database_url: str = "sqlite+aiosqlite:///./portfolio.db"
    database_echo: bool = False

    # 会话：JWT 签名密钥、Cookie 名称与有效期
    secret_key: str = DEFAULT_SECRET_KEY
    session_cookie_name: str = "session"
    session_expire_minutes: int = 60 * 24 * 7

    # 共享目录根路径，所有文件浏览/下载都被限制在其中
    shared_directory: str = "/srv/share"
    # 下载：超过阈值的文件分块流式返回，阈值以内一次性读入
    files_chunk_size: int = 64 * 1024
    files_buffer_threshold: int = 8 * 1024 * 1024

    # 单个 HTTP 请求的超时时间（秒），防止超大目录或文件拖住 worker
    request_timeout_seconds: float = 30.0
    # slowapi 默认限流，按客户端 IP；空字符串表示不限流
    rate_limit: str = "300/minute"

    # sitemap 使用的站点根地址
    site_url: str = "https://example.com"
    # 种子脚本创建的管理员邮箱
    admin_email: str = "admin@example.com"

    @model_validator(mode="before")
    @classmethod
    def fallback_from_bare_env(cls, data: Any) -> Any:
        """未配置 APP_ 前缀时，可用 SHARED_DIRECTORY / ADMIN_EMAIL 作为备用。"""
        if not isinstance(data, dict):
            return data
        out = dict(data)
        if not (out.get("shared_directory") or "").strip():
            bare = os.environ.get("SHARED_DIRECTORY", "").strip()
            if bare:
                out["shared_directory"] = bare
        if not (out.get("admin_email") or "").strip():
            bare = os.environ.get("ADMIN_EMAIL", "").strip()
            if bare:
                out["admin_email"] = bare
        return out

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ("DEBUG", "INFO", "WARNING", "ERROR")
        u = v.upper()
        if u not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return u

    @field_validator("files_chunk_size", "files_buffer_threshold")
    @classmethod
    def validate_positive_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("file size settings must be > 0")
        return v

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        return v

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def uses_default_secret(self) -> bool:
        return self.secret_key == DEFAULT_SECRET_KEY


@lru_cache
def get_settings() -> Settings:
    """获取单例配置，便于测试时覆盖。"""
    return Settings()
