from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MARKOV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Markov 服务地址（input / generate 两个端点都基于它拼接）
    base_url: str = "http://127.0.0.1:8000"

    # 传输层超时（秒），None 表示不设超时
    timeout: float | None = 60.0

    log_level: str = "INFO"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings_for_tests() -> None:
    """仅用于测试：清空配置缓存，便于使用 monkeypatch 设置环境变量。"""
    global _settings
    _settings = None
