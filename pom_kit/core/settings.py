"""
集中式配置（环境变量/ .env），保障可测性与可控性。
等待超时区分“出现”（appear）与“可交互”（interactive）两类，探测（probe）单独设置。
"""
# @file purpose: Centralized settings using Pydantic Settings.

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POM_", env_file=".env", extra="ignore")

    base_url: str = "http://localhost:3000"
    headless: bool = True
    slow_mo_ms: int = Field(default=0, ge=0)

    navigation_timeout_ms: int = Field(default=30_000, gt=0)
    appear_timeout_ms: int = Field(default=5_000, gt=0)
    interactive_timeout_ms: int = Field(default=10_000, gt=0)
    probe_timeout_ms: int = Field(default=1_500, gt=0)
    action_timeout_ms: int = Field(default=10_000, gt=0)

    log_level: str = "INFO"


settings = Settings()
