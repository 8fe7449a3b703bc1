"""Application configuration via pydantic-settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    debug: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 7777

    # Planning Center
    pco_api_url: str = "https://api.planningcenteronline.com/services/v2"
    # "direct" fetches plans by id; "index" enumerates every service type's plans
    plan_lookup: Literal["direct", "index"] = "direct"
    plan_cache_ttl_seconds: float = 60 * 60 * 24
    upstream_timeout_seconds: float = 10.0

    # Notifications
    ifttt_url: str = "https://maker.ifttt.com"
    pushover_api_url: str = "https://api.pushover.net"
    notification_title: str = "Planning Center Updated"
    notify_debounce_seconds: float = 60.0
    notify_leading_edge: bool = True


settings = Settings()
