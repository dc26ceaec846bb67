"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file). The
library itself never reads the environment: YubicoClient takes plain values,
and dependencies.build_yubico_client() bridges these settings to it.
"""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVERS = [
    "api.yubico.com",
    "api2.yubico.com",
    "api3.yubico.com",
    "api4.yubico.com",
    "api5.yubico.com",
]

DEFAULT_USER_AGENT = "yubiverify/0.1.0"

DEFAULT_TIMEOUT = 10.0


class YubicoSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="YUBICO_", extra="ignore"
    )

    # Assigned by Yubico at https://upgrade.yubico.com/getapikey/
    client_id: str = ""
    servers: list[str] = DEFAULT_SERVERS
    # Applies to each request and to the whole race; None waits forever
    timeout_seconds: Optional[float] = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("servers")
    @classmethod
    def _servers_not_empty(cls, value: list[str]) -> list[str]:
        servers = [s.strip() for s in value if s.strip()]
        if not servers:
            raise ValueError("at least one verification server is required")
        return servers


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    # "console" or "json"; unset follows AppSettings.env (json in production)
    log_format: Optional[str] = None


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"

    # Sub-configs (composed via model_validator below)
    yubico: Optional[YubicoSettings] = None
    logging: Optional[LoggingSettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.yubico is None:
            self.yubico = YubicoSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.logging.log_format is None:
            self.logging.log_format = "json" if self.is_production else "console"
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
