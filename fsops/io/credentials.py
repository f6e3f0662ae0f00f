"""
Client configuration loaded from environment variables and env files.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _normalize_url(url: Optional[str]) -> str:
    """_normalize_url"""
    if url is None:
        return ""
    url = url.strip().rstrip("/")
    parsed_url = urlparse(url)
    if not parsed_url.scheme:
        url = "http://" + url
    return url


class ClientConfig(BaseSettings):
    """
    Settings model for the filesystem service client via environment variables
    or other settings sources supported by `pydantic-settings`.
    """

    SERVER_ADDRESS: Optional[str] = None
    API_TOKEN: Optional[SecretStr] = None

    FSOPS_RETRY_COUNT: int = Field(default=10, ge=1)
    FSOPS_RETRY_SLEEP_SEC: float = Field(default=1, ge=0)
    FSOPS_REMOTE_PREFIX: str = "/remote"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file="fsops.env",
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    def validate_credentials(self) -> None:
        """Validate that the service address is configured."""
        if not self.SERVER_ADDRESS:
            raise ValueError("SERVER_ADDRESS must be set in environment variables.")

    def server_address(self) -> str:
        return _normalize_url(self.SERVER_ADDRESS)

    def token(self) -> Optional[str]:
        if self.API_TOKEN is None:
            return None
        return self.API_TOKEN.get_secret_value() or None
