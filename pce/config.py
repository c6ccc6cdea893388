"""Environment driven configuration for PCE clients.

Reads ``PCE_*`` variables (or a ``.env`` file) with pydantic-settings so
scripts can build a client without hard-coding credentials::

    PCE_FQDN=pce.example.com
    PCE_PORT=8443
    PCE_ORG=1
    PCE_USER=api_1234
    PCE_KEY=secret
"""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from pce.api import DEFAULT_MAX_POLLS, DEFAULT_TIMEOUT
from pce.models import PCE


class PCESettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    fqdn: str
    port: int = Field(default=8443, gt=0, lt=65536)
    org: int = Field(default=1, ge=1)
    user: str
    key: SecretStr
    disable_tls_checking: bool = False

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    # None polls async jobs until they finish.
    max_polls: int | None = Field(default=DEFAULT_MAX_POLLS, ge=1)

    def to_pce(self) -> PCE:
        return PCE(
            fqdn=self.fqdn,
            port=self.port,
            org=self.org,
            user=self.user,
            key=self.key.get_secret_value(),
            disable_tls_checking=self.disable_tls_checking,
        )
