from __future__ import annotations

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from relaynet.errors import ConfigurationError
from relaynet.relay import DEFAULT_ATTEMPTS, DEFAULT_BACKOFF_SECONDS, DEFAULT_TIMEOUT_SECONDS
from relaynet.rpc import DEFAULT_METHOD


class RelaySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    rpcs: str = Field(..., alias="RPCS")
    raw_tx: str = Field(..., alias="RAWTX")
    attempts: int = Field(DEFAULT_ATTEMPTS, alias="ATTEMPTS", gt=0)

    timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, alias="RELAY_TIMEOUT", gt=0)
    backoff_seconds: float = Field(DEFAULT_BACKOFF_SECONDS, alias="RELAY_BACKOFF_UNIT", ge=0)
    rpc_method: str = Field(DEFAULT_METHOD, alias="RELAY_METHOD")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    def endpoint_list(self) -> list[str]:
        return [url.strip() for url in self.rpcs.split(",") if url.strip()]


def load_settings(**overrides) -> RelaySettings:
    try:
        settings = RelaySettings(**overrides)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
        raise ConfigurationError(f"invalid relay configuration: {fields}") from exc
    if not settings.endpoint_list():
        raise ConfigurationError("RPCS does not contain any endpoint")
    if not settings.raw_tx.strip():
        raise ConfigurationError("RAWTX is empty")
    return settings
