from __future__ import annotations

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env once at module import so every BaseSettings subclass sees the env vars
load_dotenv()

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})


class GatewaySettings(BaseSettings):
    """Gateway server settings. Env vars prefixed with GATEWAY_."""

    model_config = SettingsConfigDict(env_prefix="GATEWAY_", populate_by_name=True)

    host: str = "0.0.0.0"
    port: int = Field(3004, validation_alias=AliasChoices("GATEWAY_PORT", "PORT"))
    name: str = "Google Maps MCP Service"
    version: str = "0.1.0"
    sse_keepalive_s: float = Field(15.0, gt=0)
    tool_timeout_s: float = Field(30.0, gt=0)
    # Upper bound on uvicorn's connection drain before open requests are cancelled.
    shutdown_timeout_s: float = Field(5.0, gt=0)


class MapsSettings(BaseSettings):
    """Google Maps Platform settings. Env vars prefixed with MAPS_."""

    model_config = SettingsConfigDict(env_prefix="MAPS_", populate_by_name=True)

    # Process-wide default credential; sessions may override with a bearer header.
    api_key: str = Field(
        "",
        validation_alias=AliasChoices("MAPS_API_KEY", "NS_API_KEY", "GOOGLE_MAPS_API_KEY"),
    )
    base_url: str = "https://maps.googleapis.com/maps/api"
    request_timeout_s: float = Field(10.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class LoggingSettings(BaseSettings):
    """Logging settings. Env vars prefixed with LOG_."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    json_output: bool = False
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in _LOG_LEVELS:
            msg = f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)} (got '{v}')"
            raise ValueError(msg)
        return v


class Settings(BaseSettings):
    """Root settings composing all sub-configurations."""

    model_config = SettingsConfigDict(extra="ignore")

    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    maps: MapsSettings = Field(default_factory=MapsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def get_settings() -> Settings:
    """Load and validate settings. Raises ValidationError on invalid values."""
    return Settings()
