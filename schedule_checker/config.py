"""Centralized configuration management using Pydantic Settings.

Every setting is loaded from environment variables with sensible defaults.

Usage:
    from schedule_checker.config import get_settings
    settings = get_settings()
    redis_host = settings.redis.host
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis connection configuration."""

    model_config = SettingsConfigDict(env_prefix="REDIS_", extra="ignore")

    host: str = Field(default="redis", description="Redis host")
    port: int = Field(default=6379, description="Redis port")
    password: str = Field(default="", description="Redis password")
    max_connections: int = Field(default=200, description="Maximum pool connections")
    pool_timeout_sec: float = Field(default=5.0, description="Pool timeout in seconds")
    health_check_interval: int = Field(default=30, description="Health check interval in seconds")
    retry_on_timeout: bool = Field(default=True, description="Retry on timeout")
    socket_timeout: float = Field(default=5.0, description="Socket timeout in seconds")
    socket_connect_timeout: float = Field(default=5.0, description="Socket connect timeout in seconds")


class CorsSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    origins_raw: str = Field(
        default="http://localhost:3000",
        validation_alias="CORS_ORIGINS",
    )
    origins_regex: str = Field(
        default="",
        validation_alias="CORS_ORIGINS_REGEX",
        description="Regex pattern for origins",
    )

    @property
    def origins(self) -> list[str]:
        """Parse comma-separated origins into list."""
        return [o.strip() for o in self.origins_raw.split(",") if o.strip()]

    @property
    def allow_credentials(self) -> bool:
        """Credentials not allowed with wildcard origins."""
        return self.origins != ["*"] and not self.origins_regex


class DebugSettings(BaseSettings):
    """Debug flags configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    request: bool = Field(default=False, alias="request_debug")
    websocket: bool = Field(default=False, alias="ws_debug")
    redis: bool = Field(default=False, alias="redis_debug")

    @field_validator("*", mode="before")
    @classmethod
    def parse_bool(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)


class EventSettings(BaseSettings):
    """Scheduling event configuration."""

    model_config = SettingsConfigDict(env_prefix="EVENT_", extra="ignore")

    id_length: int = Field(default=13, description="Length of generated event ids")
    user_id_length: int = Field(default=13, description="Length of generated participant ids")
    passcode_length: int = Field(default=6, description="Length of the admin passcode")
    max_name_length: int = Field(default=100, description="Maximum event/participant name length")
    key_ttl_sec: int = Field(default=0, description="Expiry for stored keys, 0 keeps them forever")
    ws_heartbeat_sec: float = Field(default=25.0, description="Websocket heartbeat interval")

    @property
    def key_ttl(self) -> int | None:
        return self.key_ttl_sec if self.key_ttl_sec > 0 else None


class Settings:
    """Main application settings combining all configuration sections.

    This is not a BaseSettings subclass to avoid env var conflicts.
    Each subsetting is loaded independently with its own prefix.
    """

    def __init__(self) -> None:
        self.redis = RedisSettings()
        self.cors = CorsSettings()
        self.debug = DebugSettings()
        self.events = EventSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance (singleton pattern)."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear cached settings (useful for testing)."""
    get_settings.cache_clear()
