"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _strip_base(value: Any) -> Any:
    """Normalize an optional base URL: blank -> None, no trailing slash."""
    if value is None:
        return None
    value = str(value).strip()
    return value.rstrip("/") or None


class TorrentioConfig(BaseModel):
    """Torrentio indexer settings (YAML section: torrentio.*)."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        default="https://torrentio.strem.fun",
        description="Base URL of the Torrentio service.",
    )
    path_prefix: str = Field(
        default="qualityfilter=threed,480p,scr,cam,unknown",
        description="Path segment before /stream/... (quality filter etc.).",
    )
    timeout_ms: int = Field(
        default=25_000,
        description="Timeout for a single Torrentio request (milliseconds).",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def _validate_base_url(cls, v: Any) -> Any:
        stripped = _strip_base(v)
        if stripped is None:
            raise ValueError("torrentio.base_url must not be empty")
        return stripped

    @field_validator("timeout_ms")
    @classmethod
    def _validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("torrentio.timeout_ms must be > 0")
        return v

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


class TorrServerConfig(BaseModel):
    """TorrServer settings (YAML section: torrserver.*)."""

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = Field(
        default="http://127.0.0.1:8090",
        description="Fallback TorrServer base URL when a request brings none.",
    )

    @field_validator("url", mode="before")
    @classmethod
    def _validate_url(cls, v: Any) -> Any:
        return _strip_base(v)


class StremioConfig(BaseModel):
    """Stremio addon settings (YAML section: stremio.*)."""

    model_config = ConfigDict(frozen=True)

    public_base_url: Optional[str] = Field(
        default=None,
        description=(
            "Externally visible base URL of this addon. When unset it is "
            "inferred from the incoming request."
        ),
    )
    max_streams: int = Field(
        default=25,
        description="Maximum number of Torrentio candidates listed per request.",
    )

    @field_validator("public_base_url", mode="before")
    @classmethod
    def _validate_public_base_url(cls, v: Any) -> Any:
        return _strip_base(v)

    @field_validator("max_streams")
    @classmethod
    def _validate_max_streams(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("stremio.max_streams must be > 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final, immutable).

    Note:
    - YAML is expected to be sectioned (http/logging/torrentio/torrserver/stremio).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    model_config = ConfigDict(frozen=True)

    # General
    app_name: str = Field(default="moisa", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client (YAML section: http.*)
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether the outbound HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="Moisa/1.1.1",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    torrentio: TorrentioConfig = Field(default_factory=TorrentioConfig)
    torrserver: TorrServerConfig = Field(default_factory=TorrServerConfig)
    stremio: StremioConfig = Field(default_factory=StremioConfig)

    @model_validator(mode="before")
    @classmethod
    def _derive_log_format(cls, data: Any) -> Any:
        # Default log format: console in dev/test, json in prod.
        if not isinstance(data, dict):
            return data
        section = data.get("logging")
        fmt = data.get("log_format")
        if fmt is None and isinstance(section, dict):
            fmt = section.get("format")
        if fmt is None:
            env = data.get("environment", "dev")
            data = {**data, "log_format": "json" if env == "prod" else "console"}
        return data

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "torrentio": self.torrentio.model_dump(),
            "torrserver": self.torrserver.model_dump(),
            "stremio": self.stremio.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Reads MOISA_* variables. The addon-specific settings also accept the
    unprefixed names used by earlier deployments:
    - TORRENTIO_BASE, TORRENTIO_PATH_PREFIX, TORRENTIO_TIMEOUT_MS
    - TORRSERVER_URL
    - SELF_BASE_URL
    """

    model_config = SettingsConfigDict(
        env_prefix="MOISA_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    torrentio_base: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MOISA_TORRENTIO_BASE", "TORRENTIO_BASE"),
    )
    torrentio_path_prefix: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "MOISA_TORRENTIO_PATH_PREFIX", "TORRENTIO_PATH_PREFIX"
        ),
    )
    torrentio_timeout_ms: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices(
            "MOISA_TORRENTIO_TIMEOUT_MS", "TORRENTIO_TIMEOUT_MS"
        ),
    )
    torrserver_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MOISA_TORRSERVER_URL", "TORRSERVER_URL"),
    )
    public_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MOISA_PUBLIC_BASE_URL", "SELF_BASE_URL"),
    )
    max_streams: Optional[int] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
