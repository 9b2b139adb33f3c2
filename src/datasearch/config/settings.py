"""Application settings: Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (DATASEARCH_ prefix)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class EngineSettings(BaseModel):
    """Connection to the search engine."""

    backend: Literal["elasticsearch", "opensearch"] = Field(
        default="elasticsearch", description="Search backend name"
    )
    servers: list[str] = Field(default_factory=lambda: ["127.0.0.1:9200"], description="Node addresses")
    transport: str = Field(default="http", description="URL scheme for addresses given without one")
    request_timeout: float | None = Field(default=None, gt=0, description="Request timeout in seconds")
    username: str | None = Field(default=None, description="Authentication username")
    password: str | None = Field(default=None, description="Authentication password")
    api_key: str | None = Field(default=None, description="API key authentication")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    debug: bool = Field(default=False, description="Trace calls and keep raw responses")
    extra: dict[str, Any] = Field(default_factory=dict, description="Client-specific options")

    @field_validator("servers", mode="before")
    @classmethod
    def _parse_servers(cls, v: Any) -> list[str]:
        """Parse servers from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(s) for s in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single server as plain string
            return [v] if v else []
        return list(v)

    def engine_kwargs(self) -> dict[str, Any]:
        """Constructor arguments for the configured engine class."""
        kwargs: dict[str, Any] = {
            "servers": self.servers,
            "transport": self.transport,
            "debug": self.debug,
            "verify_certs": self.verify_certs,
        }
        if self.request_timeout is not None:
            kwargs["request_timeout"] = self.request_timeout
        if self.username:
            kwargs["username"] = self.username
        if self.password:
            kwargs["password"] = self.password
        if self.api_key:
            kwargs["api_key"] = self.api_key
        kwargs.update(self.extra)
        return kwargs


class SearchDefaults(BaseModel):
    """Defaults for queries built by the CLI."""

    count: int = Field(default=10, ge=1, description="Results per page")
    query_type: str = Field(default="query_string", description="Query operator for plain query text")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the DATASEARCH_ prefix.
    Nested settings use double underscores.

    Example:
        DATASEARCH_ENGINE__BACKEND=opensearch
        DATASEARCH_ENGINE__SERVERS='["es1:9200", "es2:9200"]'
        DATASEARCH_OBSERVABILITY__LOG_LEVEL=debug
    """

    model_config = {
        "env_prefix": "DATASEARCH_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    engine: EngineSettings = Field(default_factory=EngineSettings)
    search: SearchDefaults = Field(default_factory=SearchDefaults)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Sections missing from the file still come from environment variables
        or defaults.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
