"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (SEARCHRECORD_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class AdapterConfig(BaseModel):
    """Configuration for a single search adapter."""

    enabled: bool = Field(default=True, description="Whether this adapter is active")
    hosts: list[str] = Field(default_factory=list, description="Backend host URLs")
    index_pattern: str = Field(default="*", description="Default index/collection")
    username: str | None = Field(default=None, description="Authentication username")
    password: str | None = Field(default=None, description="Authentication password")
    api_key: str | None = Field(default=None, description="API key authentication")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    extra: dict[str, Any] = Field(default_factory=dict, description="Adapter-specific options")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)


class SearchSettings(BaseModel):
    """Search backend configuration."""

    default_adapter: str = Field(default="solr", description="Adapter used by connections")
    adapters: dict[str, AdapterConfig] = Field(default_factory=dict, description="Adapter configurations")


class CompilerSettings(BaseModel):
    """Condition compiler configuration."""

    group_hash_fields: bool = Field(
        default=False,
        description=(
            "AND together every entry of a hash condition, OR-grouping multi-valued fields. "
            "When false, the first multi-valued field alone decides the condition."
        ),
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the SEARCHRECORD_ prefix.
    Nested settings use double underscores: SEARCHRECORD_SEARCH__DEFAULT_ADAPTER=opensearch

    Example:
        SEARCHRECORD_SEARCH__DEFAULT_ADAPTER=solr
        SEARCHRECORD_COMPILER__GROUP_HASH_FIELDS=true
        SEARCHRECORD_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "SEARCHRECORD_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="searchrecord", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    search: SearchSettings = Field(default_factory=SearchSettings)
    compiler: CompilerSettings = Field(default_factory=CompilerSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

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
