"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (ALGOLIABRIDGE_ prefix) and .env
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from algoliabridge.models.schema import ReplicaSpec


class AlgoliaSettings(BaseModel):
    """Algolia connection and index behavior."""

    app_id: str = Field(default="", description="Algolia application id")
    api_key: str = Field(default="", description="Algolia admin API key")
    base_url: str | None = Field(default=None, description="API host (default: https://{app_id}.algolia.net)")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")
    retries: int = Field(default=1, ge=0, description="Connection retries done by the HTTP transport")
    batch_size: int = Field(default=1000, ge=1, description="Maximum records per batch request")
    replicas: list[ReplicaSpec] = Field(default_factory=list, description="Sort replicas of every index")
    wait_for_settings: bool = Field(
        default=False,
        description="Wait until settings updates are published before saving records",
    )
    max_values_per_facet: int = Field(default=100, ge=1, description="Default facet values returned per attribute")

    @field_validator("replicas", mode="before")
    @classmethod
    def _parse_replicas(cls, v: Any) -> Any:
        """Accept ``"price:desc"`` shorthands, alone, comma-separated or in a list."""
        if isinstance(v, str):
            import json

            try:
                v = json.loads(v)
            except (json.JSONDecodeError, TypeError):
                v = [part for part in v.split(",") if part.strip()]
        if isinstance(v, list):
            return [_parse_replica(item) if isinstance(item, str) else item for item in v]
        return v


def _parse_replica(value: str) -> dict[str, Any]:
    field_name, _, direction = value.strip().partition(":")
    return {"field_name": field_name.strip(), "is_descending": direction.strip().lower() == "desc"}


class SearchSettings(BaseModel):
    """Index naming configuration."""

    scope: str = Field(default="default", min_length=1, description="Prefix of every physical index name")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the ALGOLIABRIDGE_
    prefix. Nested settings use double underscores.

    Example:
        ALGOLIABRIDGE_ALGOLIA__APP_ID=ABCD1234
        ALGOLIABRIDGE_ALGOLIA__API_KEY=...
        ALGOLIABRIDGE_ALGOLIA__REPLICAS='["price:asc", "price:desc"]'
        ALGOLIABRIDGE_SEARCH__SCOPE=shop
    """

    model_config = {
        "env_prefix": "ALGOLIABRIDGE_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="algoliabridge", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")

    algolia: AlgoliaSettings = Field(default_factory=AlgoliaSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        YAML values are passed as init arguments, so they override environment
        variables and ``.env`` entries for the keys they set.  Keys the file
        leaves out still come from the environment.

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
