"""promptshield — Configuration.

Configuration is loaded from (in order of increasing priority):
    1. Built-in defaults (this file)
    2. Environment variables prefixed with PROMPTSHIELD_
    3. User config:   ~/.promptshield/config.yaml
    4. An explicit config file passed to ``Settings.load()``

Top-level blocks found in a config file replace the environment values for
that block as a whole.

Nested fields use ``__`` as delimiter, e.g. ``PROMPTSHIELD_SCAN__API_KEY``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.centure.ai"


# ---------------------------------------------------------------------------
# Sub-configuration blocks
# ---------------------------------------------------------------------------


class ScanConfig(BaseModel):
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the prompt-injection scanning API.",
    )
    api_key: str | None = Field(
        default=None,
        description="Bearer token for the scanning API. Required by the scan clients.",
    )
    timeout_seconds: Annotated[float, Field(ge=1.0, le=600.0)] = Field(
        default=30.0,
        description="Per-request timeout for scan calls.",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class TransportConfig(BaseModel):
    preserve_order: bool = Field(
        default=False,
        description=(
            "Serialize inbound scan pipelines so messages reach the application "
            "in arrival order. When False, overlapping messages are scanned "
            "concurrently and may be delivered out of order."
        ),
    )


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    format: Literal["json", "console"] = "console"
    file: Path | None = None


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PROMPTSHIELD_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    scan: ScanConfig = Field(default_factory=ScanConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Settings":
        """Load settings from file + environment variables."""
        data: dict[str, object] = {}

        candidates = [Path.home() / ".promptshield" / "config.yaml"]
        if config_file:
            candidates.append(config_file)

        for path in candidates:
            if path.exists():
                import yaml  # lazy import

                with path.open() as f:
                    loaded = yaml.safe_load(f) or {}
                    data.update(loaded)

        return cls(**data)


# Module-level singleton — replaced by ``override_settings()`` in tests.
_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def override_settings(settings: Settings | None) -> None:
    """Replace the module-level singleton. ``None`` forces a reload."""
    global _settings
    _settings = settings
