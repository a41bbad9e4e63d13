"""Configuration models for the resolver and its builders."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, validator

PRIMARY_FALLBACK_LEVELS = [
    "500",
    "400",
    "600",
    "300",
    "700",
    "200",
    "800",
    "100",
    "900",
    "050",
]


class LoggingSettings(BaseModel):
    """Logging options applied by the CLI."""

    level: str = Field(default="INFO", description="Console log level")
    format: str = Field(default="text", description="File log format (text|json)")
    file: Path | None = Field(default=None, description="Optional log file")
    rotation_count: int = Field(default=3, ge=0, le=20)
    max_bytes: int = Field(default=10485760, ge=1024)

    @validator("level")
    def validate_level(cls, v: Any) -> str:
        level = str(v).upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @validator("format")
    def validate_format(cls, v: Any) -> str:
        if v not in {"text", "json"}:
            raise ValueError("Log format must be 'text' or 'json'")
        return str(v)


class ResolverConfig(BaseModel):
    """Tunables for reference resolution, builders and AA compliance."""

    # Contrast
    aa_threshold: float = Field(default=4.5, ge=1.0, le=21.0)

    # Recursion guards
    token_depth_limit: int = Field(default=8, ge=1, le=64)
    color_depth_limit: int = Field(default=10, ge=1, le=64)

    # Palettes
    primary_fallback_levels: list[str] = Field(
        default_factory=lambda: list(PRIMARY_FALLBACK_LEVELS)
    )
    default_mode: str = Field(default="light")

    # Side channels
    store_path: Path | None = Field(default=None)
    strict_brand_vars: bool = Field(default=False)
    emit_legacy_aliases: bool = Field(default=True)

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @validator("default_mode")
    def validate_mode(cls, v: Any) -> str:
        mode = str(v).strip().lower()
        if mode not in {"light", "dark"}:
            raise ValueError("Mode must be 'light' or 'dark'")
        return mode

    @validator("primary_fallback_levels")
    def validate_levels(cls, v: Any) -> list[str]:
        if not v:
            raise ValueError("At least one fallback level is required")
        return [str(level) for level in v]


DEFAULT_CONFIG = ResolverConfig()
