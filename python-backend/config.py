"""
Application configuration.

Settings are pydantic models populated from environment variables with the
RFF_ prefix. Invalid values fail at startup with a ValidationError.
"""

import os
from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from core.constants import (
    KernelSizeConstants,
    ParallelConstants,
    StoreConstants,
    SystemConstants,
)

PREFIX = SystemConstants.ENV_PREFIX


def _env(name: str, default: Any) -> Any:
    return os.getenv(f"{PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(f"{PREFIX}{name}")
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(f"{PREFIX}{name}")
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def _default_workers() -> int:
    return max(1, min(os.cpu_count() or 1, ParallelConstants.MAX_WORKERS_CAP))


class SystemSettings(BaseModel):
    """Logging and debug settings"""

    debug: bool = False
    log_level: str = SystemConstants.LOG_LEVEL_DEFAULT

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class APISettings(BaseModel):
    """HTTP server settings"""

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    cors_enabled: bool = True
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class StoreSettings(BaseModel):
    """Raster store limits"""

    max_rasters: int = Field(
        default=StoreConstants.DEFAULT_MAX_RASTERS,
        ge=StoreConstants.MIN_RASTERS,
        le=StoreConstants.MAX_RASTERS,
    )
    max_memory_mb: float = Field(default=StoreConstants.DEFAULT_MAX_MEMORY_MB, gt=0)


class EngineSettings(BaseModel):
    """Filter engine limits and parallelism"""

    max_kernel_size: int = Field(
        default=KernelSizeConstants.MAX_KERNEL_SIZE,
        ge=KernelSizeConstants.MIN_KERNEL_SIZE,
    )
    parallel_min_pixels: int = Field(default=ParallelConstants.DEFAULT_MIN_PIXELS, ge=0)
    max_workers: int = Field(default_factory=_default_workers, ge=1)


class Settings(BaseModel):
    """Root settings object"""

    environment: str = "development"
    system: SystemSettings = Field(default_factory=SystemSettings)
    api: APISettings = Field(default_factory=APISettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from RFF_* environment variables."""
        engine = {
            "max_kernel_size": _env("MAX_KERNEL_SIZE", KernelSizeConstants.MAX_KERNEL_SIZE),
            "parallel_min_pixels": _env(
                "PARALLEL_MIN_PIXELS", ParallelConstants.DEFAULT_MIN_PIXELS
            ),
        }
        if os.getenv(f"{PREFIX}MAX_WORKERS") is not None:
            engine["max_workers"] = _env("MAX_WORKERS", 1)

        return cls(
            environment=_env("ENV", "development"),
            system=SystemSettings(
                debug=_env_bool("DEBUG", False),
                log_level=_env("LOG_LEVEL", SystemConstants.LOG_LEVEL_DEFAULT),
            ),
            api=APISettings(
                host=_env("HOST", "0.0.0.0"),
                port=_env("PORT", 8000),
                cors_enabled=_env_bool("CORS_ENABLED", True),
                cors_origins=_env_list("CORS_ORIGINS", ["*"]),
            ),
            store=StoreSettings(
                max_rasters=_env("MAX_RASTERS", StoreConstants.DEFAULT_MAX_RASTERS),
                max_memory_mb=_env("MAX_MEMORY_MB", StoreConstants.DEFAULT_MAX_MEMORY_MB),
            ),
            engine=EngineSettings(**engine),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()
