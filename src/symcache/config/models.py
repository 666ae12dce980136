"""Pydantic models describing symcache configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from symcache.io.fetcher import DEFAULT_USER_AGENT


class CacheConfig(BaseModel):
    """Cache root, upstream server and population policy."""

    model_config = ConfigDict(extra="forbid")

    root: Path = Path("./symbols")
    server_url: str = "https://msdl.microsoft.com/download/symbols"
    lock_scope: Literal["global", "per_key"] = "global"
    temp_suffix: str = ".tmp"
    cleanup_invalid_temp: bool = False

    @field_validator("temp_suffix")
    @classmethod
    def _validate_temp_suffix(cls, value: str) -> str:
        """A suffix must look like ``.ext`` so it can replace the file extension."""

        if not value.startswith(".") or len(value) < 2 or "/" in value:
            raise ValueError(f"temp_suffix must look like '.tmp', got {value!r}.")
        return value


class HttpConfig(BaseModel):
    """Outbound request settings for the symbol server."""

    model_config = ConfigDict(extra="forbid")

    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    user_agent: str = DEFAULT_USER_AGENT


class LoggingConfig(BaseModel):
    """Log destination and verbosity."""

    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_path: Optional[Path] = None


class SymCacheConfig(BaseModel):
    """Root configuration object."""

    model_config = ConfigDict(extra="forbid")

    cache: CacheConfig = Field(default_factory=CacheConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


__all__ = ["CacheConfig", "HttpConfig", "LoggingConfig", "SymCacheConfig"]
