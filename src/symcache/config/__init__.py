"""Configuration models and loaders for symcache."""

from .loader import ConfigError, DEFAULT_CONFIG_PATH, dump_example_config, load_config
from .models import CacheConfig, HttpConfig, LoggingConfig, SymCacheConfig

__all__ = [
    "CacheConfig",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "HttpConfig",
    "LoggingConfig",
    "SymCacheConfig",
    "dump_example_config",
    "load_config",
]
