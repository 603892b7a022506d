"""Configuration management for the article pipeline."""

from .loader import DEFAULT_CONFIG_PATH, Config, load_config, save_config
from .models import (
    ConfigModel,
    LLMConfig,
    PostgresConfig,
    SiteConfig,
    WordPressConfig,
    WorkflowConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "DEFAULT_CONFIG_PATH",
    "LLMConfig",
    "PostgresConfig",
    "SiteConfig",
    "WordPressConfig",
    "WorkflowConfig",
    "load_config",
    "save_config",
]
