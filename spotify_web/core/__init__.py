"""
Core module for spotify-web.

This module provides the foundational components used throughout the library:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging setup and logger access

Usage:
    from spotify_web.core import (
        Config, load_config,
        setup_logging, get_logger,
        SpotifyWebError, SpotifyError, ValidationError, DecodeError
    )
"""

from spotify_web.core.config import (
    ApiConfig,
    Config,
    SpotifyConfig,
    load_config,
    parse_config,
)
from spotify_web.core.exceptions import (
    ConfigError,
    DecodeError,
    SpotifyError,
    SpotifyWebError,
    ValidationError,
)
from spotify_web.core.logger import get_logger, setup_logging

__all__ = [
    # Config
    "Config",
    "SpotifyConfig",
    "ApiConfig",
    "load_config",
    "parse_config",
    # Exceptions
    "SpotifyWebError",
    "ConfigError",
    "ValidationError",
    "DecodeError",
    "SpotifyError",
    # Logger
    "setup_logging",
    "get_logger",
]
