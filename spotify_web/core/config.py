"""
Configuration management for spotify-web.

This module handles loading, validating, and providing access to the
client configuration stored in config.yaml.

The configuration file contains:
    - Spotify authorization: either a ready-made bearer access token,
      or application credentials (client_id, client_secret) used to
      obtain one through the client credentials flow
    - Optional API settings: base URL and request timeout

Configuration File Location:
    By default config.yaml is read from the current working directory.
    An explicit path may be passed to load_config().

Example config.yaml:
    spotify:
      client_id: "your_client_id_here"
      client_secret: "your_client_secret_here"
      # access_token: "BQD..."  # takes precedence over client credentials

    api:
      base_url: "https://api.spotify.com/v1/"
      timeout: 10
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from spotify_web.core.exceptions import ConfigError


# Default configuration file name (in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_BASE_URL = "https://api.spotify.com/v1/"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class SpotifyConfig:
    """
    Spotify authorization configuration.

    At least one of access_token or the (client_id, client_secret) pair
    is set. Credentials are obtained from the Spotify Developer Dashboard:
    https://developer.spotify.com/dashboard

    Attributes:
        access_token: A bearer token obtained elsewhere, or None.
        client_id: The Spotify application client ID, or None.
        client_secret: The Spotify application client secret, or None.
    """
    access_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)


@dataclass(frozen=True)
class ApiConfig:
    """
    Web API endpoint configuration.

    Attributes:
        base_url: Base URL every endpoint path is joined to. Always ends with '/'.
        timeout: Transport timeout in seconds for each request.
    """
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class Config:
    """
    Complete client configuration.

    Created by load_config() and treated as immutable.

    Attributes:
        spotify: Authorization settings.
        api: Endpoint settings.

    Example:
        config = load_config()
        client = SpotifyClient.from_config(config)
    """
    spotify: SpotifyConfig
    api: ApiConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the config file is not found, has invalid YAML syntax,
                     has no usable authorization, or contains invalid values.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return parse_config(raw_config)


def parse_config(raw_config: dict[str, Any]) -> Config:
    """
    Build a Config from an already parsed dictionary.

    Raises:
        ConfigError: If a section is missing or a value is invalid.
    """
    _validate_config(raw_config)

    return Config(
        spotify=_parse_spotify_config(raw_config["spotify"]),
        api=_parse_api_config(raw_config.get("api"))
    )


def _validate_config(raw_config: dict[str, Any]) -> None:
    if "spotify" not in raw_config:
        raise ConfigError(
            "Missing required section: 'spotify'",
            details={"missing_section": "spotify"}
        )

    for section in ("spotify", "api"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )


def _optional_string(section: dict[str, Any], key: str, field: str) -> str | None:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{field}' must be a non-empty string",
            details={"field": field}
        )
    return value.strip()


def _parse_spotify_config(spotify_section: dict[str, Any]) -> SpotifyConfig:
    """
    Parse and validate the Spotify configuration section.

    Raises:
        ConfigError: If neither an access token nor both client credentials
                     are present, or if any present value is empty.
    """
    access_token = _optional_string(spotify_section, "access_token", "spotify.access_token")
    client_id = _optional_string(spotify_section, "client_id", "spotify.client_id")
    client_secret = _optional_string(spotify_section, "client_secret", "spotify.client_secret")

    if (client_id is None) != (client_secret is None):
        missing = "spotify.client_secret" if client_secret is None else "spotify.client_id"
        raise ConfigError(
            f"'{missing}' is required when the other client credential is set",
            details={"field": missing}
        )

    if access_token is None and client_id is None:
        raise ConfigError(
            "Configure either 'spotify.access_token' or "
            "'spotify.client_id' and 'spotify.client_secret'",
            details={"section": "spotify"}
        )

    return SpotifyConfig(
        access_token=access_token,
        client_id=client_id,
        client_secret=client_secret
    )


def _parse_api_config(api_section: dict[str, Any] | None) -> ApiConfig:
    """
    Parse the optional api section, applying defaults.

    Raises:
        ConfigError: If base_url is not an http(s) URL or timeout is not
                     a positive number.
    """
    if api_section is None:
        return ApiConfig()

    base_url = DEFAULT_BASE_URL
    raw_url = api_section.get("base_url")
    if raw_url is not None:
        if not isinstance(raw_url, str) or not raw_url.startswith(("http://", "https://")):
            raise ConfigError(
                "'api.base_url' must be an http(s) URL",
                details={"field": "api.base_url", "value": raw_url}
            )
        base_url = raw_url if raw_url.endswith("/") else raw_url + "/"

    timeout = DEFAULT_TIMEOUT
    raw_timeout = api_section.get("timeout")
    if raw_timeout is not None:
        # bool is an int subclass, reject it explicitly
        if isinstance(raw_timeout, bool) or not isinstance(raw_timeout, (int, float)) or raw_timeout <= 0:
            raise ConfigError(
                "'api.timeout' must be a positive number",
                details={"field": "api.timeout", "value": raw_timeout}
            )
        timeout = float(raw_timeout)

    return ApiConfig(base_url=base_url, timeout=timeout)
