"""
spotify-web: a client library for the Spotify Web API.

Each operation issues one HTTP request against a documented endpoint,
decodes the JSON response into immutable models, and turns the API's
error envelope into a typed exception.

Modules:
    core/       - Configuration, logging, exceptions
    spotify/    - Client, request building, response decoding, models

Usage:
    from spotify_web import SpotifyClient, PlaylistOptions, SpotifyError

    client = SpotifyClient.from_token(access_token)
    try:
        message, page = client.featured_playlists(PlaylistOptions(country="SE"))
    except SpotifyError as e:
        if e.is_auth_error:
            ...  # token expired, get a new one

    for playlist in page.items:
        print(playlist.name)

Configuration:
    SpotifyClient.from_config(load_config()) reads config.yaml:

        spotify:
          client_id: "your_client_id"
          client_secret: "your_client_secret"

Dependencies:
    - requests: HTTP transport
    - spotipy: OAuth token acquisition (client credentials, user auth)
    - pyyaml: Configuration file parsing
    - tqdm: Progress-bar-safe console logging
"""

__version__ = "0.1.0"
__license__ = "MIT"

from spotify_web.core import (
    Config,
    ConfigError,
    DecodeError,
    SpotifyError,
    SpotifyWebError,
    ValidationError,
    get_logger,
    load_config,
    setup_logging,
)
from spotify_web.spotify import (
    FullTrack,
    Options,
    PlaylistOptions,
    PlaylistTrack,
    SimplePlaylist,
    SimpleTrack,
    SpotifyClient,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "SpotifyWebError",
    "ConfigError",
    "ValidationError",
    "DecodeError",
    "SpotifyError",
    # Client
    "SpotifyClient",
    "Options",
    "PlaylistOptions",
    # Models
    "SimpleTrack",
    "FullTrack",
    "PlaylistTrack",
    "SimplePlaylist",
]
