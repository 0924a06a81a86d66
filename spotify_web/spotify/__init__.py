"""
Spotify Web API binding.

Modules:
    client.py   - SpotifyClient, one method per endpoint
    request.py  - URL building, query parameters, batch limits
    response.py - Status dispatch, JSON and error envelope decoding
    models.py   - Immutable models for tracks, albums, artists, users, playlists
    options.py  - Optional request parameters
    auth.py     - Bearer token sources
"""

from spotify_web.spotify.auth import AuthManagerToken, StaticToken, TokenSource
from spotify_web.spotify.client import SpotifyClient
from spotify_web.spotify.models import (
    ExternalIDs,
    ExternalURLs,
    FeaturedPlaylists,
    Followers,
    FullAlbum,
    FullArtist,
    FullPlaylist,
    FullTrack,
    Image,
    Page,
    PlaylistTrack,
    PlaylistTrackPage,
    PrivateUser,
    SavedTrack,
    SavedTrackPage,
    SimpleAlbum,
    SimpleAlbumPage,
    SimpleArtist,
    SimplePlaylist,
    SimplePlaylistPage,
    SimpleTrack,
    SimpleTrackPage,
    User,
)
from spotify_web.spotify.options import Options, PlaylistOptions

__all__ = [
    # Client
    "SpotifyClient",
    # Auth
    "TokenSource",
    "StaticToken",
    "AuthManagerToken",
    # Options
    "Options",
    "PlaylistOptions",
    # Models
    "ExternalURLs",
    "ExternalIDs",
    "Image",
    "Followers",
    "User",
    "PrivateUser",
    "SimpleArtist",
    "FullArtist",
    "SimpleAlbum",
    "FullAlbum",
    "SimpleTrack",
    "FullTrack",
    "PlaylistTrack",
    "SavedTrack",
    "SimplePlaylist",
    "FullPlaylist",
    "FeaturedPlaylists",
    # Paging
    "Page",
    "SimpleTrackPage",
    "SimpleAlbumPage",
    "SimplePlaylistPage",
    "PlaylistTrackPage",
    "SavedTrackPage",
]
