"""
Spotify Web API client.

This module provides SpotifyClient, a thin synchronous binding to the
Spotify Web API: one method per endpoint, each performing a single HTTP
request and returning immutable models from spotify_web.spotify.models.

Request Flow:
    1. The method validates its arguments locally (batch limits, options);
       a ValidationError is raised before anything is sent
    2. The token source supplies the bearer token
    3. The requests.Session performs the call
    4. decode_response() dispatches on the status code and either returns
       the decoded model or raises SpotifyError / DecodeError

Transport errors (requests.RequestException) are not caught and reach
the caller unchanged. There is no retry, no rate limiting and no token
refresh inside the client: the caller inspects SpotifyError.status and
decides (e.g., re-authenticate on 401).

Instances:
    There is no shared default client. Create one and pass it around:

        client = SpotifyClient.from_token(access_token)
        client = SpotifyClient.from_credentials(client_id, client_secret)
        client = SpotifyClient.from_config(load_config())

Thread Safety:
    A client carries only its session, token source, base URL and timeout;
    calls keep no per-request state on the instance, so independent calls
    may be issued from several threads.

Usage:
    with SpotifyClient.from_token(token) as client:
        track = client.get_track("6rqhFgbbKwnb9MLmUQDhG6")
        message, page = client.featured_playlists(PlaylistOptions(country="SE"))
"""

from typing import Any, Callable, TypeVar

import requests

from spotify_web.core.config import Config
from spotify_web.core.exceptions import DecodeError, SpotifyError
from spotify_web.core.logger import get_logger
from spotify_web.spotify.auth import AuthManagerToken, StaticToken, TokenSource
from spotify_web.spotify.models import (
    FeaturedPlaylists,
    FullAlbum,
    FullArtist,
    FullPlaylist,
    FullTrack,
    Page,
    PlaylistTrackPage,
    PrivateUser,
    SavedTrackPage,
    SimpleAlbumPage,
    SimplePlaylistPage,
    SimpleTrackPage,
    User,
)
from spotify_web.spotify.options import Options, PlaylistOptions
from spotify_web.spotify.request import (
    DEFAULT_BASE_URL,
    MAX_ALBUM_IDS,
    MAX_ARTIST_IDS,
    MAX_PLAYLIST_ADD,
    MAX_SAVED_TRACK_IDS,
    MAX_TRACK_IDS,
    build_params,
    check_batch,
    check_ids,
    endpoint_url,
    join_ids,
    resolve_url,
)
from spotify_web.spotify.response import decode_response


DEFAULT_TIMEOUT = 10.0

T = TypeVar("T")
P = TypeVar("P", bound=Page)


def _batch_decoder(key: str, factory: Callable[[Any], T]) -> Callable[[Any], list[T | None]]:
    """
    Decoder for batch lookups such as {"tracks": [{...}, null, ...]}.

    Unknown ids come back as null and stay None, so results line up
    with the requested ids.
    """
    def decode(body: Any) -> list[T | None]:
        if not isinstance(body, dict) or not isinstance(body.get(key), list):
            raise DecodeError(
                f"spotify: couldn't decode {key}",
                details={"field": key}
            )
        return [None if item is None else factory(item) for item in body[key]]
    return decode


def _field_decoder(key: str, factory: Callable[[Any], T]) -> Callable[[Any], T]:
    """Decoder for bodies that wrap a single object under one key."""
    def decode(body: Any) -> T:
        if not isinstance(body, dict) or key not in body:
            raise DecodeError(
                f"spotify: couldn't decode {key}",
                details={"field": key}
            )
        return factory(body[key])
    return decode


def _snapshot_id(body: Any) -> str:
    if not isinstance(body, dict) or not isinstance(body.get("snapshot_id"), str):
        raise DecodeError("spotify: couldn't decode snapshot_id")
    return body["snapshot_id"]


class SpotifyClient:
    """
    Synchronous Spotify Web API client.

    Attributes:
        base_url: Base URL endpoint paths are joined to.
        timeout: Transport timeout in seconds for each request.

    Raises (all methods):
        ValidationError: Arguments rejected locally, nothing was sent.
        SpotifyError: The API answered with an error envelope. An instance
                      without a token source raises SpotifyError(401)
                      before sending anything.
        DecodeError: The response body could not be decoded.
        requests.RequestException: The transport failed.
    """

    def __init__(
        self,
        token_source: TokenSource | None = None,
        session: requests.Session | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT
    ) -> None:
        """
        Args:
            token_source: Supplies the bearer token. None creates an
                          unauthenticated client whose calls all fail with 401.
            session: Transport to use. A new requests.Session by default.
            base_url: Base URL of the Web API.
            timeout: Transport timeout in seconds.
        """
        self._token_source = token_source
        self._session = session if session is not None else requests.Session()
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.logger = get_logger(__name__)

    @classmethod
    def from_token(cls, token: str, **kwargs: Any) -> "SpotifyClient":
        """Client authorized with a fixed bearer token."""
        return cls(StaticToken(token), **kwargs)

    @classmethod
    def from_credentials(cls, client_id: str, client_secret: str, **kwargs: Any) -> "SpotifyClient":
        """Client authorized through the client credentials flow (via spotipy)."""
        return cls(AuthManagerToken.client_credentials(client_id, client_secret), **kwargs)

    @classmethod
    def from_config(cls, config: Config, session: requests.Session | None = None) -> "SpotifyClient":
        """
        Client built from a loaded Config.

        A configured access token takes precedence over client credentials.
        """
        if config.spotify.access_token:
            token_source: TokenSource = StaticToken(config.spotify.access_token)
        else:
            token_source = AuthManagerToken.client_credentials(
                config.spotify.client_id, config.spotify.client_secret
            )
        return cls(
            token_source,
            session=session,
            base_url=config.api.base_url,
            timeout=config.api.timeout
        )

    @property
    def is_authenticated(self) -> bool:
        return self._token_source is not None

    def close(self) -> None:
        """Release the session's pooled connections."""
        self._session.close()

    def __enter__(self) -> "SpotifyClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # =========================================================================
    # Request execution
    # =========================================================================

    def _headers(self) -> dict[str, str]:
        if self._token_source is None:
            raise SpotifyError(
                401,
                "No access token provided",
                details={"reason": "client has no token source"}
            )
        return {"Authorization": f"Bearer {self._token_source.get_token()}"}

    def _send(
        self,
        method: str,
        path_or_url: str,
        params: dict[str, str] | None = None,
        json: Any = None
    ) -> requests.Response:
        url = resolve_url(self.base_url, path_or_url)
        headers = self._headers()
        self.logger.debug("%s %s params=%s", method, url, params or {})
        return self._session.request(
            method,
            url,
            params=params,
            json=json,
            headers=headers,
            timeout=self.timeout
        )

    def _get(self, path_or_url: str, factory: Callable[[Any], T],
             params: dict[str, str] | None = None) -> T:
        response = self._send("GET", path_or_url, params=params)
        return decode_response(response, factory)

    def _write(self, method: str, path: str, params: dict[str, str] | None = None,
               json: Any = None) -> None:
        response = self._send(method, path, params=params, json=json)
        decode_response(response, lambda body: None, allow_empty=True)

    def _path(self, *segments: str) -> str:
        return endpoint_url(self.base_url, *segments)

    # =========================================================================
    # Tracks
    # =========================================================================

    def get_track(self, track_id: str) -> FullTrack:
        """
        Get catalog information for a single track.

        Args:
            track_id: Spotify ID of the track, e.g. "6rqhFgbbKwnb9MLmUQDhG6".
        """
        check_ids("get_track", track_id)
        return self._get(self._path("tracks", track_id), FullTrack.from_dict)

    def get_tracks(self, *track_ids: str) -> list[FullTrack | None]:
        """
        Get catalog information for up to 50 tracks in one request.

        Tracks are returned in the order requested. A track that is not
        found yields None at its position. Duplicate ids yield duplicate
        tracks.
        """
        ids = check_batch("get_tracks", track_ids, MAX_TRACK_IDS)
        return self._get(
            self._path("tracks"),
            _batch_decoder("tracks", FullTrack.from_dict),
            params={"ids": join_ids(ids)}
        )

    # =========================================================================
    # Artists
    # =========================================================================

    def get_artist(self, artist_id: str) -> FullArtist:
        check_ids("get_artist", artist_id)
        return self._get(self._path("artists", artist_id), FullArtist.from_dict)

    def get_artists(self, *artist_ids: str) -> list[FullArtist | None]:
        """Get up to 50 artists in one request, in the order requested."""
        ids = check_batch("get_artists", artist_ids, MAX_ARTIST_IDS)
        return self._get(
            self._path("artists"),
            _batch_decoder("artists", FullArtist.from_dict),
            params={"ids": join_ids(ids)}
        )

    def get_artist_top_tracks(self, artist_id: str, country: str) -> list[FullTrack]:
        """
        Get an artist's top tracks in a country.

        Args:
            artist_id: Spotify ID of the artist.
            country: ISO 3166-1 alpha-2 country code (required by the API).
        """
        check_ids("get_artist_top_tracks", artist_id, country)
        tracks = self._get(
            self._path("artists", artist_id, "top-tracks"),
            _batch_decoder("tracks", FullTrack.from_dict),
            params={"country": country}
        )
        return [track for track in tracks if track is not None]

    # =========================================================================
    # Albums
    # =========================================================================

    def get_album(self, album_id: str) -> FullAlbum:
        check_ids("get_album", album_id)
        return self._get(self._path("albums", album_id), FullAlbum.from_dict)

    def get_albums(self, *album_ids: str) -> list[FullAlbum | None]:
        """Get up to 20 albums in one request, in the order requested."""
        ids = check_batch("get_albums", album_ids, MAX_ALBUM_IDS)
        return self._get(
            self._path("albums"),
            _batch_decoder("albums", FullAlbum.from_dict),
            params={"ids": join_ids(ids)}
        )

    def get_album_tracks(self, album_id: str, opt: Options | None = None) -> SimpleTrackPage:
        check_ids("get_album_tracks", album_id)
        return self._get(
            self._path("albums", album_id, "tracks"),
            SimpleTrackPage.from_dict,
            params=build_params(opt)
        )

    # =========================================================================
    # Browse
    # =========================================================================

    def featured_playlists(self, opt: PlaylistOptions | None = None) -> tuple[str, SimplePlaylistPage]:
        """
        Get Spotify's featured playlists.

        Args:
            opt: Optional country, locale, timestamp, limit and offset.

        Returns:
            The message shown with the playlists (e.g. "Enjoy a mellow
            afternoon.") and the page of playlists.
        """
        featured = self._get(
            self._path("browse", "featured-playlists"),
            FeaturedPlaylists.from_dict,
            params=build_params(opt)
        )
        return featured.message, featured.playlists

    def new_releases(self, opt: PlaylistOptions | None = None) -> SimpleAlbumPage:
        return self._get(
            self._path("browse", "new-releases"),
            _field_decoder("albums", SimpleAlbumPage.from_dict),
            params=build_params(opt)
        )

    # =========================================================================
    # Users
    # =========================================================================

    def current_user(self) -> PrivateUser:
        """Profile of the user the token belongs to (needs a user token)."""
        return self._get(self._path("me"), PrivateUser.from_dict)

    def get_user(self, user_id: str) -> User:
        check_ids("get_user", user_id)
        return self._get(self._path("users", user_id), User.from_dict)

    # =========================================================================
    # Playlists
    # =========================================================================

    def get_playlists_for_user(self, user_id: str, opt: Options | None = None) -> SimplePlaylistPage:
        check_ids("get_playlists_for_user", user_id)
        return self._get(
            self._path("users", user_id, "playlists"),
            SimplePlaylistPage.from_dict,
            params=build_params(opt)
        )

    def get_playlist(self, user_id: str, playlist_id: str, fields: str | None = None) -> FullPlaylist:
        """
        Get a playlist owned by a user.

        Args:
            user_id: Spotify ID of the owner.
            playlist_id: Spotify ID of the playlist.
            fields: Optional field filter in the API's syntax. Filtering out
                    a required field (id, name) makes decoding fail.
        """
        check_ids("get_playlist", user_id, playlist_id)
        return self._get(
            self._path("users", user_id, "playlists", playlist_id),
            FullPlaylist.from_dict,
            params=build_params(fields=fields)
        )

    def get_playlist_tracks(
        self,
        user_id: str,
        playlist_id: str,
        opt: Options | None = None
    ) -> PlaylistTrackPage:
        check_ids("get_playlist_tracks", user_id, playlist_id)
        return self._get(
            self._path("users", user_id, "playlists", playlist_id, "tracks"),
            PlaylistTrackPage.from_dict,
            params=build_params(opt)
        )

    def create_playlist_for_user(self, user_id: str, name: str, public: bool = True) -> FullPlaylist:
        """Create an empty playlist owned by user_id (needs playlist-modify scopes)."""
        check_ids("create_playlist_for_user", user_id, name)
        response = self._send(
            "POST",
            self._path("users", user_id, "playlists"),
            json={"name": name, "public": public}
        )
        return decode_response(response, FullPlaylist.from_dict)

    def add_tracks_to_playlist(self, user_id: str, playlist_id: str, *track_ids: str) -> str:
        """
        Append up to 100 tracks to a playlist.

        Returns:
            The playlist's new snapshot id.
        """
        ids = check_batch("add_tracks_to_playlist", track_ids, MAX_PLAYLIST_ADD)
        check_ids("add_tracks_to_playlist", user_id, playlist_id)
        response = self._send(
            "POST",
            self._path("users", user_id, "playlists", playlist_id, "tracks"),
            params={"uris": join_ids([f"spotify:track:{i}" for i in ids])}
        )
        return decode_response(response, _snapshot_id)

    def follow_playlist(self, owner_id: str, playlist_id: str, public: bool = True) -> None:
        """Follow a playlist as the current user."""
        check_ids("follow_playlist", owner_id, playlist_id)
        self._write(
            "PUT",
            self._path("users", owner_id, "playlists", playlist_id, "followers"),
            json={"public": public}
        )

    # =========================================================================
    # Library
    # =========================================================================

    def current_user_saved_tracks(self, opt: Options | None = None) -> SavedTrackPage:
        return self._get(
            self._path("me", "tracks"),
            SavedTrackPage.from_dict,
            params=build_params(opt)
        )

    def save_tracks(self, *track_ids: str) -> None:
        """Save up to 50 tracks to the current user's library."""
        ids = check_batch("save_tracks", track_ids, MAX_SAVED_TRACK_IDS)
        self._write("PUT", self._path("me", "tracks"), params={"ids": join_ids(ids)})

    def remove_saved_tracks(self, *track_ids: str) -> None:
        """Remove up to 50 tracks from the current user's library."""
        ids = check_batch("remove_saved_tracks", track_ids, MAX_SAVED_TRACK_IDS)
        self._write("DELETE", self._path("me", "tracks"), params={"ids": join_ids(ids)})

    # =========================================================================
    # Paging
    # =========================================================================

    def next_page(self, page: P) -> P | None:
        """
        Fetch the page after this one.

        Returns:
            A page of the same type, or None on the last page.
        """
        if page.next is None:
            return None
        return self._get(page.next, type(page).from_dict)

    def previous_page(self, page: P) -> P | None:
        """Fetch the page before this one, or None on the first page."""
        if page.previous is None:
            return None
        return self._get(page.previous, type(page).from_dict)
