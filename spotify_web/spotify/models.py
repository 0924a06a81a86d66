"""
Data models for Spotify Web API objects.

This module defines immutable dataclasses mirroring the JSON objects the
Web API returns: tracks, albums, artists, users, playlists and the paging
containers that wrap lists of them.

Design Decisions:
    - All dataclasses are frozen (immutable) and constructed only through
      their from_dict() classmethod, from an already decoded JSON object
    - JSON field names are mapped to attribute names explicitly in each
      from_dict(); 'href' becomes 'endpoint', 'duration_ms' becomes
      'duration', 'public' becomes 'is_public'
    - Required keys that are missing, or values of the wrong shape, raise
      DecodeError; optional keys fall back to empty defaults
    - "Full" objects hold their "simple" counterpart (composition) and
      forward attribute access to it, so full_track.name works as
      full_track.simple.name
    - Lists are stored as tuples to keep instances immutable

Usage:
    from spotify_web.spotify.models import FullTrack

    track = FullTrack.from_dict(response_json)
    print(f"{track.name} ({track.time_duration})")
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, ClassVar

from spotify_web.core.exceptions import DecodeError


# =========================================================================
# Decoding helpers
# =========================================================================

def _expect_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(
            f"spotify: expected a JSON object for {what}, got {type(data).__name__}",
            details={"object": what}
        )
    return data


def _require(data: dict[str, Any], key: str, what: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise DecodeError(
            f"spotify: {what} is missing required field '{key}'",
            details={"object": what, "field": key}
        ) from None


def _list(data: dict[str, Any], key: str, what: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(
            f"spotify: field '{key}' of {what} must be a list",
            details={"object": what, "field": key}
        )
    return value


def _decode_list(
    data: dict[str, Any],
    key: str,
    what: str,
    factory: Callable[[Any], Any]
) -> tuple:
    return tuple(factory(item) for item in _list(data, key, what))


def _optional(value: Any, factory: Callable[[Any], Any]) -> Any:
    return None if value is None else factory(value)


def _value_or(data: dict[str, Any], key: str, default: Any) -> Any:
    value = data.get(key)
    return default if value is None else value


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an API timestamp such as "2014-09-01T04:21:28Z".

    Returns None for a null timestamp (very old playlists have no
    added_at). The result is always timezone-aware (UTC when the
    value carries a 'Z' suffix).

    Raises:
        DecodeError: If the value is not an ISO 8601 timestamp.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"spotify: invalid timestamp {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise DecodeError(
            f"spotify: invalid timestamp {value!r}",
            details={"original_error": str(e)}
        ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class _ForwardToSimple:
    """Mixin forwarding unknown attributes to the wrapped 'simple' object."""

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails; guard against recursion
        # while the instance is still being constructed or copied.
        if name == "simple" or name.startswith("__"):
            raise AttributeError(name)
        return getattr(self.simple, name)


# =========================================================================
# Small shared objects
# =========================================================================

@dataclass(frozen=True)
class ExternalURLs:
    """
    Known external URLs for an object, keyed by kind ("spotify").

    The mapping takes part in equality but not in the hash, so objects
    holding it stay hashable.
    """
    urls: dict[str, str] = field(default_factory=dict, hash=False)

    @classmethod
    def from_dict(cls, data: Any) -> "ExternalURLs":
        if data is None:
            return cls()
        return cls(urls=dict(_expect_object(data, "external_urls")))

    @property
    def spotify(self) -> str | None:
        return self.urls.get("spotify")


@dataclass(frozen=True)
class ExternalIDs:
    """Known external IDs for a track or album, keyed by kind ("isrc", "upc")."""
    ids: dict[str, str] = field(default_factory=dict, hash=False)

    @classmethod
    def from_dict(cls, data: Any) -> "ExternalIDs":
        if data is None:
            return cls()
        return cls(ids=dict(_expect_object(data, "external_ids")))

    @property
    def isrc(self) -> str | None:
        return self.ids.get("isrc")


@dataclass(frozen=True)
class Image:
    """An image; width and height are None when unknown."""
    url: str
    width: int | None = None
    height: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Image":
        data = _expect_object(data, "image")
        return cls(
            url=_require(data, "url", "image"),
            width=data.get("width"),
            height=data.get("height")
        )


@dataclass(frozen=True)
class Followers:
    total: int = 0
    endpoint: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Followers":
        if data is None:
            return cls()
        data = _expect_object(data, "followers")
        return cls(total=_value_or(data, "total", 0), endpoint=data.get("href"))


@dataclass(frozen=True)
class Copyright:
    text: str
    type: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Copyright":
        data = _expect_object(data, "copyright")
        return cls(text=_require(data, "text", "copyright"), type=data.get("type") or "")


# =========================================================================
# Users
# =========================================================================

@dataclass(frozen=True)
class User:
    """
    Public profile of a Spotify user.

    Attributes:
        id: The Spotify user ID.
        display_name: Name shown on the profile, None if not set.
        external_urls: Known external URLs for the user.
        followers: Follower count.
        endpoint: Web API endpoint for the full profile ('href').
        images: Profile images.
        uri: The Spotify URI for the user.
    """
    id: str
    display_name: str | None = None
    external_urls: ExternalURLs = field(default_factory=ExternalURLs)
    followers: Followers = field(default_factory=Followers)
    endpoint: str | None = None
    images: tuple[Image, ...] = ()
    uri: str | None = None

    @classmethod
    def _fields_from_dict(cls, data: Any, what: str) -> dict[str, Any]:
        data = _expect_object(data, what)
        return {
            "id": _require(data, "id", what),
            "display_name": data.get("display_name"),
            "external_urls": ExternalURLs.from_dict(data.get("external_urls")),
            "followers": Followers.from_dict(data.get("followers")),
            "endpoint": data.get("href"),
            "images": _decode_list(data, "images", what, Image.from_dict),
            "uri": data.get("uri"),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        return cls(**cls._fields_from_dict(data, "user"))


@dataclass(frozen=True)
class PrivateUser(User):
    """
    Profile of the current user, as returned by the 'me' endpoint.

    The extra fields are only present when the token carries the
    matching scopes (user-read-email, user-read-private).
    """
    country: str | None = None
    email: str | None = None
    product: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "PrivateUser":
        fields = cls._fields_from_dict(data, "private user")
        return cls(
            **fields,
            country=data.get("country"),
            email=data.get("email"),
            product=data.get("product")
        )


# =========================================================================
# Artists
# =========================================================================

@dataclass(frozen=True)
class SimpleArtist:
    id: str | None
    name: str
    external_urls: ExternalURLs = field(default_factory=ExternalURLs)
    endpoint: str | None = None
    uri: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "SimpleArtist":
        data = _expect_object(data, "artist")
        return cls(
            id=_require(data, "id", "artist"),
            name=_require(data, "name", "artist"),
            external_urls=ExternalURLs.from_dict(data.get("external_urls")),
            endpoint=data.get("href"),
            uri=data.get("uri")
        )


@dataclass(frozen=True)
class FullArtist(_ForwardToSimple):
    """
    Full artist object: the simple artist plus genres, images and popularity.

    Attributes:
        simple: The SimpleArtist part (id, name, uri, ...).
        genres: Genres the artist is associated with.
        images: Artist images in various sizes, widest first.
        followers: Follower count.
        popularity: 0-100, 100 being the most popular.
    """
    simple: SimpleArtist
    genres: tuple[str, ...] = ()
    images: tuple[Image, ...] = ()
    followers: Followers = field(default_factory=Followers)
    popularity: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "FullArtist":
        data = _expect_object(data, "artist")
        return cls(
            simple=SimpleArtist.from_dict(data),
            genres=tuple(_list(data, "genres", "artist")),
            images=_decode_list(data, "images", "artist", Image.from_dict),
            followers=Followers.from_dict(data.get("followers")),
            popularity=_value_or(data, "popularity", 0)
        )


# =========================================================================
# Tracks
# =========================================================================

@dataclass(frozen=True)
class SimpleTrack:
    """
    Basic information about a track.

    Attributes:
        id: The Spotify ID for the track. None for local files in playlists.
        name: The name of the track.
        artists: The artists who performed the track.
        available_markets: ISO 3166-1 alpha-2 codes of the countries in
                           which the track can be played.
        disc_number: Usually 1 unless the album has more than one disc.
        duration: Length of the track in milliseconds ('duration_ms').
        explicit: Whether the track has explicit lyrics.
        external_urls: External URLs for this track.
        endpoint: Web API endpoint with full details of the track ('href').
        preview_url: URL of a 30 second MP3 preview, None if unavailable.
        track_number: Number of the track on its disc.
        uri: The Spotify URI for the track.
    """
    id: str | None
    name: str
    duration: int
    artists: tuple[SimpleArtist, ...] = ()
    available_markets: tuple[str, ...] = ()
    disc_number: int = 1
    explicit: bool = False
    external_urls: ExternalURLs = field(default_factory=ExternalURLs)
    endpoint: str | None = None
    preview_url: str | None = None
    track_number: int = 1
    uri: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "SimpleTrack":
        data = _expect_object(data, "track")
        duration = _require(data, "duration_ms", "track")
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise DecodeError(
                "spotify: field 'duration_ms' of track must be an integer",
                details={"object": "track", "field": "duration_ms"}
            )
        return cls(
            id=_require(data, "id", "track"),
            name=_require(data, "name", "track"),
            duration=duration,
            artists=_decode_list(data, "artists", "track", SimpleArtist.from_dict),
            available_markets=tuple(_list(data, "available_markets", "track")),
            disc_number=_value_or(data, "disc_number", 1),
            explicit=bool(data.get("explicit", False)),
            external_urls=ExternalURLs.from_dict(data.get("external_urls")),
            endpoint=data.get("href"),
            preview_url=data.get("preview_url"),
            track_number=_value_or(data, "track_number", 1),
            uri=data.get("uri")
        )

    @property
    def time_duration(self) -> timedelta:
        """The track's duration as a timedelta."""
        return timedelta(milliseconds=self.duration)


@dataclass(frozen=True)
class SimpleAlbum:
    """
    Basic information about an album.

    Attributes:
        id: The Spotify ID for the album.
        name: The name of the album.
        album_type: "album", "single" or "compilation".
        available_markets: Markets the album is available in.
        external_urls: External URLs for this album.
        endpoint: Web API endpoint with full details of the album ('href').
        images: Cover art in various sizes, widest first.
        uri: The Spotify URI for the album.
    """
    id: str
    name: str
    album_type: str = "album"
    available_markets: tuple[str, ...] = ()
    external_urls: ExternalURLs = field(default_factory=ExternalURLs)
    endpoint: str | None = None
    images: tuple[Image, ...] = ()
    uri: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "SimpleAlbum":
        data = _expect_object(data, "album")
        return cls(
            id=_require(data, "id", "album"),
            name=_require(data, "name", "album"),
            album_type=data.get("album_type") or "album",
            available_markets=tuple(_list(data, "available_markets", "album")),
            external_urls=ExternalURLs.from_dict(data.get("external_urls")),
            endpoint=data.get("href"),
            images=_decode_list(data, "images", "album", Image.from_dict),
            uri=data.get("uri")
        )


@dataclass(frozen=True)
class FullTrack(_ForwardToSimple):
    """
    Full track object: the simple track plus album, external IDs and popularity.

    Simple fields are reachable directly (track.name, track.duration,
    track.time_duration) through attribute forwarding to track.simple.

    Attributes:
        simple: The SimpleTrack part.
        album: The album the track appears on, None if not included.
        external_ids: Known external IDs for the track (ISRC, ...).
        popularity: 0-100, calculated from total and recent plays.
    """
    simple: SimpleTrack
    album: SimpleAlbum | None = None
    external_ids: ExternalIDs = field(default_factory=ExternalIDs)
    popularity: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "FullTrack":
        data = _expect_object(data, "track")
        return cls(
            simple=SimpleTrack.from_dict(data),
            album=_optional(data.get("album"), SimpleAlbum.from_dict),
            external_ids=ExternalIDs.from_dict(data.get("external_ids")),
            popularity=_value_or(data, "popularity", 0)
        )


@dataclass(frozen=True)
class PlaylistTrack:
    """
    A track in a playlist, with who added it and when.

    Attributes:
        added_at: When the track was added. None for very old playlists.
        added_by: The user who added the track. None for very old playlists.
        track: The track itself. None when it has been removed from the catalog.
    """
    added_at: datetime | None
    added_by: User | None
    track: FullTrack | None

    @classmethod
    def from_dict(cls, data: Any) -> "PlaylistTrack":
        data = _expect_object(data, "playlist track")
        return cls(
            added_at=parse_timestamp(data.get("added_at")),
            added_by=_optional(data.get("added_by"), User.from_dict),
            track=_optional(_require(data, "track", "playlist track"), FullTrack.from_dict)
        )


@dataclass(frozen=True)
class SavedTrack:
    """A track saved to the current user's library."""
    added_at: datetime | None
    track: FullTrack

    @classmethod
    def from_dict(cls, data: Any) -> "SavedTrack":
        data = _expect_object(data, "saved track")
        return cls(
            added_at=parse_timestamp(data.get("added_at")),
            track=FullTrack.from_dict(_require(data, "track", "saved track"))
        )


# =========================================================================
# Paging
# =========================================================================

@dataclass(frozen=True)
class Page:
    """
    A page of results from an endpoint that returns a list.

    Attributes:
        items: The objects on this page.
        endpoint: URL of this page ('href').
        limit: Maximum number of items in the page.
        offset: Offset of the first item in the full result.
        total: Total number of items available.
        next: URL of the next page, None on the last page.
        previous: URL of the previous page, None on the first page.
    """
    items: tuple = ()
    endpoint: str | None = None
    limit: int = 0
    offset: int = 0
    total: int = 0
    next: str | None = None
    previous: str | None = None

    # Decoder for a single element of 'items', set by each subclass
    item_decoder: ClassVar[Callable[[Any], Any]]

    @classmethod
    def from_dict(cls, data: Any) -> "Page":
        what = f"{cls.__name__} object"
        data = _expect_object(data, what)
        return cls(
            items=_decode_list(data, "items", what, cls.item_decoder),
            endpoint=data.get("href"),
            limit=_value_or(data, "limit", 0),
            offset=_value_or(data, "offset", 0),
            total=_value_or(data, "total", 0),
            next=data.get("next"),
            previous=data.get("previous")
        )

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True)
class SimpleTrackPage(Page):
    item_decoder: ClassVar[Callable[[Any], Any]] = staticmethod(SimpleTrack.from_dict)


@dataclass(frozen=True)
class SimpleAlbumPage(Page):
    item_decoder: ClassVar[Callable[[Any], Any]] = staticmethod(SimpleAlbum.from_dict)


@dataclass(frozen=True)
class PlaylistTrackPage(Page):
    item_decoder: ClassVar[Callable[[Any], Any]] = staticmethod(PlaylistTrack.from_dict)


@dataclass(frozen=True)
class SavedTrackPage(Page):
    item_decoder: ClassVar[Callable[[Any], Any]] = staticmethod(SavedTrack.from_dict)


def _page_or_empty(data: Any, page_type: type[Page]) -> Page:
    if data is None:
        return page_type()
    return page_type.from_dict(data)


# =========================================================================
# Albums (full) and playlists
# =========================================================================

@dataclass(frozen=True)
class FullAlbum(_ForwardToSimple):
    """
    Full album object: the simple album plus label, release info and tracks.

    Attributes:
        simple: The SimpleAlbum part.
        artists: The artists of the album.
        copyrights: Copyright statements.
        external_ids: Known external IDs (UPC, ...).
        genres: Genres the album is associated with.
        label: Record label.
        popularity: 0-100.
        release_date: "1981", "1981-12" or "1981-12-15".
        release_date_precision: "year", "month" or "day".
        tracks: First page of the album's tracks.
    """
    simple: SimpleAlbum
    artists: tuple[SimpleArtist, ...] = ()
    copyrights: tuple[Copyright, ...] = ()
    external_ids: ExternalIDs = field(default_factory=ExternalIDs)
    genres: tuple[str, ...] = ()
    label: str = ""
    popularity: int = 0
    release_date: str = ""
    release_date_precision: str = ""
    tracks: SimpleTrackPage = field(default_factory=SimpleTrackPage)

    @classmethod
    def from_dict(cls, data: Any) -> "FullAlbum":
        data = _expect_object(data, "album")
        return cls(
            simple=SimpleAlbum.from_dict(data),
            artists=_decode_list(data, "artists", "album", SimpleArtist.from_dict),
            copyrights=_decode_list(data, "copyrights", "album", Copyright.from_dict),
            external_ids=ExternalIDs.from_dict(data.get("external_ids")),
            genres=tuple(_list(data, "genres", "album")),
            label=data.get("label") or "",
            popularity=_value_or(data, "popularity", 0),
            release_date=data.get("release_date") or "",
            release_date_precision=data.get("release_date_precision") or "",
            tracks=_page_or_empty(data.get("tracks"), SimpleTrackPage)
        )

    @property
    def release_year(self) -> int | None:
        """Year part of release_date, None if the date is missing or malformed."""
        try:
            return int(self.release_date[:4])
        except ValueError:
            return None


@dataclass(frozen=True)
class PlaylistTracksRef:
    """Where to fetch a playlist's tracks, and how many there are."""
    endpoint: str | None = None
    total: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "PlaylistTracksRef":
        if data is None:
            return cls()
        data = _expect_object(data, "playlist tracks reference")
        return cls(endpoint=data.get("href"), total=_value_or(data, "total", 0))


@dataclass(frozen=True)
class SimplePlaylist:
    """
    Basic information about a playlist.

    Attributes:
        id: The Spotify ID for the playlist.
        name: The name of the playlist.
        owner: The user who owns the playlist.
        collaborative: Whether other users may modify the playlist.
        external_urls: External URLs for this playlist.
        endpoint: Web API endpoint with full details of the playlist ('href').
        images: Playlist images, widest first.
        is_public: Public status; None when not relevant ('public').
        snapshot_id: Version identifier of the playlist.
        tracks: Endpoint and total count of the playlist's tracks.
        uri: The Spotify URI for the playlist.
    """
    id: str
    name: str
    owner: User | None = None
    collaborative: bool = False
    external_urls: ExternalURLs = field(default_factory=ExternalURLs)
    endpoint: str | None = None
    images: tuple[Image, ...] = ()
    is_public: bool | None = None
    snapshot_id: str | None = None
    tracks: PlaylistTracksRef = field(default_factory=PlaylistTracksRef)
    uri: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "SimplePlaylist":
        data = _expect_object(data, "playlist")
        tracks = data.get("tracks")
        # Full playlists embed a page here; only keep the reference part
        return cls(
            id=_require(data, "id", "playlist"),
            name=_require(data, "name", "playlist"),
            owner=_optional(data.get("owner"), User.from_dict),
            collaborative=bool(data.get("collaborative", False)),
            external_urls=ExternalURLs.from_dict(data.get("external_urls")),
            endpoint=data.get("href"),
            images=_decode_list(data, "images", "playlist", Image.from_dict),
            is_public=data.get("public"),
            snapshot_id=data.get("snapshot_id"),
            tracks=PlaylistTracksRef.from_dict(tracks),
            uri=data.get("uri")
        )


@dataclass(frozen=True)
class SimplePlaylistPage(Page):
    item_decoder: ClassVar[Callable[[Any], Any]] = staticmethod(SimplePlaylist.from_dict)


@dataclass(frozen=True)
class FullPlaylist(_ForwardToSimple):
    """
    Full playlist object: the simple playlist plus description, followers
    and the first page of its tracks.
    """
    simple: SimplePlaylist
    description: str | None = None
    followers: Followers = field(default_factory=Followers)
    tracks: PlaylistTrackPage = field(default_factory=PlaylistTrackPage)

    @classmethod
    def from_dict(cls, data: Any) -> "FullPlaylist":
        data = _expect_object(data, "playlist")
        return cls(
            simple=SimplePlaylist.from_dict(data),
            description=data.get("description"),
            followers=Followers.from_dict(data.get("followers")),
            tracks=_page_or_empty(data.get("tracks"), PlaylistTrackPage)
        )


@dataclass(frozen=True)
class FeaturedPlaylists:
    """Response of the featured playlists endpoint: a message and a page of playlists."""
    message: str
    playlists: SimplePlaylistPage

    @classmethod
    def from_dict(cls, data: Any) -> "FeaturedPlaylists":
        data = _expect_object(data, "featured playlists")
        return cls(
            message=data.get("message") or "",
            playlists=SimplePlaylistPage.from_dict(
                _require(data, "playlists", "featured playlists")
            )
        )
