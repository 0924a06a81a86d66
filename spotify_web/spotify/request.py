"""
Request construction for Web API endpoints.

Builds endpoint URLs from a base address and path segments, merges
option dataclasses into query parameters and checks identifier batches
against each endpoint's documented limit. Nothing in this module
touches the network; every check here fails before a request is sent.
"""

from urllib.parse import quote, urljoin

from spotify_web.core.exceptions import ValidationError
from spotify_web.spotify.options import Options


DEFAULT_BASE_URL = "https://api.spotify.com/v1/"

# Documented batch limits
MAX_TRACK_IDS = 50
MAX_ARTIST_IDS = 50
MAX_ALBUM_IDS = 20
MAX_PLAYLIST_ADD = 100
MAX_SAVED_TRACK_IDS = 50


def endpoint_url(base_url: str, *segments: str) -> str:
    """
    Join path segments to the base URL, quoting each segment.

    Example:
        endpoint_url(DEFAULT_BASE_URL, "users", "wizzler", "playlists")
        # "https://api.spotify.com/v1/users/wizzler/playlists"
    """
    path = "/".join(quote(str(segment), safe="") for segment in segments)
    return urljoin(base_url, path)


def resolve_url(base_url: str, path_or_url: str) -> str:
    """Absolute URLs (paging links) pass through, paths are joined to base_url."""
    if path_or_url.startswith(("http://", "https://")):
        return path_or_url
    return urljoin(base_url, path_or_url.lstrip("/"))


def check_batch(operation: str, ids: tuple[str, ...] | list[str], limit: int) -> list[str]:
    """
    Validate an identifier batch.

    Args:
        operation: Name of the calling operation, used in the error message.
        ids: Identifiers to send.
        limit: Maximum number of identifiers the endpoint accepts.

    Returns:
        The identifiers as a list.

    Raises:
        ValidationError: If ids is empty, longer than limit, or contains
                         an empty identifier.
    """
    ids = list(ids)
    if not ids:
        raise ValidationError(
            f"spotify: {operation} needs at least one id",
            details={"operation": operation}
        )
    if len(ids) > limit:
        raise ValidationError(
            f"spotify: {operation} supports up to {limit} ids",
            details={"operation": operation, "count": len(ids), "limit": limit}
        )
    check_ids(operation, *ids)
    return ids


def join_ids(ids: list[str]) -> str:
    return ",".join(ids)


def build_params(opt: Options | None = None, **extra: str | None) -> dict[str, str]:
    """
    Merge option fields and explicit parameters into a query dict.

    None values are dropped, explicit parameters win over option fields.
    """
    params = opt.to_params() if opt is not None else {}
    for key, value in extra.items():
        if value is not None:
            params[key] = value
    return params


def check_ids(operation: str, *values: str) -> None:
    """
    Validate path identifiers (track, user, playlist ids) and country codes.

    "." and ".." are rejected: as path segments they would resolve to a
    different endpoint.

    Raises:
        ValidationError: If any value is empty, not a string, or a dot segment.
    """
    if any(not isinstance(v, str) or not v or v in (".", "..") for v in values):
        raise ValidationError(
            f"spotify: {operation} got an empty or invalid id",
            details={"operation": operation}
        )
