"""
Optional request parameters.

Endpoints that accept optional query parameters take an options
dataclass instead of a growing list of keyword arguments. Every field
defaults to None, and None fields are left out of the query string.

Example:
    opt = PlaylistOptions(country="SE", limit=10)
    message, page = client.featured_playlists(opt)
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any

from spotify_web.core.exceptions import ValidationError


# Maximum page size accepted by the paging endpoints
MAX_PAGE_LIMIT = 50


@dataclass(frozen=True)
class Options:
    """
    Options shared by the paging endpoints.

    Attributes:
        country: ISO 3166-1 alpha-2 country code, for market-specific content.
        limit: Maximum number of items to return (1-50).
        offset: Index of the first item to return (0 or more).
    """
    country: str | None = None
    limit: int | None = None
    offset: int | None = None

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If limit is outside 1-50 or offset is negative.
        """
        if self.limit is not None and not 1 <= self.limit <= MAX_PAGE_LIMIT:
            raise ValidationError(
                f"limit must be between 1 and {MAX_PAGE_LIMIT}",
                details={"limit": self.limit}
            )
        if self.offset is not None and self.offset < 0:
            raise ValidationError(
                "offset must not be negative",
                details={"offset": self.offset}
            )

    def to_params(self) -> dict[str, str]:
        """Query parameters for the fields that are set, validated first."""
        self.validate()
        params: dict[str, str] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                params[f.name] = _format_param(value)
        return params


@dataclass(frozen=True)
class PlaylistOptions(Options):
    """
    Options for the browse endpoints (featured playlists, new releases).

    Attributes:
        locale: Language of the response, as ISO 639 language code and
                ISO 3166-1 country code joined by an underscore ("sv_SE").
        timestamp: Local time of the user, used to pick playlists suited
                   to the time of day.
    """
    locale: str | None = None
    timestamp: datetime | None = None


def _format_param(value: Any) -> str:
    if isinstance(value, datetime):
        # The API expects a local timestamp without offset
        return value.strftime("%Y-%m-%dT%H:%M:%S")
    return str(value)
