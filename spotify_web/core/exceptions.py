"""
Exception classes for spotify-web.

This module defines all custom exceptions raised by the library.
Each exception carries a human-readable message and an optional
details dictionary, and distinguishes one failure mode from another
so callers can branch on the exception type.

Exception Hierarchy:
    SpotifyWebError (base)
        ConfigError - Configuration file issues
        ValidationError - Request rejected locally, before any network call
        DecodeError - Response body could not be decoded
        SpotifyError - Error reported by the Spotify Web API

Transport failures (connection refused, DNS, timeouts) are not wrapped:
the requests.RequestException raised by the session reaches the caller
unchanged.
"""

from http import HTTPStatus


class SpotifyWebError(Exception):
    """
    Base exception for all spotify-web errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch every library error with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., ids, URLs).

    Example:
        try:
            track = client.get_track(track_id)
        except SpotifyWebError as e:
            logger.error(f"Lookup failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'url': Endpoint URL involved in the error
                     - 'http_status': HTTP status code of the response
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(SpotifyWebError):
    """
    Raised when there's an issue with the configuration file.

    Common causes:
        - config.yaml not found
        - config.yaml has invalid YAML syntax
        - Neither an access token nor client credentials are configured
        - Invalid field values (e.g., non-positive timeout)

    Example:
        raise ConfigError(
            "'api.timeout' must be a positive number",
            details={'field': 'api.timeout', 'value': -1}
        )
    """
    pass


class ValidationError(SpotifyWebError):
    """
    Raised when a request is rejected locally, before any network call.

    Common causes:
        - More identifiers than the endpoint's batch limit
          (50 tracks, 50 artists, 20 albums, 100 playlist items)
        - An empty identifier list
        - Out-of-range paging options (negative offset, limit above 50)

    Example:
        raise ValidationError(
            "get_tracks supports up to 50 ids",
            details={'count': 51, 'limit': 50}
        )
    """
    pass


class DecodeError(SpotifyWebError):
    """
    Raised when a response body cannot be decoded.

    Covers both sides of the status dispatch: a 2xx body that is not
    valid JSON or does not have the expected shape, and a non-2xx body
    that is not a well-formed error envelope.

    Attributes:
        status: HTTP status code of the response that failed to decode.
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.status = status


class SpotifyError(SpotifyWebError):
    """
    Raised when the Spotify Web API reports an error.

    The API reports failures with an error envelope:

        {"error": {"status": 401, "message": "The access token expired"}}

    No retry or recovery happens inside the library; callers decide what
    to do based on the status (e.g., re-authenticate on 401, back off on 429).

    Attributes:
        status: Status code from the error envelope (the HTTP status when the envelope has none).
        is_auth_error: True for 401 (missing, invalid or expired token).
        is_rate_limit: True for 429 (too many requests).

    Example:
        try:
            message, page = client.featured_playlists()
        except SpotifyError as e:
            if e.is_auth_error:
                refresh_token()
    """

    def __init__(
        self,
        status: int,
        message: str,
        details: dict | None = None
    ) -> None:
        """
        Initialize a service error.

        Args:
            status: Status code from the error envelope.
            message: Message from the error envelope.
            details: Optional dictionary with additional context.
        """
        super().__init__(message, details)
        self.status = status

    @property
    def is_auth_error(self) -> bool:
        return self.status == HTTPStatus.UNAUTHORIZED

    @property
    def is_rate_limit(self) -> bool:
        return self.status == HTTPStatus.TOO_MANY_REQUESTS

    def __str__(self) -> str:
        return f"spotify: {self.message} [{self.status}]"
