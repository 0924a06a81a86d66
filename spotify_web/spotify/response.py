"""
Response decoding.

Every response goes through decode_response(), which dispatches on the
HTTP status:

    2xx:     the body is parsed as JSON and handed to the result factory.
             Malformed JSON, or a body the factory rejects, raises DecodeError.
             Write endpoints that answer with an empty body yield None.
    non-2xx: the body is parsed as the error envelope
                 {"error": {"status": 401, "message": "The access token expired"}}
             and raised as SpotifyError carrying the envelope's status and message
             (the HTTP status is used when the envelope has none).
             A body that is not a well-formed envelope raises DecodeError.

So a call either returns a fully decoded result or raises exactly one
exception, never both and never neither.
"""

from typing import Any, Callable, TypeVar

import requests

from spotify_web.core.exceptions import DecodeError, SpotifyError
from spotify_web.core.logger import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


def is_success(status: int) -> bool:
    return 200 <= status < 300


def _parse_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise DecodeError(
            f"spotify: couldn't decode response body (HTTP {response.status_code})",
            details={"url": response.url, "http_status": response.status_code,
                     "original_error": str(e)},
            status=response.status_code
        ) from e


def decode_error(response: requests.Response) -> SpotifyError | DecodeError:
    """
    Turn a non-2xx response into the exception to raise.

    Returns:
        SpotifyError when the body is a well-formed error envelope,
        DecodeError otherwise.
    """
    status = response.status_code
    try:
        body = _parse_json(response)
    except DecodeError as e:
        return e

    error = body.get("error") if isinstance(body, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if not isinstance(message, str):
        return DecodeError(
            f"spotify: couldn't decode error (HTTP {status})",
            details={"url": response.url, "http_status": status},
            status=status
        )

    # The envelope carries the status; the HTTP status only fills in when it is absent
    envelope_status = error.get("status")
    details = {"url": response.url, "http_status": status}
    if isinstance(envelope_status, int) and not isinstance(envelope_status, bool):
        status = envelope_status
    return SpotifyError(status, message, details=details)


def decode_response(
    response: requests.Response,
    factory: Callable[[Any], T],
    allow_empty: bool = False
) -> T | None:
    """
    Decode a response into a result, or raise the error it carries.

    Args:
        response: The transport's response.
        factory: Builds the result from the decoded JSON body; raises
                 DecodeError if the body does not have the expected shape.
        allow_empty: Accept an empty 2xx body and return None (write
                     endpoints such as follow or save).

    Returns:
        The factory's result, or None for an accepted empty body.

    Raises:
        SpotifyError: The API reported an error.
        DecodeError: The success or error body could not be decoded.
    """
    if not is_success(response.status_code):
        error = decode_error(response)
        logger.warning("Request to %s failed: %s", response.url, error)
        raise error

    if allow_empty and not response.content:
        return None

    body = _parse_json(response)
    try:
        return factory(body)
    except DecodeError as e:
        e.status = response.status_code
        e.details.setdefault("url", response.url)
        raise
