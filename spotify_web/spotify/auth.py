"""
Bearer token sources.

The client never acquires or refreshes tokens itself. It asks a token
source for the current access token before each request:

    StaticToken:       a token obtained elsewhere (an OAuth callback, a
                       test fixture); never refreshed.
    AuthManagerToken:  wraps a spotipy auth manager (SpotifyClientCredentials,
                       SpotifyOAuth, ...), which caches and refreshes the
                       token on its own.

Any object with a get_token() method returning a string can be used.
"""

from typing import Protocol

from spotipy.oauth2 import SpotifyClientCredentials

from spotify_web.core.exceptions import ValidationError


class TokenSource(Protocol):
    """Supplies the bearer token for the Authorization header."""

    def get_token(self) -> str:
        ...


class StaticToken:
    """A fixed access token."""

    def __init__(self, token: str) -> None:
        if not token:
            raise ValidationError("token must be a non-empty string")
        self._token = token

    def get_token(self) -> str:
        return self._token

    def __repr__(self) -> str:
        # Never print the token itself
        return "StaticToken(***)"


class AuthManagerToken:
    """
    Token source backed by a spotipy auth manager.

    Args:
        auth_manager: A spotipy.oauth2 auth manager. Its get_access_token()
                      performs the OAuth exchange and refresh.
    """

    def __init__(self, auth_manager) -> None:
        self.auth_manager = auth_manager

    @classmethod
    def client_credentials(cls, client_id: str, client_secret: str) -> "AuthManagerToken":
        """
        Client credentials flow: app-only access to public catalog data
        (tracks, albums, artists, browse). User endpoints such as 'me'
        will answer 401.
        """
        return cls(SpotifyClientCredentials(client_id=client_id, client_secret=client_secret))

    def get_token(self) -> str:
        token = self.auth_manager.get_access_token(as_dict=False)
        # SpotifyOAuth may still hand back the token dict on older spotipy releases
        if isinstance(token, dict):
            token = token["access_token"]
        return token
