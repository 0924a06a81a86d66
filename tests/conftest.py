"""Test configuration and fixtures"""

import json
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from spotify_web.spotify.client import SpotifyClient

TEST_DATA = Path(__file__).parent / "test_data"


def load_fixture(name: str) -> str:
    """Raw text of a file under tests/test_data"""
    return (TEST_DATA / name).read_text(encoding="utf-8")


def make_response(status: int, body: str | bytes = b"", url: str = "https://api.spotify.com/v1/") -> requests.Response:
    """Build a real requests.Response carrying a canned status and body"""
    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8") if isinstance(body, str) else body
    response.encoding = "utf-8"
    response.url = url
    return response


def make_session(status: int, body: str | bytes = b"") -> Mock:
    """Session double whose request() always answers with the given response"""
    session = Mock(spec=requests.Session)
    session.request.return_value = make_response(status, body)
    return session


def make_client(status: int, body: str | bytes = b"", token: str | None = "dummy-token") -> SpotifyClient:
    """
    Client wired to a fake session.

    The session is available as client._session for call assertions.
    """
    session = make_session(status, body)
    if token is None:
        return SpotifyClient(session=session)
    return SpotifyClient.from_token(token, session=session)


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for tests"""
    return tmp_path


@pytest.fixture
def track_data():
    """Decoded single track fixture"""
    return json.loads(load_fixture("track.json"))


@pytest.fixture
def featured_data():
    """Decoded featured playlists fixture"""
    return json.loads(load_fixture("featured_playlists.json"))


@pytest.fixture
def expired_token_body():
    return json.dumps({
        "error": {
            "status": 401,
            "message": "The access token expired"
        }
    })
