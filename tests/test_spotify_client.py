"""Test the Spotify Web API client"""

import json
from datetime import datetime
from unittest.mock import Mock

import pytest
import requests

from spotify_web.core.config import parse_config
from spotify_web.core.exceptions import DecodeError, SpotifyError, ValidationError
from spotify_web.spotify.auth import AuthManagerToken, StaticToken
from spotify_web.spotify.client import SpotifyClient
from spotify_web.spotify.models import FullTrack, PlaylistTrackPage, SimplePlaylistPage
from spotify_web.spotify.options import Options, PlaylistOptions
from tests.conftest import load_fixture, make_client, make_response, make_session


def sent(client):
    """(method, url, kwargs) of the single request the fake session received"""
    client._session.request.assert_called_once()
    args, kwargs = client._session.request.call_args
    return args[0], args[1], kwargs


class TestFeaturedPlaylists:
    """Featured playlists scenarios"""

    def test_featured_playlists(self):
        client = make_client(200, load_fixture("featured_playlists.json"))

        message, page = client.featured_playlists(PlaylistOptions(country="SE"))

        assert message == "Enjoy a mellow afternoon."
        assert isinstance(page, SimplePlaylistPage)
        assert len(page.items) > 0
        assert page.items[0].name == "Hangover Friendly Singer-Songwriter"

        method, url, kwargs = sent(client)
        assert method == "GET"
        assert url == "https://api.spotify.com/v1/browse/featured-playlists"
        assert kwargs["params"] == {"country": "SE"}
        assert kwargs["headers"] == {"Authorization": "Bearer dummy-token"}

    def test_featured_playlists_expired_token(self, expired_token_body):
        client = make_client(401, expired_token_body)

        result = None
        with pytest.raises(SpotifyError) as exc_info:
            result = client.featured_playlists()

        assert result is None
        assert exc_info.value.status == 401
        assert exc_info.value.message == "The access token expired"
        assert exc_info.value.is_auth_error

    def test_featured_playlists_no_auth(self):
        client = make_client(200, load_fixture("featured_playlists.json"), token=None)

        with pytest.raises(SpotifyError) as exc_info:
            client.featured_playlists()

        assert exc_info.value.status == 401
        assert not client.is_authenticated
        client._session.request.assert_not_called()

    def test_all_options_become_params(self):
        client = make_client(200, load_fixture("featured_playlists.json"))
        opt = PlaylistOptions(
            country="SE",
            limit=2,
            offset=4,
            locale="sv_SE",
            timestamp=datetime(2014, 10, 23, 9, 0, 0),
        )

        client.featured_playlists(opt)

        _, _, kwargs = sent(client)
        assert kwargs["params"] == {
            "country": "SE",
            "limit": "2",
            "offset": "4",
            "locale": "sv_SE",
            "timestamp": "2014-10-23T09:00:00",
        }


class TestTracks:
    """Track lookups"""

    def test_get_track(self, track_data):
        client = make_client(200, load_fixture("track.json"))

        track = client.get_track("3f9zqUnrnIq0LANhmnaF0V")

        assert isinstance(track, FullTrack)
        assert track.name == track_data["name"]
        assert track.duration == track_data["duration_ms"]
        assert track.popularity == track_data["popularity"]
        _, url, _ = sent(client)
        assert url == "https://api.spotify.com/v1/tracks/3f9zqUnrnIq0LANhmnaF0V"

    def test_get_tracks_keeps_order_and_missing(self, track_data):
        body = json.dumps({"tracks": [track_data, None, track_data]})
        client = make_client(200, body)

        tracks = client.get_tracks("3f9zqUnrnIq0LANhmnaF0V", "unknown", "3f9zqUnrnIq0LANhmnaF0V")

        assert len(tracks) == 3
        assert tracks[0].name == "Money Changes Everything"
        assert tracks[1] is None
        assert tracks[2] == tracks[0]
        _, url, kwargs = sent(client)
        assert url == "https://api.spotify.com/v1/tracks"
        assert kwargs["params"] == {"ids": "3f9zqUnrnIq0LANhmnaF0V,unknown,3f9zqUnrnIq0LANhmnaF0V"}

    def test_get_tracks_over_limit_makes_no_request(self):
        client = make_client(200, "{}")

        with pytest.raises(ValidationError) as exc_info:
            client.get_tracks(*[f"id{i}" for i in range(51)])

        assert exc_info.value.details["limit"] == 50
        client._session.request.assert_not_called()

    def test_get_tracks_at_limit(self, track_data):
        client = make_client(200, json.dumps({"tracks": [track_data] * 50}))

        assert len(client.get_tracks(*[f"id{i}" for i in range(50)])) == 50

    def test_get_tracks_needs_ids(self):
        client = make_client(200, "{}")

        with pytest.raises(ValidationError):
            client.get_tracks()
        client._session.request.assert_not_called()

    def test_get_tracks_missing_tracks_key(self):
        client = make_client(200, json.dumps({"trakcs": []}))

        with pytest.raises(DecodeError) as exc_info:
            client.get_tracks("a")
        assert exc_info.value.status == 200

    def test_empty_track_id(self):
        client = make_client(200, load_fixture("track.json"))

        with pytest.raises(ValidationError):
            client.get_track("")
        client._session.request.assert_not_called()

    @pytest.mark.parametrize("track_id", [".", ".."])
    def test_dot_segment_id_makes_no_request(self, track_id):
        """Dot segments would resolve to another endpoint"""
        client = make_client(200, load_fixture("track.json"))

        with pytest.raises(ValidationError):
            client.get_track(track_id)
        with pytest.raises(ValidationError):
            client.follow_playlist("wizzler", track_id)
        client._session.request.assert_not_called()

    def test_ids_are_quoted_into_path(self):
        client = make_client(200, load_fixture("track.json"))

        client.get_track("a/b")

        _, url, _ = sent(client)
        assert url == "https://api.spotify.com/v1/tracks/a%2Fb"


class TestErrors:
    """Error envelope and decode failures"""

    @pytest.mark.parametrize("status,message", [
        (400, "invalid id"),
        (404, "non existing id"),
        (429, "API rate limit exceeded"),
        (502, "Bad gateway."),
    ])
    def test_error_envelope(self, status, message):
        body = json.dumps({"error": {"status": status, "message": message}})
        client = make_client(status, body)

        with pytest.raises(SpotifyError) as exc_info:
            client.get_track("3f9zqUnrnIq0LANhmnaF0V")

        assert exc_info.value.status == status
        assert exc_info.value.message == message
        assert exc_info.value.is_rate_limit == (status == 429)

    def test_error_status_comes_from_envelope(self, expired_token_body):
        """The envelope status wins when it differs from the HTTP status"""
        client = make_client(400, expired_token_body)

        with pytest.raises(SpotifyError) as exc_info:
            client.get_track("3f9zqUnrnIq0LANhmnaF0V")

        assert exc_info.value.status == 401
        assert exc_info.value.is_auth_error
        assert exc_info.value.message == "The access token expired"
        assert exc_info.value.details["http_status"] == 400

    def test_envelope_without_status_uses_http_status(self):
        client = make_client(503, json.dumps({"error": {"message": "Service unavailable"}}))

        with pytest.raises(SpotifyError) as exc_info:
            client.get_track("3f9zqUnrnIq0LANhmnaF0V")

        assert exc_info.value.status == 503
        assert exc_info.value.message == "Service unavailable"

    @pytest.mark.parametrize("body", [
        "<html>Bad gateway</html>",
        "",
        '{"error": "invalid_client"}',
        '{"message": "no envelope"}',
    ])
    def test_malformed_error_body(self, body):
        client = make_client(503, body)

        with pytest.raises(DecodeError) as exc_info:
            client.get_track("3f9zqUnrnIq0LANhmnaF0V")

        assert exc_info.value.status == 503

    def test_malformed_success_body(self):
        client = make_client(200, "{not json")

        with pytest.raises(DecodeError) as exc_info:
            client.get_track("3f9zqUnrnIq0LANhmnaF0V")

        assert exc_info.value.status == 200

    def test_transport_error_propagates(self):
        session = Mock(spec=requests.Session)
        session.request.side_effect = requests.ConnectionError("connection refused")
        client = SpotifyClient.from_token("dummy-token", session=session)

        with pytest.raises(requests.ConnectionError):
            client.get_track("3f9zqUnrnIq0LANhmnaF0V")

    def test_bad_options_make_no_request(self):
        client = make_client(200, load_fixture("featured_playlists.json"))

        with pytest.raises(ValidationError):
            client.featured_playlists(PlaylistOptions(limit=100))
        with pytest.raises(ValidationError):
            client.get_album_tracks("0sNOF9WDwhWunNAHPD3Baj", Options(offset=-1))
        client._session.request.assert_not_called()


class TestOtherEndpoints:
    """Albums, artists, users, playlists and library"""

    def test_get_albums_over_limit(self):
        client = make_client(200, "{}")

        with pytest.raises(ValidationError):
            client.get_albums(*[f"id{i}" for i in range(21)])
        client._session.request.assert_not_called()

    def test_get_album(self):
        client = make_client(200, load_fixture("album.json"))

        album = client.get_album("0sNOF9WDwhWunNAHPD3Baj")

        assert album.label == "Epic"
        assert len(album.tracks) == 2

    def test_get_artist_top_tracks(self, track_data):
        client = make_client(200, json.dumps({"tracks": [track_data]}))

        tracks = client.get_artist_top_tracks("2BTZIqw0ntH9MvilQ3ewNY", "SE")

        assert [t.name for t in tracks] == ["Money Changes Everything"]
        _, url, kwargs = sent(client)
        assert url == "https://api.spotify.com/v1/artists/2BTZIqw0ntH9MvilQ3ewNY/top-tracks"
        assert kwargs["params"] == {"country": "SE"}

    @pytest.mark.parametrize("country", [None, ""])
    def test_get_artist_top_tracks_needs_country(self, country):
        client = make_client(200, "{}")

        with pytest.raises(ValidationError):
            client.get_artist_top_tracks("2BTZIqw0ntH9MvilQ3ewNY", country)

        client._session.request.assert_not_called()

    def test_new_releases(self):
        album = json.loads(load_fixture("album.json"))
        body = json.dumps({"albums": {"items": [album], "limit": 1, "offset": 0, "total": 500}})
        client = make_client(200, body)

        page = client.new_releases(PlaylistOptions(country="SE", limit=1))

        assert page.total == 500
        assert page.items[0].name == "She's So Unusual"

    def test_get_playlist_tracks(self):
        client = make_client(200, load_fixture("playlist_tracks.json"))

        page = client.get_playlist_tracks("spotify_españa", "21THa8j9TaSGuXYNBU5tsC", Options(limit=2))

        assert isinstance(page, PlaylistTrackPage)
        assert page.items[0].track.name == "Surrender"
        _, url, kwargs = sent(client)
        assert url == (
            "https://api.spotify.com/v1/users/spotify_espa%C3%B1a/playlists/"
            "21THa8j9TaSGuXYNBU5tsC/tracks"
        )
        assert kwargs["params"] == {"limit": "2"}

    def test_get_playlist_fields(self):
        data = json.loads(load_fixture("featured_playlists.json"))["playlists"]["items"][0]
        client = make_client(200, json.dumps(data))

        playlist = client.get_playlist("spotify", "6ftJBzU2LLQcaKefMi7ee7", fields="id,name,tracks")

        assert playlist.id == "6ftJBzU2LLQcaKefMi7ee7"
        _, _, kwargs = sent(client)
        assert kwargs["params"] == {"fields": "id,name,tracks"}

    def test_create_playlist(self):
        data = json.loads(load_fixture("featured_playlists.json"))["playlists"]["items"][0]
        client = make_client(201, json.dumps(data))

        playlist = client.create_playlist_for_user("spotify", "Hangover Friendly Singer-Songwriter", public=False)

        assert playlist.name == "Hangover Friendly Singer-Songwriter"
        method, url, kwargs = sent(client)
        assert method == "POST"
        assert url == "https://api.spotify.com/v1/users/spotify/playlists"
        assert kwargs["json"] == {"name": "Hangover Friendly Singer-Songwriter", "public": False}

    def test_add_tracks_to_playlist(self):
        client = make_client(201, json.dumps({"snapshot_id": "JbtmHBDBAYu3/bt8BOXKjzKx3i0b6LCa/wVjyl6qQ2Yf6nFXkbmzuEa+ZI/U1yF+"}))

        snapshot = client.add_tracks_to_playlist("wizzler", "7oi0w0SLbJ4YyjrOxhZbUv", "4iV5W9uYEdYUVa79Axb7Rh")

        assert snapshot.startswith("JbtmHBDBAYu3")
        method, _, kwargs = sent(client)
        assert method == "POST"
        assert kwargs["params"] == {"uris": "spotify:track:4iV5W9uYEdYUVa79Axb7Rh"}

    def test_add_tracks_over_limit(self):
        client = make_client(201, "{}")

        with pytest.raises(ValidationError):
            client.add_tracks_to_playlist("wizzler", "7oi0w0SLbJ4YyjrOxhZbUv", *[f"id{i}" for i in range(101)])
        client._session.request.assert_not_called()

    def test_follow_playlist_empty_body(self):
        client = make_client(200, b"")

        assert client.follow_playlist("spotify", "6ftJBzU2LLQcaKefMi7ee7") is None

        method, url, kwargs = sent(client)
        assert method == "PUT"
        assert url.endswith("/users/spotify/playlists/6ftJBzU2LLQcaKefMi7ee7/followers")
        assert kwargs["json"] == {"public": True}

    def test_save_and_remove_tracks(self):
        client = make_client(200, b"")

        client.save_tracks("a", "b")
        method, _, kwargs = sent(client)
        assert method == "PUT"
        assert kwargs["params"] == {"ids": "a,b"}

        client._session.request.reset_mock()
        client.remove_saved_tracks("a")
        method, _, _ = sent(client)
        assert method == "DELETE"

    def test_save_tracks_error(self, expired_token_body):
        client = make_client(401, expired_token_body)

        with pytest.raises(SpotifyError):
            client.save_tracks("a")

    def test_current_user(self):
        body = json.dumps({"id": "wizzler", "display_name": "Wizzler", "country": "SE"})
        client = make_client(200, body)

        user = client.current_user()

        assert user.id == "wizzler"
        assert user.country == "SE"
        _, url, _ = sent(client)
        assert url == "https://api.spotify.com/v1/me"


class TestPaging:
    """Following next/previous links"""

    def test_next_page_uses_absolute_url(self):
        client = make_client(200, load_fixture("featured_playlists.json"))
        _, page = client.featured_playlists()

        second_page = json.loads(load_fixture("featured_playlists.json"))["playlists"]
        second_page.update(offset=2, previous=page.endpoint, next=None)
        client._session.request.reset_mock()
        client._session.request.return_value = make_response(200, json.dumps(second_page))

        following = client.next_page(page)

        assert isinstance(following, SimplePlaylistPage)
        assert following.offset == 2
        assert client.next_page(following) is None
        _, url, _ = sent(client)
        assert url == page.next

    def test_no_previous_page(self):
        client = make_client(200, load_fixture("featured_playlists.json"))
        _, page = client.featured_playlists()
        client._session.request.reset_mock()

        assert client.previous_page(page) is None
        client._session.request.assert_not_called()


class TestConstruction:
    """Client construction and token sources"""

    def test_from_config_prefers_access_token(self):
        config = parse_config({
            "spotify": {"access_token": "abc", "client_id": "id", "client_secret": "secret"},
            "api": {"base_url": "https://example.test/v1", "timeout": 3},
        })
        session = make_session(200, load_fixture("track.json"))

        client = SpotifyClient.from_config(config, session=session)
        client.get_track("x")

        args, kwargs = session.request.call_args
        assert args[1] == "https://example.test/v1/tracks/x"
        assert kwargs["headers"] == {"Authorization": "Bearer abc"}
        assert kwargs["timeout"] == 3.0

    def test_auth_manager_token(self):
        manager = Mock()
        manager.get_access_token.return_value = "from-spotipy"
        session = make_session(200, load_fixture("track.json"))
        client = SpotifyClient(AuthManagerToken(manager), session=session)

        client.get_track("x")

        manager.get_access_token.assert_called_once_with(as_dict=False)
        _, kwargs = session.request.call_args
        assert kwargs["headers"] == {"Authorization": "Bearer from-spotipy"}

    def test_static_token_is_not_printed(self):
        assert "secret" not in repr(StaticToken("secret"))

    def test_static_token_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            StaticToken("")

    def test_context_manager_closes_session(self):
        session = make_session(200)

        with SpotifyClient.from_token("t", session=session):
            pass

        session.close.assert_called_once()

    def test_make_response_helper(self):
        response = make_response(204)
        assert response.content == b""
