import pytest
import requests

from playlist_analyzer.exceptions import PlaylistFetchError
from playlist_analyzer.spotify_client import SpotifyClient

PLAYLIST_URL = "https://api.spotify.com/v1/playlists/pl1/tracks"


def _item(track_id, artist="Artist"):
    return {"track": {
        "id": track_id,
        "name": f"Song {track_id}",
        "duration_ms": 1000,
        "artists": [{"id": f"id-{artist}", "name": artist}],
        "album": {"id": "al", "name": "Album"},
    }}


def test_pagination_follows_next_until_empty(fake_session, fake_response):
    session = fake_session({"/playlists/pl1/tracks": [
        fake_response({"items": [_item("1"), _item("2")], "next": PLAYLIST_URL + "?offset=2&limit=2"}),
        fake_response({"items": [_item("3"), {"track": None}], "next": PLAYLIST_URL + "?offset=4&limit=2"}),
        fake_response({"items": [_item("4")], "next": ""}),
    ]})
    client = SpotifyClient("tok", session=session)

    tracks = client.get_playlist_tracks("pl1", page_size=2)

    assert [t.id for t in tracks] == ["1", "2", "3", "4"]
    assert len(session.calls) == 3
    assert session.calls[0]["url"] == PLAYLIST_URL
    assert session.calls[0]["params"] == {"limit": 2}
    assert session.calls[1]["url"].endswith("offset=2&limit=2")
    assert session.calls[1]["params"] is None


def test_single_page_with_null_next(fake_session, fake_response):
    session = fake_session({"/playlists/pl1/tracks": fake_response({"items": [_item("1")], "next": None})})
    tracks = SpotifyClient("tok", session=session).get_playlist_tracks("pl1")
    assert len(tracks) == 1
    assert session.calls[0]["params"] == {"limit": 100}


def test_bearer_token_and_timeout(fake_session, fake_response):
    session = fake_session({"/playlists/pl1/tracks": fake_response({"items": [], "next": None})})
    SpotifyClient("secret-token", timeout=3, session=session).get_playlist_tracks("pl1")
    assert session.headers["Authorization"] == "Bearer secret-token"
    assert session.calls[0]["timeout"] == 3


def test_failure_mid_pagination_aborts(fake_session, fake_response):
    session = fake_session({"/playlists/pl1/tracks": [
        fake_response({"items": [_item("1")], "next": PLAYLIST_URL + "?offset=1"}),
        fake_response({"error": {"status": 401}}, status_code=401),
    ]})
    with pytest.raises(PlaylistFetchError) as excinfo:
        SpotifyClient("tok", session=session).get_playlist_tracks("pl1")
    assert "page 2" in str(excinfo.value)


def test_connection_error_is_fatal(fake_session):
    session = fake_session({"/playlists/": requests.exceptions.ConnectionError("down")})
    with pytest.raises(PlaylistFetchError):
        SpotifyClient("tok", session=session).get_playlist_tracks("pl1")


def test_artist_genres(fake_session, fake_response):
    session = fake_session({"/artists/a1": fake_response({"genres": ["french hip hop", "pop urbaine"]})})
    assert SpotifyClient("tok", session=session).get_artist_genres("a1") == ["french hip hop", "pop urbaine"]


def test_artist_genres_failure_returns_empty(fake_session, fake_response):
    session = fake_session({"/artists/a1": fake_response({}, status_code=500)})
    assert SpotifyClient("tok", session=session).get_artist_genres("a1") == []


def test_artist_genres_skips_unknown_id(fake_session):
    session = fake_session()
    client = SpotifyClient("tok", session=session)
    assert client.get_artist_genres("unknown") == []
    assert client.get_artist_genres("") == []
    assert session.calls == []


@pytest.mark.parametrize("payload", [
    {"items": ["oops"], "next": None},
    {"items": "oops", "next": None},
    [{"track": None}],
    {"items": [{"track": "not-an-object"}], "next": None},
])
def test_malformed_page_is_a_fetch_error(fake_session, fake_response, payload):
    session = fake_session({"/playlists/pl1/tracks": fake_response(payload)})
    with pytest.raises(PlaylistFetchError) as excinfo:
        SpotifyClient("tok", session=session).get_playlist_tracks("pl1")
    assert "pl1" in str(excinfo.value)
