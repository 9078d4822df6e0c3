"""
Track Models - Common track shape and per-provider payload normalization

Spotify and Deezer return differently shaped track objects. Each provider's
payload is described by a TypedDict and converted into the common Track right
after fetch, so the enricher and the report builder only ever see Track.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TypedDict, Union

UNKNOWN = "Unknown"
UNKNOWN_ID = "unknown"


@dataclass(frozen=True)
class ArtistRef:
    id: str
    name: str


@dataclass(frozen=True)
class AlbumRef:
    id: str
    title: str


UNKNOWN_ARTIST = ArtistRef(id=UNKNOWN_ID, name=UNKNOWN)
UNKNOWN_ALBUM = AlbumRef(id=UNKNOWN_ID, title=UNKNOWN)


@dataclass(frozen=True)
class Track:
    """A playlist track, independent of the provider it came from"""
    id: str
    title: str
    artist: ArtistRef = UNKNOWN_ARTIST
    album: AlbumRef = UNKNOWN_ALBUM
    duration_ms: Optional[float] = None
    tempo: Optional[Union[float, str]] = None


# --- Spotify payloads ---------------------------------------------------------

class SpotifyArtistPayload(TypedDict, total=False):
    id: Optional[str]
    name: Optional[str]


class SpotifyAlbumPayload(TypedDict, total=False):
    id: Optional[str]
    name: Optional[str]


class SpotifyTrackPayload(TypedDict, total=False):
    id: Optional[str]
    name: Optional[str]
    duration_ms: Optional[int]
    artists: Optional[List[SpotifyArtistPayload]]
    album: Optional[SpotifyAlbumPayload]


class SpotifyPlaylistItem(TypedDict, total=False):
    track: Optional[SpotifyTrackPayload]


# --- Deezer payloads ----------------------------------------------------------

class DeezerArtistPayload(TypedDict, total=False):
    id: Optional[int]
    name: Optional[str]


class DeezerAlbumPayload(TypedDict, total=False):
    id: Optional[int]
    title: Optional[str]


class DeezerTrackPayload(TypedDict, total=False):
    id: Optional[int]
    title: Optional[str]
    duration: Optional[int]
    bpm: Optional[float]
    artist: Optional[DeezerArtistPayload]
    album: Optional[DeezerAlbumPayload]


def _as_id(value: Any) -> str:
    if value is None or value == "":
        return UNKNOWN_ID
    return str(value)


def _as_number(value: Any) -> Optional[float]:
    """Return value as a finite float, or None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_spotify_track(payload: SpotifyTrackPayload) -> Track:
    """
    Convert a Spotify track object into a Track

    Only the first listed artist is kept. A missing artists array or album
    object yields the "Unknown" placeholders.
    """
    artists = payload.get("artists") or []
    first_artist = artists[0] if artists else None
    artist = UNKNOWN_ARTIST
    if first_artist:
        artist = ArtistRef(
            id=_as_id(first_artist.get("id")),
            name=first_artist.get("name") or UNKNOWN,
        )

    album_data = payload.get("album")
    album = UNKNOWN_ALBUM
    if album_data:
        album = AlbumRef(
            id=_as_id(album_data.get("id")),
            title=album_data.get("name") or UNKNOWN,
        )

    return Track(
        id=_as_id(payload.get("id")),
        title=payload.get("name") or "",
        artist=artist,
        album=album,
        duration_ms=_as_number(payload.get("duration_ms")),
    )


def normalize_deezer_track(payload: DeezerTrackPayload) -> Track:
    """
    Convert a Deezer track object into a Track

    Deezer reports durations in seconds; they are stored as milliseconds.
    """
    artist_data = payload.get("artist")
    artist = UNKNOWN_ARTIST
    if artist_data:
        artist = ArtistRef(
            id=_as_id(artist_data.get("id")),
            name=artist_data.get("name") or UNKNOWN,
        )

    album_data = payload.get("album")
    album = UNKNOWN_ALBUM
    if album_data:
        album = AlbumRef(
            id=_as_id(album_data.get("id")),
            title=album_data.get("title") or UNKNOWN,
        )

    seconds = _as_number(payload.get("duration"))
    bpm = _as_number(payload.get("bpm"))

    return Track(
        id=_as_id(payload.get("id")),
        title=payload.get("title") or "",
        artist=artist,
        album=album,
        duration_ms=seconds * 1000 if seconds is not None else None,
        tempo=bpm if bpm else None,
    )


def normalize_spotify_items(items: List[Dict[str, Any]]) -> List[Track]:
    """Normalize a page of Spotify playlist items, skipping items without a track"""
    tracks = []
    for item in items or []:
        track = item.get("track") if item else None
        if not track:
            continue
        tracks.append(normalize_spotify_track(track))
    return tracks
