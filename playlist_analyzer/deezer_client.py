"""
Deezer API Client - Fetches playlist tracks and album genres (no authentication)
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .exceptions import PlaylistFetchError
from .models import UNKNOWN_ID, Track, normalize_deezer_track

logger = logging.getLogger(__name__)


class DeezerAPIError(Exception):
    """Deezer answered with an `error` object instead of data"""
    pass


class DeezerClient:
    """Client for the public Deezer API"""

    BASE_URL = "https://api.deezer.com"

    def __init__(self, timeout: float = 10, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self.session.get(f"{self.BASE_URL}{path}", params=params, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        # Deezer reports most errors as HTTP 200 with an error object
        if isinstance(data, dict) and data.get('error'):
            error = data['error']
            message = error.get('message') if isinstance(error, dict) else error
            raise DeezerAPIError(f"Deezer API error on {path}: {message}")
        return data

    def get_playlist_tracks(self, playlist_id: str, limit: int = 2000) -> List[Track]:
        """
        Fetch a playlist's tracks in one bulk request

        Args:
            playlist_id: Deezer playlist ID
            limit: Maximum number of tracks requested

        Returns:
            Normalized tracks in playlist order

        Raises:
            PlaylistFetchError: on any transport, HTTP, API or decoding failure
        """
        try:
            data = self._get_json(f"/playlist/{playlist_id}/tracks", params={'limit': limit})
        except (requests.exceptions.RequestException, DeezerAPIError, ValueError) as e:
            raise PlaylistFetchError(f"Failed to fetch Deezer playlist {playlist_id}: {e}") from e

        items = data.get('data') if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise PlaylistFetchError(
                f"Unexpected payload for Deezer playlist {playlist_id}: expected an object with a `data` list"
            )
        try:
            tracks = [normalize_deezer_track(item) for item in items if item]
        except (AttributeError, TypeError) as e:
            raise PlaylistFetchError(f"Unexpected track object in Deezer playlist {playlist_id}: {e}") from e
        logger.info(f"Fetched {len(tracks)} tracks from Deezer playlist {playlist_id}")
        return tracks

    def get_album_genres(self, album_id: str) -> List[str]:
        """
        Fetch the genre names of an album

        Args:
            album_id: Deezer album ID

        Returns:
            Genre names in Deezer's order (empty on failure or unknown album)
        """
        if not album_id or album_id == UNKNOWN_ID:
            return []

        try:
            data = self._get_json(f"/album/{album_id}")
            genres = (data.get('genres') or {}).get('data') or []
            return [g['name'] for g in genres if isinstance(g, dict) and g.get('name')]
        except (requests.exceptions.RequestException, DeezerAPIError, ValueError, AttributeError) as e:
            logger.warning(f"Deezer album genre lookup failed for album {album_id}: {e}")
            return []
