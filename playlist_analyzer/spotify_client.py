"""
Spotify API Client - Fetches playlist tracks and artist genre tags
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .exceptions import PlaylistFetchError
from .logging_utils import redact
from .models import UNKNOWN_ID, Track, normalize_spotify_items

logger = logging.getLogger(__name__)


class SpotifyClient:
    """Client for the Spotify Web API (bearer token authenticated)"""

    BASE_URL = "https://api.spotify.com/v1"

    def __init__(self, token: str, timeout: float = 10, session: Optional[requests.Session] = None):
        """
        Initialize Spotify client

        Args:
            token: OAuth bearer token
            timeout: Request timeout in seconds
            session: Optional pre-built session (tests inject a fake one)
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Authorization': f'Bearer {token}'})

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_playlist_tracks(self, playlist_id: str, page_size: int = 100) -> List[Track]:
        """
        Fetch every track of a playlist, following the `next` cursor

        Items whose `track` is null (removed or local tracks) are skipped.

        Args:
            playlist_id: Spotify playlist ID
            page_size: Items per page (Spotify maximum is 100)

        Returns:
            Normalized tracks in playlist order

        Raises:
            PlaylistFetchError: on any transport, HTTP or decoding failure
        """
        tracks: List[Track] = []
        url: Optional[str] = f"{self.BASE_URL}/playlists/{playlist_id}/tracks"
        params: Optional[Dict[str, Any]] = {'limit': page_size}
        page = 0

        while url:
            page += 1
            try:
                data = self._get_json(url, params=params)
            except (requests.exceptions.RequestException, ValueError) as e:
                raise PlaylistFetchError(
                    f"Failed to fetch Spotify playlist {playlist_id} (page {page}): {redact(e)}"
                ) from e

            items = (data.get('items') or []) if isinstance(data, dict) else None
            if not isinstance(items, list) or not all(item is None or isinstance(item, dict) for item in items):
                raise PlaylistFetchError(
                    f"Unexpected payload for Spotify playlist {playlist_id} (page {page}): "
                    f"expected an object with an `items` list of objects"
                )
            try:
                page_tracks = normalize_spotify_items(items)
            except (AttributeError, TypeError) as e:
                raise PlaylistFetchError(
                    f"Unexpected track object in Spotify playlist {playlist_id} (page {page}): {e}"
                ) from e
            tracks.extend(page_tracks)
            logger.debug(f"Spotify page {page}: {len(page_tracks)} tracks")

            # `next` is a full URL that already carries offset and limit
            next_url = data.get('next')
            url = next_url if isinstance(next_url, str) and next_url else None
            params = None

        logger.info(f"Fetched {len(tracks)} tracks from Spotify playlist {playlist_id} in {page} pages")
        return tracks

    def get_artist_genres(self, artist_id: str) -> List[str]:
        """
        Fetch the genre tags Spotify attaches to an artist

        Args:
            artist_id: Spotify artist ID

        Returns:
            List of genre tags (empty on failure or unknown artist)
        """
        if not artist_id or artist_id == UNKNOWN_ID:
            return []

        try:
            data = self._get_json(f"{self.BASE_URL}/artists/{artist_id}")
            genres = data.get('genres') or []
            return [g for g in genres if isinstance(g, str) and g]
        except (requests.exceptions.RequestException, ValueError, AttributeError) as e:
            logger.warning(f"Spotify genre lookup failed for artist {artist_id}: {redact(e)}")
            return []
