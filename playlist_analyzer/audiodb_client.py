"""
TheAudioDB Client - Artist genre and track tempo lookups by name
"""
import logging
import math
from typing import Any, Dict, Optional

import requests

from .logging_utils import redact
from .models import UNKNOWN

logger = logging.getLogger(__name__)


class AudioDBClient:
    """Fetches genre and tempo from TheAudioDB (key "1" is the public test key)"""

    BASE_URL = "https://theaudiodb.com/api/v1/json"

    def __init__(self, api_key: str = "1", timeout: float = 10, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_json(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.BASE_URL}/{self.api_key}/{endpoint}"
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        # TheAudioDB answers an empty body for some misses
        if not response.content:
            return {}
        return response.json() or {}

    def fetch_artist_genre(self, artist_name: str) -> str:
        """
        Look up an artist by exact name and return its main genre

        Args:
            artist_name: Artist name

        Returns:
            Genre string, or "Unknown" when absent or on any error
        """
        try:
            data = self._get_json("search.php", {'s': artist_name})
            artists = data.get('artists') or []
            genre = artists[0].get('strGenre') if artists else None
            if isinstance(genre, str) and genre.strip():
                return genre.strip()
            logger.debug(f"TheAudioDB: no genre for {artist_name}")
            return UNKNOWN
        except (requests.exceptions.RequestException, ValueError, AttributeError) as e:
            logger.warning(f"TheAudioDB genre lookup failed for artist {artist_name}: {redact(e)}")
            return UNKNOWN

    def fetch_track_tempo(self, artist_name: str, track_title: str) -> Optional[float]:
        """
        Look up a track by artist and title and return its tempo (BPM)

        Returns:
            Tempo as a float, or None when absent, unparsable or on any error
        """
        try:
            data = self._get_json("searchtrack.php", {'s': artist_name, 't': track_title})
            found = data.get('track') or []
            tempo = found[0].get('intTempo') if found else None
            if tempo in (None, ''):
                return None
            value = float(tempo)
            return value if math.isfinite(value) else None
        except (requests.exceptions.RequestException, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"TheAudioDB tempo lookup failed for {artist_name} - {track_title}: {redact(e)}")
            return None
