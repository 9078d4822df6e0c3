"""
Genre Enricher
==============
Resolves a genre (and optionally a tempo) for each playlist track.

Lookup order for an artist genre:
    1. TheAudioDB artist search by exact name
    2. The streaming provider's own artist genre tags, when an artist id is known
    3. The "Unknown" sentinel

Every lookup is fault tolerant: a failed call degrades to "Unknown", None or
an empty list and never aborts the run.
"""
import logging
from typing import Callable, List, Optional

from .album_cache import AlbumGenreCache
from .audiodb_client import AudioDBClient
from .models import UNKNOWN, UNKNOWN_ID

logger = logging.getLogger(__name__)

GenreLookup = Callable[[str], List[str]]


def is_usable_genre(genre: Optional[str]) -> bool:
    return bool(genre and genre.strip() and genre != UNKNOWN)


class GenreEnricher:
    """Combines the secondary metadata provider with streaming provider lookups"""

    def __init__(
        self,
        audiodb: AudioDBClient,
        artist_genre_lookup: Optional[GenreLookup] = None,
        album_genre_lookup: Optional[GenreLookup] = None,
        cache: Optional[AlbumGenreCache] = None,
    ):
        """
        Args:
            audiodb: TheAudioDB client (primary genre source, tempo source)
            artist_genre_lookup: Streaming provider artist id -> genre tags
            album_genre_lookup: Streaming provider album id -> genre names
            cache: Album genre memo; a fresh one is created if omitted
        """
        self.audiodb = audiodb
        self.artist_genre_lookup = artist_genre_lookup
        self.album_genre_lookup = album_genre_lookup
        self.cache = cache if cache is not None else AlbumGenreCache()

    def resolve_genre(self, artist_name: str, artist_id: Optional[str] = None) -> str:
        """
        Resolve a single genre string for an artist

        Args:
            artist_name: Artist name used for the TheAudioDB search
            artist_id: Streaming provider artist ID, enables the fallback lookup

        Returns:
            Genre string, "Unknown" if no source has one
        """
        genre = self.audiodb.fetch_artist_genre(artist_name)
        if is_usable_genre(genre):
            return genre

        if artist_id and artist_id != UNKNOWN_ID and self.artist_genre_lookup is not None:
            try:
                tags = self.artist_genre_lookup(artist_id)
            except Exception as e:
                logger.warning(f"Artist genre fallback failed for {artist_name} ({artist_id}): {e}")
                tags = []
            if tags and is_usable_genre(tags[0]):
                logger.debug(f"Genre for {artist_name} taken from provider tags: {tags[0]}")
                return tags[0]

        return UNKNOWN

    def resolve_tempo(self, artist_name: str, track_title: str) -> Optional[float]:
        """Resolve a track tempo (BPM), None when unavailable"""
        return self.audiodb.fetch_track_tempo(artist_name, track_title)

    def resolve_album_genres(self, album_id: str) -> List[str]:
        """
        Resolve all genre names of an album through the cache

        Returns:
            Genre names, empty when the album has none or the lookup failed
        """
        if self.album_genre_lookup is None:
            return []
        return self.cache.get_or_populate(album_id, self._load_album_genres)

    def _load_album_genres(self, album_id: str) -> List[str]:
        try:
            return self.album_genre_lookup(album_id)
        except Exception as e:
            logger.warning(f"Album genre lookup failed for album {album_id}: {e}")
            return []
