"""
Album Genre Cache - Per-run memo of album genre lookups
"""
import logging
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)


class AlbumGenreCache:
    """In-memory album id -> genre list map, scoped to a single run

    Nothing is persisted and nothing expires; the playlist size bounds it.
    """

    def __init__(self):
        self._genres: Dict[str, Tuple[str, ...]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._genres)

    def __contains__(self, album_id: str) -> bool:
        return album_id in self._genres

    def get_or_populate(self, album_id: str, loader: Callable[[str], List[str]]) -> List[str]:
        """
        Return the cached genres for an album, loading them on first use

        The loader runs at most once per album id. Its result is stored even
        when empty, so a failed lookup is not repeated.

        Args:
            album_id: Album identifier
            loader: Called with album_id on a miss

        Returns:
            A fresh list of genre names; callers may mutate it freely
        """
        if album_id in self._genres:
            self.hits += 1
            logger.debug(f"Cache HIT: album {album_id}")
            return list(self._genres[album_id])

        self.misses += 1
        logger.debug(f"Cache MISS: album {album_id}")
        genres = tuple(loader(album_id))
        self._genres[album_id] = genres
        return list(genres)

    def get_stats(self) -> dict:
        """Get statistics about the cache"""
        return {
            'albums': len(self._genres),
            'hits': self.hits,
            'misses': self.misses,
        }
