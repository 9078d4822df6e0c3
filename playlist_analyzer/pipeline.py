"""
Playlist Analysis Pipeline
Fetch playlist -> enrich each track (one at a time, throttled) -> sort -> CSV

The two providers keep their own rules:
    Spotify: artist genre via TheAudioDB then Spotify tags, optional tempo,
             pause after every track, duration column before seconds column.
    Deezer:  album genres (cached) first, TheAudioDB only as fallback, pause
             only after a fallback call, seconds column before duration column.
"""
import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from .audiodb_client import AudioDBClient
from .deezer_client import DeezerClient
from .genre_enricher import GenreEnricher
from .logging_utils import format_count, stage_timer
from .models import Track
from .rate_limiter import RateLimiter
from .report import (
    DEEZER_COLUMNS,
    SPOTIFY_COLUMNS,
    TEMPO,
    Column,
    CsvReportWriter,
    OutputRecord,
    build_record,
    sort_records,
)
from .spotify_client import SpotifyClient

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    playlist_id: str
    output_path: Path
    records: List[OutputRecord]


class PlaylistAnalyzer:
    """Shared per-track loop; subclasses supply fetch and enrichment rules"""

    provider_name = "playlist"

    def __init__(self, enricher: GenreEnricher, rate_limiter: RateLimiter, output_path: Union[str, Path]):
        self.enricher = enricher
        self.rate_limiter = rate_limiter
        self.output_path = Path(output_path)

    @property
    def columns(self) -> Sequence[Column]:
        raise NotImplementedError

    def fetch_tracks(self, playlist_id: str) -> List[Track]:
        raise NotImplementedError

    def enrich_track(self, track: Track) -> Tuple[Track, str, bool]:
        """Return (track, genre, whether a throttled call was made)"""
        raise NotImplementedError

    def analyze(self, playlist_id: str) -> AnalysisResult:
        """
        Run the whole analysis for one playlist

        Raises:
            PlaylistFetchError: playlist could not be fetched
            ReportWriteError: report could not be written
        """
        with stage_timer(f"{self.provider_name} playlist fetch", logger):
            tracks = self.fetch_tracks(playlist_id)

        logger.info(
            f"Analyzing {self.provider_name} playlist {playlist_id} "
            f"with {format_count(len(tracks), 'track')}..."
        )

        records = []
        with stage_timer("Track enrichment", logger):
            for index, track in enumerate(tracks, 1):
                enriched, genre, throttled = self.enrich_track(track)
                logger.debug(f"[{index}/{len(tracks)}] {track.artist.name} - {track.title}: {genre}")
                records.append(build_record(enriched, genre))
                if throttled:
                    self.rate_limiter.pause()

        records = sort_records(records)
        path = CsvReportWriter(self.output_path, self.columns).write(records)

        stats = self.enricher.cache.get_stats()
        if stats['misses']:
            logger.debug(f"Album cache: {stats}")
        logger.info(f"Analysis complete! Results are in {path}")
        return AnalysisResult(playlist_id=playlist_id, output_path=path, records=records)


class SpotifyPlaylistAnalyzer(PlaylistAnalyzer):

    provider_name = "Spotify"

    def __init__(
        self,
        client: SpotifyClient,
        enricher: GenreEnricher,
        rate_limiter: RateLimiter,
        output_path: Union[str, Path],
        page_size: int = 100,
        fetch_tempo: bool = False,
    ):
        super().__init__(enricher, rate_limiter, output_path)
        self.client = client
        self.page_size = page_size
        self.fetch_tempo = fetch_tempo

    @property
    def columns(self) -> Sequence[Column]:
        if self.fetch_tempo:
            return SPOTIFY_COLUMNS + [TEMPO]
        return SPOTIFY_COLUMNS

    def fetch_tracks(self, playlist_id: str) -> List[Track]:
        return self.client.get_playlist_tracks(playlist_id, page_size=self.page_size)

    def enrich_track(self, track: Track) -> Tuple[Track, str, bool]:
        genre = self.enricher.resolve_genre(track.artist.name, track.artist.id or None)
        if self.fetch_tempo:
            tempo = self.enricher.resolve_tempo(track.artist.name, track.title)
            track = dataclasses.replace(track, tempo=tempo)
        # Every Spotify track hits TheAudioDB, so every track is throttled
        return track, genre, True


class DeezerPlaylistAnalyzer(PlaylistAnalyzer):

    provider_name = "Deezer"

    def __init__(
        self,
        client: DeezerClient,
        enricher: GenreEnricher,
        rate_limiter: RateLimiter,
        output_path: Union[str, Path],
        limit: int = 2000,
    ):
        super().__init__(enricher, rate_limiter, output_path)
        self.client = client
        self.limit = limit

    @property
    def columns(self) -> Sequence[Column]:
        return DEEZER_COLUMNS

    def fetch_tracks(self, playlist_id: str) -> List[Track]:
        return self.client.get_playlist_tracks(playlist_id, limit=self.limit)

    def enrich_track(self, track: Track) -> Tuple[Track, str, bool]:
        album_genres = self.enricher.resolve_album_genres(track.album.id)
        if album_genres:
            return track, ", ".join(album_genres), False
        return track, self.enricher.resolve_genre(track.artist.name), True


def build_spotify_analyzer(config, output_path=None, fetch_tempo=None) -> SpotifyPlaylistAnalyzer:
    """Wire clients, enricher and limiter for a Spotify run from a Config"""
    client = SpotifyClient(config.spotify_token, timeout=config.http_timeout)
    enricher = GenreEnricher(
        AudioDBClient(config.audiodb_api_key, timeout=config.http_timeout),
        artist_genre_lookup=client.get_artist_genres,
    )
    return SpotifyPlaylistAnalyzer(
        client,
        enricher,
        RateLimiter(delay_seconds=config.enrichment_delay_seconds),
        output_path or config.spotify_output_path,
        page_size=config.spotify_page_size,
        fetch_tempo=config.fetch_tempo if fetch_tempo is None else fetch_tempo,
    )


def build_deezer_analyzer(config, output_path=None) -> DeezerPlaylistAnalyzer:
    """Wire clients, enricher and limiter for a Deezer run from a Config"""
    client = DeezerClient(timeout=config.http_timeout)
    enricher = GenreEnricher(
        AudioDBClient(config.audiodb_api_key, timeout=config.http_timeout),
        album_genre_lookup=client.get_album_genres,
    )
    return DeezerPlaylistAnalyzer(
        client,
        enricher,
        RateLimiter(delay_seconds=config.enrichment_delay_seconds),
        output_path or config.deezer_output_path,
        limit=config.deezer_limit,
    )
