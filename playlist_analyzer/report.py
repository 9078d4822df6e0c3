"""
CSV Report Builder - Maps enriched tracks to rows, sorts them and writes the CSV
"""
import csv
import logging
import math
import os
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .exceptions import ReportWriteError
from .models import UNKNOWN, Track

logger = logging.getLogger(__name__)

# (record field, header label)
Column = Tuple[str, str]

TITLE = ('title', 'Titre')
ARTIST = ('artist', 'Artiste')
ALBUM = ('album', 'Album')
GENRE = ('genre', 'Genre')
DURATION = ('duration', 'Durée')
DURATION_SECONDS = ('duration_seconds', 'Durée (s)')
TEMPO = ('tempo', 'BPM')

SPOTIFY_COLUMNS: List[Column] = [TITLE, ARTIST, ALBUM, GENRE, DURATION, DURATION_SECONDS]
DEEZER_COLUMNS: List[Column] = [TITLE, ARTIST, ALBUM, GENRE, DURATION_SECONDS, DURATION]


@dataclass(frozen=True)
class OutputRecord:
    title: str
    artist: str
    album: str
    genre: str
    duration: str
    duration_seconds: Union[int, str]
    tempo: Union[float, str] = ''


def _whole_seconds(value: Optional[float], unit: str) -> Optional[int]:
    if unit not in ('ms', 's'):
        raise ValueError(f"unit must be 'ms' or 's', got {unit!r}")
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return int(number // 1000) if unit == 'ms' else int(number)


def format_duration(value: Optional[float], unit: str = 'ms') -> str:
    """
    Format a duration as "minutes:seconds"

    Args:
        value: Duration in milliseconds (unit="ms") or seconds (unit="s")
        unit: "ms" or "s"

    Returns:
        e.g. "1:05"; "Unknown" for missing, zero, negative or non-finite input
    """
    total = _whole_seconds(value, unit)
    if total is None:
        return UNKNOWN
    minutes, seconds = divmod(total, 60)
    return f"{minutes}:{seconds:02d}"


def duration_in_seconds(value: Optional[float], unit: str = 'ms') -> Union[int, str]:
    """Whole seconds of a duration, or "" when unknown"""
    total = _whole_seconds(value, unit)
    return '' if total is None else total


def _format_tempo(tempo) -> Union[float, str]:
    if tempo is None or tempo == '':
        return ''
    if isinstance(tempo, float) and tempo.is_integer():
        return int(tempo)
    return tempo


def build_record(track: Track, genre: str) -> OutputRecord:
    """Build the output row for an enriched track"""
    return OutputRecord(
        title=track.title,
        artist=track.artist.name,
        album=track.album.title,
        genre=genre if genre and genre.strip() else UNKNOWN,
        duration=format_duration(track.duration_ms),
        duration_seconds=duration_in_seconds(track.duration_ms),
        tempo=_format_tempo(track.tempo),
    )


def sort_records(records: Iterable[OutputRecord]) -> List[OutputRecord]:
    """Sort by genre, artist, then title, case-insensitively (stable)"""
    return sorted(
        records,
        key=lambda r: ((r.genre or '').lower(), (r.artist or '').lower(), (r.title or '').lower()),
    )


class CsvReportWriter:
    """Writes the whole report in one go once every record is known"""

    def __init__(self, path: Union[str, Path], columns: Sequence[Column]):
        """
        Args:
            path: Destination CSV file
            columns: (record field, header label) pairs in output order
        """
        self.path = Path(path)
        self.columns = list(columns)

    def write(self, records: Sequence[OutputRecord]) -> Path:
        """
        Write header and rows to the CSV file (UTF-8, comma separated)

        The rows go to a temporary file next to the destination, which then
        replaces it, so a failed run never leaves a half-written report.

        Raises:
            ReportWriteError: if the file cannot be written
        """
        fields = [field for field, _ in self.columns]
        directory = self.path.parent if str(self.path.parent) else Path('.')

        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', newline='', dir=directory,
                prefix=f".{self.path.name}.", suffix='.tmp', delete=False,
            ) as f:
                tmp_name = f.name
                writer = csv.writer(f)
                writer.writerow([label for _, label in self.columns])
                for record in records:
                    row = asdict(record)
                    writer.writerow([row[field] for field in fields])
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ReportWriteError(f"Failed to write report {self.path}: {e}") from e

        logger.info(f"Wrote {len(records)} rows to: {self.path}")
        return self.path
