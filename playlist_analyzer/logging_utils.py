"""
Logging utilities for the playlist analyzer.

The CLI calls configure_logging() once at startup; library modules only use
logging.getLogger(__name__).
"""
import logging
import os
import re
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, List, Optional

# Set by the first configure_logging() call of a run
_logging_configured = False
_HANDLER_TAG = "_pa_handler"
_CONSOLE_FMT = '%(asctime)s | %(levelname)-5s | %(name)s | %(message)s'
_FILE_FMT = '%(asctime)s | %(levelname)-5s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'


def configure_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    file_level: str = 'DEBUG',
    force: bool = False,
    console: bool = True,
) -> None:
    """
    Install the analyzer's console and file handlers on the root logger.

    Called by cli.main() before anything is fetched, so that per-track genre
    fallbacks, album cache HIT/MISS lines and Spotify page counts all share
    one format. A second call is a no-op unless force=True; handlers from an
    earlier call are recognised by their tag and replaced, never duplicated.
    Console output goes to stderr so it never mixes with a report piped to
    stdout.

    Args:
        level: Console threshold (DEBUG shows every enrichment step)
        log_file: Optional run log; its parent directory is created
        file_level: Threshold for the run log (default DEBUG)
        force: Reinstall handlers even if already configured
        console: Set False to log only to the file

    LOG_LEVEL and LOG_FILE in the environment (or .env) win over the
    arguments, which lets a scheduled export be made verbose without
    editing config.yaml.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    level = os.getenv('LOG_LEVEL', level).upper()
    if log_file is None:
        log_file = os.getenv('LOG_FILE')

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)  # Capture all, filter at handler level

    # Drop only our own handlers; pytest and embedding apps keep theirs
    for handler in root.handlers[:]:
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, level, logging.INFO))
        console_handler.setFormatter(logging.Formatter(_CONSOLE_FMT, datefmt='%H:%M:%S'))
        setattr(console_handler, _HANDLER_TAG, True)
        root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(getattr(logging, file_level.upper(), logging.DEBUG))
        file_handler.setFormatter(logging.Formatter(_FILE_FMT, datefmt='%Y-%m-%d %H:%M:%S'))
        setattr(file_handler, _HANDLER_TAG, True)
        root.addHandler(file_handler)

    # urllib3 logs every connection to api.spotify.com at DEBUG
    for noisy in ['urllib3', 'requests', 'charset_normalizer']:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _logging_configured = True

    logging.getLogger(__name__).debug(f"Logging configured: level={level}, file={log_file or 'none'}")


@contextmanager
def stage_timer(stage_name: str, logger: Optional[logging.Logger] = None):
    """
    Time one step of an analysis run (fetch, enrichment, report write).

    The start is logged at DEBUG and the elapsed time at INFO, in ms below
    a second and in minutes for long enrichment loops over large playlists.

        with stage_timer("Deezer playlist fetch", logger):
            tracks = client.get_playlist_tracks(playlist_id)
        # -> "Deezer playlist fetch completed in 412ms"
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    logger.debug(f"{stage_name} starting...")
    start = time.perf_counter()

    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if elapsed < 1:
            logger.info(f"{stage_name} completed in {elapsed*1000:.0f}ms")
        elif elapsed < 60:
            logger.info(f"{stage_name} completed in {elapsed:.1f}s")
        else:
            minutes = int(elapsed // 60)
            seconds = elapsed % 60
            logger.info(f"{stage_name} completed in {minutes}m {seconds:.0f}s")


def redact(value: Any, patterns: Optional[List[str]] = None) -> str:
    """
    Redact credentials from a value before logging.

    Covers bearer tokens, key=value style secrets and TheAudioDB's
    /json/<api key>/ URL segment.

    Args:
        value: Value to redact (string, URL, exception)
        patterns: Additional regex patterns to redact

    Returns:
        Redacted string representation
    """
    if value is None:
        return "None"

    text = str(value)

    default_patterns = [
        (r'(Bearer\s+)[A-Za-z0-9._\-]+', r'\1***REDACTED***'),
        (r'(["\']?(?:api[_-]?key|token|secret|password|auth)["\']?\s*[:=]\s*["\']?)([^"\'\s&]+)(["\']?)',
         r'\1***REDACTED***\3'),
        (r'(/api/v1/json/)[^/]+(/)', r'\1***\2'),
    ]

    for pattern, replacement in default_patterns:
        text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)

    if patterns:
        for pattern in patterns:
            text = re.sub(pattern, '***REDACTED***', text)

    return text


def format_count(n: int, singular: str, plural: Optional[str] = None) -> str:
    """Render a count for the run summary, e.g. "1 track", "1,204 tracks", "3 album lookups"."""
    if plural is None:
        plural = singular + 's'
    return f"{n:,} {singular if n == 1 else plural}"
