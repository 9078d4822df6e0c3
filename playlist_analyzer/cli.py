"""
Playlist Genre Analyzer - command line entry point

Examples:
    playlist-analyzer spotify                      # uses SPOTIFY_PLAYLIST_ID / SPOTIFY_TOKEN
    playlist-analyzer deezer --playlist-id 908622995 --output rap.csv
"""
import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .config_loader import Config
from .exceptions import ConfigurationError, PlaylistAnalyzerError
from .logging_utils import configure_logging
from .pipeline import build_deezer_analyzer, build_spotify_analyzer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playlist-analyzer",
        description="Export a Spotify or Deezer playlist as a CSV report sorted by genre, artist and title.",
    )
    parser.add_argument('--config', default=None,
                        help="YAML configuration file (default: config.yaml if present)")
    parser.add_argument('--log-level', default=None,
                        help="Console log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument('--log-file', default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest='provider', required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--playlist-id', default=None,
                        help="Playlist ID (overrides the provider's environment variable)")
    common.add_argument('--output', default=None, help="CSV report path")
    common.add_argument('--delay', type=float, default=None,
                        help="Seconds to pause between enriched tracks (default 1.0)")

    spotify = subparsers.add_parser('spotify', parents=[common],
                                    help="Analyze a Spotify playlist (needs SPOTIFY_TOKEN)")
    spotify.add_argument('--with-tempo', action='store_true', default=None,
                         help="Also look up each track's tempo on TheAudioDB (adds a BPM column)")

    subparsers.add_parser('deezer', parents=[common], help="Analyze a Deezer playlist")
    return parser


def _run_spotify(config: Config, args) -> None:
    config.require_spotify()
    analyzer = build_spotify_analyzer(
        config,
        output_path=args.output,
        fetch_tempo=args.with_tempo,
    )
    analyzer.analyze(config.spotify_playlist_id)


def _run_deezer(config: Config, args) -> None:
    config.require_deezer()
    analyzer = build_deezer_analyzer(config, output_path=args.output)
    analyzer.analyze(config.deezer_playlist_id)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()

    try:
        config = Config(args.config)
    except ConfigurationError as e:
        configure_logging(level=args.log_level or 'INFO', log_file=args.log_file)
        logger.error(str(e))
        return EXIT_CONFIG

    configure_logging(level=args.log_level or config.log_level, log_file=args.log_file or config.log_file)

    if args.playlist_id:
        env_name = 'SPOTIFY_PLAYLIST_ID' if args.provider == 'spotify' else 'DEEZER_PLAYLIST_ID'
        config.environ = {**config.environ, env_name: args.playlist_id}
    config.delay_override = args.delay

    runner = _run_spotify if args.provider == 'spotify' else _run_deezer
    try:
        runner(config, args)
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIG
    except PlaylistAnalyzerError as e:
        logger.error(f"Playlist analysis failed: {e}")
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
