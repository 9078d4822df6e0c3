"""
Configuration Loader - Manages optional YAML configuration and environment variables
"""
import math
import os
from typing import Any, Mapping, Optional

import yaml

from .exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_AUDIODB_API_KEY = "1"


class Config:
    """Configuration manager for the playlist analyzer

    Secrets and playlist ids come from the environment; everything else may be
    tuned in the YAML file. Environment values take precedence over the file.
    """

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self._explicit_path = config_path is not None
        self.environ = os.environ if environ is None else environ
        self.config = self._load_config()
        self.delay_override: Optional[float] = None

    def _load_config(self) -> dict:
        """Load configuration from YAML file, if there is one"""
        if not os.path.exists(self.config_path):
            if self._explicit_path:
                raise ConfigurationError(f"Configuration file not found: {self.config_path}")
            return {}

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {self.config_path} must be a mapping")
        return data

    def _env(self, name: str) -> str:
        return (self.environ.get(name) or '').strip()

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            section: Configuration section
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        section_data = self.config.get(section)
        if not isinstance(section_data, dict):
            return default
        return section_data.get(key, default)

    def _number(self, section: str, key: str, default, cast, minimum=None, inclusive: bool = True):
        """Read a numeric setting, raising ConfigurationError on a bad value"""
        raw = self.get(section, key, default=default)
        try:
            if isinstance(raw, bool):
                raise ValueError(raw)
            value = cast(raw)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"{section}.{key} must be a number, got {raw!r} in {self.config_path}"
            ) from None
        return self._check_minimum(f"{section}.{key}", value, minimum, inclusive)

    @staticmethod
    def _check_minimum(name: str, value, minimum, inclusive: bool = True):
        if minimum is None:
            return value
        if isinstance(value, float) and not math.isfinite(value):
            raise ConfigurationError(f"{name} must be a finite number, got {value}")
        if value < minimum or (not inclusive and value == minimum):
            bound = f">= {minimum}" if inclusive else f"> {minimum}"
            raise ConfigurationError(f"{name} must be {bound}, got {value}")
        return value

    def validate(self):
        """Read every numeric setting once so bad values fail before any network call"""
        self.spotify_page_size
        self.deezer_limit
        self.enrichment_delay_seconds
        self.http_timeout

    def require_spotify(self):
        """Validate the values a Spotify run cannot start without"""
        self.validate()
        if not self.spotify_playlist_id:
            raise ConfigurationError(
                "Please set the SPOTIFY_PLAYLIST_ID environment variable to the playlist ID."
            )
        if not self.spotify_token:
            raise ConfigurationError(
                "Please set the SPOTIFY_TOKEN environment variable (Bearer token)."
            )

    def require_deezer(self):
        """Validate the values a Deezer run cannot start without"""
        self.validate()
        if not self.deezer_playlist_id:
            raise ConfigurationError(
                "Please set the DEEZER_PLAYLIST_ID environment variable to the playlist ID."
            )

    @property
    def spotify_playlist_id(self) -> str:
        """Get Spotify playlist ID (environment variable over config file)"""
        return self._env('SPOTIFY_PLAYLIST_ID') or str(self.get('spotify', 'playlist_id', default='') or '')

    @property
    def spotify_token(self) -> str:
        """Get Spotify bearer token (environment only)"""
        return self._env('SPOTIFY_TOKEN')

    @property
    def spotify_page_size(self) -> int:
        """Get Spotify playlist page size (API maximum is 100)"""
        return self._number('spotify', 'page_size', 100, int, minimum=1)

    @property
    def deezer_playlist_id(self) -> str:
        """Get Deezer playlist ID (environment variable over config file)"""
        return self._env('DEEZER_PLAYLIST_ID') or str(self.get('deezer', 'playlist_id', default='') or '')

    @property
    def deezer_limit(self) -> int:
        """Get Deezer bulk fetch limit"""
        return self._number('deezer', 'limit', 2000, int, minimum=1)

    @property
    def audiodb_api_key(self) -> str:
        """Get TheAudioDB API key, falling back to the shared public key"""
        return (
            self._env('THEAUDIODB_API_KEY')
            or str(self.get('theaudiodb', 'api_key', default='') or '')
            or DEFAULT_AUDIODB_API_KEY
        )

    @property
    def enrichment_delay_seconds(self) -> float:
        """Get pause between enriched tracks (command line value over config file)"""
        if self.delay_override is not None:
            return self._check_minimum('--delay', float(self.delay_override), 0)
        return self._number('enrichment', 'delay_seconds', 1.0, float, minimum=0)

    @property
    def fetch_tempo(self) -> bool:
        """Check if TheAudioDB tempo lookup is enabled (Spotify runs only)"""
        return bool(self.get('enrichment', 'fetch_tempo', default=False))

    @property
    def http_timeout(self) -> float:
        """Get outbound request timeout in seconds"""
        return self._number('http', 'timeout', 10.0, float, minimum=0, inclusive=False)

    @property
    def spotify_output_path(self) -> str:
        """Get Spotify report path"""
        return self.get('output', 'spotify_path', default='spotify_playlist_analysis.csv')

    @property
    def deezer_output_path(self) -> str:
        """Get Deezer report path"""
        return self.get('output', 'deezer_path', default='deezer_playlist_analysis.csv')

    @property
    def log_level(self) -> str:
        """Get console log level"""
        return self.get('logging', 'level', default='INFO')

    @property
    def log_file(self) -> Optional[str]:
        """Get optional log file path"""
        return self.get('logging', 'file', default=None)
