"""
Exceptions raised by the playlist analyzer

Only fatal conditions are modelled here. Enrichment failures are never raised,
they degrade to the "Unknown" sentinel instead.
"""


class PlaylistAnalyzerError(Exception):
    """Base exception for the playlist analyzer"""
    pass


class ConfigurationError(PlaylistAnalyzerError):
    """Raised when required configuration is missing or invalid"""
    pass


class PlaylistFetchError(PlaylistAnalyzerError):
    """Raised when the playlist track listing cannot be fetched"""
    pass


class ReportWriteError(PlaylistAnalyzerError):
    """Raised when the CSV report cannot be written"""
    pass
