"""
Playlist Genre Analyzer - Spotify/Deezer playlist to sorted genre CSV report
"""

__version__ = "1.0.0"
