# -*- coding: utf-8 -*-
"""
Playlist Genre Analyzer - Main Application
Exports a Spotify or Deezer playlist as a CSV report sorted by genre
"""
import sys

from playlist_analyzer.cli import main

if __name__ == "__main__":
    sys.exit(main())
