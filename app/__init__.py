"""Moodflix: mood-driven movie recommendations with a personal watchlist."""

__version__ = "1.0.0"
