"""Utility helpers: logging setup and the verbose search trace."""
