"""Videotheque - gestionnaire de vidéothèque locale."""

__version__ = "0.1.0"
