"""Entités du domaine."""

from videotheque.core.entities.video import VideoEntry

__all__ = ["VideoEntry"]
