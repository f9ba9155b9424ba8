"""Adaptateurs pour les services externes (TMDB, posters)."""
