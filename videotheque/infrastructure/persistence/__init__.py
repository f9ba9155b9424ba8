"""Persistance du catalogue (SQLite via SQLModel)."""
