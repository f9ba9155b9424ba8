"""
Tests du repository SQLModel du catalogue.

Base SQLite temporaire via les fixtures engine/session/catalog.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from videotheque.core.errors import StorageError
from videotheque.infrastructure.persistence.repositories import SQLModelCatalogRepository


class TestUpsert:
    """Insertion et mise a jour."""

    def test_insert_and_get(self, catalog, make_entry) -> None:
        entry = make_entry(
            "/v/Show.S01E02.mkv",
            title="Show",
            series_title="Show",
            is_series=True,
            season=1,
            episode=2,
            episode_title="Pilote",
            duration="00:42:00",
        )

        stored = catalog.upsert(entry)

        assert stored == entry
        assert catalog.get(entry.id) == entry

    def test_upsert_replaces_metadata(self, catalog, make_entry) -> None:
        entry = make_entry(title="Ancien")
        catalog.upsert(entry)

        entry.title = "Nouveau"
        entry.description = "Synopsis"
        catalog.upsert(entry)

        stored = catalog.get(entry.id)
        assert stored.title == "Nouveau"
        assert stored.description == "Synopsis"
        assert catalog.count() == 1

    def test_upsert_preserves_user_state(self, catalog, make_entry) -> None:
        """Statistiques de lecture, favori et date d'ajout survivent a un upsert."""
        entry = make_entry()
        catalog.upsert(entry)
        catalog.record_play(entry.id, datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc))
        catalog.set_favorite(entry.id, True)

        catalog.upsert(make_entry(title="Rescan", create_time=datetime(2030, 1, 1, tzinfo=timezone.utc)))

        stored = catalog.get(entry.id)
        assert stored.title == "Rescan"
        assert stored.play_count == 1
        assert stored.last_play_time == datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc)
        assert stored.favorite is True
        assert stored.create_time == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestQueries:
    def test_get_unknown(self, catalog) -> None:
        assert catalog.get("inconnu") is None

    def test_get_all_and_count(self, catalog, make_entry) -> None:
        catalog.upsert(make_entry("/v/a.mkv"))
        catalog.upsert(make_entry("/v/b.mkv"))

        assert {e.path for e in catalog.get_all()} == {"/v/a.mkv", "/v/b.mkv"}
        assert catalog.count() == 2

    def test_exists(self, catalog, make_entry) -> None:
        entry = catalog.upsert(make_entry())
        assert catalog.exists(entry.id) is True
        assert catalog.exists("inconnu") is False

    def test_delete_is_idempotent(self, catalog, make_entry) -> None:
        entry = catalog.upsert(make_entry())

        catalog.delete(entry.id)
        catalog.delete(entry.id)

        assert catalog.get(entry.id) is None
        assert catalog.count() == 0


class TestRecordPlay:
    """Statistiques de lecture."""

    def test_increments_count(self, catalog, make_entry) -> None:
        entry = catalog.upsert(make_entry())

        catalog.record_play(entry.id, datetime(2024, 6, 1, tzinfo=timezone.utc))
        updated = catalog.record_play(entry.id, datetime(2024, 6, 2, tzinfo=timezone.utc))

        assert updated.play_count == 2
        assert updated.last_play_time == datetime(2024, 6, 2, tzinfo=timezone.utc)

    def test_last_play_time_never_goes_back(self, catalog, make_entry) -> None:
        entry = catalog.upsert(make_entry())
        catalog.record_play(entry.id, datetime(2024, 6, 2, tzinfo=timezone.utc))

        updated = catalog.record_play(entry.id, datetime(2024, 6, 1, tzinfo=timezone.utc))

        assert updated.play_count == 2
        assert updated.last_play_time == datetime(2024, 6, 2, tzinfo=timezone.utc)

    def test_unknown_id(self, catalog) -> None:
        with pytest.raises(StorageError):
            catalog.record_play("inconnu", datetime.now(timezone.utc))


class TestTimestamps:
    """Les dates sont relues en UTC avec fuseau, quelle que soit la saisie."""

    def test_upsert_and_play_read_back_in_new_session(self, engine, catalog, make_entry) -> None:
        entry = catalog.upsert(make_entry())
        catalog.record_play(entry.id, datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc))

        with Session(engine) as other:
            stored = SQLModelCatalogRepository(other).get(entry.id)

        assert stored.play_count == 1
        assert stored.create_time == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert stored.last_play_time == datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc)
        assert stored.last_play_time.tzinfo is not None

    def test_naive_dates_are_taken_as_utc(self, catalog, make_entry) -> None:
        entry = catalog.upsert(make_entry(create_time=datetime(2024, 1, 1, 12, 0)))

        updated = catalog.record_play(entry.id, datetime(2024, 6, 1, 20, 0))

        assert updated.create_time == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert updated.last_play_time == datetime(2024, 6, 1, 20, 0, tzinfo=timezone.utc)

    def test_other_offsets_are_converted(self, catalog, make_entry) -> None:
        paris = timezone(timedelta(hours=2))
        entry = catalog.upsert(make_entry())
        catalog.record_play(entry.id, datetime(2024, 6, 1, 22, 0, tzinfo=paris))

        # 22h+02 correspond a 20h UTC
        updated = catalog.record_play(entry.id, datetime(2024, 6, 1, 21, 0, tzinfo=timezone.utc))

        assert updated.last_play_time == datetime(2024, 6, 1, 21, 0, tzinfo=timezone.utc)

class TestSetFavorite:
    def test_set_and_unset(self, catalog, make_entry) -> None:
        entry = catalog.upsert(make_entry())

        assert catalog.set_favorite(entry.id, True).favorite is True
        assert catalog.set_favorite(entry.id, False).favorite is False

    def test_unknown_id(self, catalog) -> None:
        assert catalog.set_favorite("inconnu", True) is None


class TestStorageErrors:
    """Les erreurs SQLAlchemy deviennent des StorageError."""

    def test_database_error_is_wrapped(self) -> None:
        session = MagicMock(spec=Session)
        session.get.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
        repository = SQLModelCatalogRepository(session)

        with pytest.raises(StorageError, match="get"):
            repository.get("abc")
        session.rollback.assert_called_once()
