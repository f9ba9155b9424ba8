"""
Implementation SQLModel du repository du catalogue.

Implemente ICatalogRepository. Toute erreur SQLAlchemy est convertie en
StorageError apres rollback de la session.
"""

from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from videotheque.core.entities.video import VideoEntry
from videotheque.core.errors import StorageError
from videotheque.core.ports.repositories import ICatalogRepository
from videotheque.infrastructure.persistence.models import VideoEntryModel
from videotheque.utils.helpers import as_utc

# Champs conserves lors d'un upsert sur une ligne existante
_PRESERVED_FIELDS = ("play_count", "last_play_time", "favorite", "create_time")

_ENTRY_FIELDS = (
    "path",
    "original_title",
    "title",
    "duration",
    "thumbnail",
    "category",
    "tags",
    "description",
    "create_time",
    "last_play_time",
    "play_count",
    "favorite",
    "is_series",
    "series_title",
    "season",
    "episode",
    "episode_title",
    "episode_overview",
)


class SQLModelCatalogRepository(ICatalogRepository):
    """
    Repository SQLModel du catalogue.

    Conversion bidirectionnelle entre VideoEntry (domaine) et
    VideoEntryModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: VideoEntryModel) -> VideoEntry:
        return VideoEntry(
            id=model.id,
            **{name: getattr(model, name) for name in _ENTRY_FIELDS},
        )

    def _to_model(self, entity: VideoEntry) -> VideoEntryModel:
        return VideoEntryModel(
            id=entity.id,
            **{name: getattr(entity, name) for name in _ENTRY_FIELDS},
        )

    def _fail(self, operation: str, exc: SQLAlchemyError) -> StorageError:
        """Rollback puis construit la StorageError a lever."""
        try:
            self._session.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback impossible", operation=operation)
        logger.error("Erreur de stockage", operation=operation, error=str(exc))
        return StorageError(f"Catalogue indisponible ({operation}) : {exc}")

    def upsert(self, entry: VideoEntry) -> VideoEntry:
        try:
            existing = self._session.get(VideoEntryModel, entry.id)
            if existing is None:
                model = self._to_model(entry)
                self._session.add(model)
            else:
                model = existing
                for name in _ENTRY_FIELDS:
                    if name not in _PRESERVED_FIELDS:
                        setattr(model, name, getattr(entry, name))
                self._session.add(model)
            self._session.commit()
            self._session.refresh(model)
            return self._to_entity(model)
        except SQLAlchemyError as exc:
            raise self._fail("upsert", exc) from exc

    def get(self, video_id: str) -> Optional[VideoEntry]:
        try:
            model = self._session.get(VideoEntryModel, video_id)
        except SQLAlchemyError as exc:
            raise self._fail("get", exc) from exc
        return self._to_entity(model) if model else None

    def get_all(self) -> list[VideoEntry]:
        try:
            models = self._session.exec(select(VideoEntryModel)).all()
        except SQLAlchemyError as exc:
            raise self._fail("get_all", exc) from exc
        return [self._to_entity(m) for m in models]

    def delete(self, video_id: str) -> None:
        try:
            model = self._session.get(VideoEntryModel, video_id)
            if model is None:
                return
            self._session.delete(model)
            self._session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete", exc) from exc

    def exists(self, video_id: str) -> bool:
        try:
            statement = select(VideoEntryModel.id).where(VideoEntryModel.id == video_id)
            return self._session.exec(statement).first() is not None
        except SQLAlchemyError as exc:
            raise self._fail("exists", exc) from exc

    def count(self) -> int:
        try:
            return self._session.exec(select(func.count()).select_from(VideoEntryModel)).one()
        except SQLAlchemyError as exc:
            raise self._fail("count", exc) from exc

    def record_play(self, video_id: str, played_at: datetime) -> VideoEntry:
        """
        Incremente play_count et avance last_play_time.

        last_play_time ne recule jamais, meme si l'horloge l'a fait.
        """
        try:
            model = self._session.get(VideoEntryModel, video_id)
            if model is None:
                raise StorageError(f"Video inconnue du catalogue : {video_id}")
            model.play_count += 1
            played_at = as_utc(played_at)
            previous = as_utc(model.last_play_time)
            if previous is None or played_at > previous:
                model.last_play_time = played_at
            self._session.add(model)
            self._session.commit()
            self._session.refresh(model)
            return self._to_entity(model)
        except SQLAlchemyError as exc:
            raise self._fail("record_play", exc) from exc

    def set_favorite(self, video_id: str, favorite: bool) -> Optional[VideoEntry]:
        try:
            model = self._session.get(VideoEntryModel, video_id)
            if model is None:
                return None
            model.favorite = favorite
            self._session.add(model)
            self._session.commit()
            self._session.refresh(model)
            return self._to_entity(model)
        except SQLAlchemyError as exc:
            raise self._fail("set_favorite", exc) from exc
