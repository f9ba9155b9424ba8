"""
Configuration de la base de donnees SQLite pour Videotheque.

Ce module fournit :
- init_db : ressource (generateur) creant l'engine unique du processus,
  les tables et les migrations, puis liberant l'engine a l'arret
- open_session : ressource de session partagee, liee a cet engine

L'engine est ouvert une seule fois au demarrage ; tous les repositories
partagent ce handle.
"""

from collections.abc import Generator
from pathlib import Path

from loguru import logger
from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from videotheque.core.errors import StorageError

# Colonnes ajoutees apres la premiere version du schema : (nom, DDL)
_VIDEO_COLUMN_MIGRATIONS = (
    ("series_title", "VARCHAR NOT NULL DEFAULT ''"),
    ("episode_overview", "VARCHAR NOT NULL DEFAULT ''"),
)


def _create_engine(database_url: str) -> Engine:
    # Creer le repertoire parent si l'URL est un fichier SQLite
    if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
        db_path = Path(database_url.replace("sqlite:///", "", 1))
        db_path.parent.mkdir(exist_ok=True, parents=True)

    return create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def init_db(database_url: str) -> Generator[Engine, None, None]:
    """
    Ressource d'initialisation de la base.

    Cree l'engine, les tables et applique les migrations, puis libere
    l'engine a la fermeture de la ressource (shutdown du container).

    Raises:
        StorageError: Base inaccessible ou corrompue
    """
    # Import des modeles pour enregistrer leurs metadonnees
    from videotheque.infrastructure.persistence import models  # noqa: F401

    try:
        engine = _create_engine(database_url)
        SQLModel.metadata.create_all(engine)
        _run_migrations(engine)
    except (SQLAlchemyError, OSError) as exc:
        raise StorageError(f"Initialisation du catalogue impossible : {exc}") from exc

    logger.debug("Catalogue ouvert", database_url=database_url)
    try:
        yield engine
    finally:
        engine.dispose()
        logger.debug("Catalogue ferme")


def _run_migrations(engine: Engine) -> None:
    """
    Ajoute les colonnes manquantes dans la table videos.

    SQLModel.metadata.create_all() ne modifie pas les tables existantes.
    """
    with engine.connect() as conn:
        result = conn.execute(text("PRAGMA table_info(videos)"))
        columns = {row[1] for row in result.fetchall()}

        for name, ddl in _VIDEO_COLUMN_MIGRATIONS:
            if name not in columns:
                conn.execute(text(f"ALTER TABLE videos ADD COLUMN {name} {ddl}"))
                logger.info("Migration du catalogue", column=name)
        conn.commit()


def open_session(engine: Engine) -> Generator[Session, None, None]:
    """Ressource de session partagee, fermee a l'arret du container."""
    with Session(engine) as session:
        yield session
