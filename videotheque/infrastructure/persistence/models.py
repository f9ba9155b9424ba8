"""
Modeles SQLModel pour la base de donnees Videotheque.

Ces modeles representent les tables SQLite. Ils sont distincts des entites
de domaine (dataclass dans core/entities/) selon l'architecture hexagonale.

Tables:
- videos: catalogue des videos, cle = id derive du chemin canonique
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel

from videotheque.utils.helpers import as_utc, utc_now


class UTCDateTime(TypeDecorator):
    """
    Date stockee en UTC sans fuseau, relue en UTC avec fuseau.

    SQLite ne conserve pas le fuseau : la conversion se fait ici pour que
    le domaine ne manipule que des dates avec fuseau.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return as_utc(value).replace(tzinfo=None)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        return as_utc(value)


class VideoEntryModel(SQLModel, table=True):
    """
    Ligne du catalogue.

    path est unique : un chemin donne une seule ligne.
    """

    __tablename__ = "videos"

    id: str = Field(primary_key=True)
    path: str = Field(index=True, unique=True)
    original_title: str = ""
    title: str = Field(default="", index=True)
    duration: str = ""
    thumbnail: str = ""
    category: str = ""
    tags: str = ""
    description: str = ""
    create_time: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    last_play_time: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    play_count: int = Field(default=0)
    favorite: bool = Field(default=False)
    is_series: bool = Field(default=False)
    series_title: str = ""
    season: int = Field(default=0)
    episode: int = Field(default=0)
    episode_title: str = ""
    episode_overview: str = ""
