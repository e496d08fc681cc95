import logging

import sqlalchemy as sa
import sqlalchemy_utils as sau

from ..database import Base
from enum import Enum

L = logging.getLogger("songvault.types")


class Premium(Enum):
    free = "free"
    premium = "premium"

    @classmethod
    def parse(cls, value):
        """Map a submitted premium flag to a member, or None when unset.

        Accepts the member values as well as 0/1, false/true and no/yes.
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.premium if value else cls.free
        value = str(value).strip().lower()
        if not value:
            return None
        if value in ("0", "false", "no", cls.free.value):
            return cls.free
        if value in ("1", "true", "yes", cls.premium.value):
            return cls.premium
        raise ValueError(f"premium must be one of: {', '.join(m.value for m in cls)}, 0, 1")

    @classmethod
    def coerce(cls, value):
        """Like `parse`, but an unknown flag is logged and stored as unset."""
        try:
            return cls.parse(value)
        except ValueError:
            L.info(f"Ignoring unknown premium flag {value!r}")
            return None


class Song(Base):
    __tablename__ = "song"
    id = sa.Column(sa.String(64), primary_key=True)
    name = sa.Column(sa.Text, name="song_name", nullable=False)
    style = sa.Column(sa.Text)
    premium = sa.Column(
            sau.ChoiceType(Premium, impl=sa.String()),
            nullable=True)
    image = sa.Column(sa.Text, name="img")
    audio = sa.Column(sa.Text)
    lyric = sa.Column(sa.Text)
    country = sa.Column(sa.Text)
    created = sa.Column(sa.DateTime(timezone=True))

    authors = sa.orm.relationship("Author",
            secondary="ctbh",
            collection_class=set,
            back_populates="songs")

    albums = sa.orm.relationship("Album",
            secondary="ctalbum",
            collection_class=set,
            back_populates="songs")

    def __str__(self):
        return f"{self.name} ({self.id})"
