import sqlalchemy as sa
import sqlalchemy_utils as sau

from ..database import Base
from .song import Premium

class Album(Base):
    __tablename__ = "album"
    id = sa.Column(sa.Integer, primary_key=True, name="id_album")
    name = sa.Column(sa.Text, nullable=False)
    image = sa.Column(sa.Text, name="img")
    premium = sa.Column(
            sau.ChoiceType(Premium, impl=sa.String()),
            nullable=True)

    author_id = sa.Column(sa.Integer,
            sa.ForeignKey("author.id_author"),
            name="id_author",
            nullable=False)
    owner = sa.orm.relationship("Author",
            back_populates="albums")

    songs = sa.orm.relationship("Song",
            secondary="ctalbum",
            collection_class=set,
            back_populates="albums")

    def __str__(self):
        return str(self.name)
