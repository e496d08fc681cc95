import sqlalchemy as sa
from ..database import Base

class Author(Base):
    __tablename__ = "author"
    id = sa.Column(sa.Integer, primary_key=True, name="id_author")
    name = sa.Column(sa.Text, nullable=False, index=True)
    albums = sa.orm.relationship("Album",
            collection_class=set,
            back_populates="owner")
    songs = sa.orm.relationship("Song",
            secondary="ctbh",
            collection_class=set,
            back_populates="authors")

    def __str__(self):
        return str(self.name)
