import sqlalchemy as sa

from ..database import Base

# song <-> album
ctalbum = sa.Table("ctalbum", Base.metadata,
    sa.Column("id_album", sa.Integer, sa.ForeignKey("album.id_album"), nullable=False, index=True, primary_key=True),
    sa.Column("id_song", sa.String(64), sa.ForeignKey("song.id"), nullable=False, index=True, primary_key=True)
)

# song <-> author
ctbh = sa.Table("ctbh", Base.metadata,
    sa.Column("id_author", sa.Integer, sa.ForeignKey("author.id_author"), nullable=False, index=True, primary_key=True),
    sa.Column("id_song", sa.String(64), sa.ForeignKey("song.id"), nullable=False, index=True, primary_key=True)
)
