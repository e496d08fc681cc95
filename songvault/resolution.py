import logging
from typing import Optional

from .errors import ResolutionError
from .normalize import AuthorInput, AuthorReference, NamedAuthor, NewAuthor
from .storage import AssetBatch
from .types import Album, Author, Premium, Song

L = logging.getLogger("songvault.resolution")


class Resolver:
    """Turns normalized author entries into author/album rows linked to `song`.

    Runs inside the caller's transaction; every failure is raised as
    `ResolutionError` and the caller rolls back.
    """

    def __init__(self, session, song: Song, assets: AssetBatch):
        self.session = session
        self.song = song
        self.assets = assets

    def resolve(self, entry: AuthorInput) -> Optional[int]:
        if isinstance(entry, AuthorReference):
            author = self.session.query(Author).filter_by(id=entry.id).one_or_none()
            if not author:
                raise ResolutionError(f"Author {entry.id} does not exist")
            self.attach_albums(author, entry)
        elif isinstance(entry, NewAuthor):
            if not entry.name:
                raise ResolutionError("New author missing name")
            author = Author(name=entry.name)
            self.session.add(author)
            self.session.flush()
            L.debug(f"Created author {author} ({author.id})")
            self.attach_albums(author, entry)
        elif isinstance(entry, NamedAuthor):
            author = self.session.query(Author).filter_by(name=entry.name).first()
            if not author:
                L.info(f"No author named {entry.name!r}, skipping")
                return None
        else:
            return None

        self.song.authors.add(author)
        return author.id

    def attach_albums(self, author, entry):
        if entry.album:
            album = self.session.query(Album).filter_by(id=entry.album.id).one_or_none()
            if not album:
                raise ResolutionError(f"Album {entry.album.id} does not exist")
            self.song.albums.add(album)

        if entry.new_album:
            album = Album(
                name=entry.new_album.name,
                image=self.assets.resolve_album_image(entry.position, entry.new_album.image),
                premium=Premium.coerce(entry.new_album.premium),
                owner=author,
            )
            self.session.add(album)
            self.song.albums.add(album)
            L.debug(f"Created album {album} for author {author}")
