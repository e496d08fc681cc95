import logging
import uuid
from typing import List, NamedTuple, Union

from sqlalchemy.exc import SQLAlchemyError

from .errors import (ConfigurationError, IngestError, PersistenceError,
                     ResolutionError, ValidationError)
from .misc import db_session
from .normalize import SongRequest
from .resolution import Resolver
from .storage import AssetBatch, AssetStore, SlotKind
from .types import Premium, Song

L = logging.getLogger("songvault.ingest")

# multipart part names of the song's own assets
IMAGE_PART = 'image'
AUDIO_PART = 'audio'
LYRIC_PART = 'lyricFile'


class Saved(NamedTuple):
    song_id: str
    saved: dict
    author_ids: List[int]
    status = 200

    def json(self):
        return dict(
            success=True,
            message="Song added",
            song_id=self.song_id,
            saved=self.saved,
            author_ids=self.author_ids,
        )


def generate_song_id():
    return f"song_{uuid.uuid4().hex}"


def resolve_assets(batch: AssetBatch, request: SongRequest) -> dict:
    return dict(
        image=batch.resolve_upload(SlotKind.image, IMAGE_PART, request.image_field),
        audio=batch.resolve_upload(SlotKind.audio, AUDIO_PART, request.audio_field),
        lyric=batch.resolve_upload(SlotKind.lyric, LYRIC_PART, request.lyric_field),
    )


def claimed_album_images(request: SongRequest) -> set:
    """Positions of the author entries that create an album."""
    return {entry.position for entry in request.authors
            if getattr(entry, 'new_album', None)}


def validate(request: SongRequest, saved: dict):
    errors = []
    if not request.song_name:
        errors.append("song_name required")
    if not saved['audio'] and not request.audio_field:
        errors.append("audio required (file or filename or base64)")
    if errors:
        raise ValidationError(errors)


def persist(db, batch: AssetBatch, request: SongRequest, saved: dict) -> Saved:
    song_id = generate_song_id()
    author_ids = []
    with db_session(db) as session:
        song = Song(
            id=song_id,
            name=request.song_name,
            style=request.style,
            premium=Premium.coerce(request.premium),
            country=request.country,
            image=saved['image'],
            audio=saved['audio'],
            lyric=saved['lyric'],
        )
        session.add(song)
        resolver = Resolver(session, song, batch)
        for entry in request.authors:
            author_id = resolver.resolve(entry)
            if author_id is not None and author_id not in author_ids:
                author_ids.append(author_id)
    L.info(f"Added song {song} with authors {author_ids}")
    return Saved(song_id, saved, author_ids)


def add_song(db, store: AssetStore, request: SongRequest, files=None) -> Union[Saved, IngestError]:
    """Store the assets of `request` and write its rows in one transaction.

    Failures are returned rather than raised. Files written for the request
    are removed again whenever no song row ends up committed.
    """
    if db is None:
        return ConfigurationError("Database connection missing")
    if store is None:
        return ConfigurationError("Storage not configured")
    try:
        store.prepare()
    except ConfigurationError as e:
        return e

    batch = store.batch(files, claimed_album_images(request))
    try:
        saved = resolve_assets(batch, request)
        validate(request, saved)
        return persist(db, batch, request, saved)
    except ValidationError as e:
        L.info(f"Rejected song {request.song_name!r}: {e.errors}")
        batch.discard()
        return e
    except ResolutionError as e:
        L.info(f"Rolled back song {request.song_name!r}: {e}")
        batch.discard()
        return e
    except SQLAlchemyError:
        L.exception(f"Rolled back song {request.song_name!r}")
        batch.discard()
        return PersistenceError()
    except BaseException:
        batch.discard()
        raise
