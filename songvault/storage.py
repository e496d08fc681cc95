import base64
import binascii
import logging
import re
import uuid
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from .errors import ConfigurationError

L = logging.getLogger("songvault.storage")

DATA_URI = re.compile(r'^data:.*?base64,', re.DOTALL)


class SlotKind(Enum):
    image = ".jpg"
    audio = ".mp3"
    lyric = ".txt"

    @property
    def extension(self):
        return self.value


class StorageConfig(NamedTuple):
    root: Path
    image_dir: str = "public/img"
    audio_dir: str = "public/mp3"
    lyric_dir: str = "lyrics"
    album_image_prefix: str = "album_img_"

    def directory(self, kind: SlotKind) -> str:
        return getattr(self, f"{kind.name}_dir").strip('/')


class AssetStore:
    """Saves submitted assets below a fixed root, one directory per slot kind.

    The store itself holds no per-request state; every request works on its
    own `AssetBatch`, so concurrent requests never share anything but the
    filesystem. Generated names carry a uuid4 token, no locking is involved.
    """

    def __init__(self, config: StorageConfig):
        self.config = config
        self.root = Path(config.root)

    def prepare(self):
        for kind in SlotKind:
            path = self.root / self.config.directory(kind)
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                L.exception(f"Cannot create storage directory {path}")
                raise ConfigurationError(f"Storage unavailable: {path}") from e

    def reference(self, path: Path) -> str:
        return '/' + path.relative_to(self.root).as_posix()

    def existing(self, ref) -> Optional[str]:
        """Return `ref` unchanged if it names a file already stored below the root."""
        if not isinstance(ref, str) or not ref.strip('/'):
            return None
        root = self.root.resolve()
        path = (root / ref.lstrip('/')).resolve()
        if root not in path.parents or not path.is_file():
            return None
        return ref

    def batch(self, files=None, claimed=()) -> "AssetBatch":
        return AssetBatch(self, files or {}, claimed)


class AssetBatch:
    def __init__(self, store: AssetStore, files, claimed=()):
        self.store = store
        self.files = files
        # author positions that create an album in this request
        self.claimed = set(claimed)
        self.written = []
        self.consumed = set()

    def _target(self, kind: SlotKind, name: str) -> Path:
        return self.store.root / self.store.config.directory(kind) / name

    def save_upload(self, kind: SlotKind, upload: FileStorage) -> Optional[str]:
        name = secure_filename(Path(upload.filename).name) or f"upload{kind.extension}"
        target = self._target(kind, f"{uuid.uuid4().hex}_{name}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            upload.save(str(target))
        except OSError:
            L.exception(f"Failed to store upload {upload.filename!r} at {target}")
            return None
        self.written.append(target)
        L.info(f"Stored upload {upload.filename!r} as {target}")
        return self.store.reference(target)

    def save_data_uri(self, kind: SlotKind, value: str) -> Optional[str]:
        try:
            data = base64.b64decode(DATA_URI.sub('', value, count=1))
        except (binascii.Error, ValueError) as e:
            L.info(f"Could not decode {kind.name} data uri: {e}")
            return None
        target = self._target(kind, f"{uuid.uuid4().hex}{kind.extension}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError:
            L.exception(f"Failed to write {kind.name} data to {target}")
            return None
        self.written.append(target)
        L.info(f"Stored {len(data)} bytes of {kind.name} data as {target}")
        return self.store.reference(target)

    def resolve(self, kind: SlotKind, upload=None, fallback=None) -> Optional[str]:
        if isinstance(upload, FileStorage) and upload.filename:
            return self.save_upload(kind, upload)
        if isinstance(fallback, str) and DATA_URI.match(fallback):
            return self.save_data_uri(kind, fallback)
        return self.store.existing(fallback)

    def resolve_upload(self, kind: SlotKind, field: str, fallback=None) -> Optional[str]:
        upload = self.files.get(field)
        if upload is not None:
            self.consumed.add(field)
        return self.resolve(kind, upload, fallback)

    def album_image_field(self, position) -> Optional[str]:
        """Pick the part holding the image of the album created for author `position`.

        `<prefix><position>` belongs to that author. Otherwise the first unused
        part with the prefix is taken, skipping numbered parts that belong to
        another claimed position.
        """
        prefix = self.store.config.album_image_prefix
        own = f"{prefix}{position}"
        if own in self.files and own not in self.consumed:
            return own
        for field in self.files.keys():
            if not field.startswith(prefix):
                continue
            suffix = field[len(prefix):]
            if suffix.isdigit() and int(suffix) != position and int(suffix) in self.claimed:
                continue
            if field not in self.consumed:
                upload = self.files.get(field)
                if isinstance(upload, FileStorage) and upload.filename:
                    return field
        return None

    def resolve_album_image(self, position, fallback=None) -> Optional[str]:
        field = self.album_image_field(position)
        if field is None:
            return self.resolve(SlotKind.image, None, fallback)
        return self.resolve_upload(SlotKind.image, field, fallback)

    def discard(self):
        """Remove every file this batch wrote."""
        for path in self.written:
            try:
                path.unlink()
                L.info(f"Removed {path}")
            except FileNotFoundError:
                pass
            except OSError:
                L.exception(f"Could not remove {path}")
        self.written = []
