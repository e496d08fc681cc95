import json
import logging
import re
from typing import List, NamedTuple, Optional, Union

from ftfy import fix_text

L = logging.getLogger("songvault.normalize")

SONG_NAME_KEYS = ('song_name', 'songName')
COUNTRY_KEYS = ('country',)
PREMIUM_KEYS = ('premium',)
STYLE_KEYS = ('style',)
IMAGE_KEYS = ('image',)
AUDIO_KEYS = ('audio', 'audioFile')
LYRIC_KEYS = ('lyricFile', 'lyric', 'lyric_file')
AUTHORS_KEYS = ('authorsArray', 'authors', 'authorArray', 'author')

FALSE_STRINGS = ('', '0', 'false', 'no', 'off')

BRACKETS = re.compile(r'\[([^\]]*)\]')


class AlbumRef(NamedTuple):
    id: int


class NewAlbum(NamedTuple):
    name: str
    image: Optional[str] = None
    premium: Optional[str] = None


class AuthorReference(NamedTuple):
    position: int
    id: int
    album: Optional[AlbumRef] = None
    new_album: Optional[NewAlbum] = None


class NewAuthor(NamedTuple):
    position: int
    name: str
    album: Optional[AlbumRef] = None
    new_album: Optional[NewAlbum] = None


class NamedAuthor(NamedTuple):
    position: int
    name: str


AuthorInput = Union[AuthorReference, NewAuthor, NamedAuthor]


class SongRequest(NamedTuple):
    song_name: str
    country: str
    premium: str
    style: str
    image_field: Optional[str]
    audio_field: Optional[str]
    lyric_field: Optional[str]
    authors: List[AuthorInput]


def clean(value, default=''):
    if value is None:
        return default
    if not isinstance(value, str):
        return str(value).strip()
    value = value.replace('\x00', '')
    try:
        value = fix_text(value, normalization='NFC', uncurl_quotes=False, fix_character_width=False)
    except Exception as e:
        L.info(f"Could not repair text {value!r}: {e}")
    return value.strip()


def getv(payload, keys, default=None):
    for k in keys:
        if k in payload:
            return payload[k]
    return default


def first(value):
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_STRINGS
    return bool(value)


def as_id(value):
    """Positive integer id from an int or a digit string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
        return value if value > 0 else None
    return None


def split_key(key):
    """`a[0][b]` -> ('a', ['0', 'b']). Keys that are not bracketed come back whole."""
    base, sep, rest = key.partition('[')
    if not sep or not base:
        return key, []
    parts = BRACKETS.findall(sep + rest)
    if ''.join(f'[{p}]' for p in parts) != sep + rest:
        return key, []
    return base, parts


def listify(node):
    """Turn dicts keyed only by digit strings into lists ordered by index, recursively."""
    if not isinstance(node, dict):
        return node
    node = {k: listify(v) for k, v in node.items()}
    if node and all(k.isdigit() for k in node):
        return [node[k] for k in sorted(node, key=int)]
    return node


def read_payload(request):
    """Turn a flask request into a plain dict of submitted fields.

    Bracketed form keys nest: `authorsArray[0][author_name]` builds a list of
    dicts and `authorsArray[]` a list of strings.
    """
    if request.is_json:
        decoded = request.get_json(silent=True)
        return decoded if isinstance(decoded, dict) else {}
    payload = {}
    nested = set()
    for key in request.form.keys():
        values = request.form.getlist(key)
        value = values if len(values) > 1 else values[0]
        base, parts = split_key(key)
        if not parts:
            payload[key] = value
            continue
        if parts == ['']:
            payload[base] = values
            continue
        if '' in parts:
            L.info(f"Ignoring form field {key!r}")
            continue
        node = payload.setdefault(base, {})
        nested.add(base)
        for part in parts[:-1]:
            if not isinstance(node, dict):
                break
            node = node.setdefault(part, {})
        if isinstance(node, dict):
            node[parts[-1]] = value
        else:
            L.info(f"Ignoring form field {key!r}, {base!r} is not a mapping")
    for base in nested:
        payload[base] = listify(payload[base])
    return payload


def decode_authors(raw):
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            L.info("Ignoring undecodable authors value")
            return []
        return raw if isinstance(raw, list) else []
    if isinstance(raw, (list, tuple)):
        if len(raw) == 1 and isinstance(raw[0], str) and raw[0].strip().startswith('['):
            return decode_authors(raw[0])
        return list(raw)
    return []


def parse_album(raw) -> Optional[AlbumRef]:
    if not isinstance(raw, dict):
        return None
    album_id = as_id(getv(raw, ('id_album', 'idAlbum')))
    return AlbumRef(album_id) if album_id else None


def parse_new_album(raw) -> Optional[NewAlbum]:
    if not isinstance(raw, dict):
        return None
    name = clean(raw.get('name'))
    if not name:
        return None
    image = first(raw.get('image'))
    return NewAlbum(
        name=name,
        image=image if isinstance(image, str) else None,
        premium=raw.get('premium'),
    )


def parse_author(position, raw) -> Optional[AuthorInput]:
    if isinstance(raw, str):
        return NewAuthor(position, clean(raw))
    if not isinstance(raw, dict):
        return None

    author_id = as_id(getv(raw, ('id_author', 'idAuthor')))
    name = clean(getv(raw, ('author_name', 'authorName')))
    album = parse_album(getv(raw, ('album', 'albumObj')))
    new_album = parse_new_album(getv(raw, ('new_album', 'newAlbum')))

    if author_id:
        return AuthorReference(position, author_id, album, new_album)
    if as_bool(getv(raw, ('is_new_author', 'isNewAuthor'), False)):
        return NewAuthor(position, name, album, new_album)
    if name:
        return NamedAuthor(position, name)
    return None


def normalize(payload) -> SongRequest:
    authors = []
    for position, raw in enumerate(decode_authors(getv(payload, AUTHORS_KEYS, []))):
        author = parse_author(position, raw)
        if author is None:
            L.debug(f"Skipping author entry {position}: {raw!r}")
            continue
        authors.append(author)

    return SongRequest(
        song_name=clean(first(getv(payload, SONG_NAME_KEYS))),
        country=clean(first(getv(payload, COUNTRY_KEYS))),
        premium=clean(first(getv(payload, PREMIUM_KEYS))),
        style=clean(first(getv(payload, STYLE_KEYS))),
        image_field=first(getv(payload, IMAGE_KEYS)),
        audio_field=first(getv(payload, AUDIO_KEYS)),
        lyric_field=first(getv(payload, LYRIC_KEYS)),
        authors=authors,
    )
