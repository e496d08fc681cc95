from .song import Song, Premium
from .author import Author
from .album import Album
from .links import ctalbum, ctbh
