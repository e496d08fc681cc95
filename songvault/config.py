import configparser
import logging
import os
from pathlib import Path
from typing import NamedTuple

from .errors import ConfigurationError
from .storage import StorageConfig

fmt = logging.Formatter("[%(asctime)s] %(levelname)s: %(filename)s:%(funcName)s(%(lineno)s): %(message)s")
logger = logging.getLogger("songvault")
logger.setLevel(logging.DEBUG)

# stderr logging
sh = logging.StreamHandler()
sh.setLevel(logging.DEBUG)
sh.setFormatter(fmt)
logger.addHandler(sh)

DEFAULT_PATHS = ['/etc/songvault/api.conf', 'songvault.conf']


class Settings(NamedTuple):
    database_url: str
    storage: StorageConfig
    host: str
    port: int


def _database_url(config):
    if config.has_option('database', 'url'):
        return config['database']['url']
    if not config.has_section('postgres'):
        raise ConfigurationError("Database connection missing")
    cfg_pg: configparser.SectionProxy = config['postgres']
    try:
        return (f"postgresql://{cfg_pg['user']}:{cfg_pg['password']}"
                f"@{cfg_pg['host']}:{cfg_pg.getint('port', 5432)}/{cfg_pg['database']}")
    except KeyError as e:
        raise ConfigurationError(f"postgres option {e} missing") from e


def load(paths=None) -> Settings:
    if paths is None:
        paths = DEFAULT_PATHS
        if os.environ.get('SONGVAULT_CONFIG'):
            paths = paths + [os.environ['SONGVAULT_CONFIG']]
    config = configparser.ConfigParser()
    read = config.read(paths)
    logger.debug(f"Read configuration from {read}")

    cfg_storage = config['storage'] if config.has_section('storage') else {}
    defaults = StorageConfig(root=Path('.'))
    storage = StorageConfig(
        root=Path(cfg_storage.get('root', str(defaults.root))),
        image_dir=cfg_storage.get('image', defaults.image_dir),
        audio_dir=cfg_storage.get('audio', defaults.audio_dir),
        lyric_dir=cfg_storage.get('lyric', defaults.lyric_dir),
        album_image_prefix=cfg_storage.get('album-image-prefix', defaults.album_image_prefix),
    )

    cfg_server = config['server'] if config.has_section('server') else {}
    return Settings(
        database_url=_database_url(config),
        storage=storage,
        host=cfg_server.get('host', ''),
        port=int(cfg_server.get('port', 5000)),
    )
