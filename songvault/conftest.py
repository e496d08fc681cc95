import pytest
import sqlalchemy as sa

from .app import create_app
from .database import Base, Database
from .storage import AssetStore, StorageConfig
from .types import Album, Author


@pytest.fixture
def db(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'songvault.db'}")
    db.create()
    yield db
    db.engine.dispose()


@pytest.fixture
def storage_root(tmp_path):
    return tmp_path / "storage"


@pytest.fixture
def store(storage_root):
    return AssetStore(StorageConfig(root=storage_root))


@pytest.fixture
def app(db, store):
    app = create_app(db=db, store=store)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seeded(db):
    """Author 5 owning album 9."""
    session = db.create_session()
    author = Author(id=5, name="Bob")
    session.add(author)
    session.add(Album(id=9, name="Greatest Hits", owner=author))
    session.commit()
    session.close()


@pytest.fixture
def row_counts(db):
    def count():
        with db.engine.connect() as conn:
            return {table.name: conn.execute(sa.select(sa.func.count()).select_from(table)).scalar()
                    for table in Base.metadata.sorted_tables}
    return count
