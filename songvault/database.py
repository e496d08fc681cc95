from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


@event.listens_for(Base, 'before_insert', propagate=True)
def before_insert(mapper, connection, target):
    if hasattr(target, 'created'):
        target.created = datetime.now(timezone.utc)


class Database:
    def __init__(self, connection_string):
        self.engine = create_engine(connection_string)
        self.sessionmaker = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine)

    def create_session(self) -> Session:
        return self.sessionmaker()

    def create(self):
        # importing the models registers their tables on Base.metadata
        from . import types  # noqa: F401
        Base.metadata.create_all(bind=self.engine)
