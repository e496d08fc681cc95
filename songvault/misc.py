from contextlib import contextmanager

import json
import flask
from functools import wraps

JSON_HEADERS = {
    "Content-Type": "application/json; charset=utf-8",
}


def json_api(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        ret = fn(*args, **kwargs)
        status = None
        if isinstance(ret, flask.Response):
            return ret
        if isinstance(ret, tuple):
            status = ret[1]
            ret = ret[0]
        return flask.Response(
            json.dumps(ret, ensure_ascii=False, separators=(',', ':')),
            status=status,
            headers=JSON_HEADERS,
        )

    return wrapper


@contextmanager
def db_session(db):
    """
    Yields a session wrapped in one transaction: committed when the block
    finishes, rolled back when anything is raised inside it.
    """
    session = db.create_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
