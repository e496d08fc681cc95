import logging

import flask
from werkzeug.exceptions import HTTPException

from . import ingest
from .database import Database
from .misc import json_api
from .normalize import normalize, read_payload
from .storage import AssetStore

L = logging.getLogger("songvault.app")

api = flask.Blueprint("songs", __name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Requested-With",
}


@api.after_request
def cors(response):
    response.headers.update(CORS_HEADERS)
    return response


@api.route("/api/songs", methods=["POST"])
@api.route("/add_song.php", methods=["POST"])
@json_api
def add_song():
    request = normalize(read_payload(flask.request))
    result = ingest.add_song(
        flask.current_app.config.get("DATABASE"),
        flask.current_app.config["ASSET_STORE"],
        request,
        flask.request.files,
    )
    return result.json(), result.status


def create_app(settings=None, db=None, store=None) -> flask.Flask:
    app = flask.Flask(__name__)
    if settings is not None:
        db = db or Database(settings.database_url)
        store = store or AssetStore(settings.storage)
    app.config["DATABASE"] = db
    app.config["ASSET_STORE"] = store
    app.register_blueprint(api)

    @app.before_request
    def request_logger():
        L.info("Request: {}".format(flask.request.path))

    @app.errorhandler(Exception)
    def internal_error(e):
        if isinstance(e, HTTPException):
            return e
        L.exception("Unhandled error")
        return internal_error_response()

    return app


@json_api
def internal_error_response():
    return dict(success=False, message="Internal server error"), 500
