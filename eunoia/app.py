# ===============================
# app.py - Eunoia journal API (Flask app factory)
# ===============================

import logging
import time

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, InternalServerError

from .auth import auth_bp, login_manager
from .cli import register_commands
from .config import Config
from .entries import entries_bp
from .errors import JournalError, StorageError
from .models import db
from .store import Store

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    _configure_logging(app)

    store = Store(app)
    login_manager.init_app(app)
    if app.config["CORS_ORIGINS"]:
        CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)

    app.register_blueprint(auth_bp)
    app.register_blueprint(entries_bp)
    _register_error_handlers(app)
    _register_request_logging(app)
    register_commands(app)

    @app.route("/api/health")
    def health():
        return jsonify({"ok": True, "env": app.config["ENV_NAME"]})

    store.open()
    return app


# ===============================
# Logging
# ===============================
def _configure_logging(app):
    level = app.config["LOG_LEVEL"]
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s [%(name)s] %(levelname)s %(message)s")
    logging.getLogger("eunoia").setLevel(level)


def _register_request_logging(app):

    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if request.path.startswith("/api"):
            started = g.get("request_started", time.perf_counter())
            elapsed = (time.perf_counter() - started) * 1000
            logger.info("%s %s %s in %dms", request.method, request.path, response.status_code, elapsed)
        return response


# ===============================
# Error handling
# ===============================
def _register_error_handlers(app):

    @app.errorhandler(JournalError)
    def handle_journal_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(exc):
        db.session.rollback()
        logger.exception("Unhandled database error")
        err = StorageError()
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        if not request.path.startswith("/api"):
            return exc
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        if not request.path.startswith("/api"):
            return InternalServerError(original_exception=exc)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500
