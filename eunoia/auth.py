import logging

from flask import Blueprint, jsonify, request, session
from flask_login import LoginManager, current_user, login_required, login_user, logout_user

from .errors import AuthError
from .schemas import Credentials, Registration, parse_body
from .store import get_store, username_taken

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = "sid"

login_manager = LoginManager()
auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


# ===============================
# Session binding
# ===============================
@login_manager.request_loader
def load_user_from_request(req):
    store = get_store()
    user_id = store.sessions.lookup(session.get(SESSION_TOKEN_KEY))
    if user_id is None:
        return None
    return store.users.get(user_id)


@login_manager.unauthorized_handler
def unauthorized():
    raise AuthError()


def _sign_in(user):
    sessions = get_store().sessions
    sessions.destroy(session.get(SESSION_TOKEN_KEY))
    token = sessions.create(user.id)
    session.clear()
    session[SESSION_TOKEN_KEY] = token
    login_user(user)


# ===============================
# Routes
# ===============================
@auth_bp.route("/register", methods=["POST"])
def register():
    data = parse_body(Registration, request.get_json(silent=True))
    store = get_store()
    if store.users.get_by_username(data.username):
        raise username_taken()
    user = store.users.create(data.username, data.password)
    _sign_in(user)
    logger.info("Registered user %s", user.id)
    return jsonify(user.to_dict()), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = parse_body(Credentials, request.get_json(silent=True))
    user = get_store().users.get_by_username(data.username)
    if not user or not user.check_password(data.password):
        logger.info("Failed login for %r", data.username)
        raise AuthError("Invalid username or password")
    _sign_in(user)
    return jsonify(user.to_dict())


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        logger.info("Logged out user %s", current_user.id)
    get_store().sessions.destroy(session.get(SESSION_TOKEN_KEY))
    logout_user()
    session.clear()
    return jsonify({"message": "Logged out"})


@auth_bp.route("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())
