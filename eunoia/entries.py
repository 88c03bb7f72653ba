from datetime import date, datetime

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from . import analytics
from .errors import AuthorizationError, NotFoundError, ValidationError
from .schemas import EntryCreate, EntryPatch, parse_body
from .store import get_store

entries_bp = Blueprint("entries", __name__, url_prefix="/api")


def _query_date(name, fmt):
    raw = request.args.get(name)
    if raw is None:
        return None
    try:
        return datetime.strptime(raw, fmt).date()
    except ValueError:
        raise ValidationError(
            f"Invalid {name}", [{"field": name, "message": f"expected format {fmt}"}]
        ) from None


def _owned_entry(entry_id):
    entry = get_store().entries.get(entry_id)
    if entry.user_id != current_user.id:
        raise AuthorizationError("Entry belongs to another user")
    return entry


# ===============================
# Journal entries
# ===============================
@entries_bp.route("/entries", methods=["GET"])
@login_required
def list_entries():
    month = _query_date("month", "%Y-%m")
    on = _query_date("date", "%Y-%m-%d")
    entries = get_store().entries.list_for_user(
        current_user.id,
        month=(month.year, month.month) if month else None,
        on=on,
    )
    return jsonify([e.to_dict() for e in entries])


@entries_bp.route("/entries/on/<day>", methods=["GET"])
@login_required
def get_entry_on(day):
    try:
        on = datetime.strptime(day, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(
            "Invalid date", [{"field": "date", "message": "expected format %Y-%m-%d"}]
        ) from None
    entry = get_store().entries.get_by_date(current_user.id, on)
    if entry is None:
        raise NotFoundError("No entry for that date")
    return jsonify(entry.to_dict())


@entries_bp.route("/entries/<entry_id>", methods=["GET"])
@login_required
def get_entry(entry_id):
    return jsonify(_owned_entry(entry_id).to_dict())


@entries_bp.route("/entries", methods=["POST"])
@login_required
def create_entry():
    data = parse_body(EntryCreate, request.get_json(silent=True))
    entry = get_store().entries.create(current_user.id, data.fields())
    return jsonify(entry.to_dict()), 201


@entries_bp.route("/entries/<entry_id>", methods=["PATCH"])
@login_required
def update_entry(entry_id):
    entry = _owned_entry(entry_id)
    patch = parse_body(EntryPatch, request.get_json(silent=True))
    entry = get_store().entries.update(entry.id, patch.changes())
    return jsonify(entry.to_dict())


@entries_bp.route("/entries/<entry_id>", methods=["DELETE"])
@login_required
def delete_entry(entry_id):
    entry = _owned_entry(entry_id)
    get_store().entries.delete(entry.id)
    return "", 204


# ===============================
# Insights
# ===============================
@entries_bp.route("/analytics", methods=["GET"])
@login_required
def insights():
    # the client's local date; the server's clock may sit in another timezone
    today = _query_date("today", "%Y-%m-%d") or date.today()
    entries = get_store().entries.list_for_user(current_user.id)
    return jsonify(analytics.summarize(entries, today))
