import logging
import secrets
from datetime import timedelta

from flask import current_app
from sqlalchemy import extract
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .errors import NotFoundError, StorageError, ValidationError
from .models import db, User, JournalEntry, UserSession, utcnow

logger = logging.getLogger(__name__)


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Database commit failed")
        raise StorageError() from exc


# ===============================
# Users
# ===============================
def username_taken():
    return ValidationError(
        "Username already taken",
        [{"field": "username", "message": "Username already taken"}],
    )


class UserStore:

    def create(self, username: str, password: str) -> User:
        user = User(username=username)
        user.set_password(password)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as exc:
            # a concurrent registration won the unique index
            db.session.rollback()
            raise username_taken() from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.exception("Database commit failed")
            raise StorageError() from exc
        return user

    def get(self, user_id):
        return db.session.get(User, user_id)

    def get_by_username(self, username: str):
        return User.query.filter_by(username=username).first()


# ===============================
# Journal entries
# ===============================
class EntryStore:

    def create(self, user_id, fields: dict) -> JournalEntry:
        if db.session.get(User, user_id) is None:
            raise NotFoundError("User not found")
        entry = JournalEntry(user_id=user_id, **fields)
        if entry.target_met is None:
            entry.target_met = False
        db.session.add(entry)
        _commit()
        return entry

    def get(self, entry_id) -> JournalEntry:
        entry = db.session.get(JournalEntry, entry_id)
        if entry is None:
            raise NotFoundError("Entry not found")
        return entry

    def list_for_user(self, user_id, month=None, on=None):
        """Entries owned by ``user_id``, newest date first.

        ``month`` is a ``(year, month)`` pair for the calendar view and ``on``
        a single date for the day editor; both may be combined.
        """
        q = JournalEntry.query.filter(JournalEntry.user_id == user_id)
        if month is not None:
            year, mon = month
            q = q.filter(
                extract("year", JournalEntry.date) == year,
                extract("month", JournalEntry.date) == mon,
            )
        if on is not None:
            q = q.filter(JournalEntry.date == on)
        return q.order_by(JournalEntry.date.desc(), JournalEntry.created_at.desc()).all()

    def get_by_date(self, user_id, on):
        entries = self.list_for_user(user_id, on=on)
        return entries[0] if entries else None

    def existing_dates(self, user_id):
        rows = db.session.query(JournalEntry.date).filter(JournalEntry.user_id == user_id).distinct()
        return {row[0] for row in rows}

    def update(self, entry_id, changes: dict) -> JournalEntry:
        entry = self.get(entry_id)
        for field, value in changes.items():
            setattr(entry, field, value)
        _commit()
        return entry

    def delete(self, entry_id):
        entry = self.get(entry_id)
        db.session.delete(entry)
        _commit()

    def add_many(self, user_id, rows):
        """Bulk insert used by the importer; one commit for the batch."""
        for fields in rows:
            db.session.add(JournalEntry(user_id=user_id, target_met=False, **fields))
        _commit()
        return len(rows)


# ===============================
# Sessions
# ===============================
class SessionStore:

    def __init__(self, ttl: timedelta):
        self.ttl = ttl

    def create(self, user_id) -> str:
        token = secrets.token_urlsafe(32)
        now = utcnow()
        db.session.add(UserSession(token=token, user_id=user_id, created_at=now, expires_at=now + self.ttl))
        _commit()
        return token

    def lookup(self, token):
        if not token:
            return None
        row = db.session.get(UserSession, token)
        if row is None:
            return None
        if row.expires_at <= utcnow():
            db.session.delete(row)
            _commit()
            return None
        return row.user_id

    def destroy(self, token):
        row = db.session.get(UserSession, token) if token else None
        if row is not None:
            db.session.delete(row)
            _commit()

    def sweep(self, now=None) -> int:
        now = now or utcnow()
        removed = UserSession.query.filter(UserSession.expires_at <= now).delete(synchronize_session=False)
        _commit()
        return removed


# ===============================
# Lifecycle
# ===============================
class Store:
    """Owns the repositories for one Flask app.

    ``open`` creates the schema once the app is configured; ``close`` drops
    pooled connections at shutdown.
    """

    def __init__(self, app=None):
        self.app = None
        self.users = UserStore()
        self.entries = EntryStore()
        self.sessions = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        self.sessions = SessionStore(app.config["SESSION_TTL"])
        db.init_app(app)
        app.extensions["eunoia.store"] = self

    def open(self):
        with self.app.app_context():
            db.create_all()
            logger.info("Store opened on %s", db.engine.url.render_as_string(hide_password=True))

    def close(self):
        with self.app.app_context():
            db.session.remove()
            db.engine.dispose()
        logger.info("Store closed")


def get_store() -> Store:
    return current_app.extensions["eunoia.store"]
