import uuid
from datetime import datetime, timezone
from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash


# SQLAlchemy instance (initialized in app.py)
db = SQLAlchemy()


MOODS = ("great", "good", "okay", "low", "rough")
GYM_STATUSES = ("worked_out", "rest_day", "skipped")


def _new_id():
    return str(uuid.uuid4())


def utcnow():
    # naive UTC, which is what sqlite hands back
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    username = db.Column(db.String(64), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    entries = db.relationship("JournalEntry", backref="owner", lazy=True, cascade="all, delete-orphan")
    sessions = db.relationship("UserSession", backref="user", lazy=True, cascade="all, delete-orphan")

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {"id": self.id, "username": self.username}


class JournalEntry(db.Model):
    __tablename__ = "journal_entries"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    target_plan = db.Column(db.Text, nullable=True)
    reflection = db.Column(db.Text, nullable=True)
    gym_status = db.Column(db.String(20), nullable=True)  # one of GYM_STATUSES
    gym_notes = db.Column(db.Text, nullable=True)
    food = db.Column(db.Text, nullable=True)
    mood = db.Column(db.String(20), nullable=True)  # one of MOODS
    target_met = db.Column(db.Boolean, nullable=False, default=False)
    images = db.Column(db.JSON, nullable=True)  # list of data URIs
    videos = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "date": self.date.isoformat(),
            "targetPlan": self.target_plan,
            "reflection": self.reflection,
            "gymStatus": self.gym_status,
            "gymNotes": self.gym_notes,
            "food": self.food,
            "mood": self.mood,
            "targetMet": bool(self.target_met),
            "images": self.images,
            "videos": self.videos,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class UserSession(db.Model):
    __tablename__ = "user_sessions"

    token = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
