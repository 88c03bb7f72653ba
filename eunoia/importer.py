"""Bring old journals into the database.

Two sources are understood: spreadsheet exports (CSV with a ``Date`` column in
``M/D/YYYY`` form plus a ``Journal`` or ``Activity`` text column, optionally a
``Physical Activity`` column) and WhatsApp chat exports where each day was
posted as a message starting with ``Day N``.
"""
import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)

GYM_KEYWORDS = (
    "gym", "gymmed", "workout", "worked out", "chest", "back", "legs", "shoulders",
    "arms", "biceps", "triceps", "abs", "cardio", "swimming", "swam", "swim",
    "badminton", "boxing", "volleyball", "basketball", "cricket", "football",
    "jogged", "jog", "run", "ran",
)
_GYM_RE = re.compile(r"\b(" + "|".join(re.escape(k) for k in GYM_KEYWORDS) + r")\b", re.IGNORECASE)

_US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_CHAT_LINE_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4}), \d{2}:\d{2} - ([^:]+): (.*)$")
_CHAT_PREFIX_RE = re.compile(r"^\d{2}/\d{2}/\d{4}")


@dataclass
class ParsedEntry:
    date: date
    reflection: str
    gym_status: Optional[str] = None
    gym_notes: Optional[str] = None

    def fields(self):
        return {
            "date": self.date,
            "reflection": self.reflection or None,
            "gym_status": self.gym_status,
            "gym_notes": self.gym_notes,
        }


def detect_gym_status(text):
    """``worked_out`` when the text mentions training, else unknown (None)."""
    return "worked_out" if text and _GYM_RE.search(text) else None


def parse_us_date(value):
    match = _US_DATE_RE.match(value.strip())
    if not match:
        return None
    month, day, year = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_csv(text):
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if not header:
        return []
    columns = {name.strip().lower(): i for i, name in enumerate(header)}
    if "date" not in columns:
        raise ValueError("CSV has no Date column")
    text_col = columns.get("journal", columns.get("activity"))
    activity_col = columns.get("physical activity")

    def cell(row, idx):
        return row[idx].strip() if idx is not None and idx < len(row) else ""

    entries = []
    for row in reader:
        on = parse_us_date(cell(row, columns["date"]))
        if on is None:
            continue
        reflection = cell(row, text_col)
        activity = cell(row, activity_col)
        if not reflection and not activity:
            continue
        if activity:
            entries.append(ParsedEntry(on, reflection, "worked_out", activity))
        else:
            entries.append(ParsedEntry(on, reflection, detect_gym_status(reflection)))
    return entries


def parse_whatsapp(text, author=None):
    entries = []
    current_date = None
    lines = []

    def flush():
        if current_date is not None and lines:
            reflection = "\n".join(lines).strip()
            entries.append(ParsedEntry(current_date, reflection, detect_gym_status(reflection)))

    for line in text.splitlines():
        match = _CHAT_LINE_RE.match(line)
        if match:
            flush()
            day, month, year, sender, message = match.groups()
            lines = []
            current_date = None
            if (author is None or sender.strip() == author) and message.lower().startswith("day "):
                current_date = date(int(year), int(month), int(day))
                lines = [message]
        elif current_date is not None and not _CHAT_PREFIX_RE.match(line):
            lines.append(line)
    flush()
    return entries


def parse_file(path, author=None):
    with open(path, encoding="utf-8-sig") as f:
        text = f.read()
    if str(path).lower().endswith(".txt"):
        return parse_whatsapp(text, author)
    return parse_csv(text)


def dedupe_by_date(entries):
    """One entry per date, keeping the longest reflection."""
    best = {}
    for entry in entries:
        kept = best.get(entry.date)
        if kept is None or len(entry.reflection) > len(kept.reflection):
            best[entry.date] = entry
    return sorted(best.values(), key=lambda e: e.date)


def import_entries(store, user, parsed):
    """Insert ``parsed`` for ``user``, skipping dates they already wrote about.

    Returns ``(inserted, skipped)``.
    """
    unique = dedupe_by_date(parsed)
    existing = store.entries.existing_dates(user.id)
    fresh = [e.fields() for e in unique if e.date not in existing]
    inserted = store.entries.add_many(user.id, fresh) if fresh else 0
    skipped = len(unique) - len(fresh)
    logger.info("Imported %d entries for %s (%d skipped)", inserted, user.username, skipped)
    return inserted, skipped
