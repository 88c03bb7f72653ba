"""Insights over a user's journal entries.

Everything here is a pure function of an entry list and a reference date, so
callers (the ``/api/analytics`` route, tests) pass ``today`` explicitly. An
entry is anything with ``date``, ``mood``, ``gym_status`` and ``target_met``
attributes.
"""
import math
from collections import Counter
from datetime import timedelta

from .models import MOODS, GYM_STATUSES

MOOD_VALUES = {"great": 5, "good": 4, "okay": 3, "low": 2, "rough": 1}

MONTH_WINDOW_DAYS = 30
WEEK_WINDOW_DAYS = 7
STREAK_LIMIT = 365


def within_days(entries, today, days):
    """Entries dated in ``[today - days, today]``, both ends inclusive."""
    start = today - timedelta(days=days)
    return [e for e in entries if start <= e.date <= today]


def target_met_percentage(entries) -> int:
    if not entries:
        return 0
    met = sum(1 for e in entries if e.target_met)
    # half-up, not banker's rounding
    return int(math.floor(met * 100 / len(entries) + 0.5))


def gym_counts(entries) -> dict:
    counts = Counter(e.gym_status for e in entries if e.gym_status in GYM_STATUSES)
    return {status: counts.get(status, 0) for status in GYM_STATUSES}


def mood_distribution(entries) -> dict:
    counts = Counter(e.mood for e in entries if e.mood in MOOD_VALUES)
    return {mood: counts.get(mood, 0) for mood in MOODS}


def average_mood(entries):
    """Mean on the 1..5 scale, or None when no entry has a mood."""
    scores = [MOOD_VALUES[e.mood] for e in entries if e.mood in MOOD_VALUES]
    if not scores:
        return None
    return sum(scores) / len(scores)


def format_average_mood(value) -> str:
    return "-" if value is None else f"{value:.1f}"


def current_streak(entries, today) -> int:
    dates = {e.date for e in entries}
    streak = 0
    day = today
    for i in range(STREAK_LIMIT):
        if day in dates:
            streak += 1
        elif i > 0:
            break
        # a missing today doesn't break the streak yet
        day -= timedelta(days=1)
    return streak


def week_days(today):
    """Sunday..Saturday of the week containing ``today``."""
    sunday = today - timedelta(days=(today.weekday() + 1) % 7)
    return [sunday + timedelta(days=i) for i in range(7)]


def weekly_activity(entries, today):
    first_by_date = {}
    for e in entries:
        first_by_date.setdefault(e.date, e)
    activity = []
    for day in week_days(today):
        entry = first_by_date.get(day)
        activity.append({
            "day": day.strftime("%a"),
            "date": day.isoformat(),
            "hasEntry": entry is not None,
            "mood": entry.mood if entry is not None else None,
            "targetMet": bool(entry.target_met) if entry is not None else None,
        })
    return activity


def summarize(entries, today) -> dict:
    month = within_days(entries, today, MONTH_WINDOW_DAYS)
    week = within_days(entries, today, WEEK_WINDOW_DAYS)
    avg = average_mood(month)
    return {
        "today": today.isoformat(),
        "totalEntries": len(entries),
        "entriesThisMonth": len(month),
        "entriesThisWeek": len(week),
        "targetMetPercentage": target_met_percentage(month),
        "gymCounts": gym_counts(month),
        "moodCounts": mood_distribution(month),
        "averageMood": round(avg, 1) if avg is not None else None,
        "averageMoodLabel": format_average_mood(avg),
        "currentStreak": current_streak(entries, today),
        "weeklyActivity": weekly_activity(entries, today),
    }
