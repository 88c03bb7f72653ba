"""Insights aggregation: deterministic data, no IO."""
from datetime import date, timedelta
from types import SimpleNamespace

from eunoia import analytics

TODAY = date(2026, 10, 14)  # a Wednesday


def entry(days_ago=0, mood=None, gym_status=None, target_met=False):
    return SimpleNamespace(
        date=TODAY - timedelta(days=days_ago), mood=mood, gym_status=gym_status, target_met=target_met
    )


class TestWindows:
    def test_bounds_are_inclusive(self):
        entries = [entry(0), entry(30), entry(31), entry(-1)]
        month = analytics.within_days(entries, TODAY, 30)
        assert [e.date for e in month] == [TODAY, TODAY - timedelta(days=30)]

    def test_week_window(self):
        entries = [entry(i) for i in range(10)]
        assert len(analytics.within_days(entries, TODAY, 7)) == 8


class TestTargetMet:
    def test_empty(self):
        assert analytics.target_met_percentage([]) == 0

    def test_all_met(self):
        assert analytics.target_met_percentage([entry(i, target_met=True) for i in range(4)]) == 100

    def test_rounds_half_up(self):
        entries = [entry(0, target_met=True)] + [entry(i) for i in range(1, 8)]
        assert analytics.target_met_percentage(entries) == 13

    def test_two_thirds(self):
        entries = [entry(0, target_met=True), entry(1, target_met=True), entry(2)]
        assert analytics.target_met_percentage(entries) == 67


class TestMood:
    def test_average_without_moods(self):
        assert analytics.average_mood([entry(0), entry(1)]) is None
        assert analytics.format_average_mood(None) == "-"

    def test_average_great_and_rough(self):
        value = analytics.average_mood([entry(0, "great"), entry(1, "rough"), entry(2)])
        assert value == 3.0
        assert analytics.format_average_mood(value) == "3.0"

    def test_distribution_has_every_mood(self):
        dist = analytics.mood_distribution([entry(0, "good"), entry(1, "good"), entry(2, "low")])
        assert dist == {"great": 0, "good": 2, "okay": 0, "low": 1, "rough": 0}


def test_gym_counts():
    entries = [entry(0, gym_status="worked_out"), entry(1, gym_status="worked_out"),
               entry(2, gym_status="skipped"), entry(3)]
    assert analytics.gym_counts(entries) == {"worked_out": 2, "rest_day": 0, "skipped": 1}


class TestStreak:
    def test_empty(self):
        assert analytics.current_streak([], TODAY) == 0

    def test_consecutive_days_including_today(self):
        assert analytics.current_streak([entry(i) for i in range(5)], TODAY) == 5

    def test_today_missing_is_tolerated(self):
        assert analytics.current_streak([entry(1), entry(2), entry(3)], TODAY) == 3

    def test_gap_breaks_streak(self):
        entries = [entry(0), entry(1), entry(3), entry(4)]
        assert analytics.current_streak(entries, TODAY) == 2

    def test_gap_right_after_missing_today(self):
        assert analytics.current_streak([entry(2), entry(3)], TODAY) == 0

    def test_duplicate_dates_count_once(self):
        assert analytics.current_streak([entry(0), entry(0), entry(1)], TODAY) == 2

    def test_capped(self):
        entries = [entry(i) for i in range(400)]
        assert analytics.current_streak(entries, TODAY) == analytics.STREAK_LIMIT


class TestWeeklyActivity:
    def test_sunday_to_saturday(self):
        days = analytics.week_days(TODAY)
        assert days[0] == date(2026, 10, 11)
        assert days[-1] == date(2026, 10, 17)
        assert [d.strftime("%a") for d in days] == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

    def test_sunday_starts_its_own_week(self):
        assert analytics.week_days(date(2026, 10, 11))[0] == date(2026, 10, 11)

    def test_marks_entries(self):
        activity = analytics.weekly_activity([entry(0, "good", target_met=True), entry(2)], TODAY)
        by_day = {a["day"]: a for a in activity}
        assert by_day["Wed"] == {"day": "Wed", "date": "2026-10-14", "hasEntry": True,
                                 "mood": "good", "targetMet": True}
        assert by_day["Mon"]["hasEntry"] is True
        assert by_day["Mon"]["targetMet"] is False
        assert by_day["Sat"] == {"day": "Sat", "date": "2026-10-17", "hasEntry": False,
                                 "mood": None, "targetMet": None}


def test_summarize():
    entries = [entry(0, "great", "worked_out", True), entry(1, "rough", "rest_day"), entry(40, "good")]
    summary = analytics.summarize(entries, TODAY)
    assert summary["totalEntries"] == 3
    assert summary["entriesThisMonth"] == 2
    assert summary["entriesThisWeek"] == 2
    assert summary["targetMetPercentage"] == 50
    assert summary["averageMood"] == 3.0
    assert summary["averageMoodLabel"] == "3.0"
    assert summary["gymCounts"] == {"worked_out": 1, "rest_day": 1, "skipped": 0}
    assert summary["moodCounts"]["good"] == 0
    assert summary["currentStreak"] == 2
    assert len(summary["weeklyActivity"]) == 7


def test_summarize_is_deterministic():
    entries = [entry(i, "okay") for i in range(3)]
    assert analytics.summarize(entries, TODAY) == analytics.summarize(list(entries), TODAY)
