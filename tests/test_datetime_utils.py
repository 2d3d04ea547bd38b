# -*- coding: utf-8 -*-
"""
Unit tests for utils.datetime_utils.
"""

from datetime import date, datetime, timedelta, timezone

from services.translation_manager import TranslationManager, set_language
from utils.datetime_utils import (
    calculate_age, format_display_date, format_last_saved, from_isoformat, parse_date,
    to_date_isoformat,
)


class TestParsing:
    """ISO parsing helpers"""

    def test_from_isoformat_handles_z_suffix(self):
        parsed = from_isoformat("2024-05-01T12:00:00Z")
        assert parsed == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_from_isoformat_date_only(self):
        assert from_isoformat("2024-05-01") == datetime(2024, 5, 1)

    def test_from_isoformat_garbage(self):
        assert from_isoformat("yesterday") is None

    def test_to_date_isoformat_strips_time(self):
        assert to_date_isoformat("1941-03-02T00:00:00.000Z") == "1941-03-02"
        assert to_date_isoformat(datetime(1941, 3, 2, 8, 30)) == "1941-03-02"

    def test_to_date_isoformat_keeps_unparsable_text(self):
        """Bad input survives so validation can reject it."""
        assert to_date_isoformat("spring 1941") == "spring 1941"

    def test_parse_date(self):
        assert parse_date("1941-03-02") == date(1941, 3, 2)
        assert parse_date("") is None
        assert parse_date("02/03/1941") is None


class TestDisplay:
    """Display formatting"""

    def test_format_display_date(self):
        assert format_display_date("1940-03-01") == "March 1, 1940"
        assert format_display_date(None) is None

    def test_calculate_age(self):
        """Age counts whole years only."""
        assert calculate_age("1941-03-02", "2023-03-01") == 81
        assert calculate_age("1941-03-02", "2023-03-02") == 82
        assert calculate_age("2023-03-02", "1941-03-02") is None
        assert calculate_age(None, "2023-03-02") is None


class TestLastSaved:
    """format_last_saved()"""

    NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_never_saved(self):
        assert format_last_saved(None, self.NOW) is None

    def test_just_saved(self):
        assert format_last_saved(self.NOW - timedelta(seconds=4), self.NOW) == "Just saved"

    def test_seconds_minutes_hours(self):
        assert format_last_saved(self.NOW - timedelta(seconds=42), self.NOW) == "42 seconds ago"
        assert format_last_saved(self.NOW - timedelta(minutes=1), self.NOW) == "1 minute ago"
        assert format_last_saved(self.NOW - timedelta(minutes=5), self.NOW) == "5 minutes ago"
        assert format_last_saved(self.NOW - timedelta(hours=3), self.NOW) == "3 hours ago"

    def test_older_than_a_day(self):
        assert format_last_saved(self.NOW - timedelta(days=2), self.NOW) == "April 29, 2024"

    def test_accepts_strings(self):
        """Server timestamps are parsed first."""
        assert format_last_saved("2024-05-01T11:58:00Z", self.NOW) == "2 minutes ago"

    def test_naive_saved_at_is_local_time(self):
        """Naive timestamps are local wall-clock time, whatever the zone."""
        local_wall = self.NOW.astimezone().replace(tzinfo=None)
        assert format_last_saved(local_wall - timedelta(hours=1), self.NOW) == "1 hour ago"
        assert format_last_saved(local_wall - timedelta(minutes=3), self.NOW) == "3 minutes ago"

    def test_naive_reference_time(self):
        """A naive reference is local time too."""
        saved = self.NOW - timedelta(minutes=2)
        now = self.NOW.astimezone().replace(tzinfo=None)
        assert format_last_saved(saved, now) == "2 minutes ago"

    def test_labels_follow_language(self):
        """Labels come from the active translation table."""
        TranslationManager().register_language("xx", {"save_status.minutes_ago": "il y a {count} minutes"})
        set_language("xx")
        try:
            assert format_last_saved(self.NOW - timedelta(minutes=5), self.NOW) == "il y a 5 minutes"
            assert format_last_saved(self.NOW - timedelta(seconds=4), self.NOW) == "Just saved"
        finally:
            set_language("en")
