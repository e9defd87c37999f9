"""Tests for statistics module."""

from dronelog.statistics import calculate_statistics, day_key, day_label, group_by_day


class TestCalculateStatistics:
    """Tests for calculate_statistics function."""

    def test_empty(self):
        """Test no flights."""
        assert calculate_statistics([]) == {
            "num_flights": 0,
            "total_duration_secs": 0,
            "total_distance_m": 0,
        }

    def test_totals(self):
        """Test sums skip missing values."""
        flights = [
            {"duration_secs": 120, "total_distance": 1000.5},
            {"duration_secs": None, "total_distance": 200},
            {},
        ]
        stats = calculate_statistics(flights)
        assert stats["num_flights"] == 3
        assert stats["total_duration_secs"] == 120
        assert stats["total_distance_m"] == 1200.5


class TestDayKey:
    """Tests for day_key and day_label."""

    def test_recorded_date(self):
        """Test the date prefix is kept in its recorded offset."""
        assert day_key("2025-03-15T23:30:00-05:00") == "2025-03-15"

    def test_unknown(self):
        """Test missing or invalid times share a key after every date."""
        assert day_key(None) == "~unknown"
        assert day_key("garbage") == "~unknown"
        assert "~unknown" > "9999-12-31"

    def test_label(self):
        """Test weekday heading and unknown label."""
        assert day_label("2025-03-15T10:00:00Z") == "Saturday, 15 Mar 2025"
        assert day_label(None) == "Unknown Date"


class TestGroupByDay:
    """Tests for group_by_day function."""

    def test_grouping(self):
        """Test days ascend and keep entry order within a day."""
        entries = [
            {"flight": {"id": 1, "start_time": "2025-03-16T09:00:00Z", "duration_secs": 60}},
            {"flight": {"id": 2, "start_time": None}},
            {"flight": {"id": 3, "start_time": "2025-03-15T12:00:00Z"}},
            {"flight": {"id": 4, "start_time": "2025-03-16T08:00:00Z", "duration_secs": 30}},
        ]
        days = group_by_day(entries)
        assert [d["key"] for d in days] == ["2025-03-15", "2025-03-16", "~unknown"]
        assert [e["flight"]["id"] for e in days[1]["entries"]] == [1, 4]
        assert days[1]["stats"]["total_duration_secs"] == 90
        assert days[2]["label"] == "Unknown Date"
