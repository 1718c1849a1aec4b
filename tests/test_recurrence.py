"""Tests for recurring series expansion."""

from datetime import date, time

import pytest

from fitschedule.domain.entities import EventStatus, EventType
from fitschedule.domain.errors import DomainError, RecurrenceLimitError, ValidationError
from fitschedule.domain.recurrence import (
    MAX_EXPANSION_DAYS,
    RecurrenceRule,
    describe_weekdays,
    expand_series,
    iter_candidate_dates,
    normalize_weekdays,
    occurrence_dates,
    sunday_ordinal,
)


def make_rule(**overrides) -> RecurrenceRule:
    params = dict(
        type=EventType.PERSON,
        weekdays=[1, 3],
        start_date=date(2024, 1, 1),
        time=time(9, 0),
        duration=60,
        sessions_total=3,
        member_id="m1",
    )
    params.update(overrides)
    return RecurrenceRule(**params)


class TestExpandSeries:
    """Tests for expand_series."""

    def test_monday_wednesday_example(self):
        """Test the documented Monday/Wednesday example."""
        series, events = expand_series(make_rule())

        assert [e.date for e in events] == [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 8)]
        assert all(e.status == EventStatus.SCHEDULED for e in events)
        assert all(e.time == time(9, 0) and e.duration == 60 for e in events)
        assert series.weekdays == (1, 3)
        assert series.sessions_total == 3

    def test_events_share_series_id(self, id_factory):
        """Test that every event points back at the new series."""
        series, events = expand_series(make_rule(), id_factory=id_factory)

        assert series.id == "id-1"
        assert [e.id for e in events] == ["id-2", "id-3", "id-4"]
        assert {e.series_id for e in events} == {series.id}

    def test_count_weekdays_and_order(self):
        """Test count, weekday membership and strictly ascending dates."""
        rule = make_rule(weekdays=[0, 6], start_date=date(2024, 2, 28), sessions_total=10)
        _, events = expand_series(rule)

        assert len(events) == 10
        assert all(sunday_ordinal(e.date) in (0, 6) for e in events)
        dates = [e.date for e in events]
        assert all(a < b for a, b in zip(dates, dates[1:]))
        # Crosses the leap day without skipping the weekend after it
        assert dates[:2] == [date(2024, 3, 2), date(2024, 3, 3)]

    def test_start_date_not_matching_is_skipped(self):
        """Test that a start date off the weekday set is not used."""
        _, events = expand_series(make_rule(weekdays=[1], start_date=date(2024, 1, 2), sessions_total=1))
        assert events[0].date == date(2024, 1, 8)

    def test_deterministic(self):
        """Test that identical rules expand to identical schedules."""
        rule = make_rule(weekdays=[2, 4, 5], sessions_total=12)
        _, first = expand_series(rule)
        _, second = expand_series(rule)

        assert [(e.date, e.time, e.duration) for e in first] == [
            (e.date, e.time, e.duration) for e in second
        ]

    def test_group_rule(self):
        """Test a group series carries the group id only."""
        series, events = expand_series(make_rule(type="group", member_id=None, group_id="g1"))

        assert series.type == EventType.GROUP
        assert all(e.group_id == "g1" and e.member_id is None for e in events)

    def test_notes_copied(self):
        _, events = expand_series(make_rule(notes="Bring bands"))
        assert {e.notes for e in events} == {"Bring bands"}

    def test_duplicate_weekdays_collapse(self):
        series, events = expand_series(make_rule(weekdays=[3, 1, 1, 3], sessions_total=4))
        assert series.weekdays == (1, 3)
        assert len(events) == 4


class TestExpandSeriesValidation:
    """Tests for rejected rules."""

    def test_empty_weekdays(self):
        with pytest.raises(ValidationError, match="at least one weekday"):
            expand_series(make_rule(weekdays=[]))

    @pytest.mark.parametrize("sessions_total", [0, -1])
    def test_non_positive_session_count(self, sessions_total):
        with pytest.raises(ValidationError, match="at least one session"):
            expand_series(make_rule(sessions_total=sessions_total))

    def test_non_positive_duration(self):
        with pytest.raises(ValidationError, match="Duration"):
            expand_series(make_rule(duration=0))

    def test_weekday_out_of_range(self):
        with pytest.raises(ValidationError, match="between 0"):
            expand_series(make_rule(weekdays=[1, 7]))

    def test_person_rule_without_member(self):
        with pytest.raises(ValidationError, match="needs a member"):
            expand_series(make_rule(member_id=None))

    def test_group_rule_with_member(self):
        with pytest.raises(ValidationError, match="cannot reference a member"):
            expand_series(make_rule(type=EventType.GROUP, group_id="g1"))

    def test_unknown_type(self):
        with pytest.raises(ValidationError, match="Unknown event type"):
            expand_series(make_rule(type="team"))

    def test_ceiling_exceeded(self):
        """Test that a count that cannot fit in ten years fails distinctly."""
        with pytest.raises(RecurrenceLimitError) as excinfo:
            expand_series(make_rule(weekdays=[1], sessions_total=600))

        assert not isinstance(excinfo.value, ValidationError)
        assert isinstance(excinfo.value, DomainError)


class TestCandidateDates:
    """Tests for the bounded candidate walk."""

    def test_consecutive_days(self):
        days = list(iter_candidate_dates(date(2024, 12, 30), max_days=4))
        assert days == [date(2024, 12, 30), date(2024, 12, 31), date(2025, 1, 1), date(2025, 1, 2)]

    def test_default_ceiling(self):
        days = list(iter_candidate_dates(date(2024, 1, 1)))
        assert len(days) == MAX_EXPANSION_DAYS

    def test_restartable(self):
        start = date(2024, 1, 1)
        assert list(iter_candidate_dates(start, 5)) == list(iter_candidate_dates(start, 5))

    def test_occurrence_dates_respects_max_days(self):
        with pytest.raises(RecurrenceLimitError, match="Only 1 of 2"):
            occurrence_dates(date(2024, 1, 1), [1], 2, max_days=7)

    def test_walk_stops_at_last_date(self):
        assert list(iter_candidate_dates(date(9999, 12, 30))) == [date(9999, 12, 30), date(9999, 12, 31)]

    def test_series_near_last_date_hits_ceiling(self):
        with pytest.raises(RecurrenceLimitError, match="Only 31 of 100"):
            occurrence_dates(date(9999, 12, 1), range(7), 100)


def test_sunday_ordinal():
    assert sunday_ordinal(date(2024, 1, 7)) == 0  # Sunday
    assert sunday_ordinal(date(2024, 1, 1)) == 1  # Monday
    assert sunday_ordinal(date(2024, 1, 6)) == 6  # Saturday


def test_normalize_weekdays_rejects_bools():
    with pytest.raises(ValidationError):
        normalize_weekdays([True])


def test_describe_weekdays():
    assert describe_weekdays([3, 1]) == "Mon, Wed"
