"""Unit tests for ConflictValidator.

This module tests the placement rules in order:
- past dates are rejected (day granularity)
- starts beyond one year are rejected
- overlapping time-of-day on any shared day is rejected, with the witness
"""

from datetime import date
from itertools import product

import pytest
from pydantic import ValidationError

from models.errors import SchedulingValidationError, ValidationErrorKind
from models.event import CalendarEvent, DateRange
from models.time_range import minutes_to_time
from models.timers import ManualClock
from models.validation import ConflictValidator, PlacementResult, one_year_after
from tests.fixtures.engine import FIXED_NOW
from tests.fixtures.events import create_event


@pytest.fixture
def validator() -> ConflictValidator:
    """Validator whose today is 2025-01-01."""
    return ConflictValidator(ManualClock(FIXED_NOW))


class TestOneYearAfter:
    def test_same_month_and_day(self):
        assert one_year_after(date(2025, 1, 1)) == date(2026, 1, 1)

    def test_leap_day_clamps(self):
        assert one_year_after(date(2024, 2, 29)) == date(2025, 2, 28)


class TestPlacementResult:
    def test_accept(self):
        result = PlacementResult.accept()
        assert result.accepted
        assert result.reason is None
        result.raise_for_rejection()

    def test_reject_uses_default_message(self):
        result = PlacementResult.reject(ValidationErrorKind.PAST_DATE)
        assert not result.accepted
        assert result.message == "Cannot schedule events in the past"

    def test_raise_for_rejection(self):
        result = PlacementResult.reject(
            ValidationErrorKind.TIME_CONFLICT, "clash", conflicting_event_id="a"
        )
        with pytest.raises(SchedulingValidationError) as exc_info:
            result.raise_for_rejection()
        assert exc_info.value.kind == ValidationErrorKind.TIME_CONFLICT
        assert exc_info.value.conflicting_event_id == "a"
        assert exc_info.value.message == "clash"

    def test_rejection_requires_reason(self):
        with pytest.raises(ValidationError):
            PlacementResult(accepted=False)


class TestDateRules:
    """Test past and horizon checks."""

    def test_today_is_allowed(self, validator):
        event = create_event(start_date=date(2025, 1, 1))
        assert validator.is_valid_placement(event, event.date_range, ()).accepted

    def test_yesterday_is_past(self, validator):
        event = create_event()
        result = validator.is_valid_placement(event, DateRange.single(date(2024, 12, 31)), ())
        assert result.reason == ValidationErrorKind.PAST_DATE
        assert result.message == "Cannot schedule events in the past"

    def test_past_is_checked_at_day_granularity(self, validator):
        """Verify an event earlier today than "now" is still allowed."""
        event = create_event(start_date=date(2025, 1, 1), start_time="07:00", end_time="08:00")
        assert validator.is_valid_placement(event, event.date_range, ()).accepted

    def test_horizon_boundary(self, validator):
        event = create_event()
        assert validator.horizon() == date(2026, 1, 1)
        assert validator.is_valid_placement(
            event, DateRange.single(date(2026, 1, 1)), ()
        ).accepted

        result = validator.is_valid_placement(event, DateRange.single(date(2026, 1, 2)), ())
        assert result.reason == ValidationErrorKind.HORIZON_EXCEEDED
        assert result.message == "Cannot schedule events more than a year in advance"

    def test_past_checked_before_conflicts(self, validator):
        other = create_event(start_date=date(2024, 12, 31), event_id="old")
        event = create_event()
        result = validator.is_valid_placement(
            event, DateRange.single(date(2024, 12, 31)), (other,)
        )
        assert result.reason == ValidationErrorKind.PAST_DATE


class TestTimeConflicts:
    """Test per-day time-of-day overlap."""

    def test_overlap_rejected_with_witness(self, validator):
        a = create_event(title="A", event_id="a")
        b = create_event(
            title="B",
            start_date=date(2025, 1, 5),
            start_time="09:30",
            end_time="10:30",
            event_id="b",
        )
        result = validator.is_valid_placement(b, DateRange.single(date(2025, 1, 10)), (a, b))
        assert result.reason == ValidationErrorKind.TIME_CONFLICT
        assert result.conflicting_event_id == "a"
        assert result.conflict_date == date(2025, 1, 10)
        assert result.message == 'Overlaps with "A" (9:00 AM - 10:00 AM) on 2025-01-10'

    def test_touching_intervals_accepted(self, validator):
        a = create_event(event_id="a")
        b = create_event(start_time="10:00", end_time="11:00", event_id="b")
        assert validator.is_valid_placement(b, b.date_range, (a,)).accepted

    def test_event_never_conflicts_with_itself(self, validator, simple_event):
        assert validator.is_valid_placement(
            simple_event, simple_event.date_range, (simple_event,)
        ).accepted

    def test_different_days_do_not_conflict(self, validator):
        a = create_event(event_id="a")
        b = create_event(start_date=date(2025, 1, 11), event_id="b")
        assert validator.is_valid_placement(b, b.date_range, (a,)).accepted

    def test_multi_day_event_blocks_interior_day(self, validator, multi_day_event):
        """Verify an event on day 11 conflicts with a day 10-12 event."""
        newcomer = create_event(
            start_date=date(2025, 1, 11), start_time="14:30", end_time="15:00", event_id="new"
        )
        result = validator.is_valid_placement(
            newcomer, newcomer.date_range, (multi_day_event,)
        )
        assert result.reason == ValidationErrorKind.TIME_CONFLICT
        assert result.conflicting_event_id == multi_day_event.id
        assert result.conflict_date == date(2025, 1, 11)

    def test_multi_day_candidate_checked_on_every_day(self, validator):
        """Verify a clash on the last day of the candidate is found."""
        later = create_event(start_date=date(2025, 1, 14), event_id="later")
        candidate = create_event(
            start_date=date(2025, 1, 12), end_date=date(2025, 1, 14), event_id="span"
        )
        result = validator.is_valid_placement(candidate, candidate.date_range, (later,))
        assert result.conflicting_event_id == "later"
        assert result.conflict_date == date(2025, 1, 14)

    def test_earliest_day_then_collection_order(self, validator):
        first_in_order = create_event(start_date=date(2025, 1, 13), event_id="x")
        second_in_order = create_event(start_date=date(2025, 1, 12), event_id="y")
        third_in_order = create_event(start_date=date(2025, 1, 12), event_id="z")
        candidate = create_event(
            start_date=date(2025, 1, 12), end_date=date(2025, 1, 13), event_id="span"
        )
        result = validator.is_valid_placement(
            candidate, candidate.date_range, (first_in_order, second_in_order, third_in_order)
        )
        assert result.conflicting_event_id == "y"
        assert result.conflict_date == date(2025, 1, 12)

    def test_multi_day_events_may_share_days_at_different_times(self, validator, multi_day_event):
        morning = create_event(
            start_date=date(2025, 1, 9), end_date=date(2025, 1, 11), event_id="morning"
        )
        assert validator.is_valid_placement(
            morning, morning.date_range, (multi_day_event,)
        ).accepted


class TestOverlapLaw:
    """Placement on a shared day is accepted exactly when the intervals are disjoint."""

    SLOTS = [(start, end) for start, end in product(range(8, 13), range(9, 14)) if end > start]

    @pytest.mark.parametrize("existing", SLOTS[::3])
    def test_grid(self, validator, existing):
        other = create_event(
            start_time=minutes_to_time(existing[0] * 60),
            end_time=minutes_to_time(existing[1] * 60),
            event_id="other",
        )
        for start, end in self.SLOTS:
            candidate = create_event(
                start_time=minutes_to_time(start * 60),
                end_time=minutes_to_time(end * 60),
                event_id="candidate",
            )
            result = validator.is_valid_placement(candidate, candidate.date_range, (other,))
            disjoint = end <= existing[0] or start >= existing[1]
            assert result.accepted == disjoint, (existing, (start, end))


class TestValidateEvent:
    """Test full validation of created/edited events."""

    def test_valid_event(self, validator, simple_event):
        assert validator.validate_event(simple_event, ()).accepted

    def test_blank_title(self, validator):
        event = CalendarEvent.model_construct(
            id="e",
            title="  ",
            description="",
            start_date=date(2025, 1, 10),
            end_date=date(2025, 1, 10),
            start_time="09:00",
            end_time="10:00",
        )
        assert validator.validate_event(event, ()).reason == ValidationErrorKind.EMPTY_TITLE

    def test_reversed_times(self, validator):
        event = CalendarEvent.model_construct(
            id="e",
            title="Late",
            description="",
            start_date=date(2025, 1, 10),
            end_date=date(2025, 1, 10),
            start_time="10:00",
            end_time="09:00",
        )
        result = validator.validate_event(event, ())
        assert result.reason == ValidationErrorKind.INVALID_TIME_RANGE
        assert result.message == "End time must be after start time"

    def test_placement_rules_apply(self, validator):
        event = create_event(start_date=date(2024, 12, 1))
        assert validator.validate_event(event, ()).reason == ValidationErrorKind.PAST_DATE

    def test_skipping_bounds_still_checks_conflicts(self, validator):
        """Verify check_bounds=False only lifts the past-date and horizon rules."""
        started = create_event(
            start_date=date(2024, 12, 30), end_date=date(2025, 1, 2), event_id="started"
        )
        assert validator.validate_event(started, (), check_bounds=False).accepted

        today = create_event(start_date=date(2025, 1, 1), event_id="today")
        result = validator.validate_event(started, (started, today), check_bounds=False)
        assert result.reason == ValidationErrorKind.TIME_CONFLICT
        assert result.conflicting_event_id == "today"
