"""Unit tests for the CRA aggregate and its activity rules."""

from datetime import date

import pytest

from app.domain.entities import (
    CRA,
    Activity,
    CRAStatus,
    compute_total_hours,
    ensure_status_transition,
    validate_activity_set,
)
from app.domain.exceptions import DomainValidationError, InvalidStatusTransitionError


def _activity(hours: float = 4, work_date: date | None = None, description: str = "Build API") -> Activity:
    return Activity(description=description, hours=hours, category="Dev", work_date=work_date)


def test_new_cra_defaults_to_draft_and_attaches_activities():
    activities = [_activity(4), _activity(3.5)]
    cra = CRA(date=date(2025, 1, 10), client="Acme", activities=activities)

    assert cra.status == CRAStatus.DRAFT
    assert [a.cra_id for a in cra.activities] == [cra.id, cra.id]
    assert [a.position for a in cra.activities] == [0, 1]


def test_recompute_total_sums_activity_hours():
    cra = CRA(date=date(2025, 1, 10), client="Acme", activities=[_activity(4), _activity(3.5)])
    assert cra.total_hours == 0.0

    assert cra.recompute_total() == 7.5
    assert cra.total_hours == 7.5


def test_compute_total_hours_of_empty_set_is_zero():
    assert compute_total_hours([]) == 0.0


def test_replace_activities_discards_previous_set():
    cra = CRA(date=date(2025, 1, 10), client="Acme", activities=[_activity(4), _activity(3.5)])
    before = cra.updated_at

    cra.replace_activities([_activity(8)])

    assert len(cra.activities) == 1
    assert cra.total_hours == 8.0
    assert cra.updated_at >= before


def test_activity_cannot_move_between_cras():
    first = CRA(date=date(2025, 1, 10), client="Acme", activities=[_activity()])
    second = CRA(date=date(2025, 1, 11), client="Globex")

    with pytest.raises(DomainValidationError):
        second.replace_activities([first.activities[0]])


def test_update_changes_only_supplied_fields():
    cra = CRA(date=date(2025, 1, 10), client="Acme")

    cra.update(status=CRAStatus.SUBMITTED)

    assert cra.status == CRAStatus.SUBMITTED
    assert cra.client == "Acme"
    assert cra.date == date(2025, 1, 10)


def test_validate_rejects_empty_activity_set():
    with pytest.raises(DomainValidationError, match="At least one activity"):
        validate_activity_set([])


@pytest.mark.parametrize("hours", [0, -1, 24.25, 1.1])
def test_validate_rejects_bad_hours(hours):
    with pytest.raises(DomainValidationError):
        validate_activity_set([_activity(hours)])


def test_validate_accepts_full_day_in_quarter_hours():
    validate_activity_set([_activity(24)])
    validate_activity_set([_activity(0.25), _activity(7.75)])


def test_validate_rejects_same_work_date_twice():
    day = date(2025, 1, 10)
    with pytest.raises(DomainValidationError, match="once per CRA"):
        validate_activity_set([_activity(4, day), _activity(4, day)])


def test_validate_rejects_more_than_24_hours_on_one_day():
    day = date(2025, 1, 10)
    with pytest.raises(DomainValidationError, match="exceed 24h"):
        validate_activity_set([_activity(20, day), _activity(6, day)])


def test_undated_activities_are_not_checked_for_uniqueness():
    validate_activity_set([_activity(4), _activity(4)])


def test_status_transition_table():
    ensure_status_transition(CRAStatus.DRAFT, CRAStatus.SUBMITTED)
    ensure_status_transition(CRAStatus.APPROVED, CRAStatus.APPROVED)

    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        ensure_status_transition(CRAStatus.APPROVED, CRAStatus.DRAFT)
    assert exc_info.value.field == "status"
