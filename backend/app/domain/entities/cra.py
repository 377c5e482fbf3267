"""Domain entities for the CRA (Compte Rendu d'Activité) aggregate."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from uuid import uuid4

from app.domain.exceptions import DomainValidationError, InvalidStatusTransitionError

MAX_HOURS_PER_DAY = 24.0
HOURS_INCREMENT = 0.25


class CRAStatus(str, Enum):
    """Lifecycle states of an activity report."""

    DRAFT = "draft"
    COMPLETED = "completed"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


# Allowed targets per status, used only when transition enforcement is enabled.
STATUS_TRANSITIONS: dict[CRAStatus, frozenset[CRAStatus]] = {
    CRAStatus.DRAFT: frozenset({CRAStatus.COMPLETED, CRAStatus.SUBMITTED}),
    CRAStatus.COMPLETED: frozenset({CRAStatus.DRAFT, CRAStatus.SUBMITTED}),
    CRAStatus.SUBMITTED: frozenset({CRAStatus.DRAFT, CRAStatus.APPROVED, CRAStatus.REJECTED}),
    CRAStatus.APPROVED: frozenset(),
    CRAStatus.REJECTED: frozenset({CRAStatus.DRAFT}),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Activity:
    """A single line item of a CRA. Owned by exactly one CRA for its whole lifetime."""

    description: str
    hours: float
    category: str
    work_date: date | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    cra_id: str | None = None
    position: int = 0
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class CRA:
    """Aggregate root: one activity report for a date and a client.

    ``total_hours`` is derived from the activities and is recomputed whenever
    the activity set is replaced; callers never set it directly.
    """

    date: date
    client: str
    activities: list[Activity] = field(default_factory=list)
    status: CRAStatus = CRAStatus.DRAFT
    id: str = field(default_factory=lambda: str(uuid4()))
    total_hours: float = 0.0
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        self._attach(self.activities)

    def recompute_total(self) -> float:
        """Set ``total_hours`` from the current activity set and return it."""
        self.total_hours = compute_total_hours(self.activities)
        return self.total_hours

    def update(
        self,
        *,
        date: date | None = None,
        client: str | None = None,
        status: CRAStatus | None = None,
    ) -> None:
        """Change the supplied scalar fields and refresh ``updated_at``."""
        if date is not None:
            self.date = date
        if client is not None:
            self.client = client
        if status is not None:
            self.status = status
        self.updated_at = _utcnow()

    def replace_activities(self, activities: list[Activity]) -> None:
        """Discard the whole activity set and adopt ``activities`` in its place."""
        self._attach(activities)
        self.activities = list(activities)
        self.recompute_total()
        self.updated_at = _utcnow()

    def _attach(self, activities: list[Activity]) -> None:
        for position, activity in enumerate(activities):
            if activity.cra_id is not None and activity.cra_id != self.id:
                raise DomainValidationError(
                    f"Activity {activity.id} already belongs to CRA {activity.cra_id}",
                    field="activities",
                )
            activity.cra_id = self.id
            activity.position = position


def compute_total_hours(activities: list[Activity]) -> float:
    """Sum of activity hours. Quarter-hour values add up exactly as floats."""
    return float(sum(activity.hours for activity in activities))


def validate_activity_set(activities: list[Activity]) -> None:
    """Enforce the rules that span several activities of one CRA.

    Raises:
        DomainValidationError: empty set, out-of-range hours, a work date used
            twice, or more than 24 hours booked on one day.
    """
    if not activities:
        raise DomainValidationError("At least one activity is required", field="activities")

    for activity in activities:
        if activity.hours <= 0 or activity.hours > MAX_HOURS_PER_DAY:
            raise DomainValidationError("Hours must be between 0 and 24", field="hours")
        if activity.hours % HOURS_INCREMENT != 0:
            raise DomainValidationError(
                "Hours must be a multiple of 0.25 (15 minutes)", field="hours"
            )

    hours_by_day: dict[date, float] = defaultdict(float)
    for activity in activities:
        if activity.work_date is not None:
            hours_by_day[activity.work_date] += activity.hours
    for day, hours in hours_by_day.items():
        if hours > MAX_HOURS_PER_DAY:
            raise DomainValidationError(
                f"Total hours for {day.isoformat()} exceed 24h", field="activities"
            )

    dated = [a.work_date for a in activities if a.work_date is not None]
    if len(dated) != len(set(dated)):
        raise DomainValidationError(
            "Each work date can only appear once per CRA", field="activities"
        )


def ensure_status_transition(current: CRAStatus, requested: CRAStatus) -> None:
    """Raise if ``current`` → ``requested`` is not in the transition table."""
    if current == requested:
        return
    if requested not in STATUS_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(current.value, requested.value)


@dataclass
class CRAChanges:
    """Partial update of a CRA. ``None`` means "leave unchanged".

    When ``activities`` is given the whole activity set is replaced. With
    ``check_transition`` the status change is checked against
    ``STATUS_TRANSITIONS`` using the status stored at write time.
    """

    date: date | None = None
    client: str | None = None
    status: CRAStatus | None = None
    activities: list[Activity] | None = None
    check_transition: bool = False
