"""Translate ``CRAFilters`` into parameterized SQLAlchemy WHERE clauses.

Each known filter key maps to exactly one comparison. Caller values are only
ever passed as bound parameters, never spliced into SQL text.
"""

from sqlalchemy import ColumnElement

from app.domain.entities.cra_query import CRAFilters
from app.infrastructure.database.models.cra import CRAModel

_LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``%`` and ``_`` match literally."""
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )


def build_cra_predicates(filters: CRAFilters) -> list[ColumnElement[bool]]:
    """Return the conjunctive predicate list for ``filters``; absent keys are skipped."""
    predicates: list[ColumnElement[bool]] = []

    if filters.status is not None:
        predicates.append(CRAModel.status == filters.status.value)
    if filters.client:
        predicates.append(
            CRAModel.client.ilike(f"%{escape_like(filters.client)}%", escape=_LIKE_ESCAPE)
        )
    if filters.start_date is not None:
        predicates.append(CRAModel.date >= filters.start_date)
    if filters.end_date is not None:
        predicates.append(CRAModel.date <= filters.end_date)

    return predicates
