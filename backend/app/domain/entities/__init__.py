from .cra import (
    CRA,
    Activity,
    CRAChanges,
    CRAStatus,
    STATUS_TRANSITIONS,
    compute_total_hours,
    ensure_status_transition,
    validate_activity_set,
)
from .cra_query import (
    CRAFilters,
    CRAStatistics,
    Page,
    Pagination,
)

__all__ = [
    "CRA",
    "Activity",
    "CRAChanges",
    "CRAStatus",
    "STATUS_TRANSITIONS",
    "compute_total_hours",
    "ensure_status_transition",
    "validate_activity_set",
    "CRAFilters",
    "CRAStatistics",
    "Page",
    "Pagination",
]
