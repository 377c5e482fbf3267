from .cra import (
    ActivityInput,
    ActivityResponse,
    CRACreate,
    CRAResponse,
    CRAStatisticsResponse,
    CRAUpdate,
)
from .envelope import ApiResponse, PaginationMeta

__all__ = [
    "ActivityInput",
    "ActivityResponse",
    "CRACreate",
    "CRAResponse",
    "CRAStatisticsResponse",
    "CRAUpdate",
    "ApiResponse",
    "PaginationMeta",
]
