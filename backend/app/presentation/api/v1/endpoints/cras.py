"""CRA CRUD endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.application.schemas import (
    ApiResponse,
    CRACreate,
    CRAResponse,
    CRAStatisticsResponse,
    CRAUpdate,
    PaginationMeta,
)
from app.application.services import CRAService
from app.domain.entities import CRAFilters, CRAStatus
from app.domain.exceptions import EntityNotFoundError
from app.infrastructure.dependencies import get_cra_service

router = APIRouter(prefix="/cras", tags=["CRAs"])


def get_cra_filters(
    status_: CRAStatus | None = Query(None, alias="status", description="Exact status"),
    client: str | None = Query(None, description="Case-insensitive substring of the client"),
    start_date: date | None = Query(None, alias="startDate", description="Inclusive lower date bound"),
    end_date: date | None = Query(None, alias="endDate", description="Inclusive upper date bound"),
) -> CRAFilters:
    return CRAFilters(
        status=status_,
        client=client.strip() if client else None,
        start_date=start_date,
        end_date=end_date,
    )


@router.get(
    "",
    response_model=ApiResponse[list[CRAResponse]],
    response_model_exclude_none=True,
)
async def list_cras(
    filters: CRAFilters = Depends(get_cra_filters),
    limit: int | None = Query(None, description="Page size (default 50, clamped)"),
    offset: int | None = Query(None, description="Rows to skip (default 0)"),
    service: CRAService = Depends(get_cra_service),
) -> ApiResponse[list[CRAResponse]]:
    """Retrieve a filtered, paginated list of CRAs."""
    page = await service.list_cras(filters, limit=limit, offset=offset)
    return ApiResponse(
        data=[CRAResponse.model_validate(c, from_attributes=True) for c in page.items],
        pagination=PaginationMeta(
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_more=page.has_more,
        ),
    )


@router.get(
    "/statistics",
    response_model=ApiResponse[CRAStatisticsResponse],
    response_model_exclude_none=True,
)
async def get_statistics(
    filters: CRAFilters = Depends(get_cra_filters),
    service: CRAService = Depends(get_cra_service),
) -> ApiResponse[CRAStatisticsResponse]:
    """Dashboard aggregates over the CRAs matching the filters."""
    stats = await service.get_statistics(filters)
    return ApiResponse(data=CRAStatisticsResponse.model_validate(stats, from_attributes=True))


@router.get(
    "/{cra_id}",
    response_model=ApiResponse[CRAResponse],
    response_model_exclude_none=True,
)
async def get_cra(
    cra_id: str,
    service: CRAService = Depends(get_cra_service),
) -> ApiResponse[CRAResponse]:
    """Retrieve a single CRA with its activities."""
    try:
        cra = await service.get_cra(cra_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ApiResponse(data=CRAResponse.model_validate(cra, from_attributes=True))


@router.post(
    "",
    response_model=ApiResponse[CRAResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_cra(
    data: CRACreate,
    service: CRAService = Depends(get_cra_service),
) -> ApiResponse[CRAResponse]:
    """Create a new CRA and its activities in one transaction."""
    cra = await service.create_cra(data)
    return ApiResponse(
        data=CRAResponse.model_validate(cra, from_attributes=True),
        message="CRA created successfully",
    )


@router.put(
    "/{cra_id}",
    response_model=ApiResponse[CRAResponse],
    response_model_exclude_none=True,
)
async def update_cra(
    cra_id: str,
    data: CRAUpdate,
    service: CRAService = Depends(get_cra_service),
) -> ApiResponse[CRAResponse]:
    """Update a CRA. Supplying ``activities`` replaces the whole set."""
    try:
        cra = await service.update_cra(cra_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ApiResponse(
        data=CRAResponse.model_validate(cra, from_attributes=True),
        message="CRA updated successfully",
    )


@router.delete(
    "/{cra_id}",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
)
async def delete_cra(
    cra_id: str,
    service: CRAService = Depends(get_cra_service),
) -> ApiResponse[None]:
    """Delete a CRA and all of its activities."""
    try:
        await service.delete_cra(cra_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ApiResponse(message="CRA deleted successfully")
