"""Pydantic DTOs (Data Transfer Objects) for the CRA feature."""

import datetime as dt

from pydantic import BaseModel, Field

from app.domain.entities import CRAStatus


class ActivityInput(BaseModel):
    """One activity line as submitted by the client."""

    model_config = {"str_strip_whitespace": True}

    id: str | None = Field(
        None, max_length=36,
        description="Existing activity id; reused only if it already belongs to the CRA",
    )
    description: str = Field(..., min_length=3, max_length=500, examples=["Build API"])
    hours: float = Field(..., gt=0, le=24, multiple_of=0.25, examples=[4])
    category: str = Field(..., min_length=2, max_length=100, examples=["Dev"])
    work_date: dt.date | None = Field(None, examples=["2025-01-10"])


class CRACreate(BaseModel):
    """Schema for creating a new CRA with its initial activity set."""

    model_config = {"str_strip_whitespace": True}

    date: dt.date = Field(..., examples=["2025-01-10"])
    client: str = Field(..., min_length=2, max_length=100, examples=["Acme"])
    status: CRAStatus = CRAStatus.DRAFT
    activities: list[ActivityInput] = Field(..., min_length=1)


class CRAUpdate(BaseModel):
    """Schema for updating a CRA — all fields optional.

    Supplying ``activities`` replaces the whole activity set; an empty list
    is rejected, same as on creation.
    """

    model_config = {"str_strip_whitespace": True}

    date: dt.date | None = None
    client: str | None = Field(None, min_length=2, max_length=100)
    status: CRAStatus | None = None
    activities: list[ActivityInput] | None = Field(None, min_length=1)


class ActivityResponse(BaseModel):
    id: str
    cra_id: str
    description: str
    hours: float
    category: str
    work_date: dt.date | None
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class CRAResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    date: dt.date
    client: str
    total_hours: float
    status: CRAStatus
    activities: list[ActivityResponse]
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class CRAStatisticsResponse(BaseModel):
    total_cras: int
    total_hours: float
    active_clients: int
    by_status: dict[str, int]

    model_config = {"from_attributes": True}
