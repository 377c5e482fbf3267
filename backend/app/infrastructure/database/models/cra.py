"""SQLAlchemy ORM models for the CRA aggregate — 'cras' and 'activities' tables."""

import datetime as dt

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.domain.entities.cra import CRAStatus
from app.infrastructure.database.base import Base, utc_now

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in CRAStatus)


class CRAModel(Base):
    """ORM model — maps to the 'cras' table (aggregate root)."""

    __tablename__ = "cras"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    client: Mapped[str] = mapped_column(String(100), nullable=False)
    total_hours: Mapped[float] = mapped_column(
        Numeric(8, 2, asdecimal=False), nullable=False, default=0
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CRAStatus.DRAFT.value
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    activities: Mapped[list["ActivityModel"]] = relationship(
        back_populates="cra",
        order_by=lambda: [ActivityModel.created_at, ActivityModel.position],
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint("total_hours >= 0", name="ck_cras_total_hours"),
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_cras_status"),
        Index("ix_cras_date_created", "date", "created_at"),
        Index("ix_cras_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<CRAModel(id={self.id}, date={self.date}, client='{self.client}')>"


class ActivityModel(Base):
    """ORM model — maps to the 'activities' table; each row belongs to one CRA."""

    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    cra_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cras.id", ondelete="CASCADE"), nullable=False
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    hours: Mapped[float] = mapped_column(Numeric(5, 2, asdecimal=False), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    work_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    cra: Mapped[CRAModel] = relationship(back_populates="activities")

    __table_args__ = (
        CheckConstraint("hours > 0 AND hours <= 24", name="ck_activities_hours"),
        Index("ix_activities_cra", "cra_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ActivityModel(id={self.id}, cra_id={self.cra_id}, hours={self.hours})>"
