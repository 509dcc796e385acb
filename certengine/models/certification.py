"""Certification audit model."""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from certengine.database import Base


class CertificationAudit(Base):
    """Certification audit records - append-only, one per employee per run."""

    __tablename__ = "certification_audit"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    employee_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("employees.id"), nullable=False
    )
    employee_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    org_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    location_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("locations.id"), nullable=False
    )
    audit_date: Mapped[date] = mapped_column(Date, nullable=False)
    status_before: Mapped[str] = mapped_column(String(20), nullable=False)
    status_after: Mapped[str] = mapped_column(String(20), nullable=False)
    all_positions_qualified: Mapped[bool] = mapped_column(Boolean, nullable=False)
    position_averages: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
