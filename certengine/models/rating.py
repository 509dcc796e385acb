"""Positional rating model (scoring source for certification)."""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from certengine.database import Base


class Rating(Base):
    """One leader rating of an employee on a position."""

    __tablename__ = "ratings"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    employee_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("employees.id"), nullable=False
    )
    location_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("locations.id"), nullable=False
    )
    org_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    position: Mapped[str] = mapped_column(Text, nullable=False)
    rating_avg: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
