"""Employee model (roster is owned elsewhere; the engine writes certified_status only)."""

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from certengine.database import Base


class Employee(Base):
    """Roster row."""

    __tablename__ = "employees"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    org_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    location_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey("locations.id"), nullable=False
    )
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(Text, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    certified_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="Not Certified"
    )  # Not Certified|Pending|Certified|PIP
