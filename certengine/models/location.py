"""Location model."""

from sqlalchemy import Boolean, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from certengine.database import Base


class Location(Base):
    """Store location - only enrolled ones are evaluated."""

    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    org_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    location_number: Mapped[str | None] = mapped_column(Text, nullable=True)
    certification_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
