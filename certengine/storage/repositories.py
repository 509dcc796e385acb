"""Repositories for locations, employees and certification audits."""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Protocol
from uuid import uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from certengine.models import CertificationAudit, Employee, Location
from certengine.schemas.certification import (
    AuditSnapshot,
    CertificationStatus,
    EmployeeRecord,
    NewAudit,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CertificationStore(Protocol):
    """Persistence the evaluation engine needs."""

    async def is_location_enrolled(self, location_id: str) -> bool: ...

    async def list_enrolled_location_ids(self) -> list[str]: ...

    async def get_active_employees(
        self, location_id: str, roles: Sequence[str] | None = None
    ) -> list[EmployeeRecord]: ...

    async def get_recent_audits(self, employee_id: str, limit: int = 2) -> list[AuditSnapshot]: ...

    async def insert_audit(self, record: NewAudit) -> str: ...

    async def update_certified_status(
        self, employee_id: str, status: CertificationStatus
    ) -> None: ...


class SqlCertificationStore:
    """CertificationStore over an AsyncSession. Each write commits on its own."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def is_location_enrolled(self, location_id: str) -> bool:
        """Check location has certification tracking enabled."""
        result = await self.db.execute(
            select(Location.certification_enabled).where(Location.id == location_id)
        )
        return bool(result.scalar_one_or_none())

    async def list_enrolled_location_ids(self) -> list[str]:
        """List enrolled location IDs ordered by name."""
        result = await self.db.execute(
            select(Location.id)
            .where(Location.certification_enabled.is_(True))
            .order_by(Location.name)
        )
        return [str(lid) for lid in result.scalars().all()]

    async def get_active_employees(
        self, location_id: str, roles: Sequence[str] | None = None
    ) -> list[EmployeeRecord]:
        """Get active employees by location + optional roles."""
        stmt = select(Employee).where(
            Employee.location_id == location_id,
            Employee.active.is_(True),
        )
        if roles:
            stmt = stmt.where(Employee.role.in_(list(roles)))
        result = await self.db.execute(stmt.order_by(Employee.id))
        return [EmployeeRecord.model_validate(e) for e in result.scalars().all()]

    async def get_recent_audits(self, employee_id: str, limit: int = 2) -> list[AuditSnapshot]:
        """Get recent audits by employee, newest audit_date first."""
        result = await self.db.execute(
            select(CertificationAudit)
            .where(CertificationAudit.employee_id == employee_id)
            .order_by(
                CertificationAudit.audit_date.desc(),
                CertificationAudit.created_at.desc(),
            )
            .limit(limit)
        )
        return [AuditSnapshot.model_validate(a) for a in result.scalars().all()]

    async def get_audit_history(self, employee_id: str, limit: int = 24) -> list[AuditSnapshot]:
        """Get audit history for an employee, newest first."""
        return await self.get_recent_audits(employee_id, limit=limit)

    async def insert_audit(self, record: NewAudit) -> str:
        """Create certification audit record."""
        audit = CertificationAudit(
            id=str(uuid4()),
            employee_id=record.employee_id,
            employee_name=record.employee_name,
            org_id=record.org_id,
            location_id=record.location_id,
            audit_date=record.audit_date,
            status_before=record.status_before.value,
            status_after=record.status_after.value,
            all_positions_qualified=record.all_positions_qualified,
            position_averages=dict(record.position_averages),
            notes=record.notes,
            created_at=_now(),
        )
        self.db.add(audit)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return audit.id

    async def update_certified_status(
        self, employee_id: str, status: CertificationStatus
    ) -> None:
        """Update employee certified_status. Raises LookupError if not found."""
        try:
            result = await self.db.execute(
                update(Employee)
                .where(Employee.id == employee_id)
                .values(certified_status=status.value)
            )
            if result.rowcount == 0:
                raise LookupError(f"Employee not found: {employee_id}")
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def reset_location(self, location_id: str, purge_audit: bool = False) -> int:
        """Reset location employees to Not Certified + optionally purge audits."""
        try:
            result = await self.db.execute(
                update(Employee)
                .where(Employee.location_id == location_id)
                .values(certified_status=CertificationStatus.NOT_CERTIFIED.value)
            )
            if purge_audit:
                await self.db.execute(
                    delete(CertificationAudit).where(
                        CertificationAudit.location_id == location_id
                    )
                )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return result.rowcount
