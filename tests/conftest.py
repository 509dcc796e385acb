"""In-memory stand-ins for the certification store and scoring source."""

from datetime import date, datetime, timedelta

import pytest

from certengine.schemas.certification import (
    AuditSnapshot,
    CertificationStatus,
    EmployeeRecord,
    NewAudit,
)

LOCATION_ID = "loc-buda"
OTHER_LOCATION_ID = "loc-west-buda"
ORG_ID = "org-1"


class FakeStore:
    def __init__(self):
        self.locations: dict[str, bool] = {}
        self.employees: dict[str, EmployeeRecord] = {}
        self.audits: list[AuditSnapshot] = []
        self.inserted: list[NewAudit] = []
        self.status_updates: list[tuple[str, CertificationStatus]] = []
        self.reads = 0
        self.fail_roster = False
        self.fail_history = False
        self.fail_insert_for: set[str] = set()
        self.fail_update_for: set[str] = set()
        self._clock = datetime(2025, 1, 1, 12, 0, 0)

    @property
    def writes(self) -> int:
        return len(self.inserted) + len(self.status_updates)

    def add_location(self, location_id: str, enrolled: bool = True) -> None:
        self.locations[location_id] = enrolled

    def add_employee(
        self,
        employee_id: str,
        status: str | None = "Not Certified",
        location_id: str = LOCATION_ID,
        role: str = "Team Member",
        active: bool = True,
    ) -> EmployeeRecord:
        emp = EmployeeRecord(
            id=employee_id,
            org_id=ORG_ID,
            location_id=location_id,
            first_name=employee_id.title(),
            last_name="Tester",
            role=role,
            active=active,
            certified_status=status,
        )
        self.employees[employee_id] = emp
        return emp

    def add_audit(
        self,
        employee_id: str,
        audit_date: date,
        status_after: str,
        qualified: bool,
        status_before: str | None = None,
    ) -> AuditSnapshot:
        self._clock += timedelta(minutes=1)
        audit = AuditSnapshot(
            id=f"audit-{len(self.audits) + 1}",
            employee_id=employee_id,
            org_id=ORG_ID,
            location_id=LOCATION_ID,
            audit_date=audit_date,
            status_before=status_before or status_after,
            status_after=status_after,
            all_positions_qualified=qualified,
            created_at=self._clock,
        )
        self.audits.append(audit)
        return audit

    async def is_location_enrolled(self, location_id):
        self.reads += 1
        return self.locations.get(location_id, False)

    async def list_enrolled_location_ids(self):
        self.reads += 1
        return [lid for lid, enrolled in self.locations.items() if enrolled]

    async def get_active_employees(self, location_id, roles=None):
        self.reads += 1
        if self.fail_roster:
            raise ConnectionError("roster unavailable")
        return [
            e
            for e in self.employees.values()
            if e.location_id == location_id and e.active and (not roles or e.role in roles)
        ]

    async def get_recent_audits(self, employee_id, limit=2):
        self.reads += 1
        if self.fail_history:
            raise ConnectionError("audit history unavailable")
        rows = [a for a in self.audits if a.employee_id == employee_id]
        rows.sort(key=lambda a: (a.audit_date, a.created_at), reverse=True)
        return rows[:limit]

    async def get_audit_history(self, employee_id, limit=24):
        return await self.get_recent_audits(employee_id, limit)

    async def insert_audit(self, record):
        if record.employee_id in self.fail_insert_for:
            raise ConnectionError("insert failed")
        self.inserted.append(record)
        audit = self.add_audit(
            record.employee_id,
            record.audit_date,
            record.status_after.value,
            record.all_positions_qualified,
            status_before=record.status_before.value,
        )
        return audit.id

    async def update_certified_status(self, employee_id, status):
        if employee_id in self.fail_update_for:
            raise ConnectionError("update failed")
        self.status_updates.append((employee_id, status))
        emp = self.employees[employee_id]
        self.employees[employee_id] = emp.model_copy(update={"certified_status": status.value})


class FakeScoring:
    def __init__(self):
        self.scores: dict[str, dict] = {}
        self.fail = False

    async def position_scores(self, employee):
        if self.fail:
            raise ConnectionError("ratings unavailable")
        return self.scores.get(employee.id, {})


@pytest.fixture
def store():
    s = FakeStore()
    s.add_location(LOCATION_ID)
    return s


@pytest.fixture
def scoring():
    return FakeScoring()
