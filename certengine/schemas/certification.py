"""Certification schemas - statuses, transitions, snapshots and run results."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CertificationStatus(str, Enum):
    """Certification lifecycle state. Values match what is stored on employees."""

    NOT_CERTIFIED = "Not Certified"
    PENDING = "Pending"
    CERTIFIED = "Certified"
    PIP = "PIP"

    @classmethod
    def parse(cls, value: "str | CertificationStatus | None") -> "CertificationStatus":
        """Map a stored value or member-style name to a status.

        Missing or unrecognized values are Not Certified.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.NOT_CERTIFIED
        text = str(value).strip()
        for status in cls:
            if text == status.value:
                return status
        key = text.replace(" ", "").replace("_", "").lower()
        aliases = {
            "notcertified": cls.NOT_CERTIFIED,
            "pending": cls.PENDING,
            "certified": cls.CERTIFIED,
            "pip": cls.PIP,
        }
        return aliases.get(key, cls.NOT_CERTIFIED)


S = CertificationStatus

ALLOWED_TRANSITIONS: frozenset[tuple[CertificationStatus, CertificationStatus]] = frozenset(
    {
        (S.NOT_CERTIFIED, S.NOT_CERTIFIED),
        (S.NOT_CERTIFIED, S.PENDING),
        (S.PENDING, S.PENDING),
        (S.PENDING, S.NOT_CERTIFIED),
        (S.CERTIFIED, S.CERTIFIED),
        (S.CERTIFIED, S.PIP),
        (S.PIP, S.CERTIFIED),
        (S.PIP, S.NOT_CERTIFIED),
    }
)


class Transition(BaseModel):
    """One state machine step. Only edges in ALLOWED_TRANSITIONS can be built."""

    model_config = ConfigDict(frozen=True)

    status_before: CertificationStatus
    status_after: CertificationStatus
    note: str | None = None

    @model_validator(mode="after")
    def check_edge(self) -> "Transition":
        if (self.status_before, self.status_after) not in ALLOWED_TRANSITIONS:
            raise ValueError(
                f"Illegal certification transition: "
                f"{self.status_before.value} -> {self.status_after.value}"
            )
        return self

    @property
    def changed(self) -> bool:
        return self.status_before != self.status_after


class EmployeeRecord(BaseModel):
    """Employee fields the engine reads."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    org_id: str
    location_id: str
    first_name: str = ""
    last_name: str | None = None
    full_name: str | None = None
    role: str = ""
    active: bool = True
    certified_status: str | None = None

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        return f"{self.first_name} {self.last_name or ''}".strip()


class AuditSnapshot(BaseModel):
    """Read view of a persisted certification audit row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    employee_id: str
    employee_name: str | None = None
    org_id: str
    location_id: str
    audit_date: date
    status_before: str
    status_after: str
    all_positions_qualified: bool
    position_averages: dict[str, float] = Field(default_factory=dict)
    notes: str | None = None
    created_at: datetime | None = None


class NewAudit(BaseModel):
    """Audit row to insert."""

    employee_id: str
    employee_name: str | None = None
    org_id: str
    location_id: str
    audit_date: date
    status_before: CertificationStatus
    status_after: CertificationStatus
    all_positions_qualified: bool
    position_averages: dict[str, float] = Field(default_factory=dict)
    notes: str | None = None


class PositionAverages(BaseModel):
    """Per-position averages for one employee. Missing position = not scored."""

    employee_id: str
    employee_name: str
    positions: dict[str, float] = Field(default_factory=dict)


class QualificationSnapshot(BaseModel):
    """Aggregator output for one employee and period."""

    averages: PositionAverages
    all_qualified: bool


class EvaluationResult(BaseModel):
    """Outcome of evaluating one employee."""

    employee_id: str
    employee_name: str
    status_before: CertificationStatus
    status_after: CertificationStatus
    position_averages: dict[str, float] = Field(default_factory=dict)
    all_qualified: bool
    notes: str | None = None
    audit_id: str | None = None
    status_updated: bool = False


class MonthlyRunResult(BaseModel):
    """Outcome of the date-gated monthly run."""

    success: bool
    message: str
    audit_date: date | None = None
    next_audit_date: date | None = None
    results: list[EvaluationResult] = Field(default_factory=list)


class LocationEvaluateRequest(BaseModel):
    """POST /v1/certifications/locations/{id}/evaluate request."""

    audit_date: date | None = None


class AuditDayResponse(BaseModel):
    """GET /v1/certifications/audit-day response."""

    year: int
    month: int
    audit_day: date
    next_audit_day: date
    previous_audit_day: date
