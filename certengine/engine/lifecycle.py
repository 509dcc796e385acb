"""Certification state machine - monthly transitions with hysteresis."""

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from certengine.schemas.certification import CertificationStatus, Transition

NOTE_PROMOTED_TO_PENDING = "qualified two consecutive periods"
NOTE_PENDING_DROPPED = "dropped below threshold while Pending"
NOTE_MOVED_TO_PIP = "two consecutive unqualified periods while Certified"
NOTE_CERTIFIED_WARNING = "warning: below threshold, will move to PIP next period if unresolved"
NOTE_PIP_RECOVERED = "improved back above threshold"
NOTE_PIP_FAILED = "did not improve within PIP period"


class PriorAudit(Protocol):
    """Fields of the previous audit the machine looks at."""

    audit_date: date
    status_after: str
    all_positions_qualified: bool


def select_prior_audit(
    audits: Sequence[PriorAudit], audit_date: date
) -> PriorAudit | None:
    """
    Pick the previous period's audit from recent audits (newest first).

    Rows dated on or after `audit_date` are ignored; only earlier periods count.
    """
    for audit in audits:
        if audit.audit_date < audit_date:
            return audit
    return None


def decide_transition(
    current: CertificationStatus | str | None,
    qualified: bool,
    prior_audit: PriorAudit | None = None,
) -> Transition:
    """
    Next status for one employee.

    Never promotes Pending to Certified; that is a manual action.
    Unknown `current` values are treated as Not Certified.
    """
    status = CertificationStatus.parse(current)
    prior_qualified = bool(prior_audit and prior_audit.all_positions_qualified)

    if status is CertificationStatus.NOT_CERTIFIED:
        if qualified and prior_qualified:
            return Transition(
                status_before=status,
                status_after=CertificationStatus.PENDING,
                note=NOTE_PROMOTED_TO_PENDING,
            )
        return Transition(status_before=status, status_after=status)

    if status is CertificationStatus.PENDING:
        if qualified:
            return Transition(status_before=status, status_after=status)
        return Transition(
            status_before=status,
            status_after=CertificationStatus.NOT_CERTIFIED,
            note=NOTE_PENDING_DROPPED,
        )

    if status is CertificationStatus.CERTIFIED:
        if qualified:
            return Transition(status_before=status, status_after=status)
        second_miss = (
            prior_audit is not None
            and CertificationStatus.parse(prior_audit.status_after) is CertificationStatus.CERTIFIED
            and not prior_audit.all_positions_qualified
        )
        if second_miss:
            return Transition(
                status_before=status,
                status_after=CertificationStatus.PIP,
                note=NOTE_MOVED_TO_PIP,
            )
        return Transition(
            status_before=status, status_after=status, note=NOTE_CERTIFIED_WARNING
        )

    # PIP
    if qualified:
        return Transition(
            status_before=status,
            status_after=CertificationStatus.CERTIFIED,
            note=NOTE_PIP_RECOVERED,
        )
    return Transition(
        status_before=status,
        status_after=CertificationStatus.NOT_CERTIFIED,
        note=NOTE_PIP_FAILED,
    )
