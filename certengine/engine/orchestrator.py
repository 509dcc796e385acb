"""Evaluation orchestrator - runs the monthly certification audit per location."""

import logging
from collections.abc import Sequence
from datetime import date

from certengine.config import settings
from certengine.engine.audit_day import audit_day, is_audit_day, next_audit_day_from
from certengine.engine.lifecycle import decide_transition, select_prior_audit
from certengine.engine.qualification import PositionQualificationAggregator, ScoringSource
from certengine.schemas.certification import (
    EmployeeRecord,
    EvaluationResult,
    MonthlyRunResult,
    NewAudit,
    QualificationSnapshot,
    Transition,
)
from certengine.storage.repositories import CertificationStore

logger = logging.getLogger(__name__)

AUDIT_HISTORY_DEPTH = 2


class CertificationEvaluator:
    """
    Drives every active employee at an enrolled location through one step of
    the certification lifecycle and records the outcome.

    Reads happen first for the whole roster; a failed read aborts the location
    before anything is written. Writes are isolated per employee: the audit
    row is inserted, then the employee's status is updated only if it changed.
    Employees already audited on or after the audit date are skipped, so
    re-running a day writes nothing new for them.
    """

    def __init__(
        self,
        store: CertificationStore,
        scoring: ScoringSource,
        threshold: float | None = None,
        eligible_roles: Sequence[str] | None = None,
    ):
        self.store = store
        self.aggregator = PositionQualificationAggregator(scoring, threshold)
        self.eligible_roles = (
            list(settings.eligible_roles) if eligible_roles is None else list(eligible_roles)
        )

    async def evaluate(self, location_id: str, audit_date: date) -> list[EvaluationResult]:
        try:
            enrolled = await self.store.is_location_enrolled(location_id)
        except Exception:
            logger.exception("Could not check enrolment for location %s", location_id)
            return []
        if not enrolled:
            logger.warning(
                "Location %s is not enrolled for certification tracking", location_id
            )
            return []

        try:
            planned = await self._plan(location_id, audit_date)
        except Exception:
            logger.exception(
                "Aborting certification run for location %s: failed to load data",
                location_id,
            )
            return []

        results = [await self._apply(emp, snap, t, audit_date) for emp, snap, t in planned]
        changed = sum(1 for r in results if r.status_before != r.status_after)
        logger.info(
            "Location %s audit %s: evaluated %d employees, %d status changes",
            location_id,
            audit_date.isoformat(),
            len(results),
            changed,
        )
        return results

    async def _plan(self, location_id: str, audit_date: date):
        employees = await self.store.get_active_employees(
            location_id, self.eligible_roles or None
        )
        if not employees:
            return []
        snapshots = await self.aggregator.aggregate_many(employees)

        planned = []
        for employee in employees:
            snapshot = snapshots[employee.id]
            audits = await self.store.get_recent_audits(employee.id, AUDIT_HISTORY_DEPTH)
            if audits and audits[0].audit_date >= audit_date:
                # One audit per employee per audit day; later history is never rewritten
                logger.info(
                    "Skipping %s (%s): already audited on %s",
                    employee.display_name,
                    employee.id,
                    audits[0].audit_date.isoformat(),
                )
                continue
            prior = select_prior_audit(audits, audit_date)
            transition = decide_transition(
                employee.certified_status, snapshot.all_qualified, prior
            )
            planned.append((employee, snapshot, transition))
        return planned

    async def _apply(
        self,
        employee: EmployeeRecord,
        snapshot: QualificationSnapshot,
        transition: Transition,
        audit_date: date,
    ) -> EvaluationResult:
        result = EvaluationResult(
            employee_id=employee.id,
            employee_name=employee.display_name,
            status_before=transition.status_before,
            status_after=transition.status_after,
            position_averages=snapshot.averages.positions,
            all_qualified=snapshot.all_qualified,
            notes=transition.note,
        )
        record = NewAudit(
            employee_id=employee.id,
            employee_name=employee.display_name,
            org_id=employee.org_id,
            location_id=employee.location_id,
            audit_date=audit_date,
            status_before=transition.status_before,
            status_after=transition.status_after,
            all_positions_qualified=snapshot.all_qualified,
            position_averages=snapshot.averages.positions,
            notes=transition.note,
        )
        try:
            result.audit_id = await self.store.insert_audit(record)
        except Exception:
            logger.exception(
                "Failed to insert certification audit for %s (%s); skipping",
                employee.display_name,
                employee.id,
            )
            return result

        # Also rewrites missing/unrecognized stored values to the parsed status
        if not transition.changed and employee.certified_status == transition.status_after.value:
            return result

        try:
            await self.store.update_certified_status(employee.id, transition.status_after)
        except Exception:
            logger.exception(
                "Certification inconsistency: audit %s records %s -> %s for %s (%s) "
                "but the employee status update failed",
                result.audit_id,
                transition.status_before.value,
                transition.status_after.value,
                employee.display_name,
                employee.id,
            )
            return result

        result.status_updated = True
        logger.info(
            "Updated %s: %s -> %s",
            employee.display_name,
            transition.status_before.value,
            transition.status_after.value,
        )
        return result

    async def run_monthly_evaluation(self, today: date) -> MonthlyRunResult:
        """Evaluate every enrolled location, but only on this month's audit day."""
        if not is_audit_day(today):
            next_day = next_audit_day_from(today)
            logger.warning(
                "Skipping certification run on %s; next audit day is %s",
                today.isoformat(),
                next_day.isoformat(),
            )
            return MonthlyRunResult(
                success=False,
                message=(
                    "Today is not a certification audit day. "
                    f"Next audit day: {next_day.isoformat()}"
                ),
                next_audit_date=next_day,
            )

        reference = audit_day(today.year, today.month)
        try:
            location_ids = await self.store.list_enrolled_location_ids()
        except Exception:
            logger.exception("Could not load enrolled locations")
            return MonthlyRunResult(
                success=False,
                message="Could not load enrolled locations",
                audit_date=reference,
            )

        all_results: list[EvaluationResult] = []
        for location_id in location_ids:
            all_results.extend(await self.evaluate(location_id, reference))

        changes = sum(1 for r in all_results if r.status_before != r.status_after)
        return MonthlyRunResult(
            success=True,
            message=(
                f"Certification audit evaluated {len(all_results)} employees "
                f"across {len(location_ids)} locations. {changes} status changes."
            ),
            audit_date=reference,
            results=all_results,
        )
