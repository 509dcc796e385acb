"""Certification endpoints - scheduler trigger, manual re-run, calendar and history."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from certengine.auth.middleware import CronDep
from certengine.database import get_db
from certengine.engine.audit_day import (
    audit_day,
    next_audit_day_from,
    previous_audit_day_from,
)
from certengine.engine.orchestrator import CertificationEvaluator
from certengine.schemas.certification import (
    AuditDayResponse,
    AuditSnapshot,
    EvaluationResult,
    LocationEvaluateRequest,
    MonthlyRunResult,
)
from certengine.storage.repositories import SqlCertificationStore
from certengine.storage.scoring import RatingsScoringSource

router = APIRouter()


async def get_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SqlCertificationStore:
    return SqlCertificationStore(db)


async def get_evaluator(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CertificationEvaluator:
    return CertificationEvaluator(SqlCertificationStore(db), RatingsScoringSource(db))


EvaluatorDep = Annotated[CertificationEvaluator, Depends(get_evaluator)]
StoreDep = Annotated[SqlCertificationStore, Depends(get_store)]


@router.post("/certifications/run", response_model=MonthlyRunResult)
async def run_monthly(
    _: CronDep,
    evaluator: EvaluatorDep,
    today: date | None = None,
):
    """
    Scheduler trigger. Safe to call daily: evaluates only on the audit day.
    `today` overrides the server date.
    """
    return await evaluator.run_monthly_evaluation(today or date.today())


@router.post(
    "/certifications/locations/{location_id}/evaluate",
    response_model=list[EvaluationResult],
)
async def evaluate_location(
    location_id: str,
    _: CronDep,
    evaluator: EvaluatorDep,
    body: LocationEvaluateRequest | None = None,
):
    """Manually evaluate one location for an audit date (default: latest audit day)."""
    audit_date = (body.audit_date if body else None) or previous_audit_day_from(date.today())
    return await evaluator.evaluate(location_id, audit_date)


@router.get("/certifications/audit-day", response_model=AuditDayResponse)
async def get_audit_day(
    year: Annotated[int | None, Query(ge=1, le=9999)] = None,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
):
    """Audit day for a month, plus next/previous audit days from today."""
    today = date.today()
    year = year or today.year
    month = month or today.month
    try:
        day = audit_day(year, month)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    return AuditDayResponse(
        year=year,
        month=month,
        audit_day=day,
        next_audit_day=next_audit_day_from(today),
        previous_audit_day=previous_audit_day_from(today),
    )


@router.get(
    "/certifications/employees/{employee_id}/audits",
    response_model=list[AuditSnapshot],
)
async def get_employee_audits(
    employee_id: str,
    store: StoreDep,
    limit: Annotated[int, Query(ge=1, le=120)] = 24,
):
    """Certification audit history for an employee, newest first."""
    return await store.get_audit_history(employee_id, limit=limit)
