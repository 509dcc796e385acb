"""Position qualification - score validation, averages and the all-qualified verdict."""

import math
from collections.abc import Iterable, Mapping
from numbers import Real
from typing import Any, Protocol

from certengine.config import settings
from certengine.schemas.certification import (
    EmployeeRecord,
    PositionAverages,
    QualificationSnapshot,
)

MIN_SCORE = 0.0
MAX_SCORE = 3.0


def is_valid_score(value: Any) -> bool:
    """Real number (not bool, not NaN) within [0, 3]."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    value = float(value)
    if math.isnan(value):
        return False
    return MIN_SCORE <= value <= MAX_SCORE


def clean_position_scores(raw: Mapping[str, Any] | None) -> dict[str, float]:
    """Keep only named positions with valid scores. Nothing is coerced."""
    if not raw:
        return {}
    cleaned: dict[str, float] = {}
    for position, score in raw.items():
        if not isinstance(position, str) or not position.strip():
            continue
        if is_valid_score(score):
            cleaned[position] = float(score)
    return cleaned


def average_scores(scores: Iterable[Any]) -> float | None:
    """Mean of the valid scores, None when there are none."""
    valid = [float(s) for s in scores if is_valid_score(s)]
    if not valid:
        return None
    return sum(valid) / len(valid)


def all_positions_qualified(
    positions: Mapping[str, float],
    threshold: float | None = None,
) -> bool:
    """No positions means not qualified; otherwise every average must meet threshold.

    `threshold` defaults to settings.certification_threshold (2.85).
    """
    if not positions:
        return False
    if threshold is None:
        threshold = settings.certification_threshold
    return all(avg >= threshold for avg in positions.values())


class ScoringSource(Protocol):
    """Answers: for this employee, what is each position's recent average?"""

    async def position_scores(self, employee: EmployeeRecord) -> Mapping[str, Any]:
        ...


class PositionQualificationAggregator:
    """Builds PositionAverages and the qualification verdict from a ScoringSource."""

    def __init__(self, source: ScoringSource, threshold: float | None = None):
        self._source = source
        self.threshold = settings.certification_threshold if threshold is None else threshold

    async def aggregate(self, employee: EmployeeRecord) -> QualificationSnapshot:
        raw = await self._source.position_scores(employee)
        positions = clean_position_scores(raw)
        averages = PositionAverages(
            employee_id=employee.id,
            employee_name=employee.display_name,
            positions=positions,
        )
        return QualificationSnapshot(
            averages=averages,
            all_qualified=all_positions_qualified(positions, self.threshold),
        )

    async def aggregate_many(
        self, employees: Iterable[EmployeeRecord]
    ) -> dict[str, QualificationSnapshot]:
        return {e.id: await self.aggregate(e) for e in employees}
