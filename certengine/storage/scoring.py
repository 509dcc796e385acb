"""Ratings-table scoring source: rolling per-position averages."""

from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from certengine.config import settings
from certengine.engine.qualification import average_scores, is_valid_score
from certengine.models import Rating
from certengine.schemas.certification import EmployeeRecord


class RatingsScoringSource:
    """
    Averages the `window` most recent valid ratings per position.

    Ratings with a missing or out-of-range rating_avg are skipped before the
    window is taken, so they never push an older valid rating out.
    """

    def __init__(self, db: AsyncSession, window: int | None = None):
        self.db = db
        self.window = settings.rating_window if window is None else window

    async def position_scores(self, employee: EmployeeRecord) -> dict[str, float]:
        result = await self.db.execute(
            select(Rating.position, Rating.rating_avg)
            .where(Rating.employee_id == employee.id)
            .order_by(Rating.created_at.desc())
        )
        by_position: dict[str, list[float]] = defaultdict(list)
        for position, rating_avg in result.all():
            if not position or not is_valid_score(rating_avg):
                continue
            if len(by_position[position]) < self.window:
                by_position[position].append(rating_avg)

        averages = {}
        for position, scores in by_position.items():
            avg = average_scores(scores)
            if avg is not None:
                averages[position] = avg
        return averages
