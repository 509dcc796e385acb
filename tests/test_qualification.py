"""Unit tests for position qualification."""

import asyncio
import math

from certengine.engine.qualification import (
    PositionQualificationAggregator,
    all_positions_qualified,
    average_scores,
    clean_position_scores,
    is_valid_score,
)
from certengine.schemas.certification import EmployeeRecord


def _employee(**kw):
    data = {"id": "emp-1", "org_id": "org-1", "location_id": "loc-1", "first_name": "Ana"}
    data.update(kw)
    return EmployeeRecord(**data)


def test_empty_is_never_qualified():
    """Not rated yet is different from rated and passing."""
    assert all_positions_qualified({}) is False
    assert all_positions_qualified({}, threshold=0.0) is False


def test_threshold_is_inclusive():
    assert all_positions_qualified({"iPOS": 2.85}) is True
    assert all_positions_qualified({"iPOS": 2.84, "Host": 3.0}) is False


def test_custom_threshold():
    assert all_positions_qualified({"Bagging": 2.76}, threshold=2.75) is True


def test_valid_scores():
    assert is_valid_score(0)
    assert is_valid_score(3)
    assert is_valid_score(2.5)
    assert not is_valid_score(3.01)
    assert not is_valid_score(-0.1)
    assert not is_valid_score("2.9")
    assert not is_valid_score(None)
    assert not is_valid_score(True)
    assert not is_valid_score(math.nan)


def test_clean_discards_instead_of_coercing():
    raw = {"iPOS": "3.0", "Host": 2.9, "Drive Thru": 4.2, "": 3.0, "Runner": None}
    assert clean_position_scores(raw) == {"Host": 2.9}


def test_average_scores_skips_invalid():
    assert average_scores([3.0, 2.0, "x", 7]) == 2.5
    assert average_scores([]) is None


class _StaticSource:
    def __init__(self, scores):
        self.scores = scores

    async def position_scores(self, employee):
        return self.scores


def test_aggregator_snapshot():
    """Aggregator cleans scores, names the employee and applies the threshold."""
    source = _StaticSource({"iPOS": 2.9, "Host": 3.0, "Bogus": 9})
    aggregator = PositionQualificationAggregator(source, threshold=2.85)
    snap = asyncio.run(aggregator.aggregate(_employee(last_name="Lopez")))
    assert snap.averages.employee_name == "Ana Lopez"
    assert snap.averages.positions == {"iPOS": 2.9, "Host": 3.0}
    assert snap.all_qualified is True


def test_aggregator_unscored_employee():
    aggregator = PositionQualificationAggregator(_StaticSource({}), threshold=2.85)
    snap = asyncio.run(aggregator.aggregate(_employee(full_name="Ana L.")))
    assert snap.averages.positions == {}
    assert snap.averages.employee_name == "Ana L."
    assert snap.all_qualified is False


def test_aggregate_many_keys_by_employee():
    aggregator = PositionQualificationAggregator(_StaticSource({"iPOS": 2.0}), threshold=2.85)
    snaps = asyncio.run(aggregator.aggregate_many([_employee(), _employee(id="emp-2")]))
    assert set(snaps) == {"emp-1", "emp-2"}
    assert not snaps["emp-2"].all_qualified
