"""Unit tests for the certification state machine."""

from datetime import date

import pytest
from pydantic import ValidationError

from certengine.engine.lifecycle import (
    NOTE_CERTIFIED_WARNING,
    NOTE_MOVED_TO_PIP,
    decide_transition,
    select_prior_audit,
)
from certengine.schemas.certification import (
    ALLOWED_TRANSITIONS,
    AuditSnapshot,
    CertificationStatus as S,
    Transition,
)


def _audit(status_after, qualified, audit_date=date(2025, 10, 20)):
    return AuditSnapshot(
        id="a1",
        employee_id="emp-1",
        org_id="org-1",
        location_id="loc-1",
        audit_date=audit_date,
        status_before=status_after,
        status_after=status_after,
        all_positions_qualified=qualified,
    )


@pytest.mark.parametrize(
    "current, qualified, prior, expected, note_fragment",
    [
        (S.NOT_CERTIFIED, False, None, S.NOT_CERTIFIED, None),
        (S.NOT_CERTIFIED, True, None, S.NOT_CERTIFIED, None),
        (S.NOT_CERTIFIED, True, ("Not Certified", False), S.NOT_CERTIFIED, None),
        (S.NOT_CERTIFIED, True, ("Not Certified", True), S.PENDING, "two consecutive periods"),
        (S.PENDING, True, None, S.PENDING, None),
        (S.PENDING, False, None, S.NOT_CERTIFIED, "while Pending"),
        (S.CERTIFIED, True, ("Certified", False), S.CERTIFIED, None),
        (S.CERTIFIED, False, None, S.CERTIFIED, "warning"),
        (S.CERTIFIED, False, ("Certified", True), S.CERTIFIED, "warning"),
        (S.CERTIFIED, False, ("Certified", False), S.PIP, "two consecutive unqualified"),
        (S.CERTIFIED, False, ("PIP", False), S.CERTIFIED, "warning"),
        (S.PIP, True, None, S.CERTIFIED, "improved"),
        (S.PIP, False, None, S.NOT_CERTIFIED, "did not improve"),
    ],
)
def test_transition_table(current, qualified, prior, expected, note_fragment):
    """Each row of the lifecycle table."""
    prior_audit = _audit(*prior) if prior else None
    t = decide_transition(current, qualified, prior_audit)
    assert t.status_before == current
    assert t.status_after == expected
    if note_fragment is None:
        assert t.note is None
    else:
        assert note_fragment in t.note


@pytest.mark.parametrize("current", list(S))
@pytest.mark.parametrize("qualified", [True, False])
def test_every_combination_is_an_allowed_edge(current, qualified):
    """All 4x2 combinations produce a legal edge and never raise."""
    for prior in (None, _audit("Certified", False), _audit("Not Certified", True)):
        t = decide_transition(current, qualified, prior)
        assert (t.status_before, t.status_after) in ALLOWED_TRANSITIONS


def test_hysteresis_single_miss_only_warns():
    first = decide_transition(S.CERTIFIED, False, _audit("Certified", True))
    assert first.status_after == S.CERTIFIED
    assert first.note == NOTE_CERTIFIED_WARNING
    second = decide_transition(S.CERTIFIED, False, _audit("Certified", False))
    assert second.status_after == S.PIP
    assert second.note == NOTE_MOVED_TO_PIP


def test_pending_is_never_auto_certified():
    for prior in (None, _audit("Pending", True), _audit("Certified", True)):
        assert decide_transition(S.PENDING, True, prior).status_after == S.PENDING


@pytest.mark.parametrize("raw", [None, "", "Gold", "certified-ish"])
def test_malformed_status_is_not_certified(raw):
    t = decide_transition(raw, True, _audit("Not Certified", True))
    assert t.status_before == S.NOT_CERTIFIED
    assert t.status_after == S.PENDING


def test_status_parse_accepts_stored_and_member_names():
    assert S.parse("Not Certified") is S.NOT_CERTIFIED
    assert S.parse("NotCertified") is S.NOT_CERTIFIED
    assert S.parse("pip") is S.PIP
    assert S.parse(S.CERTIFIED) is S.CERTIFIED


def test_illegal_transition_cannot_be_built():
    with pytest.raises(ValidationError):
        Transition(status_before=S.PENDING, status_after=S.CERTIFIED)
    with pytest.raises(ValidationError):
        Transition(status_before=S.NOT_CERTIFIED, status_after=S.CERTIFIED)


def test_select_prior_audit_skips_same_day_rows():
    """A re-run of an audit day compares against the period before it."""
    today = _audit("Pending", True, audit_date=date(2025, 11, 24))
    last_month = _audit("Not Certified", True, audit_date=date(2025, 10, 20))
    assert select_prior_audit([today, last_month], date(2025, 11, 24)) is last_month
    assert select_prior_audit([today], date(2025, 11, 24)) is None
    assert select_prior_audit([], date(2025, 11, 24)) is None
