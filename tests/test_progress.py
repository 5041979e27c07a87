import itertools
from datetime import datetime, timezone

import pytest

from Contribute.progress import (
    ContributorFlags,
    ProgressState,
    Step,
    contributor_state,
    derive_state,
    route_step,
    status_label,
)

STAMP = datetime(2025, 1, 1, tzinfo=timezone.utc)

ALL_FLAGS = [
    ContributorFlags(
        interview_completed=completed,
        allocation_prefs_submitted_at=prefs,
        algorithm_acknowledged_at=ack,
        session_id=session_id,
        algorithm_text=text,
    )
    for completed, prefs, ack, session_id, text in itertools.product(
        (False, True), (None, STAMP), (None, STAMP), (None, 7), (None, "", "  ", "algo")
    )
]


@pytest.mark.parametrize("flags", ALL_FLAGS)
def test_routing_is_deterministic(flags):
    assert route_step(flags) == route_step(ContributorFlags(**flags.__dict__))
    assert derive_state(flags) == derive_state(flags)


@pytest.mark.parametrize("flags", [f for f in ALL_FLAGS if f.interview_completed])
def test_completed_always_routes_to_interview(flags):
    assert derive_state(flags) == ProgressState.COMPLETED
    assert route_step(flags) == Step.INTERVIEW


def test_submitted_preferences_route_to_interview():
    flags = ContributorFlags(allocation_prefs_submitted_at=STAMP, session_id=1, algorithm_text="algo")
    assert route_step(flags) == Step.INTERVIEW
    assert status_label(flags) == "In Interview"


def test_acknowledged_without_preferences_goes_to_preferences_not_review():
    flags = ContributorFlags(algorithm_acknowledged_at=STAMP, session_id=1, algorithm_text="algo")
    assert route_step(flags) == Step.PREFERENCES
    assert status_label(flags) == "Filling Prefs"


def test_session_with_algorithm_routes_to_review():
    flags = ContributorFlags(session_id=1, algorithm_text="algo")
    assert derive_state(flags) == ProgressState.ALGORITHM_PENDING
    assert route_step(flags) == Step.REVIEW


@pytest.mark.parametrize("session_id,text", [(None, None), (None, "algo"), (1, None), (1, ""), (1, "   ")])
def test_no_algorithm_routes_to_preferences(session_id, text):
    flags = ContributorFlags(session_id=session_id, algorithm_text=text)
    assert route_step(flags) == Step.PREFERENCES
    assert status_label(flags) == "Not Started"


def test_status_labels_match_console_badges():
    assert status_label(ContributorFlags(interview_completed=True)) == "Completed"
    assert status_label(ContributorFlags()) == "Not Started"


@pytest.mark.django_db
def test_state_from_contributor_row(reviewing_contributor):
    assert contributor_state(reviewing_contributor) == ProgressState.ALGORITHM_PENDING
    reviewing_contributor.algorithm_acknowledged_at = STAMP
    assert contributor_state(reviewing_contributor) == ProgressState.PREFERENCES_PENDING
