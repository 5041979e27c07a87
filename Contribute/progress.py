"""
Contributor progress as an explicit state.

The progress markers on a contributor row encode a linear flow
(review -> preferences -> interview -> completed). ``derive_state`` turns the
markers into one ``ProgressState``; the contributor-facing step router and the
admin status badge both read from that state.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ProgressState(str, Enum):
    NOT_STARTED = "not_started"
    ALGORITHM_PENDING = "algorithm_pending"
    PREFERENCES_PENDING = "preferences_pending"
    INTERVIEWING = "interviewing"
    COMPLETED = "completed"


class Step(str, Enum):
    REVIEW = "review"
    PREFERENCES = "preferences"
    INTERVIEW = "interview"


STATUS_LABELS = {
    ProgressState.COMPLETED: "Completed",
    ProgressState.INTERVIEWING: "In Interview",
    ProgressState.PREFERENCES_PENDING: "Filling Prefs",
    ProgressState.ALGORITHM_PENDING: "Not Started",
    ProgressState.NOT_STARTED: "Not Started",
}

STEP_FOR_STATE = {
    ProgressState.COMPLETED: Step.INTERVIEW,
    ProgressState.INTERVIEWING: Step.INTERVIEW,
    ProgressState.PREFERENCES_PENDING: Step.PREFERENCES,
    ProgressState.ALGORITHM_PENDING: Step.REVIEW,
    ProgressState.NOT_STARTED: Step.PREFERENCES,
}


@dataclass(frozen=True)
class ContributorFlags:
    interview_completed: bool = False
    allocation_prefs_submitted_at: Optional[datetime] = None
    algorithm_acknowledged_at: Optional[datetime] = None
    session_id: Optional[int] = None
    algorithm_text: Optional[str] = None

    @classmethod
    def from_contributor(cls, contributor) -> "ContributorFlags":
        session = contributor.session if contributor.session_id else None
        return cls(
            interview_completed=bool(contributor.interview_completed),
            allocation_prefs_submitted_at=contributor.allocation_prefs_submitted_at,
            algorithm_acknowledged_at=contributor.algorithm_acknowledged_at,
            session_id=contributor.session_id,
            algorithm_text=session.algorithm_text if session else None,
        )


def derive_state(flags: ContributorFlags) -> ProgressState:
    """First match wins; never touches the database."""
    if flags.interview_completed:
        return ProgressState.COMPLETED
    if flags.allocation_prefs_submitted_at:
        return ProgressState.INTERVIEWING
    if flags.algorithm_acknowledged_at:
        return ProgressState.PREFERENCES_PENDING
    if flags.session_id and (flags.algorithm_text or "").strip():
        return ProgressState.ALGORITHM_PENDING
    return ProgressState.NOT_STARTED


def route_step(flags: ContributorFlags) -> Step:
    return STEP_FOR_STATE[derive_state(flags)]


def status_label(flags: ContributorFlags) -> str:
    return STATUS_LABELS[derive_state(flags)]


def contributor_state(contributor) -> ProgressState:
    return derive_state(ContributorFlags.from_contributor(contributor))
