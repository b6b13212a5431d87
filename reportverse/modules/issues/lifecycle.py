"""
Issue status transitions

    Open ──→ Under Review ──→ Resolved ──→ Closed
      │            │  ↺            ↑           ↑
      └────────────┴───────────────┴───────────┘

Re-applying the current status is always allowed and changes nothing.
Closed is terminal; a closed issue accepts no comments either.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Set

from reportverse.core.exceptions import InvalidTransitionError, IssueClosedError
from reportverse.models.issue import IssueStatus


ISSUE_TRANSITIONS: Dict[IssueStatus, Set[IssueStatus]] = {
    IssueStatus.OPEN: {IssueStatus.UNDER_REVIEW, IssueStatus.RESOLVED, IssueStatus.CLOSED},
    IssueStatus.UNDER_REVIEW: {IssueStatus.UNDER_REVIEW, IssueStatus.RESOLVED, IssueStatus.CLOSED},
    IssueStatus.RESOLVED: {IssueStatus.CLOSED},
    IssueStatus.CLOSED: set(),
}


@dataclass
class StatusTransition:
    """Outcome of applying a requested status to an issue"""
    from_status: IssueStatus
    to_status: IssueStatus

    @property
    def changed(self) -> bool:
        return self.from_status != self.to_status


def parse_status(value: Optional[str]) -> Optional[IssueStatus]:
    """Map a client-supplied status string to the enum. Unknown values give None."""
    if value is None:
        return None
    try:
        return IssueStatus(value)
    except ValueError:
        return None


def can_transition(current: IssueStatus, requested: IssueStatus) -> bool:
    if current == requested:
        return True
    return requested in ISSUE_TRANSITIONS.get(current, set())


def ensure_open_for_comments(current: IssueStatus) -> None:
    if current == IssueStatus.CLOSED:
        raise IssueClosedError()


def apply_transition(current: IssueStatus, requested: IssueStatus) -> StatusTransition:
    """Validate ``current -> requested``; raises InvalidTransitionError when not allowed"""
    if not can_transition(current, requested):
        raise InvalidTransitionError(current.value, requested.value)
    return StatusTransition(from_status=current, to_status=requested)
