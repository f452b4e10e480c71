"""Case status transitions.

Pending -> In Progress (assignment) -> Solved (completion), plus
Pending -> Solved since completion does not require an assignment.
Solved is terminal. Every write path that can touch Customer.status
goes through ensure_transition.
"""

from recovery_crm.db.enums import CaseStatus


ALLOWED_TRANSITIONS: dict[CaseStatus, frozenset[CaseStatus]] = {
    CaseStatus.PENDING: frozenset({CaseStatus.IN_PROGRESS, CaseStatus.SOLVED}),
    CaseStatus.IN_PROGRESS: frozenset({CaseStatus.SOLVED}),
    CaseStatus.SOLVED: frozenset(),
}


class InvalidTransitionError(Exception):
    """Raised when a status change is not allowed."""
    pass


def can_transition(current: str, target: str) -> bool:
    try:
        source = CaseStatus(current)
        destination = CaseStatus(target)
    except ValueError:
        return False
    if source == destination:
        return source != CaseStatus.SOLVED
    return destination in ALLOWED_TRANSITIONS[source]


def ensure_transition(current: str, target: str) -> bool:
    """
    Validate a status change.

    Returns:
        True if the status actually changes, False for a same-state no-op

    Raises:
        InvalidTransitionError: If the target is unknown, the case is
            already solved, or the move goes backwards
    """
    if not any(target == s.value for s in CaseStatus):
        raise InvalidTransitionError(f"Invalid status: {target}")
    if current == CaseStatus.SOLVED.value:
        raise InvalidTransitionError("Case is already solved")
    if not can_transition(current, target):
        raise InvalidTransitionError(
            f"Cannot change status from {current} to {target}"
        )
    return current != target
