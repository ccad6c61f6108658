"""Consensus math and status transition rules for governance decisions."""

from dataclasses import dataclass

from people_center_api.models.governance import DecisionStatus

DEFAULT_CONSENSUS_THRESHOLD = 70

# Admin-initiated moves. Approved and Rejected are reached through votes only.
MANUAL_TRANSITIONS: dict[DecisionStatus, frozenset[DecisionStatus]] = {
    DecisionStatus.PROPOSED: frozenset({DecisionStatus.IN_DELIBERATION}),
    DecisionStatus.IN_DELIBERATION: frozenset({DecisionStatus.VOTING}),
    DecisionStatus.VOTING: frozenset(),
    DecisionStatus.APPROVED: frozenset({DecisionStatus.IMPLEMENTED}),
    DecisionStatus.REJECTED: frozenset(),
    DecisionStatus.IMPLEMENTED: frozenset(),
}

# Statuses a decision may be created in without a vote count.
INITIAL_STATUSES: frozenset[DecisionStatus] = frozenset(
    {DecisionStatus.PROPOSED, DecisionStatus.IN_DELIBERATION, DecisionStatus.VOTING}
)


@dataclass(frozen=True)
class VoteTally:
    """Outcome of a vote count.

    Attributes:
        total_votes: ``votes_for + votes_against``.
        consensus_rate: Rounded percentage of votes in favour (0 with no votes).
        status: ``Approved`` or ``Rejected`` once votes exist, otherwise None.
    """

    votes_for: int
    votes_against: int
    total_votes: int
    consensus_rate: int
    status: DecisionStatus | None


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; 62.5 must become 63.
    return int(value + 0.5)


def tally_votes(votes_for: int, votes_against: int, threshold: int = DEFAULT_CONSENSUS_THRESHOLD) -> VoteTally:
    """Compute the consensus rate and the status a vote count settles on.

    Args:
        votes_for: Votes in favour (non-negative).
        votes_against: Votes against (non-negative).
        threshold: Consensus rate at or above which the decision is approved.

    Returns:
        The computed :class:`VoteTally`.

    Raises:
        ValueError: If either count is negative.
    """
    if votes_for < 0 or votes_against < 0:
        msg = "Vote counts cannot be negative"
        raise ValueError(msg)
    total = votes_for + votes_against
    if total == 0:
        return VoteTally(votes_for, votes_against, 0, 0, None)
    rate = _round_half_up(votes_for / total * 100)
    status = DecisionStatus.APPROVED if rate >= threshold else DecisionStatus.REJECTED
    return VoteTally(votes_for, votes_against, total, rate, status)


def check_manual_transition(current: str, target: str) -> bool:
    """Whether an admin may move a decision from ``current`` to ``target``.

    Re-asserting the current status is always allowed.
    """
    if current == target:
        return True
    try:
        allowed = MANUAL_TRANSITIONS[DecisionStatus(current)]
    except ValueError:
        return False
    return DecisionStatus(target) in allowed
