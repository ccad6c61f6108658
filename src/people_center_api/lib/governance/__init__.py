"""Governance decision workflow rules.

Public API:
    - ``tally_votes``: Consensus rate and derived status for a vote tally
    - ``VoteTally``: Result of :func:`tally_votes`
    - ``check_manual_transition``: Validate an admin-initiated status change
    - ``MANUAL_TRANSITIONS``: Forward path allowed for manual changes
    - ``INITIAL_STATUSES``: Statuses a decision may start in without votes
"""

from people_center_api.lib.governance.consensus import (
    INITIAL_STATUSES,
    MANUAL_TRANSITIONS,
    VoteTally,
    check_manual_transition,
    tally_votes,
)

__all__ = [
    "INITIAL_STATUSES",
    "MANUAL_TRANSITIONS",
    "VoteTally",
    "check_manual_transition",
    "tally_votes",
]
