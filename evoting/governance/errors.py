"""
Governance Errors

Every failure the engine can report is a caller-input or timing error with a
fixed contract error code. Stores raise the matching ``GovernanceError``
subclass; the contract boundary turns it into a failed ``CallResult``.
"""

from enum import IntEnum
from typing import Dict, Type

from ..constants import (
    ERR_ALREADY_CLAIMED,
    ERR_ALREADY_VOTED,
    ERR_DISTRIBUTION_UNDEFINED,
    ERR_INSUFFICIENT_STAKE,
    ERR_INVALID_DEADLINE,
    ERR_INVALID_DESCRIPTION,
    ERR_INVALID_POINTS,
    ERR_INVALID_REWARD_POOL,
    ERR_PROPOSAL_ACTIVE,
    ERR_PROPOSAL_NOT_FINALIZED,
    ERR_PROPOSAL_NOT_FOUND,
    ERR_TRANSFER_FAILED,
    ERR_UNAUTHORIZED,
    ERR_VOTING_CLOSED,
)


class ErrorKind(IntEnum):
    """Enumerated engine outcomes; the value is the contract error code."""
    PROPOSAL_NOT_FOUND = ERR_PROPOSAL_NOT_FOUND
    VOTING_CLOSED = ERR_VOTING_CLOSED
    ALREADY_VOTED = ERR_ALREADY_VOTED
    INSUFFICIENT_STAKE = ERR_INSUFFICIENT_STAKE
    INVALID_DEADLINE = ERR_INVALID_DEADLINE
    UNAUTHORIZED = ERR_UNAUTHORIZED
    PROPOSAL_ACTIVE = ERR_PROPOSAL_ACTIVE
    PROPOSAL_NOT_FINALIZED = ERR_PROPOSAL_NOT_FINALIZED
    TRANSFER_FAILED = ERR_TRANSFER_FAILED
    ALREADY_CLAIMED = ERR_ALREADY_CLAIMED
    DISTRIBUTION_UNDEFINED = ERR_DISTRIBUTION_UNDEFINED
    INVALID_DESCRIPTION = ERR_INVALID_DESCRIPTION
    INVALID_REWARD_POOL = ERR_INVALID_REWARD_POOL
    INVALID_POINTS = ERR_INVALID_POINTS

    def __str__(self) -> str:
        return f"err u{self.value}"


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class GovernanceError(Exception):
    """Base governance exception."""
    kind: ErrorKind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.name)
        self.message = message or self.kind.name

    def __str__(self) -> str:
        return f"{self.kind} {self.message}"


class ProposalNotFoundError(GovernanceError):
    """No proposal with the given id."""
    kind = ErrorKind.PROPOSAL_NOT_FOUND


class VotingClosedError(GovernanceError):
    """Voting deadline has passed."""
    kind = ErrorKind.VOTING_CLOSED


class AlreadyVotedError(GovernanceError):
    """Voter already cast a vote on this proposal."""
    kind = ErrorKind.ALREADY_VOTED


class InsufficientStakeError(GovernanceError):
    """Vote weight is not positive."""
    kind = ErrorKind.INSUFFICIENT_STAKE


class InvalidDeadlineError(GovernanceError):
    """Deadline is earlier than the minimum proposal duration allows."""
    kind = ErrorKind.INVALID_DEADLINE


class UnauthorizedError(GovernanceError):
    """Caller is not allowed to perform this action."""
    kind = ErrorKind.UNAUTHORIZED


class ProposalActiveError(GovernanceError):
    """Finalization attempted before the deadline passed."""
    kind = ErrorKind.PROPOSAL_ACTIVE


class ProposalNotFinalizedError(GovernanceError):
    """Reward claimed on a proposal that is still active."""
    kind = ErrorKind.PROPOSAL_NOT_FINALIZED


class TransferFailedError(GovernanceError):
    """Payout hook refused the reward transfer."""
    kind = ErrorKind.TRANSFER_FAILED


class AlreadyClaimedError(GovernanceError):
    """Reward for this (proposal, voter) pair was already paid."""
    kind = ErrorKind.ALREADY_CLAIMED


class DistributionUndefinedError(GovernanceError):
    """Reward share requested on a proposal with zero total votes."""
    kind = ErrorKind.DISTRIBUTION_UNDEFINED


class InvalidDescriptionError(GovernanceError):
    """Description is empty or too long."""
    kind = ErrorKind.INVALID_DESCRIPTION


class InvalidRewardPoolError(GovernanceError):
    """Reward pool is below the configured minimum."""
    kind = ErrorKind.INVALID_REWARD_POOL


class InvalidPointsError(GovernanceError):
    """Reputation points must be non-negative."""
    kind = ErrorKind.INVALID_POINTS


_ERRORS_BY_KIND: Dict[ErrorKind, Type[GovernanceError]] = {
    cls.kind: cls
    for cls in GovernanceError.__subclasses__()
}


def error_for(kind: ErrorKind, message: str = "") -> GovernanceError:
    """Build the exception matching *kind*."""
    return _ERRORS_BY_KIND[kind](message)
