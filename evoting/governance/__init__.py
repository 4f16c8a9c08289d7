"""
eVoting Governance Engine

Provides:
  - ProposalStatus / Proposal / ProposalStore        (proposals.py)
  - VoteRecord / VotingEngine                         (voting.py)
  - FinalizationEngine                                (finalization.py)
  - RewardDistributor / RewardClaim                   (rewards.py)
  - DelegationRegistry / CategoryRegistry             (delegation.py, categories.py)
  - TimeLockManager / TimeLockEntry                   (timelock.py)
  - ReputationLedger                                  (reputation.py)
  - GovernanceContract / CallContext / CallResult     (contract.py)
"""

from .errors import (
    AlreadyClaimedError,
    AlreadyVotedError,
    DistributionUndefinedError,
    ErrorKind,
    GovernanceError,
    InsufficientStakeError,
    InvalidDeadlineError,
    InvalidDescriptionError,
    InvalidPointsError,
    InvalidRewardPoolError,
    ProposalActiveError,
    ProposalNotFinalizedError,
    ProposalNotFoundError,
    TransferFailedError,
    UnauthorizedError,
    VotingClosedError,
)
from .proposals import (
    Proposal,
    ProposalStatus,
    ProposalStore,
    VoteTally,
)
from .voting import (
    VoteRecord,
    VotingEngine,
)
from .finalization import FinalizationEngine
from .rewards import (
    RewardClaim,
    RewardDistributor,
)
from .delegation import DelegationRegistry
from .categories import CategoryRegistry
from .timelock import (
    TimeLockEntry,
    TimeLockManager,
)
from .reputation import ReputationLedger
from .contract import (
    CallContext,
    CallResult,
    GovernanceContract,
)

__all__ = [
    # Errors
    "AlreadyClaimedError",
    "AlreadyVotedError",
    "DistributionUndefinedError",
    "ErrorKind",
    "GovernanceError",
    "InsufficientStakeError",
    "InvalidDeadlineError",
    "InvalidDescriptionError",
    "InvalidPointsError",
    "InvalidRewardPoolError",
    "ProposalActiveError",
    "ProposalNotFinalizedError",
    "ProposalNotFoundError",
    "TransferFailedError",
    "UnauthorizedError",
    "VotingClosedError",
    # Proposals
    "Proposal",
    "ProposalStatus",
    "ProposalStore",
    "VoteTally",
    # Voting
    "VoteRecord",
    "VotingEngine",
    "FinalizationEngine",
    # Rewards
    "RewardClaim",
    "RewardDistributor",
    # Registries
    "CategoryRegistry",
    "DelegationRegistry",
    "ReputationLedger",
    "TimeLockEntry",
    "TimeLockManager",
    # Contract
    "CallContext",
    "CallResult",
    "GovernanceContract",
]
