"""
Reward Distribution

Pays each voter of a finalized proposal its share of the reward pool:

    reward = weight * reward_pool // total_votes

Floor division keeps the sum of all claims at or below the pool; the
remainder (at most total_votes - 1 units) stays unclaimed. Each
(proposal, voter) pair can be paid once.
"""

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Set, Tuple

from ..logger import get_logger
from .errors import (
    AlreadyClaimedError,
    DistributionUndefinedError,
    ProposalNotFinalizedError,
    TransferFailedError,
    UnauthorizedError,
)
from .proposals import ProposalStore
from .voting import VotingEngine

logger = get_logger(__name__)


PayoutFn = Callable[[str, int], bool]


@dataclass(frozen=True)
class RewardClaim:
    """A paid reward."""
    proposal_id: int
    voter: str
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposalId": self.proposal_id,
            "voter": self.voter,
            "amount": self.amount,
        }


class RewardDistributor:
    """
    Computes and records proportional reward claims.

    Args:
        store:     Proposal store holding pools and tallies
        voting:    Voting engine holding the vote records
        payout_fn: Optional Callable(voter, amount) → bool performing the
                   actual transfer; a False return fails the claim
    """

    def __init__(
        self,
        store: ProposalStore,
        voting: VotingEngine,
        payout_fn: Optional[PayoutFn] = None,
    ):
        self.store = store
        self.voting = voting
        self._payout = payout_fn
        self._claimed: Set[Tuple[int, str]] = set()
        self._claims: Dict[int, Dict[str, RewardClaim]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def share(weight: int, reward_pool: int, total_votes: int) -> int:
        if total_votes <= 0:
            raise DistributionUndefinedError("No votes were cast on this proposal")
        return (weight * reward_pool) // total_votes

    def preview(self, proposal_id: int, voter: str) -> int:
        """Reward the voter would receive, without claiming it."""
        proposal = self.store.get(proposal_id)
        record = self.voting.get_vote(proposal_id, voter)
        if proposal is None or record is None:
            raise UnauthorizedError(
                f"{voter} did not vote on proposal #{proposal_id}"
            )
        if proposal.is_active:
            raise ProposalNotFinalizedError(
                f"Proposal #{proposal_id} has not been finalized"
            )
        return self.share(record.weight, proposal.reward_pool, proposal.total_votes)

    def claim(self, proposal_id: int, voter: str) -> int:
        """Pay and record the voter's reward; returns the amount."""
        with self.store.locked(proposal_id):
            amount = self.preview(proposal_id, voter)
            key = (proposal_id, voter)
            if key in self._claimed:
                raise AlreadyClaimedError(
                    f"{voter} already claimed the reward of proposal #{proposal_id}"
                )
            if self._payout is not None and not self._payout(voter, amount):
                raise TransferFailedError(
                    f"Transfer of {amount} to {voter} failed"
                )
            with self._lock:
                self._claimed.add(key)
                self._claims.setdefault(proposal_id, {})[voter] = RewardClaim(
                    proposal_id=proposal_id, voter=voter, amount=amount,
                )

        logger.info(f"Reward: {voter} claimed {amount} from Proposal #{proposal_id}")
        return amount

    # ── Queries ───────────────────────────────────────────────────────

    def has_claimed(self, proposal_id: int, voter: str) -> bool:
        return (proposal_id, voter) in self._claimed

    def total_claimed(self, proposal_id: int) -> int:
        return sum(c.amount for c in self._claims.get(proposal_id, {}).values())

    def unclaimed_remainder(self, proposal_id: int) -> int:
        """Pool left over once every voter has claimed."""
        proposal = self.store.get_or_raise(proposal_id)
        paid_out = sum(
            self.share(v.weight, proposal.reward_pool, proposal.total_votes)
            for v in self.voting.get_votes(proposal_id)
        )
        return proposal.reward_pool - paid_out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "claims": {
                pid: [c.to_dict() for c in claims.values()]
                for pid, claims in sorted(self._claims.items())
            },
        }
