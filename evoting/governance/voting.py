"""
Weighted Voting Engine

Implements:
  - One vote per (proposal, voter) pair, no revocation or update
  - Caller-supplied positive weight (stake is verified by the host)
  - Deadline gating against the current block height
  - Atomic tally update on the owning proposal
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..logger import get_logger
from .errors import (
    AlreadyVotedError,
    InsufficientStakeError,
    VotingClosedError,
)
from .proposals import ProposalStore, is_whole_amount

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  VOTE DATA
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class VoteRecord:
    """An individual vote cast by a voter."""
    proposal_id: int
    voter: str
    weight: int
    vote_for: bool
    height: int = 0
    cast_by: Optional[str] = None  # Delegate that cast the vote, if any

    @property
    def direction(self) -> str:
        return "FOR" if self.vote_for else "AGAINST"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposalId": self.proposal_id,
            "voter": self.voter,
            "weight": self.weight,
            "voteFor": self.vote_for,
            "height": self.height,
            "castBy": self.cast_by,
        }


# ══════════════════════════════════════════════════════════════════════
#  VOTING ENGINE
# ══════════════════════════════════════════════════════════════════════

class VotingEngine:
    """
    Records weighted votes against proposals owned by a ProposalStore.

    The engine owns the vote records; tallies live on the proposals
    themselves and are only changed here.
    """

    def __init__(self, store: ProposalStore):
        self.store = store
        self._votes: Dict[Tuple[int, str], VoteRecord] = {}
        self._by_proposal: Dict[int, List[VoteRecord]] = {}
        self._lock = threading.Lock()

    # ── Cast vote ─────────────────────────────────────────────────────

    def vote(
        self,
        proposal_id: int,
        voter: str,
        weight: int,
        vote_for: bool,
        now: int,
        cast_by: Optional[str] = None,
    ) -> VoteRecord:
        """
        Cast a weighted vote.

        Args:
            proposal_id:    Target proposal
            voter:          Identity the vote is recorded under
            weight:         Positive stake amount
            vote_for:       True for, False against
            now:            Current block height
            cast_by:        Delegate casting on the voter's behalf
        """
        proposal = self.store.get_or_raise(proposal_id)

        with self.store.locked(proposal_id):
            if not proposal.accepts_votes_at(now):
                raise VotingClosedError(
                    f"Voting on proposal #{proposal_id} closed at height "
                    f"{proposal.deadline} (height={now})"
                )
            key = (proposal_id, voter)
            if key in self._votes:
                raise AlreadyVotedError(
                    f"{voter} has already voted on proposal #{proposal_id}"
                )
            if not is_whole_amount(weight) or weight <= 0:
                raise InsufficientStakeError(
                    f"Vote weight must be a positive integer (got {weight!r})"
                )

            record = VoteRecord(
                proposal_id=proposal_id,
                voter=voter,
                weight=weight,
                vote_for=bool(vote_for),
                height=now,
                cast_by=cast_by,
            )
            with self._lock:
                self._votes[key] = record
                self._by_proposal.setdefault(proposal_id, []).append(record)
            proposal.record_vote(weight, record.vote_for)

        logger.info(
            f"Vote: {voter} → {record.direction} on Proposal #{proposal_id} "
            f"(weight={weight}, height={now})"
        )
        return record

    # ── Queries ───────────────────────────────────────────────────────

    def get_vote(self, proposal_id: int, voter: str) -> Optional[VoteRecord]:
        return self._votes.get((proposal_id, voter))

    def has_voted(self, proposal_id: int, voter: str) -> bool:
        return (proposal_id, voter) in self._votes

    def get_votes(self, proposal_id: int) -> List[VoteRecord]:
        return list(self._by_proposal.get(proposal_id, []))

    def voter_count(self, proposal_id: int) -> int:
        return len(self._by_proposal.get(proposal_id, []))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "votes": {
                pid: [v.to_dict() for v in records]
                for pid, records in sorted(self._by_proposal.items())
            },
        }

    def __repr__(self) -> str:
        return f"<VotingEngine votes={len(self._votes)}>"
