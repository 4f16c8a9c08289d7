"""
Governance Proposals

Defines the proposal lifecycle, the Proposal record and the ProposalStore
that allocates sequential ids and owns every proposal for the lifetime of
the engine.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterator, List, Optional

from ..logger import get_logger
from ..constants import (
    EVOTING_MIN_PROPOSAL_DURATION,
    EVOTING_MIN_REWARD_POOL,
    MAX_DESCRIPTION_LENGTH,
)
from .errors import (
    InvalidDeadlineError,
    InvalidDescriptionError,
    InvalidRewardPoolError,
    ProposalNotFoundError,
)

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  ENUMS
# ══════════════════════════════════════════════════════════════════════

class ProposalStatus(IntEnum):
    """Lifecycle stage of a proposal."""
    ACTIVE = 0      # Accepting votes until the deadline
    PASSED = 1      # Finalized with for > against
    REJECTED = 2    # Finalized with for <= against


# Valid forward transitions
_VALID_TRANSITIONS: Dict[ProposalStatus, set] = {
    ProposalStatus.ACTIVE:   {ProposalStatus.PASSED, ProposalStatus.REJECTED},
    # Terminal states, no further transitions
    ProposalStatus.PASSED:   set(),
    ProposalStatus.REJECTED: set(),
}


def is_whole_amount(value: Any) -> bool:
    """True for a plain integer amount; bools and floats do not count."""
    return isinstance(value, int) and not isinstance(value, bool)


# ══════════════════════════════════════════════════════════════════════
#  TALLY
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class VoteTally:
    """
    Immutable vote accumulators.

    A proposal swaps its tally for a new instance on every vote, so readers
    always observe the three counters from the same vote.
    """
    for_votes: int = 0
    against_votes: int = 0

    @property
    def total_votes(self) -> int:
        return self.for_votes + self.against_votes

    def add(self, weight: int, vote_for: bool) -> "VoteTally":
        if vote_for:
            return VoteTally(self.for_votes + weight, self.against_votes)
        return VoteTally(self.for_votes, self.against_votes + weight)


# ══════════════════════════════════════════════════════════════════════
#  PROPOSAL
# ══════════════════════════════════════════════════════════════════════

@dataclass
class Proposal:
    """
    Governance proposal record.

    Fields:
        id:             Sequential identifier, starting at 1
        creator:        Identity of the caller that created it
        description:    Free text, at most MAX_DESCRIPTION_LENGTH characters
        deadline:       Last block height at which votes are accepted
        reward_pool:    Amount shared between voters after finalization
        created_at:     Block height of creation
        status:         Current lifecycle stage
        tally:          Current vote accumulators
        finalized_at:   Block height of finalization, if finalized
    """
    id: int
    creator: str
    description: str
    deadline: int
    reward_pool: int
    created_at: int = 0
    status: ProposalStatus = ProposalStatus.ACTIVE
    tally: VoteTally = field(default_factory=VoteTally)
    finalized_at: Optional[int] = None

    # ── Properties ────────────────────────────────────────────────────

    @property
    def for_votes(self) -> int:
        return self.tally.for_votes

    @property
    def against_votes(self) -> int:
        return self.tally.against_votes

    @property
    def total_votes(self) -> int:
        return self.tally.total_votes

    @property
    def is_active(self) -> bool:
        return self.status == ProposalStatus.ACTIVE

    @property
    def is_terminal(self) -> bool:
        return self.status in (ProposalStatus.PASSED, ProposalStatus.REJECTED)

    def accepts_votes_at(self, height: int) -> bool:
        return self.is_active and height <= self.deadline

    # ── State transitions ─────────────────────────────────────────────

    def record_vote(self, weight: int, vote_for: bool):
        """Apply a vote to the tally as a single reference swap."""
        self.tally = self.tally.add(weight, vote_for)

    def transition_to(self, new_status: ProposalStatus, height: int):
        """
        Move the proposal to a terminal status.

        Raises ValueError on an invalid transition; callers check
        ``is_terminal`` first.
        """
        allowed = _VALID_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise ValueError(
                f"Cannot transition from {self.status.name} → {new_status.name}"
            )
        self.finalized_at = height
        self.status = new_status

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "creator": self.creator,
            "description": self.description,
            "deadline": self.deadline,
            "rewardPool": self.reward_pool,
            "createdAt": self.created_at,
            "status": self.status.name,
            "totalVotes": self.total_votes,
            "forVotes": self.for_votes,
            "againstVotes": self.against_votes,
            "finalizedAt": self.finalized_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proposal":
        return cls(
            id=data["id"],
            creator=data["creator"],
            description=data["description"],
            deadline=data["deadline"],
            reward_pool=data["rewardPool"],
            created_at=data.get("createdAt", 0),
            status=ProposalStatus[data.get("status", "ACTIVE")],
            tally=VoteTally(
                for_votes=data.get("forVotes", 0),
                against_votes=data.get("againstVotes", 0),
            ),
            finalized_at=data.get("finalizedAt"),
        )

    def __repr__(self) -> str:
        return (
            f"<Proposal #{self.id} status={self.status.name} "
            f"for={self.for_votes} against={self.against_votes}>"
        )


# ══════════════════════════════════════════════════════════════════════
#  PROPOSAL STORE
# ══════════════════════════════════════════════════════════════════════

class ProposalStore:
    """
    Owns every proposal and allocates sequential ids.

    Id allocation is serialized by one lock; each proposal has its own
    re-entrant lock that voting, finalization and reward claims hold for
    their check-then-write sequences.
    """

    def __init__(
        self,
        min_proposal_duration: int = EVOTING_MIN_PROPOSAL_DURATION,
        min_reward_pool: int = EVOTING_MIN_REWARD_POOL,
        max_description_length: int = MAX_DESCRIPTION_LENGTH,
    ):
        self.min_proposal_duration = int(min_proposal_duration)
        self.min_reward_pool = int(min_reward_pool)
        self.max_description_length = int(max_description_length)
        self._proposals: Dict[int, Proposal] = {}
        self._locks: Dict[int, threading.RLock] = {}
        self._id_lock = threading.Lock()
        self._next_id = 1

    # ── Create ────────────────────────────────────────────────────────

    def create(
        self,
        description: str,
        deadline: int,
        reward_pool: int,
        creator: str,
        now: int,
    ) -> int:
        """
        Create an ACTIVE proposal and return its id.

        Raises:
            InvalidDescriptionError: empty or over-long description
            InvalidRewardPoolError:  pool below the configured minimum
            InvalidDeadlineError:    deadline < now + min_proposal_duration
        """
        if not description or len(description) > self.max_description_length:
            raise InvalidDescriptionError(
                f"Description must be 1-{self.max_description_length} characters"
            )
        if not is_whole_amount(reward_pool):
            raise InvalidRewardPoolError(
                f"Reward pool must be an integer (got {reward_pool!r})"
            )
        if reward_pool < max(self.min_reward_pool, 0):
            raise InvalidRewardPoolError(
                f"Reward pool {reward_pool} < minimum {max(self.min_reward_pool, 0)}"
            )
        earliest = now + self.min_proposal_duration
        if deadline < earliest:
            raise InvalidDeadlineError(
                f"Deadline {deadline} < earliest allowed {earliest}"
            )

        with self._id_lock:
            proposal_id = self._next_id
            self._locks[proposal_id] = threading.RLock()
            self._proposals[proposal_id] = Proposal(
                id=proposal_id,
                creator=creator,
                description=description,
                deadline=deadline,
                reward_pool=reward_pool,
                created_at=now,
            )
            self._next_id += 1

        logger.info(
            f"Proposal #{proposal_id} created by {creator} "
            f"(deadline={deadline}, pool={reward_pool}, height={now})"
        )
        return proposal_id

    # ── Lookup ────────────────────────────────────────────────────────

    def get(self, proposal_id: int) -> Optional[Proposal]:
        return self._proposals.get(proposal_id)

    def get_or_raise(self, proposal_id: int) -> Proposal:
        proposal = self._proposals.get(proposal_id)
        if proposal is None:
            raise ProposalNotFoundError(f"Proposal #{proposal_id} not found")
        return proposal

    def list_ids(self) -> List[int]:
        return sorted(self._proposals)

    @contextmanager
    def locked(self, proposal_id: int) -> Iterator[None]:
        """Hold the per-proposal lock; a no-op for unknown ids."""
        lock = self._locks.get(proposal_id)
        if lock is None:
            yield
            return
        with lock:
            yield

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._proposals)

    def __contains__(self, proposal_id: object) -> bool:
        return proposal_id in self._proposals

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nextId": self._next_id,
            "minProposalDuration": self.min_proposal_duration,
            "proposals": {
                pid: p.to_dict() for pid, p in sorted(self._proposals.items())
            },
        }

    def __repr__(self) -> str:
        return f"<ProposalStore proposals={len(self._proposals)}>"
