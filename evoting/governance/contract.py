"""
Governance Contract

The host-facing surface of the engine. Each call receives a CallContext
carrying the authenticated caller and the current block height, and
returns a CallResult instead of raising, mirroring a contract's
``(ok ...)`` / ``(err uNNN)`` responses.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from ..logger import get_logger
from ..config import GovernanceConfig
from .categories import CategoryRegistry
from .delegation import DelegationRegistry
from .errors import ErrorKind, GovernanceError, UnauthorizedError, error_for
from .finalization import FinalizationEngine
from .proposals import Proposal, ProposalStatus, ProposalStore
from .reputation import ReputationLedger
from .rewards import PayoutFn, RewardDistributor
from .timelock import TimeLockManager
from .voting import VoteRecord, VotingEngine

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CallContext:
    """Caller identity and block height supplied by the host for one call."""
    caller: str
    height: int


@dataclass(frozen=True)
class CallResult(Generic[T]):
    """Outcome of a contract call: a value, or an ErrorKind."""
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the matching GovernanceError."""
        if self.error is not None:
            raise error_for(self.error, self.message)
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            value = self.value
            if hasattr(value, "to_dict"):
                value = value.to_dict()
            elif isinstance(value, ProposalStatus):
                value = value.name
            return {"ok": True, "value": value}
        return {"ok": False, "error": str(self.error), "message": self.message}

    def __str__(self) -> str:
        if self.ok:
            return f"ok {self.value}"
        return f"{self.error} ({self.message})"


class GovernanceContract:
    """
    Wires the stores together behind the call-level interface.

    Participation accrues reputation: a proposal creator earns
    ``reputation_per_proposal`` points and every accepted vote earns the
    voter ``reputation_per_vote`` points.
    """

    def __init__(
        self,
        store: Optional[ProposalStore] = None,
        timelocks: Optional[TimeLockManager] = None,
        payout_fn: Optional[PayoutFn] = None,
        reputation_per_proposal: int = 10,
        reputation_per_vote: int = 1,
    ):
        if reputation_per_proposal < 0 or reputation_per_vote < 0:
            raise ValueError("Reputation awards must be non-negative")
        self.proposals = store if store is not None else ProposalStore()
        self.voting = VotingEngine(self.proposals)
        self.finalization = FinalizationEngine(self.proposals)
        self.rewards = RewardDistributor(self.proposals, self.voting, payout_fn)
        self.delegations = DelegationRegistry()
        self.categories = CategoryRegistry()
        self.timelocks = timelocks if timelocks is not None else TimeLockManager()
        self.reputation = ReputationLedger()
        self.reputation_per_proposal = reputation_per_proposal
        self.reputation_per_vote = reputation_per_vote

    @classmethod
    def from_config(
        cls,
        config: GovernanceConfig,
        payout_fn: Optional[PayoutFn] = None,
    ) -> "GovernanceContract":
        g = config.governance
        return cls(
            store=ProposalStore(
                min_proposal_duration=g.min_proposal_duration,
                min_reward_pool=g.min_reward_pool,
                max_description_length=g.max_description_length,
            ),
            timelocks=TimeLockManager(lock_period=g.lock_period),
            payout_fn=payout_fn,
            reputation_per_proposal=config.reputation.per_proposal,
            reputation_per_vote=config.reputation.per_vote,
        )

    # ── Call wrapper ──────────────────────────────────────────────────

    def _call(self, name: str, ctx: CallContext, fn: Callable[[], T]) -> CallResult[T]:
        try:
            value = fn()
        except GovernanceError as e:
            logger.warning(
                f"{name} by {ctx.caller} rejected at height={ctx.height}: {e}"
            )
            return CallResult(error=e.kind, message=e.message)
        return CallResult(value=value)

    # ── Proposals ─────────────────────────────────────────────────────

    def create_proposal(
        self, ctx: CallContext, description: str, deadline: int, reward_pool: int,
    ) -> CallResult[int]:
        def run() -> int:
            pid = self.proposals.create(
                description, deadline, reward_pool, ctx.caller, ctx.height,
            )
            if self.reputation_per_proposal:
                self.reputation.add_reputation(ctx.caller, self.reputation_per_proposal)
            return pid
        return self._call("create-proposal", ctx, run)

    def get_proposal(self, ctx: CallContext, proposal_id: int) -> CallResult[Proposal]:
        return self._call(
            "get-proposal", ctx, lambda: self.proposals.get_or_raise(proposal_id),
        )

    # ── Voting ────────────────────────────────────────────────────────

    def _record_vote(
        self, voter: str, proposal_id: int, weight: int, vote_for: bool,
        height: int, cast_by: Optional[str] = None,
    ) -> VoteRecord:
        record = self.voting.vote(
            proposal_id, voter, weight, vote_for, height, cast_by=cast_by,
        )
        if self.reputation_per_vote:
            self.reputation.add_reputation(voter, self.reputation_per_vote)
        return record

    def vote(
        self, ctx: CallContext, proposal_id: int, weight: int, vote_for: bool,
    ) -> CallResult[VoteRecord]:
        return self._call(
            "vote", ctx,
            lambda: self._record_vote(ctx.caller, proposal_id, weight, vote_for, ctx.height),
        )

    def vote_on_behalf(
        self, ctx: CallContext, delegator: str, proposal_id: int,
        weight: int, vote_for: bool,
    ) -> CallResult[VoteRecord]:
        """Cast the delegator's vote; the caller must be its registered delegate."""
        def run() -> VoteRecord:
            if self.delegations.get_delegate(delegator) != ctx.caller:
                raise UnauthorizedError(
                    f"{ctx.caller} is not the delegate of {delegator}"
                )
            return self._record_vote(
                delegator, proposal_id, weight, vote_for, ctx.height, cast_by=ctx.caller,
            )
        return self._call("vote-on-behalf", ctx, run)

    def finalize(self, ctx: CallContext, proposal_id: int) -> CallResult[ProposalStatus]:
        return self._call(
            "finalize", ctx, lambda: self.finalization.finalize(proposal_id, ctx.height),
        )

    def claim_reward(self, ctx: CallContext, proposal_id: int) -> CallResult[int]:
        return self._call(
            "claim-reward", ctx, lambda: self.rewards.claim(proposal_id, ctx.caller),
        )

    # ── Delegation ────────────────────────────────────────────────────

    def delegate(self, ctx: CallContext, delegate_id: str) -> CallResult[bool]:
        return self._call(
            "delegate", ctx, lambda: self.delegations.delegate(ctx.caller, delegate_id),
        )

    def get_delegate(self, ctx: CallContext) -> CallResult[Optional[str]]:
        return CallResult(value=self.delegations.get_delegate(ctx.caller))

    # ── Categories ────────────────────────────────────────────────────

    def set_category(self, ctx: CallContext, proposal_id: int, label: str) -> CallResult[bool]:
        return self._call(
            "set-category", ctx, lambda: self.categories.set_category(proposal_id, label),
        )

    def get_category(self, ctx: CallContext, proposal_id: int) -> CallResult[Optional[str]]:
        return CallResult(value=self.categories.get_category(proposal_id))

    # ── Time locks ────────────────────────────────────────────────────

    def lock_proposal(self, ctx: CallContext, proposal_id: int) -> CallResult[int]:
        return self._call(
            "lock-proposal", ctx,
            lambda: self.timelocks.lock(proposal_id, ctx.height).unlock_height,
        )

    def is_unlocked(self, ctx: CallContext, proposal_id: int) -> CallResult[bool]:
        return CallResult(value=self.timelocks.is_unlocked(proposal_id, ctx.height))

    # ── Reputation ────────────────────────────────────────────────────

    def add_reputation(self, ctx: CallContext, user_id: str, points: int) -> CallResult[int]:
        return self._call(
            "add-reputation", ctx, lambda: self.reputation.add_reputation(user_id, points),
        )

    def get_reputation(self, ctx: CallContext, user_id: str) -> CallResult[int]:
        return CallResult(value=self.reputation.get_reputation(user_id))

    # ── Snapshot ──────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposals": self.proposals.to_dict(),
            "votes": self.voting.to_dict(),
            "rewards": self.rewards.to_dict(),
            "delegations": self.delegations.to_dict(),
            "categories": self.categories.to_dict(),
            "timelocks": self.timelocks.to_dict(),
            "reputation": self.reputation.to_dict(),
        }

    def __repr__(self) -> str:
        return f"<GovernanceContract proposals={len(self.proposals)}>"
