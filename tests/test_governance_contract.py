"""
Governance Contract Test Suite

Exercises the call-level interface the host invokes: context passing,
result values instead of exceptions, delegated voting, participation
reputation and the end-to-end proposal scenarios.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from evoting.config import GovernanceConfig
from evoting.governance import (
    AlreadyVotedError,
    CallContext,
    CallResult,
    ErrorKind,
    GovernanceContract,
    ProposalStatus,
    ProposalStore,
    TimeLockManager,
)


# ══════════════════════════════════════════════════════════════════════
#  HELPERS
# ══════════════════════════════════════════════════════════════════════

OWNER = "initial_owner"
VOTER1 = "voter1"
VOTER2 = "voter2"
DELEGATE = "delegate1"

HEIGHT = 1000


def at(caller: str, height: int = HEIGHT) -> CallContext:
    return CallContext(caller=caller, height=height)


def make_contract(**kwargs) -> GovernanceContract:
    kwargs.setdefault("store", ProposalStore(min_proposal_duration=1440))
    kwargs.setdefault("timelocks", TimeLockManager(lock_period=1440))
    return GovernanceContract(**kwargs)


def open_proposal(contract, deadline=HEIGHT + 2000, pool=1000) -> int:
    return contract.create_proposal(at(OWNER), "Voting Proposal", deadline, pool).unwrap()


# ══════════════════════════════════════════════════════════════════════
#  CALL RESULTS
# ══════════════════════════════════════════════════════════════════════


class TestCallResult:
    """Result wrapper semantics."""

    def test_ok(self):
        r = CallResult(value=5)
        assert r.ok
        assert r.unwrap() == 5
        assert r.to_dict() == {"ok": True, "value": 5}

    def test_err(self):
        r = CallResult(error=ErrorKind.ALREADY_VOTED, message="twice")
        assert not r.ok
        assert r.to_dict() == {"ok": False, "error": "err u102", "message": "twice"}
        with pytest.raises(AlreadyVotedError, match="twice"):
            r.unwrap()

    def test_status_serialized_by_name(self):
        assert CallResult(value=ProposalStatus.PASSED).to_dict()["value"] == "PASSED"


# ══════════════════════════════════════════════════════════════════════
#  SCENARIOS
# ══════════════════════════════════════════════════════════════════════


class TestProposalScenarios:
    """End-to-end flows through the contract surface."""

    def test_create_proposal(self):
        c = make_contract()
        r = c.create_proposal(at(OWNER), "Test", HEIGHT + 2000, 1000)
        assert r.ok and r.value == 1
        p = c.get_proposal(at(OWNER), 1).unwrap()
        assert p.status == ProposalStatus.ACTIVE
        assert p.creator == OWNER
        assert p.deadline == 3000

    def test_create_invalid_deadline(self):
        c = make_contract()
        r = c.create_proposal(at(OWNER), "Bad", HEIGHT + 100, 500)
        assert r.error == ErrorKind.INVALID_DEADLINE
        assert c.get_proposal(at(OWNER), 1).error == ErrorKind.PROPOSAL_NOT_FOUND

    def test_vote_then_duplicate(self):
        c = make_contract()
        pid = open_proposal(c)
        assert c.vote(at(VOTER1), pid, 50, True).ok
        p = c.get_proposal(at(VOTER1), pid).unwrap()
        assert p.for_votes == 50
        assert p.total_votes == 50
        assert c.vote(at(VOTER1), pid, 30, False).error == ErrorKind.ALREADY_VOTED

    def test_vote_errors(self):
        c = make_contract()
        pid = open_proposal(c)
        assert c.vote(at(VOTER1), 99, 1, True).error == ErrorKind.PROPOSAL_NOT_FOUND
        assert c.vote(at(VOTER1, 3001), pid, 1, True).error == ErrorKind.VOTING_CLOSED
        assert c.vote(at(VOTER1), pid, 0, True).error == ErrorKind.INSUFFICIENT_STAKE

    def test_fractional_weight_rejected(self):
        c = make_contract()
        pid = open_proposal(c)
        assert c.vote(at(VOTER1), pid, 2.5, True).error == ErrorKind.INSUFFICIENT_STAKE
        assert c.vote(at(VOTER2), pid, True, True).error == ErrorKind.INSUFFICIENT_STAKE
        assert c.get_proposal(at(OWNER), pid).unwrap().total_votes == 0

    def test_finalize_gated_by_deadline(self):
        c = make_contract()
        pid = open_proposal(c)
        c.vote(at(VOTER1), pid, 50, True)
        assert c.finalize(at(OWNER, 1000), pid).error == ErrorKind.PROPOSAL_ACTIVE
        assert c.finalize(at(OWNER, 3000), pid).error == ErrorKind.PROPOSAL_ACTIVE
        r = c.finalize(at(OWNER, 3001), pid)
        assert r.ok and r.value == ProposalStatus.PASSED
        assert c.finalize(at(OWNER, 4000), pid).value == ProposalStatus.PASSED

    def test_finalize_unknown(self):
        c = make_contract()
        assert c.finalize(at(OWNER, 5000), 3).error == ErrorKind.PROPOSAL_NOT_FOUND

    def test_claim_reward_flow(self):
        c = make_contract()
        pid = open_proposal(c)
        c.vote(at(VOTER1), pid, 50, True)
        assert c.claim_reward(at(VOTER1), pid).error == ErrorKind.PROPOSAL_NOT_FINALIZED
        c.finalize(at(OWNER, 3001), pid)
        r = c.claim_reward(at(VOTER1, 3002), pid)
        assert r.ok and r.value == 1000
        assert c.claim_reward(at(VOTER1, 3003), pid).error == ErrorKind.ALREADY_CLAIMED

    def test_claim_by_non_voter_unauthorized(self):
        c = make_contract()
        pid = open_proposal(c)
        c.vote(at(VOTER1), pid, 50, True)
        c.finalize(at(OWNER, 3001), pid)
        assert c.claim_reward(at(VOTER2, 3002), pid).error == ErrorKind.UNAUTHORIZED

    def test_claim_transfer_failure(self):
        payout = MagicMock(return_value=False)
        c = make_contract(payout_fn=payout)
        pid = open_proposal(c)
        c.vote(at(VOTER1), pid, 50, True)
        c.finalize(at(OWNER, 3001), pid)
        assert c.claim_reward(at(VOTER1, 3002), pid).error == ErrorKind.TRANSFER_FAILED
        payout.assert_called_once_with(VOTER1, 1000)

    def test_lock_proposal(self):
        c = make_contract()
        pid = open_proposal(c)
        assert c.lock_proposal(at(OWNER, 1000), pid).value == 2440
        assert c.is_unlocked(at(OWNER, 1000), pid).value is False
        assert c.is_unlocked(at(OWNER, 2440), pid).value is False
        assert c.is_unlocked(at(OWNER, 2441), pid).value is True

    def test_unlocked_without_lock(self):
        c = make_contract()
        assert c.is_unlocked(at(OWNER), 1).value is True


# ══════════════════════════════════════════════════════════════════════
#  DELEGATION / CATEGORIES / REPUTATION
# ══════════════════════════════════════════════════════════════════════


class TestDelegationCalls:
    """Caller-scoped delegation and delegated voting."""

    def test_delegate_uses_caller(self):
        c = make_contract()
        assert c.delegate(at(VOTER1), DELEGATE).value is True
        assert c.get_delegate(at(VOTER1)).value == DELEGATE
        assert c.get_delegate(at(VOTER2)).value is None

    def test_vote_on_behalf(self):
        c = make_contract()
        pid = open_proposal(c)
        c.delegate(at(VOTER1), DELEGATE)
        r = c.vote_on_behalf(at(DELEGATE), VOTER1, pid, 40, False)
        assert r.ok
        assert r.value.voter == VOTER1
        assert r.value.cast_by == DELEGATE
        assert c.voting.has_voted(pid, VOTER1)
        assert not c.voting.has_voted(pid, DELEGATE)
        assert c.vote(at(VOTER1), pid, 1, True).error == ErrorKind.ALREADY_VOTED

    def test_vote_on_behalf_requires_delegation(self):
        c = make_contract()
        pid = open_proposal(c)
        r = c.vote_on_behalf(at(VOTER2), VOTER1, pid, 40, True)
        assert r.error == ErrorKind.UNAUTHORIZED
        assert c.get_proposal(at(VOTER2), pid).unwrap().total_votes == 0

    def test_redelegation_revokes_previous_delegate(self):
        c = make_contract()
        pid = open_proposal(c)
        c.delegate(at(VOTER1), DELEGATE)
        c.delegate(at(VOTER1), VOTER2)
        assert c.vote_on_behalf(at(DELEGATE), VOTER1, pid, 1, True).error == ErrorKind.UNAUTHORIZED
        assert c.vote_on_behalf(at(VOTER2), VOTER1, pid, 1, True).ok


class TestCategoryCalls:
    def test_set_get(self):
        c = make_contract()
        assert c.set_category(at(OWNER), 1, "treasury").value is True
        assert c.get_category(at(VOTER1), 1).value == "treasury"
        assert c.get_category(at(VOTER1), 2).value is None


class TestReputationCalls:
    """Direct grants and participation accrual."""

    def test_add_and_get(self):
        c = make_contract()
        assert c.add_reputation(at(OWNER), VOTER1, 5).value == 5
        assert c.get_reputation(at(VOTER2), VOTER1).value == 5
        assert c.get_reputation(at(VOTER2), VOTER2).value == 0

    def test_negative_points_rejected(self):
        c = make_contract()
        assert c.add_reputation(at(OWNER), VOTER1, -3).error == ErrorKind.INVALID_POINTS

    def test_participation_accrual(self):
        c = make_contract(reputation_per_proposal=10, reputation_per_vote=2)
        pid = open_proposal(c)
        c.vote(at(VOTER1), pid, 5, True)
        c.vote(at(VOTER1), pid, 5, True)  # rejected, no extra points
        assert c.get_reputation(at(OWNER), OWNER).value == 10
        assert c.get_reputation(at(OWNER), VOTER1).value == 2

    def test_failed_create_earns_nothing(self):
        c = make_contract()
        c.create_proposal(at(OWNER), "Bad", HEIGHT + 1, 10)
        assert c.get_reputation(at(OWNER), OWNER).value == 0

    def test_negative_awards_rejected(self):
        with pytest.raises(ValueError):
            GovernanceContract(reputation_per_vote=-1)


# ══════════════════════════════════════════════════════════════════════
#  CONFIG WIRING / SNAPSHOT
# ══════════════════════════════════════════════════════════════════════


class TestContractConfig:
    def test_from_config(self):
        config = GovernanceConfig.from_dict({
            "governance": {"min_proposal_duration": 10, "lock_period": 3},
            "reputation": {"per_proposal": 0, "per_vote": 0},
        })
        c = GovernanceContract.from_config(config)
        assert c.create_proposal(at(OWNER, 0), "Short", 10, 0).ok
        assert c.lock_proposal(at(OWNER, 0), 1).value == 3
        assert c.get_reputation(at(OWNER), OWNER).value == 0

    def test_empty_store_and_timelocks_are_kept(self):
        store = ProposalStore(min_proposal_duration=10, min_reward_pool=100)
        locks = TimeLockManager(lock_period=3)
        c = GovernanceContract(store=store, timelocks=locks)
        assert c.proposals is store
        assert c.timelocks is locks
        r = c.create_proposal(at(OWNER, 0), "Under-funded", 10, 5)
        assert r.error == ErrorKind.INVALID_REWARD_POOL
        assert len(store) == 0

    def test_from_config_applies_proposal_rules(self):
        config = GovernanceConfig.from_dict({
            "governance": {
                "min_proposal_duration": 10,
                "min_reward_pool": 100,
                "max_description_length": 8,
            },
        })
        c = GovernanceContract.from_config(config)
        assert c.create_proposal(at(OWNER, 0), "Pool", 10, 99).error == ErrorKind.INVALID_REWARD_POOL
        assert c.create_proposal(at(OWNER, 0), "Too long!", 10, 100).error == ErrorKind.INVALID_DESCRIPTION
        assert c.create_proposal(at(OWNER, 0), "Pool", 9, 100).error == ErrorKind.INVALID_DEADLINE
        assert c.create_proposal(at(OWNER, 0), "Pool", 10, 100).value == 1

    def test_to_dict_snapshot(self):
        c = make_contract()
        pid = open_proposal(c)
        c.vote(at(VOTER1), pid, 50, True)
        c.set_category(at(OWNER), pid, "grants")
        snap = c.to_dict()
        assert snap["proposals"]["proposals"][pid]["forVotes"] == 50
        assert snap["categories"]["categories"][pid] == "grants"
        assert snap["reputation"]["reputation"][VOTER1] == 1
