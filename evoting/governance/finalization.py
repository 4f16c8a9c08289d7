"""
Proposal finalization: the one-time ACTIVE → PASSED / REJECTED transition.
"""

from ..logger import get_logger
from .errors import ProposalActiveError
from .proposals import ProposalStatus, ProposalStore

logger = get_logger(__name__)


class FinalizationEngine:
    """Closes proposals whose deadline has passed."""

    def __init__(self, store: ProposalStore):
        self.store = store

    @staticmethod
    def outcome(for_votes: int, against_votes: int) -> ProposalStatus:
        """Strict majority passes; ties are rejected."""
        if for_votes > against_votes:
            return ProposalStatus.PASSED
        return ProposalStatus.REJECTED

    def finalize(self, proposal_id: int, now: int) -> ProposalStatus:
        """
        Finalize a proposal and return its terminal status.

        Finalizing an already-finalized proposal returns the existing
        status without changing anything, so the call is safe to retry.
        """
        proposal = self.store.get_or_raise(proposal_id)

        with self.store.locked(proposal_id):
            if proposal.is_terminal:
                logger.debug(
                    f"Proposal #{proposal_id} already finalized as {proposal.status.name}"
                )
                return proposal.status
            if now <= proposal.deadline:
                raise ProposalActiveError(
                    f"Proposal #{proposal_id} is active until height "
                    f"{proposal.deadline} (height={now})"
                )
            status = self.outcome(proposal.for_votes, proposal.against_votes)
            proposal.transition_to(status, now)

        logger.info(
            f"Proposal #{proposal_id}: {status.name} "
            f"(for={proposal.for_votes}, against={proposal.against_votes}, height={now})"
        )
        return status
