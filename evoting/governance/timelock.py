"""
Time-Lock Manager

A lock schedule per proposal id, independent of the proposal's voting
deadline. A locked id stays locked through its unlock height and releases
on the first height strictly greater than it.
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..logger import get_logger
from ..constants import EVOTING_LOCK_PERIOD

logger = get_logger(__name__)


@dataclass(frozen=True)
class TimeLockEntry:
    """
    A lock on a proposal id.

    Attributes:
        proposal_id:    Locked proposal id
        locked_at:      Height at which the lock was set
        unlock_height:  Last height that is still locked
    """
    proposal_id: int
    locked_at: int
    unlock_height: int

    def is_unlocked(self, now: int) -> bool:
        return now > self.unlock_height

    def remaining(self, now: int) -> int:
        """Blocks until the lock releases (0 once unlocked)."""
        return max(0, self.unlock_height - now + 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposalId": self.proposal_id,
            "lockedAt": self.locked_at,
            "unlockHeight": self.unlock_height,
        }


class TimeLockManager:
    """Lock entries keyed by proposal id; a later lock replaces an earlier one."""

    def __init__(self, lock_period: int = EVOTING_LOCK_PERIOD):
        self.lock_period = int(lock_period)
        self._entries: Dict[int, TimeLockEntry] = {}
        self._lock = threading.Lock()

    def lock(self, proposal_id: int, now: int) -> TimeLockEntry:
        entry = TimeLockEntry(
            proposal_id=proposal_id,
            locked_at=now,
            unlock_height=now + self.lock_period,
        )
        with self._lock:
            self._entries[proposal_id] = entry
        logger.info(
            f"Proposal #{proposal_id} locked until height={entry.unlock_height}"
        )
        return entry

    def is_unlocked(self, proposal_id: int, now: int) -> bool:
        entry = self._entries.get(proposal_id)
        return entry is None or entry.is_unlocked(now)

    def get_entry(self, proposal_id: int) -> Optional[TimeLockEntry]:
        return self._entries.get(proposal_id)

    def remaining(self, proposal_id: int, now: int) -> int:
        entry = self._entries.get(proposal_id)
        return 0 if entry is None else entry.remaining(now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lockPeriod": self.lock_period,
            "entries": {
                pid: e.to_dict() for pid, e in sorted(self._entries.items())
            },
        }
