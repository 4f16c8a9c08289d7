"""
Vote delegation registry: delegator → delegate, last write wins.
"""

import threading
from typing import Any, Dict, List, Optional

from ..logger import get_logger

logger = get_logger(__name__)


class DelegationRegistry:
    """
    Maps a voter to the address that votes on its behalf.

    Overwrites are unconditional; self-delegation and cycles are accepted
    and have no effect on vote counting.
    """

    def __init__(self):
        self._delegations: Dict[str, str] = {}
        self._lock = threading.Lock()

    def delegate(self, delegator: str, delegate: str) -> bool:
        with self._lock:
            previous = self._delegations.get(delegator)
            self._delegations[delegator] = delegate
        if previous is not None and previous != delegate:
            logger.info(f"Delegation: {delegator} → {delegate} (replaces {previous})")
        else:
            logger.info(f"Delegation: {delegator} → {delegate}")
        return True

    def get_delegate(self, delegator: str) -> Optional[str]:
        return self._delegations.get(delegator)

    def delegators_of(self, delegate: str) -> List[str]:
        return sorted(d for d, to in self._delegations.items() if to == delegate)

    def __len__(self) -> int:
        return len(self._delegations)

    def to_dict(self) -> Dict[str, Any]:
        return {"delegations": dict(sorted(self._delegations.items()))}
