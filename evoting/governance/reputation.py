"""
Reputation Ledger

Additive, never-decreasing point totals per user. Points come from
governance participation (see GovernanceContract) or direct grants.
"""

import threading
from typing import Any, Dict, List, Tuple

from ..logger import get_logger
from .errors import InvalidPointsError
from .proposals import is_whole_amount

logger = get_logger(__name__)


class ReputationLedger:
    """Per-user reputation totals."""

    def __init__(self):
        self._points: Dict[str, int] = {}
        self._lock = threading.Lock()

    def add_reputation(self, user: str, points: int) -> int:
        """Add *points* to the user's total and return the new total."""
        if not is_whole_amount(points) or points < 0:
            raise InvalidPointsError(
                f"Reputation points must be a non-negative integer (got {points!r})"
            )
        with self._lock:
            total = self._points.get(user, 0) + points
            self._points[user] = total
        logger.debug(f"Reputation: {user} +{points} = {total}")
        return total

    def get_reputation(self, user: str) -> int:
        return self._points.get(user, 0)

    def top(self, n: int = 10) -> List[Tuple[str, int]]:
        """Highest totals first; ties ordered by user id."""
        ranked = sorted(self._points.items(), key=lambda kv: (-kv[1], kv[0]))
        return ranked[:n]

    def __len__(self) -> int:
        return len(self._points)

    def to_dict(self) -> Dict[str, Any]:
        return {"reputation": dict(sorted(self._points.items()))}
