"""
Proposal category tags.
"""

import threading
from typing import Any, Dict, List, Optional

from ..logger import get_logger

logger = get_logger(__name__)


class CategoryRegistry:
    """Labels keyed by proposal id. Ids are not checked against the store."""

    def __init__(self):
        self._categories: Dict[int, str] = {}
        self._lock = threading.Lock()

    def set_category(self, proposal_id: int, label: str) -> bool:
        with self._lock:
            self._categories[proposal_id] = label
        logger.debug(f"Proposal #{proposal_id} tagged '{label}'")
        return True

    def get_category(self, proposal_id: int) -> Optional[str]:
        return self._categories.get(proposal_id)

    def proposals_in(self, label: str) -> List[int]:
        return sorted(pid for pid, cat in self._categories.items() if cat == label)

    def to_dict(self) -> Dict[str, Any]:
        return {"categories": dict(sorted(self._categories.items()))}
