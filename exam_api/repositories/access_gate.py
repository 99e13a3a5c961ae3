"""
Premium access gate.

Decides whether a user may take premium exams. The entitlement source itself
(payments) lives elsewhere; this service only asks the question.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ..core.logging import get_logger
from ..core.config import settings

logger = get_logger(__name__)


class AccessGateInterface(ABC):
    """Abstract interface for premium entitlement checks"""

    @abstractmethod
    async def is_premium_unlocked(self, user_id: Optional[str]) -> bool:
        """Whether the user has premium access"""
        pass


class SettingsAccessGate(AccessGateInterface):
    """Entitlements listed in the PREMIUM_USER_IDS setting"""

    def __init__(self, premium_user_ids: Optional[Iterable[str]] = None):
        if premium_user_ids is None:
            premium_user_ids = settings.PREMIUM_USER_IDS
        self.premium_user_ids = frozenset(premium_user_ids)

    async def is_premium_unlocked(self, user_id: Optional[str]) -> bool:
        unlocked = user_id is not None and user_id in self.premium_user_ids
        logger.debug(
            "Premium check",
            extra_data={"user_id": user_id, "unlocked": unlocked}
        )
        return unlocked


# Singleton instance
_access_gate: Optional[SettingsAccessGate] = None


def get_access_gate() -> SettingsAccessGate:
    """Get access gate instance (singleton)"""
    global _access_gate

    if _access_gate is None:
        _access_gate = SettingsAccessGate()

    return _access_gate
