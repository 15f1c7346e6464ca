"""
Admin unlock gate.

A shared passcode that hides the admin surface from casual visitors. The
unlocked state is persisted as the string "true" under `adminUnlocked_v1`.
This is a convenience screen, not a security boundary: admin writes still
require an authenticated session.
"""

import hmac
import logging
import os
from typing import Optional

from src.integrations.contracts.interfaces import ErrorCode
from src.integrations.contracts.results import OperationResult
from src.integrations.services.local_cache import LocalCacheAdapter

logger = logging.getLogger(__name__)

UNLOCK_FLAG_KEY = "adminUnlocked_v1"


class AdminGate:
    def __init__(self, local_cache: LocalCacheAdapter, passcode: Optional[str] = None, flag_key: str = UNLOCK_FLAG_KEY):
        self.local_cache = local_cache
        self.passcode = passcode if passcode is not None else os.getenv("ADMIN_PASSCODE", "")
        self.flag_key = flag_key

    def is_unlocked(self) -> bool:
        return self.local_cache.get_flag(self.flag_key)

    def unlock(self, passcode: str) -> OperationResult:
        if not self.passcode:
            return OperationResult.fail(ErrorCode.VALIDATION, "Admin passcode is not configured")
        if not hmac.compare_digest((passcode or "").encode("utf-8"), self.passcode.encode("utf-8")):
            logger.info("Rejected admin unlock attempt")
            return OperationResult.fail(ErrorCode.INVALID_CREDENTIALS, "Incorrect passcode")
        result = self.local_cache.set_flag(self.flag_key)
        if result.success:
            result.message = "Admin area unlocked"
        return result

    def lock(self) -> OperationResult:
        result = self.local_cache.clear_flag(self.flag_key)
        if result.success:
            result.message = "Admin area locked"
        return result
