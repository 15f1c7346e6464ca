"""
Auth Service

Email/password sign-in for store admins and the session lookups the write
paths depend on. Sessions are JSON blobs in the key-value store under
"session:{token}" with a TTL.

Admin credentials come from configuration (ADMIN_CREDENTIALS="email:password,...").
"""

import hashlib
import hmac
import json
import logging
import os
import secrets
from typing import Dict, Optional

from src.integrations.contracts.interfaces import AuthSession, ErrorCode, KeyValueStore
from src.integrations.contracts.results import OperationResult
from src.utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session:"


def parse_credentials(raw: str) -> Dict[str, str]:
    """Parse "email:password,email2:password2" into a mapping."""
    creds: Dict[str, str] = {}
    for chunk in (raw or "").split(","):
        chunk = chunk.strip()
        if not chunk or ":" not in chunk:
            continue
        email, password = chunk.split(":", 1)
        if email.strip():
            creds[email.strip().lower()] = password
    return creds


def user_id_for(email: str) -> str:
    return hashlib.sha256(email.lower().encode("utf-8")).hexdigest()[:28]


class AuthService:
    def __init__(
        self,
        store: KeyValueStore,
        credentials: Optional[Dict[str, str]] = None,
        session_ttl: int = 3600,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.store = store
        if credentials is None:
            credentials = parse_credentials(os.getenv("ADMIN_CREDENTIALS", ""))
        self.credentials = {k.lower(): v for k, v in credentials.items()}
        self.session_ttl = session_ttl
        self.rate_limiter = rate_limiter or RateLimiter(max_attempts=5, window_seconds=300)
        if not self.credentials:
            logger.warning("No admin credentials configured; admin login is disabled.")

    def login(self, email: str, password: str) -> OperationResult:
        email = (email or "").strip().lower()
        if not email or not password:
            return OperationResult.fail(ErrorCode.VALIDATION, "Email and password are required")

        if not self.rate_limiter.allow(email):
            return OperationResult.fail(ErrorCode.TOO_MANY_REQUESTS, "Too many attempts. Try again later")

        expected = self.credentials.get(email)
        if expected is None or not hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8")):
            logger.info("Failed admin login for %s", email)
            return OperationResult.fail(ErrorCode.INVALID_CREDENTIALS, "Invalid credentials")

        session = AuthSession(token=secrets.token_urlsafe(32), uid=user_id_for(email), email=email)
        try:
            self.store.set(f"{SESSION_PREFIX}{session.token}", json.dumps(session.to_dict()), ttl=self.session_ttl)
        except Exception as exc:
            logger.error("Could not persist session for %s: %s", email, exc, exc_info=True)
            return OperationResult.fail(ErrorCode.STORE_FAILURE, "Error signing in", error=str(exc))

        self.rate_limiter.reset(email)
        logger.info("Admin signed in: %s", email)
        return OperationResult.ok(session, "Signed in successfully")

    def logout(self, token: Optional[str]) -> OperationResult:
        if not token:
            return OperationResult.ok(None, "Already signed out")
        try:
            self.store.delete(f"{SESSION_PREFIX}{token}")
        except Exception as exc:
            logger.error("Could not drop session: %s", exc, exc_info=True)
            return OperationResult.fail(ErrorCode.STORE_FAILURE, "Error signing out", error=str(exc))
        return OperationResult.ok(None, "Signed out successfully")

    def current_session(self, token: Optional[str]) -> Optional[AuthSession]:
        if not token:
            return None
        try:
            raw = self.store.get(f"{SESSION_PREFIX}{token}")
        except Exception as exc:
            logger.warning("Session lookup failed: %s", exc)
            return None
        if not raw:
            return None
        try:
            return AuthSession.from_dict(json.loads(raw))
        except (json.JSONDecodeError, KeyError, ValueError):
            return None
