"""
Checkout Module - Draft Store
===============================
In-memory checkout sessions keyed by the checkout cookie.

A draft is created fresh on every checkout page load, discarded after a
successful submission and purged after DRAFT_TTL_MINUTES of inactivity.
Drafts are never shared: each browser gets its own random session id.
"""

import logging
import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Optional

from config.settings import DRAFT_TTL_MINUTES
from common.helpers import now_utc
from modules.checkout.controller import CheckoutController
from modules.checkout.draft import CheckoutDraft

logger = logging.getLogger("storefront.checkout")


@dataclass
class CheckoutSession:
    sid: str
    user_id: str
    draft: CheckoutDraft
    controller: CheckoutController
    last_seen: datetime = field(default_factory=now_utc)
    in_flight: bool = False


class DraftStore:

    def __init__(self, ttl_minutes: int = DRAFT_TTL_MINUTES):
        self.ttl = timedelta(minutes=ttl_minutes)
        self._sessions: Dict[str, CheckoutSession] = {}
        self._lock = threading.Lock()

    def _purge_expired(self):
        cutoff = now_utc() - self.ttl
        expired = [sid for sid, s in self._sessions.items() if s.last_seen < cutoff and not s.in_flight]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug(f"Purged {len(expired)} expired checkout drafts")

    def create(self, user_id: str, previous_sid: Optional[str] = None) -> CheckoutSession:
        """Start a fresh draft, replacing the caller's previous one."""
        draft = CheckoutDraft()
        session = CheckoutSession(
            sid=secrets.token_urlsafe(24),
            user_id=str(user_id),
            draft=draft,
            controller=CheckoutController(draft),
        )
        with self._lock:
            self._purge_expired()
            if previous_sid:
                old = self._sessions.get(previous_sid)
                if old is not None and not old.in_flight:
                    del self._sessions[previous_sid]
            self._sessions[session.sid] = session
        return session

    def get(self, sid: Optional[str], user_id: str) -> Optional[CheckoutSession]:
        """Live session for this user, or None when missing, expired or foreign."""
        if not sid:
            return None
        with self._lock:
            self._purge_expired()
            session = self._sessions.get(sid)
            if session is None or session.user_id != str(user_id):
                return None
            session.last_seen = now_utc()
            return session

    def discard(self, sid: str):
        with self._lock:
            self._sessions.pop(sid, None)

    # ==========================================
    # In-flight submission flag
    # ==========================================

    def try_begin_submission(self, session: CheckoutSession) -> bool:
        """Set the in-flight flag. False when a submission is already outstanding."""
        with self._lock:
            if session.in_flight:
                return False
            session.in_flight = True
            return True

    def finish_submission(self, session: CheckoutSession):
        with self._lock:
            session.in_flight = False
            session.last_seen = now_utc()

    def __len__(self):
        return len(self._sessions)


# Singleton
draft_store = DraftStore()
