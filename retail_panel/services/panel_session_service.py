"""In-memory per-operator panel sessions (wizard + order list)."""

import logging
import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from retail_panel.services.order_list_service import DEFAULT_CONFIRM_MESSAGE, OrderListController
from retail_panel.services.wizard_service import OrderWizard

logger = logging.getLogger(__name__)

DEFAULT_IDLE_SECONDS = 86400


@dataclass
class PanelSession:
    """State owned by one operator. Nothing here is persisted."""

    token: str
    wizard: OrderWizard = field(default_factory=OrderWizard)
    order_list: OrderListController = field(default_factory=OrderListController)
    last_seen: float = 0.0


class SessionRegistry:
    """
    Maps a session token (kept in the Flask session cookie) to a PanelSession.

    Sessions are only created on demand by panel views. Every lookup or
    creation sweeps out sessions idle for longer than ``idle_seconds``.
    """

    def __init__(
        self,
        confirm_message: str = DEFAULT_CONFIRM_MESSAGE,
        idle_seconds: float = DEFAULT_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sessions: Dict[str, PanelSession] = {}
        self._lock = threading.Lock()
        self.confirm_message = confirm_message
        self.idle_seconds = idle_seconds
        self._clock = clock

    def _evict_idle(self, now: float) -> None:
        expired = [
            token for token, panel in self._sessions.items()
            if now - panel.last_seen > self.idle_seconds
        ]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.info(f"[SESSION] Evicted {len(expired)} idle panel session(s)")

    def get(self, token: Optional[str]) -> Optional[PanelSession]:
        """Existing session for ``token``, or None. Marks it as seen."""
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            panel = self._sessions.get(token) if token else None
            if panel is not None:
                panel.last_seen = now
            return panel

    def create(self) -> PanelSession:
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            token = secrets.token_urlsafe(16)
            panel = PanelSession(
                token=token,
                order_list=OrderListController(confirm_message=self.confirm_message),
                last_seen=now,
            )
            self._sessions[token] = panel
            logger.debug(f"[SESSION] New panel session {token[:6]}...")
            return panel

    def __len__(self) -> int:
        return len(self._sessions)
