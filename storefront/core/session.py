"""
Explicit session context

One instance is created when the storefront starts and handed to every
operation that needs the signed-in user. Sign-out tears it down.
"""

import logging
from typing import Callable, List, Optional

from storefront.schemas.auth import SessionUser

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[SessionUser]], None]


class SessionContext:
    """Holds the current user and notifies subscribers when it changes"""

    def __init__(self, user: Optional[SessionUser] = None):
        self._user = user
        self._listeners: List[SessionListener] = []
        self.closed = False

    @property
    def user(self) -> Optional[SessionUser]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: SessionListener) -> None:
        """Register for session state changes; called with the user or None"""
        self._listeners.append(listener)

    def unsubscribe(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_user(self, user: Optional[SessionUser]) -> None:
        if self.closed:
            raise RuntimeError("Session has been torn down")
        self._user = user
        self._notify()

    def teardown(self) -> None:
        """Clear the user, notify once and drop all listeners"""
        self._user = None
        self._notify()
        self._listeners.clear()
        self.closed = True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._user)
            except Exception as e:
                logger.error(f"Session listener failed: {e}")
