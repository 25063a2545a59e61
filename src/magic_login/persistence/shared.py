"""
Shared synchronous store with change subscription (variant B).

One instance stands for a value every execution context can see and change,
e.g. the address-bar state shared by browser tabs. Give the same instance to
several controllers and each acts as a separate context.
"""

import logging
from typing import Optional

from magic_login.models.state import PersistedRecord
from magic_login.persistence.base import RecordListener, Unsubscribe

logger = logging.getLogger(__name__)


class SharedEmailStore:
    def __init__(self, email: Optional[str] = None):
        self._record = PersistedRecord(email=email)
        self._listeners: list[RecordListener] = []

    def subscribe(self, listener: RecordListener) -> Unsubscribe:
        """Add a change listener. Returns a cleanup function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def _set(self, record: PersistedRecord) -> None:
        old = self._record
        if old == record:
            return
        self._record = record
        for listener in list(self._listeners):
            try:
                listener(old, record)
            except Exception:
                logger.exception("Shared store listener failed")

    def write(self, email: str) -> None:
        self._set(PersistedRecord(email=email))

    def read(self) -> Optional[str]:
        return self._record.email

    def clear(self) -> None:
        self._set(PersistedRecord())
