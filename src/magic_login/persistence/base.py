"""
Persistence adapter contracts.

Both variants hold a single value, the email of an in-progress login.

* ``EmailStore`` (variant A): awaitable ``write``/``read``/``clear``, visible
  to one execution context only, no notifications.
* ``SubscribableEmailStore`` (variant B): the same three calls complete immediately,
  the value is shared with other contexts, and ``subscribe`` reports every
  change as ``listener(old_record, new_record)``.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Union

from magic_login.models.state import PersistedRecord

RecordListener = Callable[[PersistedRecord, PersistedRecord], None]
Unsubscribe = Callable[[], None]


class EmailStore(Protocol):
    async def write(self, email: str) -> None: ...

    async def read(self) -> Optional[str]: ...

    async def clear(self) -> None: ...


class SubscribableEmailStore(Protocol):
    def write(self, email: str) -> None: ...

    def read(self) -> Optional[str]: ...

    def clear(self) -> None: ...

    def subscribe(self, listener: RecordListener) -> Unsubscribe: ...


PersistenceAdapter = Union[EmailStore, SubscribableEmailStore]


def supports_subscription(store: object) -> bool:
    """True when ``store`` offers cross-context change notifications."""
    return callable(getattr(store, "subscribe", None))
