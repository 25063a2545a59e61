from magic_login.persistence.base import (
    EmailStore,
    PersistenceAdapter,
    RecordListener,
    SubscribableEmailStore,
    Unsubscribe,
    supports_subscription,
)
from magic_login.persistence.file import DEFAULT_STATE_FILE, FileEmailStore
from magic_login.persistence.memory import MemoryEmailStore
from magic_login.persistence.shared import SharedEmailStore

__all__ = [
    "DEFAULT_STATE_FILE",
    "EmailStore",
    "FileEmailStore",
    "MemoryEmailStore",
    "PersistenceAdapter",
    "RecordListener",
    "SharedEmailStore",
    "SubscribableEmailStore",
    "Unsubscribe",
    "supports_subscription",
]
