"""
magic-login: passwordless email + one-time-code login flow.

A typestate flow controller over a pluggable auth service and a
persistence adapter (async store, or shared store with change notifications).
"""

from magic_login.auth import AuthService, DemoAuthService, HttpAuthService
from magic_login.controller import FlowController
from magic_login.errors import (
    AuthError,
    ConnectionError,
    InvalidCode,
    InvalidEmail,
    MagicLoginError,
    StorageError,
)
from magic_login.models.auth import AuthResult
from magic_login.models.state import (
    AwaitingCodeInput,
    AwaitingEmailInput,
    FlowState,
    Mounting,
    PersistedRecord,
    SubmittingCode,
    SubmittingEmail,
    Success,
)
from magic_login.persistence import FileEmailStore, MemoryEmailStore, SharedEmailStore

__version__ = "0.1.0"
__all__ = [
    "AuthService",
    "DemoAuthService",
    "HttpAuthService",
    "FlowController",
    "MagicLoginError",
    "AuthError",
    "InvalidEmail",
    "InvalidCode",
    "StorageError",
    "ConnectionError",
    "AuthResult",
    "FlowState",
    "Mounting",
    "AwaitingEmailInput",
    "SubmittingEmail",
    "AwaitingCodeInput",
    "SubmittingCode",
    "Success",
    "PersistedRecord",
    "FileEmailStore",
    "MemoryEmailStore",
    "SharedEmailStore",
]
