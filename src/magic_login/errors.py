"""
magic-login error types.

Every service failure collapses into one of the two user-facing kinds
(InvalidEmail / InvalidCode) before it reaches the flow state.
"""

from typing import Any, Optional

INVALID_EMAIL_MESSAGE = "invalid email"
INVALID_CODE_MESSAGE = "invalid code"


class MagicLoginError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class AuthError(MagicLoginError):
    def __init__(self, message: str, code: str = "auth_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class InvalidEmail(AuthError):
    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message or INVALID_EMAIL_MESSAGE, code="invalid_email", details=details)


class InvalidCode(AuthError):
    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message or INVALID_CODE_MESSAGE, code="invalid_code", details=details)


class StorageError(MagicLoginError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("storage_error", message, details)


class ConnectionError(MagicLoginError):
    def __init__(self, message: str):
        super().__init__("connection_error", message)
