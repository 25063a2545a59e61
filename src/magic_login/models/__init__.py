from magic_login.models.auth import AuthResult
from magic_login.models.state import (
    AWAITING_CODE_INPUT,
    AWAITING_EMAIL_INPUT,
    MOUNTING,
    PHASES,
    SUBMITTING_CODE,
    SUBMITTING_EMAIL,
    SUCCESS,
    AwaitingCodeInput,
    AwaitingEmailInput,
    FlowState,
    Mounting,
    PersistedRecord,
    SubmittingCode,
    SubmittingEmail,
    Success,
    parse_state,
)

__all__ = [
    "AuthResult",
    "AWAITING_CODE_INPUT",
    "AWAITING_EMAIL_INPUT",
    "MOUNTING",
    "PHASES",
    "SUBMITTING_CODE",
    "SUBMITTING_EMAIL",
    "SUCCESS",
    "AwaitingCodeInput",
    "AwaitingEmailInput",
    "FlowState",
    "Mounting",
    "PersistedRecord",
    "SubmittingCode",
    "SubmittingEmail",
    "Success",
    "parse_state",
]
