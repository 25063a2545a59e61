"""
Flow state: one frozen model per phase, discriminated by ``phase``.

Each arm carries only the fields valid in that phase; ``extra="forbid"``
keeps a stray email or error from leaking into an unrelated phase.
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

MOUNTING = "mounting"
AWAITING_EMAIL_INPUT = "awaiting-email-input"
SUBMITTING_EMAIL = "submitting-email"
AWAITING_CODE_INPUT = "awaiting-code-input"
SUBMITTING_CODE = "submitting-code"
SUCCESS = "success"

PHASES = (
    MOUNTING,
    AWAITING_EMAIL_INPUT,
    SUBMITTING_EMAIL,
    AWAITING_CODE_INPUT,
    SUBMITTING_CODE,
    SUCCESS,
)


class _Phase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Mounting(_Phase):
    """Persisted state not read yet."""
    phase: Literal["mounting"] = MOUNTING


class AwaitingEmailInput(_Phase):
    phase: Literal["awaiting-email-input"] = AWAITING_EMAIL_INPUT
    error: Optional[str] = None


class SubmittingEmail(_Phase):
    phase: Literal["submitting-email"] = SUBMITTING_EMAIL
    email: str


class AwaitingCodeInput(_Phase):
    phase: Literal["awaiting-code-input"] = AWAITING_CODE_INPUT
    email: str
    error: Optional[str] = None


class SubmittingCode(_Phase):
    phase: Literal["submitting-code"] = SUBMITTING_CODE
    email: str
    code: str


class Success(_Phase):
    """Terminal. Only a fresh controller leaves it."""
    phase: Literal["success"] = SUCCESS


FlowState = Annotated[
    Union[Mounting, AwaitingEmailInput, SubmittingEmail, AwaitingCodeInput, SubmittingCode, Success],
    Field(discriminator="phase"),
]

flow_state_adapter: TypeAdapter[FlowState] = TypeAdapter(FlowState)


def parse_state(data: dict) -> FlowState:
    """Validate a dumped state back into its phase model."""
    return flow_state_adapter.validate_python(data)


class PersistedRecord(BaseModel):
    """The single durable value shared with the persistence adapter."""

    model_config = ConfigDict(frozen=True)

    email: Optional[str] = None
