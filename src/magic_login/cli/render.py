"""Text rendering of each flow phase (rich markup)."""

from magic_login.models.state import (
    AwaitingCodeInput,
    AwaitingEmailInput,
    FlowState,
    SubmittingCode,
    SubmittingEmail,
    Success,
)

WRONG_EMAIL = "!"


def render_state(state: FlowState) -> str:
    if isinstance(state, AwaitingEmailInput):
        text = "Enter your email to get a login code."
        if state.error is not None:
            text += f"\n[red]{state.error}[/red]"
        return text
    if isinstance(state, SubmittingEmail):
        return "Sending login code..."
    if isinstance(state, AwaitingCodeInput):
        text = (
            f"Please enter the code we sent to [bold]{state.email}[/bold] "
            f"(wrong email? enter {WRONG_EMAIL})"
        )
        if state.error is not None:
            text += f"\n[red]{state.error}[/red]"
        return text
    if isinstance(state, SubmittingCode):
        return "Verifying..."
    if isinstance(state, Success):
        return "[green]Success! Redirecting...[/green]"
    return ""
