"""CLI: magic-login login|status|reset"""

from typing import Optional

import click
from rich.console import Console

from magic_login.config import Settings
from magic_login.controller import FlowController
from magic_login.models.state import (
    AWAITING_CODE_INPUT,
    AWAITING_EMAIL_INPUT,
    SUCCESS,
    AwaitingCodeInput,
    AwaitingEmailInput,
    SubmittingCode,
    SubmittingEmail,
    Success,
)
from magic_login.persistence.file import FileEmailStore
from magic_login.cli.render import WRONG_EMAIL, render_state

console = Console()


def _build_auth(settings: Settings):
    from magic_login.cli.main import _build_auth
    return _build_auth(settings)


def _run(coro):
    from magic_login.cli.main import _run
    return _run(coro)


async def run_login(settings: Settings, email: Optional[str] = None) -> None:
    """Drive one controller from mount to redirect, prompting on the terminal."""
    auth = _build_auth(settings)
    store = FileEmailStore(settings.state_file)

    def go_to_home() -> None:
        console.print(f"[dim]Redirected to {settings.home_url}[/dim]")

    controller = FlowController(auth, store, go_to_home, settle_delay=settings.settle_delay)
    try:
        async with controller:
            while True:
                state = controller.state
                if isinstance(state, AwaitingEmailInput):
                    console.print(render_state(state))
                    value = email or click.prompt("Your email")
                    email = None
                    with console.status(render_state(SubmittingEmail(email=value))):
                        await controller.submit_email(value.strip())
                elif isinstance(state, AwaitingCodeInput):
                    console.print(render_state(state))
                    code = click.prompt("Code").strip()
                    controller.clear_code_error()
                    if code == WRONG_EMAIL:
                        await controller.request_email_change()
                        continue
                    with console.status(render_state(SubmittingCode(email=state.email, code=code))):
                        await controller.submit_code(code)
                elif isinstance(state, Success):
                    console.print(render_state(state))
                    if controller.redirect_task is not None:
                        await controller.redirect_task
                    break
                else:
                    await controller.wait_for_phase(AWAITING_EMAIL_INPUT, AWAITING_CODE_INPUT, SUCCESS)
    finally:
        close = getattr(auth, "close", None)
        if close is not None:
            await close()


@click.command("login")
@click.option("--email", default=None, help="Email to send the code to")
@click.option("--base-url", default=None, help="Auth backend base URL (demo service if unset)")
@click.pass_obj
def login(settings: Settings, email: Optional[str], base_url: Optional[str]):
    """Log in with an emailed one-time code."""
    if base_url:
        settings = settings.model_copy(update={"base_url": base_url})
    try:
        _run(run_login(settings, email))
    except (KeyboardInterrupt, EOFError, click.Abort):
        console.print("\n[yellow]Login interrupted. Run `magic-login login` to resume.[/yellow]")


@click.command("status")
@click.pass_obj
def status(settings: Settings):
    """Show whether a login is waiting for its code."""
    email = _run(FileEmailStore(settings.state_file).read())
    if email:
        console.print(f"[yellow]Login in progress[/yellow] for {email}. Run `magic-login login` to enter the code.")
    else:
        console.print("[green]No login in progress.[/green]")


@click.command("reset")
@click.pass_obj
def reset(settings: Settings):
    """Forget the email of a login in progress."""
    _run(FileEmailStore(settings.state_file).clear())
    console.print("[green]Pending login cleared.[/green]")
