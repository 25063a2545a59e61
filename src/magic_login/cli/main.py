"""
magic-login CLI.

Commands:
  magic-login login      Email + one-time code flow
  magic-login status     Show a login in progress
  magic-login reset      Forget a login in progress
"""

import asyncio
import logging

from pydantic import ValidationError

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install magic-login[cli]")

from magic_login import __version__
from magic_login.auth import AuthService, DemoAuthService, HttpAuthService
from magic_login.config import Settings, load_settings
from magic_login.transport.http import HttpClient

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build_auth(settings: Settings) -> AuthService:
    if settings.base_url:
        return HttpAuthService(HttpClient(settings.base_url))
    return DemoAuthService(delay=settings.demo_delay)


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """Passwordless login with an emailed one-time code."""
    try:
        settings = load_settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid MAGIC_LOGIN_* environment setting:\n{e}")
    _configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


# Register subcommands from separate modules
from magic_login.cli.login import login, reset, status  # noqa: E402

main.add_command(login)
main.add_command(status)
main.add_command(reset)


if __name__ == "__main__":
    main()
