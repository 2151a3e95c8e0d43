"""CLI: gigline auth login|register|status|logout"""

from typing import Optional

import click
from rich.console import Console

from gigline.config import load_config, save_config
from gigline.errors import AuthError
from gigline.models.identity import Role
from gigline.session import SessionStore

console = Console()


def _get_client(require_login: bool = True):
    from gigline.cli.main import _get_client
    return _get_client(require_login)


def _run(coro):
    from gigline.cli.main import _run
    return _run(coro)


def _remember_base_url(base_url: Optional[str]) -> None:
    if base_url:
        save_config({**load_config(), "base_url": base_url})


@click.group()
def auth():
    """Authentication commands."""


@auth.command("login")
@click.option("--base-url", default=None, help="Gigline API base URL")
def auth_login(base_url: Optional[str]):
    """Log in with email and password."""
    _remember_base_url(base_url)

    async def _login():
        async with _get_client(require_login=False) as client:
            email = click.prompt("Email")
            password = click.prompt("Password", hide_input=True)
            with console.status("Logging in..."):
                identity = await client.auth.login(email, password)
            console.print(f"[green]Logged in as {identity.display_name} ({identity.role.value})[/green]")

    try:
        _run(_login())
    except AuthError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)


@auth.command("register")
@click.option("--role", type=click.Choice(["artist", "organizer", "provider"], case_sensitive=False),
              prompt=True)
@click.option("--name", default=None)
@click.option("--base-url", default=None, help="Gigline API base URL")
def auth_register(role: str, name: Optional[str], base_url: Optional[str]):
    """Create an account and log in."""
    _remember_base_url(base_url)

    async def _register():
        async with _get_client(require_login=False) as client:
            email = click.prompt("Email")
            password = click.prompt("Password", hide_input=True, confirmation_prompt=True)
            with console.status("Creating account..."):
                identity = await client.auth.register(email, password, role, name=name)
            console.print(f"[green]Welcome, {identity.display_name}![/green]")

    try:
        _run(_register())
    except AuthError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)


@auth.command("status")
def auth_status():
    """Show current auth status."""
    session = SessionStore()
    identity = session.identity
    if session.authenticated and identity is not None:
        admin = " [magenta](admin)[/magenta]" if identity.role == Role.ADMIN else ""
        console.print(f"[green]Logged in[/green] as {identity.display_name} (ID: {identity.id}){admin}")
    else:
        console.print("[yellow]Not logged in. Run `gigline auth login`.[/yellow]")


@auth.command("logout")
def auth_logout():
    """Clear saved credentials."""
    SessionStore().logout()
    console.print("[green]Logged out.[/green]")
