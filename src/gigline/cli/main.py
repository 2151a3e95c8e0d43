"""
Gigline CLI: `gigline` command.

Commands:
  gigline auth login|register|status|logout
  gigline inbox                     Conversations with unread badges
  gigline open <id>                 Show a conversation
  gigline send <id> [TEXT] [--file]  Send text and/or a file
  gigline start <recipient> TEXT    Start (or reopen) a conversation
  gigline delete <id>               Delete a conversation
  gigline watch <id>                Re-sync a conversation periodically
"""

import asyncio
import logging

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install gigline[cli]")

from gigline.client import AsyncGigline

console = Console()


def _get_client(require_login: bool = True) -> AsyncGigline:
    client = AsyncGigline()
    if require_login and not client.session.authenticated:
        console.print("[red]Not logged in. Run `gigline auth login` first.[/red]")
        raise SystemExit(1)
    return client


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP and sync activity")
def main(verbose: bool):
    """Gigline CLI: messages between artists, organizers and providers."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)


# Register subcommands from separate modules
from gigline.cli.auth import auth
from gigline.cli.messages import inbox_cmd, open_cmd, send_cmd, start_cmd, delete_cmd, watch_cmd

main.add_command(auth)
main.add_command(inbox_cmd)
main.add_command(open_cmd)
main.add_command(send_cmd)
main.add_command(start_cmd)
main.add_command(delete_cmd)
main.add_command(watch_cmd)


if __name__ == "__main__":
    main()
