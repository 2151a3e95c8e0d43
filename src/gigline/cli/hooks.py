"""Terminal implementation of the view hooks."""

import click
from rich.console import Console

from gigline.hooks import ViewHooks


class ConsoleHooks(ViewHooks):
    def __init__(self, console: Console, assume_yes: bool = False):
        super().__init__()
        self._console = console
        self._assume_yes = assume_yes

    def navigate(self, conversation_id: str) -> None:
        super().navigate(conversation_id)
        self._console.print(f"[dim]→ conversation {conversation_id}[/dim]")

    def alert(self, message: str) -> None:
        self._console.print(f"[red]{message}[/red]")

    def confirm(self, message: str) -> bool:
        if self._assume_yes:
            return True
        return click.confirm(message, default=False)
