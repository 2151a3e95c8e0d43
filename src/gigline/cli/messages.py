"""CLI: gigline inbox|open|send|start|delete|watch"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from gigline.attachments import Attachment, attachment_url, media_kind, normalize_url
from gigline.cli.hooks import ConsoleHooks
from gigline.thread import ConversationView

console = Console()


def _get_client():
    from gigline.cli.main import _get_client
    return _get_client()


def _run(coro):
    from gigline.cli.main import _run
    return _run(coro)


def _print_messages(view: ConversationView, base_url: str) -> None:
    if not view.messages:
        console.print("[dim]No messages yet.[/dim]")
        return
    for m in view.messages:
        when = m.created_at.strftime("%Y-%m-%d %H:%M") if m.created_at else ""
        who = "[cyan]You[/cyan]" if view.is_own(m) else f"[green]{m.sender.name or m.sender.id}[/green]"
        pending = " [dim](sending)[/dim]" if m.is_temporary else ""
        console.print(f"[dim]{when}[/dim] {who}: {m.content or ''}{pending}")
        url = attachment_url(m)
        if url:
            console.print(f"    [blue]{media_kind(url)}[/blue] {normalize_url(url, base_url)}")


@click.command("inbox")
@click.option("--json-output", "--json", is_flag=True)
def inbox_cmd(json_output: bool):
    """List conversations, newest first."""

    async def _inbox():
        async with _get_client() as client:
            inbox = client.inbox(ConsoleHooks(console))
            with console.status("Loading conversations..."):
                await inbox.refresh()
            if inbox.load_error:
                console.print("[red]Could not load conversations.[/red]")
                raise SystemExit(1)
            me = client.identity.id
            if json_output:
                click.echo(json.dumps([
                    {**c.model_dump(mode="json"), "unread": inbox.unread.get(c.id, False)}
                    for c in inbox.conversations
                ], indent=2))
                return
            table = Table(title=f"Conversations ({inbox.unread_count} unread)")
            table.add_column("ID", style="bold")
            table.add_column("With")
            table.add_column("Last message")
            table.add_column("Updated")
            for c in inbox.conversations:
                other = c.other_participant(me)
                badge = "[red]●[/red] " if inbox.unread.get(c.id) else ""
                table.add_row(
                    f"{badge}{c.id}",
                    other.name if other else "",
                    c.last_message[:60],
                    c.updated_at.strftime("%Y-%m-%d %H:%M") if c.updated_at else "",
                )
            console.print(table)

    _run(_inbox())


@click.command("open")
@click.argument("conversation_id")
def open_cmd(conversation_id: str):
    """Show a conversation and mark it seen."""

    async def _open():
        async with _get_client() as client:
            view = client.conversation(conversation_id, ConsoleHooks(console))
            await view.mount()
            _print_messages(view, client.http.base_url)
            await view.unmount()

    _run(_open())


@click.command("send")
@click.argument("conversation_id")
@click.argument("text", required=False, default="")
@click.option("-f", "--file", "file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def send_cmd(conversation_id: str, text: str, file_path: Optional[Path]):
    """Send a message and/or a file to a conversation."""

    async def _send():
        async with _get_client() as client:
            hooks = ConsoleHooks(console)
            view = client.conversation(conversation_id, hooks)
            await view.mount()
            attachment = Attachment.from_path(file_path) if file_path else None
            with console.status("Sending..."):
                sent = await view.send(text, attachment)
            if sent and hooks.location is None:
                _print_messages(view, client.http.base_url)
            await view.unmount()
            if not sent:
                raise SystemExit(1)

    _run(_send())


@click.command("start")
@click.argument("recipient_id")
@click.argument("text")
def start_cmd(recipient_id: str, text: str):
    """Start a conversation with someone (or reopen the existing one)."""

    async def _start():
        async with _get_client() as client:
            inbox = client.inbox(ConsoleHooks(console))
            await inbox.load_conversations()
            conversation_id = await inbox.start_conversation(recipient_id, text)
            if conversation_id is None:
                raise SystemExit(1)

    _run(_start())


@click.command("delete")
@click.argument("conversation_id")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
def delete_cmd(conversation_id: str, yes: bool):
    """Delete a conversation."""

    async def _delete():
        async with _get_client() as client:
            inbox = client.inbox(ConsoleHooks(console, assume_yes=yes))
            if await inbox.delete_conversation(conversation_id):
                console.print(f"[green]Conversation {conversation_id} deleted.[/green]")

    _run(_delete())


@click.command("watch")
@click.argument("conversation_id")
@click.option("--interval", default=10.0, type=float, help="Seconds between re-syncs")
def watch_cmd(conversation_id: str, interval: float):
    """Print a conversation and re-sync it until interrupted."""

    async def _watch():
        async with _get_client() as client:
            view = client.conversation(conversation_id, ConsoleHooks(console))
            await view.mount()
            _print_messages(view, client.http.base_url)
            seen = {m.id for m in view.messages}
            try:
                while True:
                    await asyncio.sleep(interval)
                    await view.on_visibility_change(True)
                    fresh = [m for m in view.messages if m.id not in seen]
                    for m in fresh:
                        who = "You" if view.is_own(m) else (m.sender.name or m.sender.id)
                        console.print(f"[green]{who}[/green]: {m.content or ''}")
                    seen.update(m.id for m in fresh)
            finally:
                await view.unmount()

    try:
        _run(_watch())
    except KeyboardInterrupt:
        pass
