"""Rich display formatters and helpers for the Story Weaver CLI."""

import asyncio
from collections.abc import Coroutine, Sequence
from contextlib import contextmanager
from typing import Any, TypeVar

from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .console import console
from .shared.types import Notification
from .story_picker import story_label

T = TypeVar("T")


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


@contextmanager
def spinner(description: str):
    """Show a transient spinner while a model call is in flight."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        yield


def display_notification(notification: Notification) -> None:
    """Print a notification as a single coloured line."""
    if notification.is_error:
        console.print(f"[bold red]❌ {notification.title}:[/bold red] {notification.description}")
    else:
        console.print(f"[bold green]✅ {notification.title}:[/bold green] {notification.description}")


def display_story(story: str, title: str = "Your Story") -> None:
    console.print()
    console.print(Panel(Markdown(story), title=f"[bold cyan]📖 {title}[/bold cyan]", border_style="cyan"))
    console.print()


def format_history_table(history: Sequence[str]) -> Table:
    """
    Format the story history as a Rich table.

    Args:
        history: Story texts, newest first

    Returns:
        Rich Table object
    """
    table = Table(title="Story History", show_header=True, header_style="bold magenta")

    table.add_column("#", style="cyan", no_wrap=True, width=4)
    table.add_column("Story", style="white")
    table.add_column("Words", style="green", width=6)

    for idx, story in enumerate(history):
        label = story_label(idx, story, width=70).split(". ", 1)[1]
        table.add_row(str(idx + 1), label, str(len(story.split())))

    return table


def display_history(history: Sequence[str]) -> None:
    if not history:
        console.print("[yellow]No stories in your history yet.[/yellow]")
        return
    console.print(format_history_table(history))


def display_error(error: Exception, recovery_hint: str | None = None) -> None:
    """
    Display error message with recovery hint.

    Args:
        error: Exception that occurred
        recovery_hint: Optional hint for recovery
    """
    console.print(f"\n[bold red]❌ Error:[/bold red] {str(error)}")

    if recovery_hint:
        console.print(f"[yellow]💡 Hint:[/yellow] {recovery_hint}\n")


def display_success(message: str, details: dict[str, Any] | None = None) -> None:
    """
    Display success message with optional details.

    Args:
        message: Success message
        details: Optional details dict
    """
    console.print(f"\n[bold green]✅ {message}[/bold green]")

    if details:
        for key, value in details.items():
            console.print(f"  [cyan]{key}:[/cyan] {value}")
    console.print()
