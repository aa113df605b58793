"""Display functions for CLI commands - pure functions for Rich output."""

from __future__ import annotations

import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..content.models import (
    PostSearchResult,
    SearchResult,
    Source,
    TextResult,
    ThreadResult,
    TrendResult,
)
from ..services.errors import AppError

# Use safe_box on Windows to avoid Unicode encoding errors
console = Console(safe_box=sys.platform == "win32")


def show_error(console: Console, error: AppError) -> None:
    """Display a classified error."""
    console.print(f"[red]{error.kind.value}: {error.message}[/red]")


def show_sources(console: Console, sources: list[Source]) -> None:
    if not sources:
        return
    console.print("\n[dim]Fuentes:[/dim]")
    for source in sources:
        console.print(f"  [dim]-[/dim] {source.title} [cyan]{source.uri}[/cyan]")


def show_text(console: Console, result: TextResult, title: str = "Tuit") -> None:
    console.print(Panel(result.text, title=title))
    show_sources(console, result.sources)


def show_thread(console: Console, result: ThreadResult, title: str = "Hilo") -> None:
    """Display each post of a thread with its character count."""
    for index, post in enumerate(result.posts, 1):
        color = "green" if len(post) <= 275 else "red"
        console.print(Panel(
            post,
            title=f"{title} {index}/{len(result.posts)}",
            subtitle=f"[{color}]{len(post)} caracteres[/{color}]",
        ))
    show_sources(console, result.sources)


def show_search(console: Console, result: SearchResult) -> None:
    if not result.items:
        console.print("[yellow]Sin resultados.[/yellow]")
        return

    table = Table(title="Resultados de búsqueda")
    table.add_column("#", style="dim")
    table.add_column("Título", style="cyan")
    table.add_column("Resumen")
    table.add_column("URI", style="green")

    for index, item in enumerate(result.items, 1):
        table.add_row(str(index), item.title, item.summary, item.uri)

    console.print(table)


def show_posts(console: Console, result: PostSearchResult) -> None:
    for post in result.posts:
        verified = " [blue]✓[/blue]" if post.author.verified else ""
        console.print(
            Panel(
                post.content,
                title=f"{post.author.name}{verified} [dim]{post.author.handle}[/dim]",
                subtitle=(
                    f"♥ {post.stats.likes}  ↻ {post.stats.retweets}  "
                    f"💬 {post.stats.replies}  👁 {post.stats.impressions}"
                ),
            )
        )
    show_sources(console, result.sources)


def show_trends(console: Console, result: TrendResult) -> None:
    table = Table(title="Tendencias en X")
    table.add_column("Tema", style="cyan")
    table.add_column("Por qué es tendencia")

    for trend in result.trends:
        table.add_row(trend.topic, trend.description)

    console.print(table)
    show_sources(console, result.sources)
