"""CLI commands - thin wrappers over the generation client."""

from __future__ import annotations

import asyncio
import base64
import mimetypes
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer

from ..content.models import FilePart, GenerationRequest, PostFormat, Tone
from ..providers.gemini import GenerationClient, create_generation_client
from ..services.errors import AppError
from .display import (
    console,
    show_error,
    show_posts,
    show_search,
    show_text,
    show_thread,
    show_trends,
)


def _run(operation: Callable[[GenerationClient], Awaitable[Any]]) -> Any:
    """Build a client, run one operation and exit 1 on a classified error."""
    try:
        client = create_generation_client()
        return asyncio.run(operation(client))
    except AppError as e:
        show_error(console, e)
        raise typer.Exit(1)


def _read_file(path: Path | None) -> FilePart | None:
    if path is None:
        return None
    if not path.exists():
        console.print(f"[red]Archivo no encontrado: {path}[/red]")
        raise typer.Exit(1)
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return FilePart(mime_type=mime_type, data=base64.b64encode(path.read_bytes()).decode("ascii"))


def _request(
    prompt: str,
    audience: Optional[str],
    tone: Tone,
    post_format: PostFormat,
    keywords: Optional[str],
    file: Optional[Path],
    web: bool,
) -> GenerationRequest:
    return GenerationRequest(
        prompt=prompt,
        audience=audience,
        tone=None if tone == Tone.DEFAULT else tone,
        format=None if post_format == PostFormat.DEFAULT else post_format,
        keywords=keywords,
        file=_read_file(file),
        use_web_search=web,
    )


def tweet(
    prompt: str = typer.Argument(..., help="What the post is about"),
    audience: Optional[str] = typer.Option(None, "--audience", "-a", help="Target audience"),
    tone: Tone = typer.Option(Tone.DEFAULT, "--tone", "-t", help="Writing tone"),
    post_format: PostFormat = typer.Option(PostFormat.DEFAULT, "--format", "-f", help="Post format"),
    keywords: Optional[str] = typer.Option(None, "--keywords", "-k", help="Keywords to include"),
    file: Optional[Path] = typer.Option(None, "--file", help="Attach a document or image"),
    web: bool = typer.Option(False, "--web", help="Ground the post with Google Search"),
) -> None:
    """Generate a single post."""
    request = _request(prompt, audience, tone, post_format, keywords, file, web)
    result = _run(lambda client: client.generate_text(request))
    show_text(console, result)


def thread(
    prompt: str = typer.Argument(..., help="What the thread is about"),
    audience: Optional[str] = typer.Option(None, "--audience", "-a", help="Target audience"),
    tone: Tone = typer.Option(Tone.DEFAULT, "--tone", "-t", help="Writing tone"),
    post_format: PostFormat = typer.Option(PostFormat.DEFAULT, "--format", "-f", help="Post format"),
    keywords: Optional[str] = typer.Option(None, "--keywords", "-k", help="Keywords to include"),
    file: Optional[Path] = typer.Option(None, "--file", help="Attach a document or image"),
    web: bool = typer.Option(False, "--web", help="Ground the thread with Google Search"),
) -> None:
    """Generate a thread of posts."""
    request = _request(prompt, audience, tone, post_format, keywords, file, web)
    result = _run(lambda client: client.generate_thread(request))
    show_thread(console, result)


def proofread(
    posts: list[str] = typer.Argument(..., help="Posts to proofread, in order"),
) -> None:
    """Fix spelling and grammar of a thread."""
    result = _run(lambda client: client.proofread(posts))
    for index, (before, after) in enumerate(zip(posts, result.posts), 1):
        marker = "[dim]sin cambios[/dim]" if before == after else "[green]corregido[/green]"
        console.print(f"{index}. {marker}")
    show_thread(console, result, title="Corregido")


def summarize_url(
    uri: str = typer.Argument(..., help="Public URL to summarize"),
) -> None:
    """Summarize a web page."""
    result = _run(lambda client: client.summarize_url(uri))
    show_text(console, result, title="Resumen")


def search(
    query: str = typer.Argument(..., help="Search query"),
    posts: bool = typer.Option(False, "--posts", help="Synthesize X posts instead of pages"),
    summary: bool = typer.Option(False, "--summary", help="Summarize the topic instead"),
) -> None:
    """Grounded web search."""
    if posts:
        show_posts(console, _run(lambda client: client.search_posts(query)))
    elif summary:
        show_text(console, _run(lambda client: client.summarize_web_search(query)), title="Resumen")
    else:
        show_search(console, _run(lambda client: client.search_web(query)))


def trends() -> None:
    """Show trending topics on X."""
    show_trends(console, _run(lambda client: client.get_trending_topics()))


def image(
    prompt: str = typer.Argument(..., help="Image description"),
    aspect_ratio: str = typer.Option("1:1", "--aspect-ratio", "-r", help="e.g. 1:1, 16:9, 9:16"),
    output: Path = typer.Option(Path("output/images"), "--output", "-o", help="Output directory"),
) -> None:
    """Generate an image."""
    result = _run(lambda client: client.generate_image(prompt, aspect_ratio))
    output.mkdir(parents=True, exist_ok=True)
    extension = mimetypes.guess_extension(result.mime_type) or ".jpg"
    for index, data in enumerate(result.images, 1):
        path = output / f"image-{index}{extension}"
        path.write_bytes(base64.b64decode(data))
        console.print(f"[green]Imagen guardada:[/green] {path}")


def video(
    prompt: str = typer.Argument(..., help="Video description"),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="Visual style hint"),
    reference: Optional[Path] = typer.Option(None, "--image", help="Reference image"),
) -> None:
    """Generate a video (this can take several minutes)."""
    reference_image = _read_file(reference)
    result = _run(
        lambda client: client.generate_video(
            prompt,
            style=style,
            on_progress=lambda message: console.print(f"[dim]{message}[/dim]"),
            reference_image=reference_image,
        )
    )
    console.print(f"[green]Video guardado:[/green] {result.path}")
