"""Typer app configuration and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="studio",
    help="Gemini content studio - posts, threads, images and videos",
    add_completion=False,
)


def setup_logging(log_dir: Path | None = None) -> None:
    """Configure logging for CLI.

    - Suppresses console output from libraries
    - Sets up file logging for AI calls and video jobs
    """
    if log_dir is None:
        log_dir = Path.cwd() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    # Remove any default console handlers from root logger
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(logging.CRITICAL)

    for logger_name in ["httpx", "httpcore", "google_genai", "asyncio"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.WARNING)
        logger.propagate = False

    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")

    # Full AI request/response log
    for logger_name, file_name in (("ai_calls", "ai_calls.log"), ("video_jobs", "video_jobs.log")):
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.handlers = []
        handler = logging.FileHandler(log_dir / file_name, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def register_commands() -> None:
    """Register all commands."""
    from .commands import image, proofread, search, summarize_url, thread, trends, tweet, video

    app.command(name="tweet")(tweet)
    app.command(name="thread")(thread)
    app.command(name="proofread")(proofread)
    app.command(name="summarize-url")(summarize_url)
    app.command(name="search")(search)
    app.command(name="trends")(trends)
    app.command(name="image")(image)
    app.command(name="video")(video)


@app.callback()
def _configure() -> None:
    setup_logging()


# Register all commands
register_commands()


def main() -> None:
    """CLI entry point."""
    app()
