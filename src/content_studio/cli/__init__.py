"""Command-line interface for the content studio.

Usage:
    studio --help
    studio thread "IA para contadores" --tone storytelling
    studio video "Amanecer en La Habana" --style cinematográfico
"""

from .app import app, main, setup_logging

__all__ = ["app", "main", "setup_logging"]
