"""AI Providers - Gemini generation client, video poller and configuration."""

from .config import StudioConfig, load_studio_config
from .modes import PlainMode, SchemaMode, ToolMode, build_content_config
from .video import VideoJobPoller
from .chat import RefinementSession
from .gemini import GenerationClient, create_generation_client

__all__ = [
    "StudioConfig",
    "load_studio_config",
    "PlainMode",
    "SchemaMode",
    "ToolMode",
    "build_content_config",
    "VideoJobPoller",
    "RefinementSession",
    "GenerationClient",
    "create_generation_client",
]
