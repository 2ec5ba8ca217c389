"""PixelPrompt - text-to-image generation through a hosted model endpoint."""

__version__ = "0.1.0"

from pixelprompt.core.config import PixelPromptConfig, config

__all__ = [
    "PixelPromptConfig",
    "config",
]
