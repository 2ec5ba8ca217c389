"""Core functionality for PixelPrompt.

This package holds everything that does not depend on the HTTP layer:

- **config**: Pydantic Settings configuration (``PIXELPROMPT_`` prefix).
- **prompt_enhancer**: style/quality modifiers and system prompt prefixing.
- **response_extractor**: ordered strategy chain that finds the image URL in
  the remote model's reply.
- **remote_client**: the single outbound call to the hosted model.
- **history_store**: capped, file-backed image history plus view helpers.
- **generation**: orchestration of one generate request.
- **presets**: system prompt presets and prompt suggestions.
"""

from pixelprompt.core.config import PixelPromptConfig, config
from pixelprompt.core.exceptions import (
    EmptyPromptError,
    NoImageUrlError,
    PixelPromptError,
    RemoteServiceError,
    UnknownGenerationError,
    ValidationError,
)

__all__ = [
    "PixelPromptConfig",
    "config",
    "PixelPromptError",
    "ValidationError",
    "EmptyPromptError",
    "RemoteServiceError",
    "NoImageUrlError",
    "UnknownGenerationError",
]
