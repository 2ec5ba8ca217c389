"""Domain models shared by the core and the API layer.

The JSON form of every model uses camelCase keys (``enhancedPrompt``,
``aspectRatio`` ...) so persisted history and API payloads keep the shape
the frontend expects.  Python attributes stay snake_case; both spellings are
accepted on input.
"""

from __future__ import annotations

import random
import string
import time

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

KNOWN_STYLES = ("realistic", "artistic", "abstract", "cinematic", "minimalist")
KNOWN_QUALITIES = ("standard", "high", "ultra")
ASPECT_RATIOS = ("1:1", "16:9", "9:16", "4:3", "3:4")

_ID_ALPHABET = string.ascii_lowercase + string.digits


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class GenerationParameters(_CamelModel):
    """Style, quality and aspect ratio selected for a generation.

    Values outside :data:`KNOWN_STYLES` / :data:`KNOWN_QUALITIES` are
    accepted and simply contribute no modifier.

    Attributes:
        style: Style key (``realistic``, ``artistic``, ``abstract``,
            ``cinematic``, ``minimalist``).
        quality: Quality key (``standard``, ``high``, ``ultra``).
        aspect_ratio: Free-form aspect ratio label such as ``"16:9"``.
    """

    style: str | None = Field(default=None, description="Style modifier key.")
    quality: str | None = Field(default=None, description="Quality modifier key.")
    aspect_ratio: str | None = Field(default=None, description="Aspect ratio label.")


class GeneratedImage(_CamelModel):
    """A successfully generated image.

    Created once per successful generation and immutable afterwards.

    Attributes:
        id: Session-unique identifier, see :func:`new_image_id`.
        url: Image URL extracted from the remote reply.
        prompt: The user's prompt exactly as submitted.
        enhanced_prompt: Prompt with style/quality modifiers applied (without
            the system prompt prefix).
        system_prompt: System prompt used, or ``None``.
        parameters: Parameters the image was generated with.
        timestamp: Creation time in epoch milliseconds.
    """

    id: str
    url: str
    prompt: str
    enhanced_prompt: str
    system_prompt: str | None = None
    parameters: GenerationParameters = Field(default_factory=GenerationParameters)
    timestamp: int

    def to_json(self) -> dict:
        """Serialise with camelCase keys, ready for JSON encoding."""
        return self.model_dump(mode="json", by_alias=True)


def now_millis() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def new_image_id(timestamp: int | None = None) -> str:
    """Build an image identifier from the current time and a random suffix.

    The format is ``img_<epoch-millis>_<7 base36 chars>``.
    """
    if timestamp is None:
        timestamp = now_millis()
    suffix = "".join(random.choices(_ID_ALPHABET, k=7))
    return f"img_{timestamp}_{suffix}"
