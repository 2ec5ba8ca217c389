"""Pydantic request and response models for the PixelPrompt API.

These models define the JSON schema for the API endpoints.  FastAPI uses
them for automatic request validation, serialisation, and OpenAPI
documentation generation.  JSON keys are camelCase (``systemPrompt``,
``aspectRatio``) to match the frontend; snake_case is accepted too.

Models
------
GenerateImageRequest
    Payload for ``POST /api/generate-image`` and ``POST /api/prompt/enhance``.
GenerateImageResponse
    Success body of ``POST /api/generate-image``.
PromptPreviewResponse
    Body of ``POST /api/prompt/enhance``.
ErrorResponse
    Body returned with every 4xx/5xx produced by the generation flow.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pixelprompt.core.generation import GenerationRequest
from pixelprompt.core.models import GeneratedImage, GenerationParameters


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateImageRequest(_ApiModel):
    """Request body for ``POST /api/generate-image``.

    Attributes:
        prompt: Natural-language description of the image.  Must be a
            non-empty string after trimming; blank prompts are rejected by
            the route with a 400.
        system_prompt: Optional instructions prepended to the prompt.
        parameters: Style, quality and aspect ratio selection.
    """

    prompt: str = Field(
        ...,
        description="Image description (non-empty after trimming).",
    )
    system_prompt: str | None = Field(
        default=None,
        description="Optional system prompt prepended to the request.",
    )
    parameters: GenerationParameters = Field(
        default_factory=GenerationParameters,
        description="Style/quality/aspect ratio selection.",
    )

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            prompt=self.prompt,
            system_prompt=self.system_prompt,
            parameters=self.parameters,
        )


class GenerateImageResponse(_ApiModel):
    success: bool = True
    image: GeneratedImage


class PromptPreviewResponse(_ApiModel):
    """Enhanced prompt (modifiers only) and the final prompt that would be sent.

    ``preset`` is the system prompt preset key the request matches, or
    ``"custom"``.
    """

    enhanced_prompt: str
    final_prompt: str
    preset: str


class ErrorResponse(BaseModel):
    """Error body: a short user-facing message plus optional detail text."""

    error: str
    details: str | None = None
