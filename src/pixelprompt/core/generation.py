"""Orchestration of a single image generation request.

Each request walks a fixed state machine::

    IDLE -> BUILDING -> CALLING -> EXTRACTING -> SUCCESS
                 \\          \\           \\
                  +----------+-----------+--> FAILED

- ``BUILDING`` validates the prompt and runs the prompt enhancer.  A blank
  prompt fails here, before any network call is made.
- ``CALLING`` performs exactly one request to the hosted model.
- ``EXTRACTING`` runs the response extractor over the reply.
- ``SUCCESS`` builds the :class:`~pixelprompt.core.models.GeneratedImage`
  and appends it to the history store.

A failed request never touches the history store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from pixelprompt.core.exceptions import (
    NoImageUrlError,
    PixelPromptError,
    UnknownGenerationError,
)
from pixelprompt.core.history_store import HistoryStore
from pixelprompt.core.models import (
    GeneratedImage,
    GenerationParameters,
    new_image_id,
    now_millis,
)
from pixelprompt.core.prompt_enhancer import apply_modifiers, enhance
from pixelprompt.core.response_extractor import ResponseExtractor

logger = logging.getLogger(__name__)


class GenerationState(str, Enum):
    IDLE = "idle"
    BUILDING = "building"
    CALLING = "calling"
    EXTRACTING = "extracting"
    SUCCESS = "success"
    FAILED = "failed"


class ModelClient(Protocol):
    async def complete(self, prompt: str) -> Any: ...


@dataclass(frozen=True)
class GenerationRequest:
    """Input of one generate call.  Built fresh per call, never persisted."""

    prompt: str
    system_prompt: str | None = None
    parameters: GenerationParameters = field(default_factory=GenerationParameters)


def preview_prompt(request: GenerationRequest) -> dict[str, str]:
    """Return the enhanced and final prompt without calling the model.

    Raises:
        EmptyPromptError: Blank prompt.
    """
    final_prompt = enhance(request.prompt, request.parameters, request.system_prompt)
    return {
        "enhanced_prompt": apply_modifiers(request.prompt, request.parameters),
        "final_prompt": final_prompt,
    }


class GenerationService:
    """Runs generate requests against a model client and a history store.

    Args:
        client: Anything with an async ``complete(prompt)`` method, normally
            :class:`~pixelprompt.core.remote_client.RemoteModelClient`.
        history_store: Where successful images are recorded.
        extractor: Strategy chain used to find the image URL.
    """

    def __init__(
        self,
        client: ModelClient,
        history_store: HistoryStore,
        extractor: ResponseExtractor | None = None,
    ):
        self.client = client
        self.history_store = history_store
        self.extractor = extractor or ResponseExtractor()
        # Outcome of the most recently finished call.
        self.last_state = GenerationState.IDLE

    @staticmethod
    def _transition(current: GenerationState, state: GenerationState) -> GenerationState:
        logger.debug(f"Generation state: {current.value} -> {state.value}")
        return state

    async def generate(self, request: GenerationRequest) -> GeneratedImage:
        """Generate one image and record it in the history.

        Raises:
            EmptyPromptError: Blank prompt (no network call is made).
            RemoteServiceError: Non-2xx reply or transport failure.
            NoImageUrlError: 2xx reply without an extractable URL.
            UnknownGenerationError: Any other failure.
        """
        # Local to this call; concurrent requests each track their own.
        state = GenerationState.IDLE
        try:
            state = self._transition(state, GenerationState.BUILDING)
            final_prompt = enhance(request.prompt, request.parameters, request.system_prompt)
            enhanced_prompt = apply_modifiers(request.prompt, request.parameters)
            logger.info(f"Generating image with prompt: {final_prompt}")

            state = self._transition(state, GenerationState.CALLING)
            response = await self.client.complete(final_prompt)

            state = self._transition(state, GenerationState.EXTRACTING)
            try:
                url = self.extractor.extract(response)
            except NoImageUrlError:
                logger.error(f"No image URL found in response: {response}")
                raise

            timestamp = now_millis()
            image = GeneratedImage(
                id=new_image_id(timestamp),
                url=url,
                prompt=request.prompt,
                enhanced_prompt=enhanced_prompt,
                system_prompt=request.system_prompt or None,
                parameters=request.parameters,
                timestamp=timestamp,
            )
            self.history_store.append(image)
        except PixelPromptError:
            state = self._transition(state, GenerationState.FAILED)
            self.last_state = state
            raise
        except Exception as e:
            state = self._transition(state, GenerationState.FAILED)
            self.last_state = state
            logger.error(f"Image generation error: {e}", exc_info=True)
            raise UnknownGenerationError(str(e) or type(e).__name__) from e

        state = self._transition(state, GenerationState.SUCCESS)
        self.last_state = state
        logger.info(f"Generated image {image.id}: {image.url}")
        return image
