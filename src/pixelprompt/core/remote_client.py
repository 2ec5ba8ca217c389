"""Client for the hosted text-to-image model endpoint.

The endpoint speaks a chat-completions dialect: the prompt goes in as a
single user message and the reply carries the image URL somewhere in its
JSON (see :mod:`pixelprompt.core.response_extractor`).

One request is made per generation.  Errors are never retried.  Transport
faults and non-2xx replies are raised as
:class:`~pixelprompt.core.exceptions.RemoteServiceError` and the caller
decides what to show the user.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from pixelprompt.core.config import PixelPromptConfig
from pixelprompt.core.exceptions import RemoteServiceError, UnknownGenerationError

logger = logging.getLogger(__name__)


class RemoteModelClient:
    """Thin wrapper around a shared :class:`httpx.AsyncClient`.

    The HTTP client is owned by the caller (the FastAPI lifespan in
    production, a ``MockTransport`` client in tests) so connection pooling
    and shutdown stay in one place.

    Args:
        http_client: Async HTTP client used for the outbound call.
        endpoint_url: Full URL of the chat-completions endpoint.
        model: Model identifier placed in the request body.
        api_key: Optional bearer token.
        customer_id: Optional ``CustomerId`` header value.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        endpoint_url: str,
        model: str,
        *,
        api_key: str | None = None,
        customer_id: str | None = None,
    ):
        self.http_client = http_client
        self.endpoint_url = endpoint_url
        self.model = model
        self.api_key = api_key
        self.customer_id = customer_id

    @classmethod
    def from_config(
        cls, http_client: httpx.AsyncClient, config: PixelPromptConfig
    ) -> RemoteModelClient:
        return cls(
            http_client,
            config.endpoint_url,
            config.model_id,
            api_key=config.api_key,
            customer_id=config.customer_id,
        )

    def build_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.customer_id:
            headers["CustomerId"] = self.customer_id
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": prompt,
                }
            ],
        }

    async def complete(self, prompt: str) -> Any:
        """Send the prompt and return the decoded JSON reply.

        Args:
            prompt: Final prompt (already enhanced).

        Returns:
            The parsed JSON body, of whatever shape the service chose.

        Raises:
            RemoteServiceError: On a transport failure or a non-2xx status.
            UnknownGenerationError: A 2xx reply whose body is not valid JSON.
        """
        try:
            response = await self.http_client.post(
                self.endpoint_url,
                headers=self.build_headers(),
                json=self.build_payload(prompt),
            )
        except httpx.HTTPError as e:
            logger.error(f"AI service request failed: {e}")
            raise RemoteServiceError(None, str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.error(f"AI API Error: {response.status_code} {response.text}")
            raise RemoteServiceError(response.status_code, response.text)

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"AI service returned a non-JSON body: {response.text[:200]}")
            raise UnknownGenerationError("AI service returned a non-JSON body") from e

        logger.debug(f"AI API Response: {result}")
        return result
