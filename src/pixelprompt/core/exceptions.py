"""Exception taxonomy for PixelPrompt.

Every failure of a generate request maps onto one of these classes.  All of
them are terminal for the current request: nothing is retried, and a failed
request never writes to the image history.

Hierarchy::

    PixelPromptError
    ├── ValidationError
    │   └── EmptyPromptError
    ├── RemoteServiceError
    ├── NoImageUrlError
    └── UnknownGenerationError
"""

from __future__ import annotations

from typing import Any


class PixelPromptError(Exception):
    """Base class for all PixelPrompt errors."""


class ValidationError(PixelPromptError):
    """User-friendly validation error.

    The message is intended to be displayed directly to the user.
    """


class EmptyPromptError(ValidationError):
    """Raised when the prompt is missing or blank after trimming."""

    def __init__(self, message: str = "Prompt is required and must be a non-empty string"):
        super().__init__(message)


class RemoteServiceError(PixelPromptError):
    """The hosted model service replied with a non-2xx status or could not be reached.

    Attributes:
        status_code: HTTP status returned by the service, or ``None`` when the
            request failed before a response was received.
        body: Raw response body text (or the transport error message).
    """

    def __init__(self, status_code: int | None, body: str):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"AI service request failed: {body}"
        else:
            message = f"AI service returned {status_code}: {body}"
        super().__init__(message)


class NoImageUrlError(PixelPromptError):
    """The service replied successfully but no image URL could be extracted."""

    def __init__(self, response: Any = None):
        self.response = response
        super().__init__("No image URL was returned from the generation service")


class UnknownGenerationError(PixelPromptError):
    """Any other failure raised while orchestrating a generate request."""
