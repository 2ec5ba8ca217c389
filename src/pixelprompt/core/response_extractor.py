"""Image URL extraction from the remote model's reply.

The hosted endpoint does not commit to a response shape; different
providers and models behind it answer differently.  Extraction is therefore
an ordered chain of small strategies, most structured first.  The first
strategy that returns a URL wins.

Default chain
-------------
=============================  ==============================================
Strategy                       Matches
=============================  ==============================================
``chat_content_url``           ``choices[0].message.content`` is itself a URL
``chat_content_embedded_url``  the same content contains a URL somewhere
``data_list_url``              ``data[0].url`` (images API shape)
``top_level_url``              ``url`` at the top level
=============================  ==============================================

New shapes are supported by adding a strategy, either to
:data:`DEFAULT_STRATEGIES` or to a :class:`ResponseExtractor` instance.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from pixelprompt.core.exceptions import NoImageUrlError

ExtractionStrategy = Callable[[Any], "str | None"]

URL_PATTERN = re.compile(r"https?://[^\s<>\"]+")


def _chat_message_content(response: Any) -> str | None:
    """Return ``choices[0].message.content`` when it is a string."""
    if not isinstance(response, dict):
        return None
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def chat_content_url(response: Any) -> str | None:
    """Chat-completion reply whose content is the URL itself."""
    content = _chat_message_content(response)
    if content is not None and content.startswith(("http://", "https://")):
        return content.strip()
    return None


def chat_content_embedded_url(response: Any) -> str | None:
    """Chat-completion reply whose content mentions a URL in prose or markdown."""
    content = _chat_message_content(response)
    if content is None:
        return None
    match = URL_PATTERN.search(content)
    return match.group(0) if match else None


def data_list_url(response: Any) -> str | None:
    """Images-API style reply: ``{"data": [{"url": ...}, ...]}``."""
    if not isinstance(response, dict):
        return None
    data = response.get("data")
    if not isinstance(data, list) or not data:
        return None
    first = data[0]
    if not isinstance(first, dict):
        return None
    url = first.get("url")
    return url if isinstance(url, str) and url else None


def top_level_url(response: Any) -> str | None:
    """Bare ``{"url": ...}`` reply."""
    if not isinstance(response, dict):
        return None
    url = response.get("url")
    return url if isinstance(url, str) and url else None


DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    chat_content_url,
    chat_content_embedded_url,
    data_list_url,
    top_level_url,
)


def find_image_url(
    response: Any,
    strategies: Iterable[ExtractionStrategy] = DEFAULT_STRATEGIES,
) -> str | None:
    """Run the strategies in order and return the first URL found, else ``None``."""
    for strategy in strategies:
        url = strategy(response)
        if url:
            return url
    return None


def extract_image_url(
    response: Any,
    strategies: Iterable[ExtractionStrategy] = DEFAULT_STRATEGIES,
) -> str:
    """Like :func:`find_image_url` but raise when nothing matches.

    Raises:
        NoImageUrlError: If no strategy finds a URL.
    """
    url = find_image_url(response, strategies)
    if url is None:
        raise NoImageUrlError(response)
    return url


class ResponseExtractor:
    """An ordered, extendable strategy chain.

    Examples
    --------
    >>> extractor = ResponseExtractor()
    >>> extractor.register(lambda r: r.get("image") if isinstance(r, dict) else None)
    >>> extractor.extract({"image": "https://x/y.png"})
    'https://x/y.png'
    """

    def __init__(self, strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES):
        self._strategies: list[ExtractionStrategy] = list(strategies)

    @property
    def strategies(self) -> tuple[ExtractionStrategy, ...]:
        return tuple(self._strategies)

    def register(self, strategy: ExtractionStrategy, *, first: bool = False) -> None:
        """Add a strategy at the end of the chain, or at the front with ``first=True``."""
        if first:
            self._strategies.insert(0, strategy)
        else:
            self._strategies.append(strategy)

    def find(self, response: Any) -> str | None:
        return find_image_url(response, self._strategies)

    def extract(self, response: Any) -> str:
        return extract_image_url(response, self._strategies)
