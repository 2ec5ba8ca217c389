"""Generation history storage and view helpers.

The history is a capped, newest-first list of
:class:`~pixelprompt.core.models.GeneratedImage` records.  It is kept behind
a small store interface (``load`` / ``append`` / ``clear``) so the
generation service can be tested without touching disk.

Two stores are provided:

- :class:`JsonFileHistoryStore` persists the list in a single JSON file,
  overwritten wholesale on every update.
- :class:`InMemoryHistoryStore` keeps the list in memory.

Both enforce the same cap: when a new record would push the list past
``limit`` entries, the oldest entries are dropped.

The remaining functions are pure helpers used by the history view: merging
session images with persisted ones, search, style filter, sorting,
pagination, and the JSON export document.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError

from pixelprompt.core.models import GeneratedImage

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50
SORT_OPTIONS = ("newest", "oldest", "prompt")


class HistoryStore(Protocol):
    """Interface the generation service depends on."""

    limit: int

    def load(self) -> list[GeneratedImage]: ...

    def append(self, image: GeneratedImage) -> list[GeneratedImage]: ...

    def clear(self) -> None: ...


def _cap(entries: list[GeneratedImage], limit: int) -> list[GeneratedImage]:
    return entries[:limit]


class InMemoryHistoryStore:
    """History store that lives only as long as the process."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        self.limit = limit
        self._entries: list[GeneratedImage] = []

    def load(self) -> list[GeneratedImage]:
        return list(self._entries)

    def append(self, image: GeneratedImage) -> list[GeneratedImage]:
        self._entries = _cap([image, *self._entries], self.limit)
        return list(self._entries)

    def clear(self) -> None:
        self._entries = []


class JsonFileHistoryStore:
    """History store backed by a single JSON file.

    Loading is forgiving: a missing file, invalid JSON, a non-list document,
    or individual entries that no longer validate all degrade to "fewer
    entries" rather than an exception.  Every update rewrites the whole file.

    Args:
        path: Location of the history file.
        limit: Maximum number of entries kept.
    """

    def __init__(self, path: Path, limit: int = DEFAULT_HISTORY_LIMIT):
        self.path = Path(path)
        self.limit = limit

    def load(self) -> list[GeneratedImage]:
        """Read the history, newest first, capped to ``limit``."""
        if not self.path.exists():
            return []
        try:
            with open(self.path, encoding="utf-8") as handle:
                raw_entries = json.load(handle)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to parse history from {self.path}: {e}")
            return []

        if not isinstance(raw_entries, list):
            logger.warning(f"History file {self.path} does not contain a list, ignoring it")
            return []

        entries: list[GeneratedImage] = []
        for raw in raw_entries:
            try:
                entries.append(GeneratedImage.model_validate(raw))
            except PydanticValidationError:
                logger.warning(f"Dropping invalid history entry: {raw!r}")
        return _cap(entries, self.limit)

    def save(self, entries: list[GeneratedImage]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as handle:
            json.dump([entry.to_json() for entry in entries], handle, indent=2)

    def append(self, image: GeneratedImage) -> list[GeneratedImage]:
        """Insert ``image`` at the front, evict past ``limit`` and persist."""
        entries = _cap([image, *self.load()], self.limit)
        self.save(entries)
        return entries

    def clear(self) -> None:
        self.save([])
        logger.info("Generation history cleared")


def merge_history(
    session_images: list[GeneratedImage],
    persisted_images: list[GeneratedImage],
) -> list[GeneratedImage]:
    """Combine session images with persisted ones, dropping duplicate ids.

    Session images come first; a persisted image is kept only if no session
    image shares its id.
    """
    seen = {image.id for image in session_images}
    return [*session_images, *(image for image in persisted_images if image.id not in seen)]


def filter_history(
    images: list[GeneratedImage],
    *,
    search: str | None = None,
    style: str | None = None,
) -> list[GeneratedImage]:
    """Apply the prompt search and style filter.

    Args:
        images: Source images.
        search: Case-insensitive substring matched against the prompt.
        style: Style key to keep.  ``None`` or ``"all"`` keeps every style.

    Returns:
        Matching images in their original order.
    """
    filtered = images

    if search:
        needle = search.lower()
        filtered = [image for image in filtered if needle in image.prompt.lower()]

    if style and style != "all":
        filtered = [image for image in filtered if image.parameters.style == style]

    return filtered


def sort_history(images: list[GeneratedImage], sort_by: str = "newest") -> list[GeneratedImage]:
    """Sort by ``newest`` (default), ``oldest`` or ``prompt``.

    Unknown keys sort newest first.
    """
    if sort_by == "oldest":
        return sorted(images, key=lambda image: image.timestamp)
    if sort_by == "prompt":
        return sorted(images, key=lambda image: image.prompt.casefold())
    return sorted(images, key=lambda image: image.timestamp, reverse=True)


def paginate_history(images: list[GeneratedImage], page: int, per_page: int) -> dict:
    """Paginate images and clamp the requested page to valid bounds.

    Returns:
        Dictionary containing ``total``, ``page``, ``per_page``, ``pages``, and
        ``images`` for the resolved page.
    """
    total = len(images)
    pages = (total + per_page - 1) // per_page if total > 0 else 1
    resolved_page = min(max(page, 1), pages)

    start = (resolved_page - 1) * per_page
    end = start + per_page

    return {
        "total": total,
        "page": resolved_page,
        "per_page": per_page,
        "pages": pages,
        "images": images[start:end],
    }


def history_styles(images: list[GeneratedImage]) -> list[str]:
    """Distinct styles used across ``images``, in first-seen order."""
    styles: dict[str, None] = {}
    for image in images:
        if image.parameters.style:
            styles.setdefault(image.parameters.style, None)
    return list(styles)


def build_export_document(images: list[GeneratedImage], now: datetime | None = None) -> dict:
    """Build the downloadable history export.

    Args:
        images: Images to export, in display order.
        now: Export time, defaults to the current UTC time.

    Returns:
        ``{"exportedAt", "totalImages", "images"}`` where each image carries
        ``id``, ``prompt``, ``timestamp``, ``parameters`` and ``url``.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return {
        "exportedAt": now.isoformat(),
        "totalImages": len(images),
        "images": [
            {
                "id": image.id,
                "prompt": image.prompt,
                "timestamp": image.timestamp,
                "parameters": image.parameters.model_dump(mode="json", by_alias=True),
                "url": image.url,
            }
            for image in images
        ],
    }


def export_filename(now: datetime | None = None) -> str:
    """File name offered for the export download, e.g. ``ai-image-history-2024-05-01.json``."""
    if now is None:
        now = datetime.now(timezone.utc)
    return f"ai-image-history-{now.date().isoformat()}.json"
