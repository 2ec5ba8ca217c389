"""PixelPrompt - FastAPI Application.

This module is the single entry point for the web application.  It defines
the application factory, the FastAPI ``app`` instance, all REST API routes,
and the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
- **Configuration** comes from :data:`~pixelprompt.core.config.config`
  (``PIXELPROMPT_*`` environment variables) and is served to the frontend
  via ``GET /api/config``.
- **Image generation** is delegated to a hosted model endpoint through
  :class:`~pixelprompt.core.remote_client.RemoteModelClient`, orchestrated by
  :class:`~pixelprompt.core.generation.GenerationService`.
- **History persistence** uses a single ``history.json`` file capped at
  ``history_limit`` entries, no database required.
- **The HTML page** is served as a raw ``HTMLResponse``; all dynamic data
  is fetched from the API.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/``                         Serve the main HTML page
GET       ``/api/config``               Styles, qualities, presets
POST      ``/api/generate-image``       Generate one image
POST      ``/api/prompt/enhance``       Preview the enhanced prompt
GET       ``/api/gallery``              Images generated this session
GET       ``/api/history``              Searchable, paginated history
GET       ``/api/history/export``       Download the history as JSON
GET       ``/api/history/{id}``         Single history entry
DELETE    ``/api/history``              Clear the persisted history
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    pixelprompt

Direct invocation::

    python -m pixelprompt.api.main
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response

from pixelprompt import __version__
from pixelprompt.api.models import (
    ErrorResponse,
    GenerateImageRequest,
    GenerateImageResponse,
    PromptPreviewResponse,
)
from pixelprompt.core.config import PixelPromptConfig, config
from pixelprompt.core.exceptions import (
    NoImageUrlError,
    RemoteServiceError,
    UnknownGenerationError,
    ValidationError,
)
from pixelprompt.core.generation import GenerationService, preview_prompt
from pixelprompt.core.history_store import (
    SORT_OPTIONS,
    JsonFileHistoryStore,
    build_export_document,
    export_filename,
    filter_history,
    history_styles,
    merge_history,
    paginate_history,
    sort_history,
)
from pixelprompt.core.models import ASPECT_RATIOS, GeneratedImage
from pixelprompt.core.presets import (
    CUSTOM_PRESET,
    DEFAULT_SYSTEM_PROMPT,
    PROMPT_SUGGESTIONS,
    SYSTEM_PROMPT_PRESETS,
    detect_preset,
)
from pixelprompt.core.prompt_enhancer import QUALITY_MODIFIERS, STYLE_MODIFIERS
from pixelprompt.core.remote_client import RemoteModelClient

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


# ---------------------------------------------------------------------------
# Exception handlers - map the generation error taxonomy onto HTTP.
# ---------------------------------------------------------------------------


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are a 400, not FastAPI's default 422."""
    errors = exc.errors()
    if any("prompt" in err.get("loc", ()) for err in errors):
        error = "Prompt is required and must be a non-empty string"
    else:
        error = "Invalid request"
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in errors
    )
    return _error_response(400, error, details or None)


async def _handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(400, str(exc))


async def _handle_remote_service(request: Request, exc: RemoteServiceError) -> JSONResponse:
    return _error_response(500, "Image generation failed", str(exc))


async def _handle_no_image_url(request: Request, exc: NoImageUrlError) -> JSONResponse:
    return _error_response(500, "Invalid response from AI service", str(exc))


async def _handle_unknown(request: Request, exc: UnknownGenerationError) -> JSONResponse:
    return _error_response(500, "Internal server error", str(exc) or "Unknown error occurred")


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    settings: PixelPromptConfig | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration to use, defaults to the global ``config``.
        http_client: Pre-built HTTP client for the outbound call.  When
            given, the application uses it as-is and leaves closing it to the
            caller (tests pass a ``MockTransport`` client here).

    Returns:
        The configured application.
    """
    settings = settings or config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the shared HTTP client and generation service.

        On shutdown the HTTP client is closed, unless it was supplied by the
        caller.
        """
        # --- Startup -------------------------------------------------------
        owns_client = http_client is None
        client = http_client or httpx.AsyncClient(timeout=settings.timeout_seconds)
        history_store = JsonFileHistoryStore(settings.history_path, limit=settings.history_limit)

        app.state.history_store = history_store
        app.state.generation_service = GenerationService(
            RemoteModelClient.from_config(client, settings),
            history_store,
        )
        app.state.session_images = []
        logger.info(f"GenerationService ready (model: {settings.model_id}).")

        yield  # Application runs here.

        # --- Shutdown ------------------------------------------------------
        if owns_client:
            await client.aclose()
            logger.info("HTTP client closed on shutdown.")

    app = FastAPI(
        title="PixelPrompt",
        description="Text-to-image generation through a hosted model endpoint.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Allow cross-origin requests so the frontend can be served from a
    # different port during development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(ValidationError, _handle_validation)
    app.add_exception_handler(RemoteServiceError, _handle_remote_service)
    app.add_exception_handler(NoImageUrlError, _handle_no_image_url)
    app.add_exception_handler(UnknownGenerationError, _handle_unknown)

    _register_routes(app)
    return app


def _all_images(app: FastAPI) -> list[GeneratedImage]:
    """Session images merged with the persisted history."""
    return merge_history(app.state.session_images, app.state.history_store.load())


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


def _register_routes(app: FastAPI) -> None:
    settings: PixelPromptConfig = app.state.settings

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Serve the main application HTML page.

        Raises:
            HTTPException: 404 if ``index.html`` is not found.
        """
        index_path = settings.templates_dir / "index.html"
        if index_path.exists():
            return HTMLResponse(content=index_path.read_text(encoding="utf-8"))
        raise HTTPException(status_code=404, detail="index.html not found")

    @app.get("/api/config")
    async def get_config() -> dict:
        """Return the options the frontend needs to render its controls.

        Returns:
            Dictionary with keys ``version``, ``styles``, ``qualities``,
            ``aspect_ratios``, ``system_prompt_presets``,
            ``default_system_prompt``, ``custom_preset``, ``suggestions`` and
            ``history_limit``.
        """
        return {
            "version": __version__,
            "styles": list(STYLE_MODIFIERS),
            "qualities": list(QUALITY_MODIFIERS),
            "aspect_ratios": list(ASPECT_RATIOS),
            "system_prompt_presets": SYSTEM_PROMPT_PRESETS,
            "default_system_prompt": DEFAULT_SYSTEM_PROMPT,
            "custom_preset": CUSTOM_PRESET,
            "suggestions": PROMPT_SUGGESTIONS,
            "history_limit": settings.history_limit,
        }

    @app.post("/api/generate-image")
    async def generate_image(req: GenerateImageRequest) -> dict:
        """Generate one image through the hosted model.

        This endpoint:

        1. Rejects blank prompts with a 400 (no outbound call is made).
        2. Builds the final prompt from the modifiers and system prompt.
        3. Calls the hosted model once.
        4. Extracts the image URL from the reply.
        5. Records the image in the session gallery and persisted history.

        Returns:
            ``{"success": True, "image": {...}}``.

        Raises:
            ValidationError: Blank prompt (mapped to 400).
            RemoteServiceError: Remote failure (mapped to 500).
            NoImageUrlError: No URL in the reply (mapped to 500).
            UnknownGenerationError: Anything else (mapped to 500).
        """
        service: GenerationService = app.state.generation_service
        image = await service.generate(req.to_generation_request())
        session_images: list[GeneratedImage] = app.state.session_images
        session_images.insert(0, image)
        del session_images[settings.history_limit :]
        return GenerateImageResponse(image=image).model_dump(mode="json", by_alias=True)

    @app.post("/api/prompt/enhance")
    async def enhance_prompt(req: GenerateImageRequest) -> dict:
        """Preview the enhanced and final prompt without generating an image.

        The response also names the system prompt preset the request matches,
        or ``"custom"``.
        """
        preview = PromptPreviewResponse(
            **preview_prompt(req.to_generation_request()),
            preset=detect_preset(req.system_prompt),
        )
        return preview.model_dump(by_alias=True)

    @app.get("/api/gallery")
    async def get_gallery() -> dict:
        """Return the most recent images generated since the server started.

        Newest first, at most ``history_limit`` of them.
        """
        images: list[GeneratedImage] = app.state.session_images
        return {
            "total": len(images),
            "images": [image.to_json() for image in images],
        }

    @app.get("/api/history")
    async def get_history(
        page: int = 1,
        per_page: int = 20,
        search: str | None = None,
        style: str | None = None,
        sort_by: str = "newest",
    ) -> dict:
        """Return a filtered, sorted, paginated history listing.

        Args:
            page: Page number (1-indexed, clamped to the valid range).
            per_page: Number of images per page.
            search: Case-insensitive prompt substring.
            style: Style key, or ``"all"``.
            sort_by: ``newest``, ``oldest`` or ``prompt``.

        Returns:
            Dictionary with keys ``total``, ``page``, ``per_page``, ``pages``,
            ``images``, ``styles`` and ``sort_options``.
        """
        if per_page < 1:
            raise HTTPException(status_code=400, detail="per_page must be at least 1")

        images = _all_images(app)
        visible = sort_history(filter_history(images, search=search, style=style), sort_by)
        result = paginate_history(visible, page, per_page)
        result["images"] = [image.to_json() for image in result["images"]]
        result["styles"] = history_styles(images)
        result["sort_options"] = list(SORT_OPTIONS)
        return result

    @app.get("/api/history/export")
    async def export_history() -> Response:
        """Download every known image as a JSON document."""
        document = build_export_document(_all_images(app))
        return Response(
            content=json.dumps(document, indent=2),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
        )

    @app.get("/api/history/{image_id}")
    async def get_history_entry(image_id: str) -> dict:
        """Return a single image by id.

        Raises:
            HTTPException: 404 if the image is not found.
        """
        entry = next((image for image in _all_images(app) if image.id == image_id), None)
        if not entry:
            raise HTTPException(status_code=404, detail="Image not found")
        return entry.to_json()

    @app.delete("/api/history")
    async def clear_history() -> dict:
        """Empty the persisted history.

        Images generated in the current session stay in the gallery.
        """
        app.state.history_store.clear()
        return {"success": True}


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~pixelprompt.core.config.config` (which
    loads from ``PIXELPROMPT_SERVER_HOST`` and ``PIXELPROMPT_SERVER_PORT``
    environment variables).  Defaults to ``0.0.0.0:7860``.

    This function is registered as the ``pixelprompt`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "pixelprompt.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
