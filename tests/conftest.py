"""Shared pytest fixtures for PixelPrompt tests."""

import json
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from pixelprompt.api.main import create_app
from pixelprompt.core.config import PixelPromptConfig
from pixelprompt.core.history_store import InMemoryHistoryStore
from pixelprompt.core.models import GeneratedImage, GenerationParameters

ENDPOINT_URL = "https://models.test/chat/completions"
IMAGE_URL = "https://cdn.test/images/out.png"


class RecordingTransport:
    """``httpx.MockTransport`` handler that records requests and replays a reply.

    Attributes:
        requests: Every request received, in order.
        status_code: Status of the canned reply.
        payload: JSON body of the canned reply (ignored when ``text`` is set).
        text: Raw body of the canned reply.
        error: Exception raised instead of replying.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: object = {"choices": [{"message": {"content": IMAGE_URL}}]}
        self.text: str | None = None
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.payload)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


class FakeModelClient:
    """Stand-in for RemoteModelClient that returns a canned reply."""

    def __init__(self, reply: object = None, error: Exception | None = None):
        self.reply = reply if reply is not None else {"url": IMAGE_URL}
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> object:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> PixelPromptConfig:
    """Configuration pointing at a temporary data directory and a fake endpoint."""
    return PixelPromptConfig(
        _env_file=None,
        endpoint_url=ENDPOINT_URL,
        model_id="test/model",
        api_key="test-key",
        customer_id="tester@example.com",
        data_dir=temp_dir / "data",
        history_limit=50,
    )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def test_client(
    test_config: PixelPromptConfig, transport: RecordingTransport
) -> Generator[TestClient, None, None]:
    """FastAPI TestClient whose outbound calls hit ``transport``."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
    app = create_app(test_config, http_client=http_client)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def memory_store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore(limit=50)


@pytest.fixture
def make_image():
    """Factory for GeneratedImage records with sensible defaults."""
    counter = {"n": 0}

    def _make(
        prompt: str = "A test prompt",
        style: str | None = None,
        timestamp: int | None = None,
        **overrides,
    ) -> GeneratedImage:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "id": f"img_{n}",
            "url": f"https://cdn.test/{n}.png",
            "prompt": prompt,
            "enhanced_prompt": prompt,
            "system_prompt": None,
            "parameters": GenerationParameters(style=style),
            "timestamp": timestamp if timestamp is not None else 1_700_000_000_000 + n,
        }
        fields.update(overrides)
        return GeneratedImage(**fields)

    return _make


@pytest.fixture
def image_url() -> str:
    return IMAGE_URL


@pytest.fixture
def fake_client_cls() -> type[FakeModelClient]:
    """The FakeModelClient class, for tests that need custom replies."""
    return FakeModelClient
