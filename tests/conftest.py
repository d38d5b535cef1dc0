# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import List

import pytest

from ebook_studio.config import Settings
from ebook_studio.models.book import Book, Chapter, Tone
from ebook_studio.services.credentials import ApiKeyStore

BOOK_ID = "6d1c3a52-8f0e-4c1a-9a53-3b8f6a0f2e11"
FAKE_PDF = b"%PDF-1.7\n% fake layout output\n%%EOF"


class FakeEngine:
    """Layout engine stand-in: records the document and the asset dir it saw."""

    def __init__(self, output: bytes = FAKE_PDF, error: Exception | None = None):
        self.output = output
        self.error = error
        self.documents: List[str] = []
        self.asset_dirs: List[Path] = []
        self.assets_seen: List[List[str]] = []

    def __call__(self, document_html: str, base_dir: Path) -> bytes:
        self.documents.append(document_html)
        self.asset_dirs.append(base_dir)
        self.assets_seen.append(sorted(p.name for p in base_dir.iterdir()))
        if self.error is not None:
            raise self.error
        return self.output


class FakeCompletions:
    def __init__(self, replies, tokens: int = 42, error: Exception | None = None):
        self.replies = list(replies) if isinstance(replies, (list, tuple)) else [replies]
        self.tokens = tokens
        self.error = error
        self.calls: List[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        content = self.replies[min(len(self.calls), len(self.replies)) - 1]
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
            usage=SimpleNamespace(total_tokens=self.tokens),
        )


class FakeChatClient:
    def __init__(self, replies="ok", tokens: int = 42, error: Exception | None = None):
        self.completions = FakeCompletions(replies, tokens=tokens, error=error)
        self.chat = SimpleNamespace(completions=self.completions)
        self.api_keys: List[str] = []

    def factory(self, api_key: str):
        self.api_keys.append(api_key)
        return self


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"", headers=None, text: str = ""):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        import requests

        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response or FakeResponse(200, b"\x89PNG\r\n\x1a\nimage", {"Content-Type": "image/png"})
        self.error = error
        self.calls: List[dict] = []

    def _send(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._send("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._send("POST", url, **kwargs)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        LOG_LEVEL="WARNING",
        MISTRAL_API_KEY="mistral-test-key",
        STABILITY_API_KEY="stability-test-key",
    )


@pytest.fixture
def key_store(settings) -> ApiKeyStore:
    return ApiKeyStore.from_settings(settings)


@pytest.fixture
def book() -> Book:
    return Book(
        id=BOOK_ID,
        title="My Book: Part 1!",
        topic="Deep focus",
        audience="Busy professionals",
        tone=Tone.self_help,
    )


@pytest.fixture
def chapters() -> List[Chapter]:
    return [
        Chapter(
            ebook_id=BOOK_ID,
            chapter_number=1,
            title="Getting Started",
            content="## Why focus matters\n\nAttention is **scarce** and *valuable*.\n\n- Plan\n- Block time\n- Review",
        ),
        Chapter(
            ebook_id=BOOK_ID,
            chapter_number=2,
            title="Q&A <Basics>",
            content="> Focus is a muscle.\n> Train it daily.\n\n1. Breathe\n2. Begin",
        ),
        Chapter(
            ebook_id=BOOK_ID,
            chapter_number=3,
            title="Wrapping Up",
            content="Use `deep work` blocks every morning.",
        ),
    ]


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()
