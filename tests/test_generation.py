# tests/test_generation.py
from __future__ import annotations

import httpx
import openai
import pytest
import requests

from conftest import FakeChatClient, FakeResponse, FakeSession
from ebook_studio.errors import ProviderAuthError, ProviderConfigError, ProviderServiceError
from ebook_studio.models.book import Book, BookStatus, Tone
from ebook_studio.models.generation import ApiKeyRecord, CoverStyle, OutlineEntry
from ebook_studio.services.book_builder import BookBuilder
from ebook_studio.services.content_generation import (
    OPERATIONS,
    ContentGenerator,
    build_messages,
    parse_outline,
    parse_titles,
)
from ebook_studio.services.cover_generation import CoverGenerator, build_prompt, cover_theme
from ebook_studio.services.credentials import MISTRAL, STABILITY_AI, ApiKeyStore

_REQUEST = httpx.Request("POST", "https://api.mistral.ai/v1/chat/completions")


# ------------------------------ credentials ------------------------------


def test_missing_key_is_a_configuration_error():
    store = ApiKeyStore()
    with pytest.raises(ProviderConfigError) as exc:
        store.acquire(MISTRAL)
    assert "Mistral API key not configured" in str(exc.value)
    assert exc.value.status == 503


def test_inactive_key_is_not_handed_out():
    store = ApiKeyStore([ApiKeyRecord(service_name=STABILITY_AI, api_key="k", is_active=False)])
    with pytest.raises(ProviderConfigError):
        store.acquire(STABILITY_AI)


def test_usage_is_counted_only_on_success(key_store):
    key_store.record_usage(MISTRAL, "generate_titles", success=True, tokens_used=12)
    key_store.record_usage(MISTRAL, "generate_titles", success=False)

    record = key_store.get(MISTRAL)
    assert record.usage_count == 1
    assert record.last_used_at is not None
    log = key_store.usage_log()
    assert [(e.operation, e.success, e.tokens_used) for e in log] == [
        ("generate_titles", True, 12),
        ("generate_titles", False, 0),
    ]


# ------------------------------ text ------------------------------


def test_parse_titles_keeps_first_five_non_empty_lines():
    text = "\n".join(["One", "", "Two", "Three", "Four", "Five", "Six"])
    assert parse_titles(text) == ["One", "Two", "Three", "Four", "Five"]


def test_parse_outline_strips_numbering_and_chapter_prefixes():
    entries = parse_outline("1. Intro\n2) Basics\nChapter 3: Advanced\n\n", chapter_count=8)
    assert [(e.number, e.title) for e in entries] == [(1, "Intro"), (2, "Basics"), (3, "Advanced")]


def test_parse_outline_honours_chapter_count():
    assert len(parse_outline("a\nb\nc\nd", chapter_count=2)) == 2


def test_build_messages_token_limits():
    assert build_messages("generate_titles", {"topic": "x"})[1] == 200
    assert build_messages("generate_outline", {"topic": "x"})[1] == 500
    messages, max_tokens = build_messages("generate_chapter", {"tone": "guide", "audience": "cooks"})
    assert max_tokens == 3000
    assert "guide tone for cooks" in messages[0]["content"]
    with pytest.raises(ValueError):
        build_messages("generate_poem", {})


def test_every_operation_has_a_prompt():
    assert OPERATIONS == ("generate_titles", "generate_outline", "generate_chapter")
    for operation in OPERATIONS:
        messages, max_tokens = build_messages(operation, {"topic": "x", "tone": "guide", "audience": "a"})
        assert [m["role"] for m in messages] == ["system", "user"]
        assert max_tokens > 0


def test_generate_titles_calls_mistral(settings, key_store):
    client = FakeChatClient("Focus First\nDeep Hours\n", tokens=77)
    gen = ContentGenerator(settings, key_store, client_factory=client.factory)

    titles = gen.generate_titles("Deep focus", "Busy professionals", "self-help")

    assert titles == ["Focus First", "Deep Hours"]
    assert client.api_keys == ["mistral-test-key"]
    call = client.completions.calls[0]
    assert call["model"] == "mistral-small-latest"
    assert call["max_tokens"] == 200
    assert call["temperature"] == 0.7
    assert "Topic: Deep focus" in call["messages"][1]["content"]
    assert key_store.usage_log()[-1].tokens_used == 77
    assert key_store.get(MISTRAL).usage_count == 1


def test_generate_outline(settings, key_store):
    client = FakeChatClient("1. Why\n2. How\n3. What next")
    gen = ContentGenerator(settings, key_store, client_factory=client.factory)
    outline = gen.generate_outline("Focus", "Students", "guide", chapter_count=3)
    assert [e.title for e in outline] == ["Why", "How", "What next"]
    assert "3-chapter outline" in client.completions.calls[0]["messages"][1]["content"]


def test_rejected_key_maps_to_auth_error(settings, key_store):
    error = openai.AuthenticationError(
        "invalid api key", response=httpx.Response(401, request=_REQUEST), body=None
    )
    client = FakeChatClient(error=error)
    gen = ContentGenerator(settings, key_store, client_factory=client.factory)

    with pytest.raises(ProviderAuthError):
        gen.generate_titles("t", "a", "guide")
    assert key_store.usage_log()[-1].success is False
    assert key_store.get(MISTRAL).usage_count == 0


def test_connection_failure_maps_to_service_error(settings, key_store):
    client = FakeChatClient(error=openai.APIConnectionError(request=_REQUEST))
    gen = ContentGenerator(settings, key_store, client_factory=client.factory)
    with pytest.raises(ProviderServiceError):
        gen.generate_chapter("Book", "Chapter", 1, "guide", "cooks")


def test_empty_completion_is_a_service_error(settings, key_store):
    client = FakeChatClient("   ")
    gen = ContentGenerator(settings, key_store, client_factory=client.factory)
    with pytest.raises(ProviderServiceError):
        gen.generate_titles("t", "a", "guide")


def test_generation_needs_a_configured_key(settings):
    client = FakeChatClient("x")
    gen = ContentGenerator(settings, ApiKeyStore(), client_factory=client.factory)
    with pytest.raises(ProviderConfigError):
        gen.generate_titles("t", "a", "guide")
    assert client.completions.calls == []


# ------------------------------ covers ------------------------------


def test_cover_theme_and_prompt():
    theme = cover_theme("Deep Work", "forest at dawn", "#112233", "#445566")
    assert theme == "Deep Work, forest at dawn, colors: #112233 and #445566"
    assert cover_theme("Deep Work", "  ", "#112233", None) == "Deep Work"

    prompt = build_prompt(theme, "calm", CoverStyle.minimal)
    assert prompt.startswith("Book cover design, Deep Work, forest at dawn")
    assert "calm mood" in prompt
    assert "minimalist, clean" in prompt
    assert "corporate" in build_prompt(theme, "calm", "retro")


def test_cover_generation_posts_multipart(settings, key_store):
    session = FakeSession(FakeResponse(200, b"\x89PNGdata"))
    gen = CoverGenerator(settings, key_store, session=session)

    image = gen.generate("Deep Work", "calm", "artistic", "2:3", book_id="b1")

    assert image == b"\x89PNGdata"
    call = session.calls[0]
    assert call["url"] == "https://api.stability.ai/v2beta/stable-image/generate/core"
    assert call["headers"]["Authorization"] == "Bearer stability-test-key"
    assert call["headers"]["Accept"] == "image/*"
    assert call["files"]["aspect_ratio"] == (None, "2:3")
    assert call["files"]["output_format"] == (None, "png")
    assert "vibrant colors" in call["files"]["prompt"][1]
    entry = key_store.usage_log()[-1]
    assert (entry.service_name, entry.operation, entry.success, entry.book_id) == (
        STABILITY_AI,
        "generate_cover",
        True,
        "b1",
    )


@pytest.mark.parametrize("status", [401, 403])
def test_cover_auth_failure(settings, key_store, status):
    gen = CoverGenerator(settings, key_store, session=FakeSession(FakeResponse(status, text="no credits")))
    with pytest.raises(ProviderAuthError) as exc:
        gen.generate("t", "calm")
    assert str(exc.value) == "Invalid API key or insufficient credits"


def test_cover_service_failures(settings, key_store):
    gen = CoverGenerator(settings, key_store, session=FakeSession(FakeResponse(500, text="overloaded")))
    with pytest.raises(ProviderServiceError):
        gen.generate("t", "calm")

    gen = CoverGenerator(settings, key_store, session=FakeSession(FakeResponse(200, b"")))
    with pytest.raises(ProviderServiceError):
        gen.generate("t", "calm")

    gen = CoverGenerator(settings, key_store, session=FakeSession(error=requests.ConnectionError("down")))
    with pytest.raises(ProviderServiceError):
        gen.generate("t", "calm")
    assert all(not e.success for e in key_store.usage_log())


def test_cover_rejects_unknown_aspect_ratio(settings, key_store):
    session = FakeSession()
    with pytest.raises(ValueError):
        CoverGenerator(settings, key_store, session=session).generate("t", "calm", aspect_ratio="7:3")
    assert session.calls == []


# ------------------------------ whole book ------------------------------


class _ScriptedWriter:
    def __init__(self):
        self.calls = []

    def generate_chapter(self, **kwargs):
        self.calls.append(kwargs)
        return f"Body of {kwargs['chapter_title']} with five words"


def test_book_builder_writes_every_outlined_chapter():
    book = Book(title="Deep Work", audience="cooks", tone=Tone.guide)
    writer = _ScriptedWriter()
    outline = [OutlineEntry(number=1, title="Start"), OutlineEntry(number=2, title="Finish")]

    finished, chapters = BookBuilder(writer).build(book, outline)

    assert [c.chapter_number for c in chapters] == [1, 2]
    assert [c.title for c in chapters] == ["Start", "Finish"]
    assert all(c.ebook_id == book.id for c in chapters)
    assert finished.status is BookStatus.completed
    assert finished.chapter_count == 2
    assert finished.word_count == sum(c.word_count for c in chapters)
    assert writer.calls[1]["tone"] == "guide"
    assert writer.calls[1]["chapter_number"] == 2


def test_book_builder_requires_an_outline():
    with pytest.raises(ValueError):
        BookBuilder(_ScriptedWriter()).build(Book(title="x"), [])
