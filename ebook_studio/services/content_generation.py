# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, get_args

from ..config import Settings
from ..errors import ProviderAuthError, ProviderServiceError
from ..models.generation import GenerationOperation, OutlineEntry
from .credentials import MISTRAL, ApiKeyStore

log = logging.getLogger("ebook_studio.services.content_generation")

OPERATIONS: Tuple[str, ...] = get_args(GenerationOperation)
MAX_TITLES = 5
DEFAULT_CHAPTER_COUNT = 8

_LEADING_NUMBER = re.compile(r"^\d+[\.\)]\s*")
_CHAPTER_PREFIX = re.compile(r"^Chapter\s+\d+:\s*", re.IGNORECASE)

# api_key -> OpenAI-compatible client
ClientFactory = Callable[[str], Any]


def _lines(text: str) -> List[str]:
    return [line.strip() for line in (text or "").split("\n") if line.strip()]


def parse_titles(text: str, limit: int = MAX_TITLES) -> List[str]:
    return _lines(text)[:limit]


def parse_outline(text: str, chapter_count: int = DEFAULT_CHAPTER_COUNT) -> List[OutlineEntry]:
    entries: List[OutlineEntry] = []
    for line in _lines(text)[:chapter_count]:
        title = _CHAPTER_PREFIX.sub("", _LEADING_NUMBER.sub("", line)).strip()
        if title:
            entries.append(OutlineEntry(number=len(entries) + 1, title=title))
    return entries


def build_messages(operation: GenerationOperation, payload: Mapping[str, Any]) -> Tuple[List[Dict[str, str]], int]:
    """Return (chat messages, max tokens) for one operation."""
    if operation not in OPERATIONS:
        raise ValueError(f"Invalid operation: {operation}")
    if operation == "generate_titles":
        return (
            [
                {
                    "role": "system",
                    "content": "You are a creative book title generator. Generate compelling, marketable book titles.",
                },
                {
                    "role": "user",
                    "content": (
                        f"Generate {MAX_TITLES} unique and engaging book titles for:\n"
                        f"Topic: {payload.get('topic')}\n"
                        f"Audience: {payload.get('audience')}\n"
                        f"Tone: {payload.get('tone')}\n\n"
                        "Return only the titles, one per line, without numbering or explanation."
                    ),
                },
            ],
            200,
        )
    if operation == "generate_outline":
        count = payload.get("chapter_count") or DEFAULT_CHAPTER_COUNT
        return (
            [
                {
                    "role": "system",
                    "content": "You are an expert book outline creator. Create clear, logical chapter structures.",
                },
                {
                    "role": "user",
                    "content": (
                        f"Create a {count}-chapter outline for an eBook:\n"
                        f"Title: {payload.get('title') or payload.get('topic')}\n"
                        f"Topic: {payload.get('topic')}\n"
                        f"Audience: {payload.get('audience')}\n"
                        f"Tone: {payload.get('tone')}\n\n"
                        "Return only the chapter titles, one per line, without numbering or explanation."
                    ),
                },
            ],
            500,
        )
    return (
        [
            {
                "role": "system",
                "content": (
                    "You are a professional book writer. Write engaging, well-structured chapter "
                    f"content in a {payload.get('tone')} tone for {payload.get('audience')}."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Write the full content for this chapter:\n\n"
                    f"Book Title: {payload.get('book_title')}\n"
                    f"Chapter {payload.get('chapter_number')}: {payload.get('chapter_title')}\n"
                    f"Audience: {payload.get('audience')}\n"
                    f"Tone: {payload.get('tone')}\n\n"
                    "Write approximately 1500-2000 words. Include an engaging introduction, "
                    "well-developed main points with examples, and a smooth transition."
                ),
            },
        ],
        3000,
    )


class ContentGenerator:
    """
    Text generation through Mistral's OpenAI-compatible chat endpoint.
    Calls are sequential and never retried here.
    """

    def __init__(
        self,
        settings: Settings,
        key_store: ApiKeyStore,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.settings = settings
        self.key_store = key_store
        self._client_factory = client_factory or self._openai_client

    def _openai_client(self, api_key: str) -> Any:
        from openai import OpenAI

        return OpenAI(
            api_key=api_key,
            base_url=self.settings.MISTRAL_API_BASE,
            timeout=self.settings.REQUEST_TIMEOUT,
            max_retries=0,
        )

    def generate(self, operation: GenerationOperation, payload: Mapping[str, Any]) -> str:
        import openai

        messages, max_tokens = build_messages(operation, payload)
        record = self.key_store.acquire(MISTRAL)
        client = self._client_factory(record.api_key)
        book_id = payload.get("book_id")

        try:
            resp = client.chat.completions.create(
                model=self.settings.MISTRAL_MODEL,
                messages=messages,
                max_tokens=max_tokens,
                temperature=self.settings.MISTRAL_TEMPERATURE,
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            self.key_store.record_usage(MISTRAL, operation, success=False, book_id=book_id)
            raise ProviderAuthError(f"Mistral rejected the API key: {e}") from e
        except openai.APIError as e:
            self.key_store.record_usage(MISTRAL, operation, success=False, book_id=book_id)
            log.exception("mistral %s failed", operation)
            raise ProviderServiceError(f"Mistral API error: {e}") from e

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            self.key_store.record_usage(MISTRAL, operation, success=False, book_id=book_id)
            raise ProviderServiceError("Mistral returned a malformed response") from e
        if not content or not str(content).strip():
            self.key_store.record_usage(MISTRAL, operation, success=False, book_id=book_id)
            raise ProviderServiceError("Mistral returned an empty response")

        usage = getattr(resp, "usage", None)
        tokens = int(getattr(usage, "total_tokens", 0) or 0)
        self.key_store.record_usage(MISTRAL, operation, success=True, tokens_used=tokens, book_id=book_id)
        return str(content)

    # ---------------------------- operations ----------------------------

    def generate_titles(self, topic: str, audience: str, tone: str) -> List[str]:
        text = self.generate("generate_titles", {"topic": topic, "audience": audience, "tone": tone})
        return parse_titles(text)

    def generate_outline(
        self,
        topic: str,
        audience: str,
        tone: str,
        title: Optional[str] = None,
        chapter_count: int = DEFAULT_CHAPTER_COUNT,
    ) -> List[OutlineEntry]:
        text = self.generate(
            "generate_outline",
            {
                "title": title or topic,
                "topic": topic,
                "audience": audience,
                "tone": tone,
                "chapter_count": chapter_count,
            },
        )
        return parse_outline(text, chapter_count)

    def generate_chapter(
        self,
        book_title: str,
        chapter_title: str,
        chapter_number: int,
        tone: str,
        audience: str,
        book_id: Optional[str] = None,
    ) -> str:
        return self.generate(
            "generate_chapter",
            {
                "book_title": book_title,
                "chapter_title": chapter_title,
                "chapter_number": chapter_number,
                "tone": tone,
                "audience": audience,
                "book_id": book_id,
            },
        )
