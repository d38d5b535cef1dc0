# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Optional

import requests

from ..config import Settings
from ..errors import ProviderAuthError, ProviderServiceError
from ..models.generation import CoverStyle
from .credentials import STABILITY_AI, ApiKeyStore

log = logging.getLogger("ebook_studio.services.cover_generation")

ASPECT_RATIOS = ("1:1", "16:9", "21:9", "2:3", "3:2", "4:5", "5:4", "9:16", "9:21")

STYLE_DESCRIPTORS = {
    CoverStyle.minimal: "minimalist, clean, simple design, modern, elegant, negative space",
    CoverStyle.artistic: "artistic, creative, expressive, vibrant colors, unique composition",
    CoverStyle.professional: "professional, corporate, polished, sophisticated, business-like",
}


def cover_theme(
    title: str,
    prompt: Optional[str] = None,
    primary_color: Optional[str] = None,
    secondary_color: Optional[str] = None,
) -> str:
    theme = title.strip()
    if prompt and prompt.strip():
        theme += f", {prompt.strip()}"
    if primary_color and secondary_color:
        theme += f", colors: {primary_color} and {secondary_color}"
    return theme


def build_prompt(theme: str, mood: str, style: CoverStyle | str) -> str:
    try:
        descriptor = STYLE_DESCRIPTORS[CoverStyle(style)]
    except ValueError:
        descriptor = STYLE_DESCRIPTORS[CoverStyle.professional]
    return (
        f"Book cover design, {theme}, {mood} mood, {descriptor}, high quality, "
        "professional book cover, suitable for publishing, no text, centered composition, "
        "high resolution"
    )


class CoverGenerator:
    """
    Cover artwork through the Stability AI stable-image endpoint.
    Returns raw PNG bytes; no retries.
    """

    def __init__(
        self,
        settings: Settings,
        key_store: ApiKeyStore,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings
        self.key_store = key_store
        self.session = session or requests.Session()

    def generate(
        self,
        theme: str,
        mood: str,
        style: CoverStyle | str = CoverStyle.professional,
        aspect_ratio: str = "2:3",
        book_id: Optional[str] = None,
    ) -> bytes:
        if aspect_ratio not in ASPECT_RATIOS:
            raise ValueError(f"aspect_ratio must be one of {', '.join(ASPECT_RATIOS)}")
        record = self.key_store.acquire(STABILITY_AI)
        prompt = build_prompt(theme, mood, style)

        try:
            resp = self.session.post(
                self.settings.STABILITY_API_URL,
                headers={"Authorization": f"Bearer {record.api_key}", "Accept": "image/*"},
                files={
                    "prompt": (None, prompt),
                    "output_format": (None, "png"),
                    "aspect_ratio": (None, aspect_ratio),
                },
                timeout=self.settings.STABILITY_TIMEOUT,
            )
        except requests.RequestException as e:
            self.key_store.record_usage(STABILITY_AI, "generate_cover", success=False, book_id=book_id)
            log.exception("stability request failed")
            raise ProviderServiceError(f"Stability AI error: {e}") from e

        if resp.status_code in (401, 403):
            self.key_store.record_usage(STABILITY_AI, "generate_cover", success=False, book_id=book_id)
            raise ProviderAuthError("Invalid API key or insufficient credits")
        if not resp.ok:
            self.key_store.record_usage(STABILITY_AI, "generate_cover", success=False, book_id=book_id)
            raise ProviderServiceError(f"Stability AI error ({resp.status_code}): {resp.text[:500]}")
        if not resp.content:
            self.key_store.record_usage(STABILITY_AI, "generate_cover", success=False, book_id=book_id)
            raise ProviderServiceError("Received empty image data")

        self.key_store.record_usage(STABILITY_AI, "generate_cover", success=True, book_id=book_id)
        log.info("cover generated: %d bytes", len(resp.content))
        return resp.content
