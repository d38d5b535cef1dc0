# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
from typing import Any, List

from flask import Blueprint, Response
from pydantic import BaseModel, Field, ValidationError

from ..errors import EbookStudioError
from ..models.book import Book
from ..models.generation import (
    ChapterRequest,
    CoverRequest,
    OutlineEntry,
    OutlineRequest,
    TitlesRequest,
)
from ..services.book_builder import BookBuilder
from ..services.cover_generation import cover_theme
from . import error_response, get_json, json_err, json_ok, request_id, services, validation_error_response

bp = Blueprint("generate", __name__)
log = logging.getLogger("ebook_studio.routes.generate")


class BookRequest(BaseModel):
    book: Book
    outline: List[OutlineEntry] = Field(min_length=1)


@bp.post("/titles")
def titles() -> Any:
    """Body: { "topic", "audience", "tone" } -> { "titles": [...] }"""
    try:
        req = TitlesRequest.model_validate(get_json())
        result = services().content.generate_titles(req.topic, req.audience, req.tone.value)
    except ValidationError as e:
        return validation_error_response(e)
    except EbookStudioError as e:
        return error_response(e)
    return json_ok({"titles": result})


@bp.post("/outline")
def outline() -> Any:
    """Body: { "topic", "audience", "tone", "title"?, "chapter_count"? } -> { "outline": [...] }"""
    try:
        req = OutlineRequest.model_validate(get_json())
        entries = services().content.generate_outline(
            req.topic,
            req.audience,
            req.tone.value,
            title=req.title,
            chapter_count=req.chapter_count,
        )
    except ValidationError as e:
        return validation_error_response(e)
    except EbookStudioError as e:
        return error_response(e)
    return json_ok({"outline": [e.model_dump() for e in entries]})


@bp.post("/chapter")
def chapter() -> Any:
    """Body: { "book_title", "chapter_title", "chapter_number", "tone", "audience" } -> { "content" }"""
    try:
        req = ChapterRequest.model_validate(get_json())
        content = services().content.generate_chapter(
            req.book_title,
            req.chapter_title,
            req.chapter_number,
            req.tone.value,
            req.audience,
            book_id=req.book_id,
        )
    except ValidationError as e:
        return validation_error_response(e)
    except EbookStudioError as e:
        return error_response(e)
    return json_ok({"content": content, "word_count": len(content.split())})


@bp.post("/book")
def book() -> Any:
    """
    Body: { "book": {...}, "outline": [ {"number", "title"}, ... ] }
    Writes every chapter in outline order and returns the completed book.
    """
    try:
        req = BookRequest.model_validate(get_json())
        finished, chapters = BookBuilder(services().content).build(req.book, req.outline)
    except ValidationError as e:
        return validation_error_response(e)
    except EbookStudioError as e:
        return error_response(e)
    return json_ok(
        {
            "book": finished.model_dump(mode="json"),
            "chapters": [c.model_dump(mode="json") for c in chapters],
        }
    )


@bp.post("/cover")
def cover() -> Any:
    """
    Body: { "title", "prompt"?, "primary_color"?, "secondary_color"?, "mood", "style", "aspect_ratio" }
    Returns image/png bytes.
    """
    try:
        req = CoverRequest.model_validate(get_json())
    except ValidationError as e:
        return validation_error_response(e)
    if not req.title.strip():
        return json_err("invalid_request", "title is required", status=400)

    theme = cover_theme(req.title, req.prompt, req.primary_color, req.secondary_color)
    try:
        image = services().covers.generate(theme, req.mood, req.style, req.aspect_ratio)
    except EbookStudioError as e:
        log.warning("cover generation failed code=%s: %s", e.code, e)
        return error_response(e)

    resp = Response(image, mimetype="image/png")
    resp.headers["X-Request-ID"] = request_id()
    resp.headers["Cache-Control"] = "no-store"
    return resp
