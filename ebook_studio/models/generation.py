# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .book import Tone

GenerationOperation = Literal["generate_titles", "generate_outline", "generate_chapter"]
AspectRatio = Literal["1:1", "16:9", "21:9", "2:3", "3:2", "4:5", "5:4", "9:16", "9:21"]


class CoverStyle(str, Enum):
    minimal = "minimal"
    artistic = "artistic"
    professional = "professional"


class OutlineEntry(BaseModel):
    number: int = Field(ge=1)
    title: str


class ApiKeyRecord(BaseModel):
    """
    Server-held credential for one remote service.
    """
    service_name: str
    api_key: str
    is_active: bool = True
    usage_count: int = Field(default=0, ge=0)
    last_used_at: Optional[datetime] = None


class UsageLogEntry(BaseModel):
    service_name: str
    operation: str
    success: bool
    tokens_used: int = 0
    book_id: Optional[str] = None
    created_at: datetime


# ------------------------------ request bodies ------------------------------


class _BriefRequest(BaseModel):
    topic: str
    audience: str
    tone: Tone = Tone.professional

    @field_validator("topic", "audience")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()


class TitlesRequest(_BriefRequest):
    pass


class OutlineRequest(_BriefRequest):
    title: Optional[str] = None
    chapter_count: int = Field(default=8, ge=1, le=50)


class ChapterRequest(BaseModel):
    book_title: str
    chapter_title: str
    chapter_number: int = Field(ge=1)
    tone: Tone = Tone.professional
    audience: str = ""
    book_id: Optional[str] = None


class CoverRequest(BaseModel):
    title: str
    prompt: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    mood: str = "professional"
    style: CoverStyle = CoverStyle.professional
    aspect_ratio: AspectRatio = "2:3"
