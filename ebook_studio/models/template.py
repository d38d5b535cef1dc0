# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_FONT_NAME = re.compile(r"^[A-Za-z0-9 \-]+$")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class FontSizes(_Frozen):
    """Point sizes."""
    title: float = Field(gt=0)
    heading: float = Field(gt=0)
    body: float = Field(gt=0)


class LineHeights(_Frozen):
    title: float = Field(gt=0)
    heading: float = Field(gt=0)
    body: float = Field(gt=0)


class Margins(_Frozen):
    """CSS pixels."""
    top: float = Field(ge=0)
    right: float = Field(ge=0)
    bottom: float = Field(ge=0)
    left: float = Field(ge=0)

    def css(self) -> str:
        return f"{self.top:g}px {self.right:g}px {self.bottom:g}px {self.left:g}px"


class Colors(_Frozen):
    text: str
    heading: str
    accent: str

    @field_validator("text", "heading", "accent")
    @classmethod
    def _hex(cls, v: str) -> str:
        if not _HEX_COLOR.match(v or ""):
            raise ValueError(f"invalid hex color: {v!r}")
        return v


class TemplateStyles(_Frozen):
    font_family: str
    font_size: FontSizes
    line_height: LineHeights
    margins: Margins
    colors: Colors

    @field_validator("font_family")
    @classmethod
    def _font_name(cls, v: str) -> str:
        # Interpolated into stylesheets unquoted.
        if not _FONT_NAME.match(v or ""):
            raise ValueError(f"invalid font family: {v!r}")
        return v.strip()


class Template(_Frozen):
    """
    A named, immutable bundle of typography, colour and margin settings.
    """
    id: str
    name: str
    description: str = ""
    preview_image: str = ""
    styles: TemplateStyles
