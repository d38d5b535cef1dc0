# SPDX-License-Identifier: Apache-2.0
"""
Exception hierarchy shared by the export pipeline, the remote AI clients
and the HTTP layer.

Every error carries a machine ``code``, the HTTP ``status`` the API answers
with, and a ``user_message`` that is safe to show in the UI. The message
passed to the constructor is the detailed (log-facing) text.
"""
from __future__ import annotations

from typing import Any, Optional


class EbookStudioError(Exception):
    code: str = "error"
    status: int = 500
    user_message: str = "Something went wrong."

    def __init__(self, message: Optional[str] = None, *, details: Any = None) -> None:
        super().__init__(message or self.user_message)
        self.details = details

    def to_payload(self) -> dict:
        return {"code": self.code, "message": self.user_message, "details": self.details}


# ------------------------------ export input ------------------------------


class ExportValidationError(EbookStudioError):
    """Raised before any rendering work starts; never retried."""

    code = "no_content"
    status = 422
    user_message = "There is no content to export."


class NoChaptersError(ExportValidationError):
    pass


class EmptyContentError(ExportValidationError):
    pass


class ChapterSequenceError(ExportValidationError):
    code = "invalid_chapter_sequence"
    user_message = "Chapter numbers must run 1, 2, 3, ... without gaps or duplicates."


class UnsupportedFormatError(EbookStudioError):
    code = "unsupported_format"
    status = 400
    user_message = "Unsupported export format."


# ------------------------------ export output -----------------------------


class ExportError(EbookStudioError):
    code = "export_failed"
    status = 500
    user_message = "Export failed, please try again."


class RenderSurfaceError(ExportError):
    """The offscreen layout engine could not be acquired."""

    code = "render_surface_unavailable"


class RenderingError(ExportError):
    code = "rendering_failed"


class PackagingError(ExportError):
    code = "packaging_failed"


# ------------------------------ remote AI ---------------------------------


class ProviderError(EbookStudioError):
    code = "provider_error"
    status = 502
    user_message = "The AI service failed. Please try again later."


class ProviderAuthError(ProviderError):
    code = "provider_auth"
    status = 401
    user_message = "Authentication with the AI service failed. Check the API key and credits."


class ProviderConfigError(ProviderError):
    code = "provider_not_configured"
    status = 503
    user_message = "The AI service is not configured. Please contact the administrator."


class ProviderServiceError(ProviderError):
    code = "provider_service"
    status = 502
    user_message = "The AI service returned an error. Please try again later."
