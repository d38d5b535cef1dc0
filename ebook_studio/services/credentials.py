# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..config import Settings
from ..errors import ProviderConfigError
from ..models.generation import ApiKeyRecord, UsageLogEntry

log = logging.getLogger("ebook_studio.services.credentials")

MISTRAL = "mistral"
STABILITY_AI = "stability_ai"

_DISPLAY_NAMES = {
    MISTRAL: "Mistral",
    STABILITY_AI: "Stability AI",
}


class ApiKeyStore:
    """
    Server-held API keys plus usage accounting for the remote AI services.
    Every remote call acquires a key first and records its outcome after.
    """

    def __init__(self, records: Iterable[ApiKeyRecord] = ()) -> None:
        self._lock = threading.Lock()
        self._records: Dict[str, ApiKeyRecord] = {}
        self._usage: List[UsageLogEntry] = []
        for record in records:
            self._records[record.service_name] = record

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApiKeyStore":
        records = []
        if settings.MISTRAL_API_KEY:
            records.append(ApiKeyRecord(service_name=MISTRAL, api_key=settings.MISTRAL_API_KEY))
        if settings.STABILITY_API_KEY:
            records.append(ApiKeyRecord(service_name=STABILITY_AI, api_key=settings.STABILITY_API_KEY))
        return cls(records)

    def acquire(self, service: str) -> ApiKeyRecord:
        with self._lock:
            record = self._records.get(service)
            if record is None or not record.is_active or not record.api_key:
                name = _DISPLAY_NAMES.get(service, service)
                raise ProviderConfigError(f"{name} API key not configured. Please contact administrator.")
            return record.model_copy()

    def record_usage(
        self,
        service: str,
        operation: str,
        success: bool,
        tokens_used: int = 0,
        book_id: Optional[str] = None,
    ) -> UsageLogEntry:
        now = datetime.now(timezone.utc)
        entry = UsageLogEntry(
            service_name=service,
            operation=operation,
            success=success,
            tokens_used=tokens_used,
            book_id=book_id,
            created_at=now,
        )
        with self._lock:
            self._usage.append(entry)
            record = self._records.get(service)
            if success and record is not None:
                self._records[service] = record.model_copy(
                    update={"usage_count": record.usage_count + 1, "last_used_at": now}
                )
        log.info("usage service=%s operation=%s success=%s tokens=%d", service, operation, success, tokens_used)
        return entry

    def get(self, service: str) -> Optional[ApiKeyRecord]:
        with self._lock:
            record = self._records.get(service)
            return record.model_copy() if record else None

    def usage_log(self) -> List[UsageLogEntry]:
        with self._lock:
            return list(self._usage)
