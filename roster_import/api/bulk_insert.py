from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import requests

from ..roster.payload import tag_campaign

"""Bulk-insert client for the remote runner store.

One create-many request per import action: POST {base_url}/runners/bulk with
a JSON array of records, each tagged with the campaign as ``eventId``. Any
transport error or non-2xx status is a whole-batch failure (BulkInsertError);
nothing is retried here.

``update_existing`` is forwarded as the ``updateExisting=true`` query flag and
otherwise has no effect on what is sent.
"""

__all__ = [
    "BulkInsertClient",
    "BulkInsertError",
    "InsertMetrics",
    "InsertResult",
    "count_created",
]

logger = logging.getLogger(__name__)

BULK_PATH = "/runners/bulk"
# レスポンスが dict の場合に件数を数えるキー (先頭から順に探索)
_LIST_KEYS = ("data", "runners", "created")


class BulkInsertError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class InsertMetrics:
    """Timing data for a single create-many request."""
    batch_size: int
    elapsed_seconds: float
    status_code: int | None


@dataclass(frozen=True)
class InsertResult:
    submitted: int
    created: int


def count_created(body: Any, submitted: int) -> int:
    """Number of created records the response enumerates, else ``submitted``."""
    if isinstance(body, list):
        return len(body)
    if isinstance(body, dict):
        for key in _LIST_KEYS:
            value = body.get(key)
            if isinstance(value, list):
                return len(value)
    return submitted


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or "Failed to bulk import runners"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return str(body)


class BulkInsertClient:
    """Thin requests-based adapter for the create-many endpoint."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        session: requests.Session | None = None,
        metrics_callback: Callable[[InsertMetrics], None] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.metrics_callback = metrics_callback

    @property
    def url(self) -> str:
        return f"{self.base_url}{BULK_PATH}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def create_many(
        self,
        campaign_id: str,
        records: Sequence[dict[str, Any]],
        update_existing: bool = False,
    ) -> InsertResult:
        """Send all ``records`` in one request.

        Raises:
            BulkInsertError: on connection failure, timeout or non-2xx response
        """
        if not records:
            return InsertResult(submitted=0, created=0)

        params = {"updateExisting": "true"} if update_existing else None
        body = tag_campaign(records, campaign_id)
        start = time.perf_counter()
        status_code: int | None = None
        try:
            response = self.session.post(
                self.url,
                json=body,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
            status_code = response.status_code
        except requests.RequestException as e:
            raise BulkInsertError(f"bulk insert request failed: {e}") from e
        finally:
            if self.metrics_callback is not None:
                self.metrics_callback(
                    InsertMetrics(
                        batch_size=len(records),
                        elapsed_seconds=time.perf_counter() - start,
                        status_code=status_code,
                    )
                )

        if not response.ok:
            raise BulkInsertError(
                f"bulk insert rejected: HTTP {response.status_code}: {_error_detail(response)}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError:
            payload = None
        created = count_created(payload, len(records))
        logger.debug("bulk insert ok submitted=%d created=%d", len(records), created)
        return InsertResult(submitted=len(records), created=created)
