from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import requests

from ..models.config_models import MarketplaceConfig
from ..models.export_job import ExportJob, ExportStatus

"""SnappShop seller API client for the inventory excel workflow.

Endpoints (relative to ``{base_url}/{seller_code}/inventory/products``):

- POST excel/export/request   start building an export
- GET  excel/export           export status (+ file URL once processed)
- POST excel/import/request   upload a workbook with new prices

Every call sends the seller token in ``authorization`` and the seller code in
``snappshop-seller-code``. Network and protocol failures surface as
MarketplaceError; retries are the caller's business.
"""

__all__ = [
    "ALREADY_REQUESTED_CODE",
    "MarketplaceClient",
    "MarketplaceError",
]

logger = logging.getLogger(__name__)

# error code returned when an export request is already pending
ALREADY_REQUESTED_CODE = 111006

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DOWNLOAD_CHUNK_SIZE = 64 * 1024


class MarketplaceError(Exception):
    """Raised for transport errors and rejected marketplace requests."""


class MarketplaceClient:
    def __init__(
        self,
        base_url: str,
        seller_code: str,
        token: str,
        *,
        timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.seller_code = seller_code
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "accept": "application/json",
                "authorization": token,
                "snappshop-seller-code": seller_code,
            }
        )

    @classmethod
    def from_config(
        cls, config: MarketplaceConfig, token: str, session: requests.Session | None = None
    ) -> MarketplaceClient:
        return cls(
            config.base_url,
            config.seller_code,
            token,
            timeout=config.timeout_seconds,
            session=session,
        )

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{self.seller_code}/inventory/products/{path}"

    def _json(self, resp: requests.Response) -> dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as e:
            raise MarketplaceError(
                f"non-JSON response from {resp.url} (HTTP {resp.status_code})"
            ) from e
        if not isinstance(data, dict):
            raise MarketplaceError(f"unexpected response from {resp.url}: {data!r}")
        return data

    def request_export(self) -> ExportJob:
        """Ask the marketplace to build a fresh inventory export.

        An already pending request (code 111006) counts as requested, the
        poller then picks up that export.
        """
        try:
            resp = self.session.post(self._url("excel/export/request"), json={}, timeout=self.timeout)
        except requests.RequestException as e:
            raise MarketplaceError(f"export request failed: {e}") from e
        data = self._json(resp)

        if data.get("status") is True:
            logger.info("excel export requested")
            return ExportJob(ExportStatus.REQUESTED)
        if data.get("code") == ALREADY_REQUESTED_CODE:
            logger.info("excel export already requested, continuing with the pending one")
            return ExportJob(ExportStatus.REQUESTED, message=data.get("message"))
        return ExportJob(ExportStatus.FAILED, message=data.get("message") or "unknown error")

    def poll_export(self) -> ExportJob:
        """Fetch the current export status."""
        try:
            resp = self.session.get(self._url("excel/export"), timeout=self.timeout)
        except requests.RequestException as e:
            raise MarketplaceError(f"export status check failed: {e}") from e
        data = self._json(resp)

        payload = data.get("data") if isinstance(data.get("data"), dict) else {}
        state = payload.get("status")
        if data.get("status") is True and state == "processing":
            return ExportJob(ExportStatus.PROCESSING)
        if data.get("status") is True and state == "processed":
            file_url = payload.get("file")
            if not file_url:
                return ExportJob(ExportStatus.FAILED, message="processed export without file URL")
            return ExportJob(ExportStatus.PROCESSED, file_url=file_url)
        return ExportJob(ExportStatus.FAILED, message=data.get("message") or f"unexpected status {state!r}")

    def download_export(self, url: str, destination: Path) -> Path:
        """Stream the export file at ``url`` to ``destination``."""
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                with destination.open("wb") as fh:
                    for chunk in resp.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
        except requests.RequestException as e:
            raise MarketplaceError(f"export download failed: {e}") from e
        logger.info(f"export downloaded: {destination}")
        return destination

    def upload_import(self, path: Path) -> dict[str, Any]:
        """Upload a workbook through the import endpoint.

        Returns:
            Decoded JSON body of the accepted request

        Raises:
            MarketplaceError: Transport error or non-2xx response
        """
        try:
            with path.open("rb") as fh:
                resp = self.session.post(
                    self._url("excel/import/request"),
                    files={"file": (path.name, fh, XLSX_MIME)},
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise MarketplaceError(f"import upload failed: {e}") from e

        data = self._json(resp)
        if not resp.ok:
            raise MarketplaceError(
                f"import rejected (HTTP {resp.status_code}): {data.get('message') or data}"
            )
        logger.info(f"import uploaded: {path.name}")
        return data
