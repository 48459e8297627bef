#!/usr/bin/env python3
"""
Import job API client

Thin wrapper around the host library's import endpoint. All calls are POSTs
to a single URL with an ``action`` query parameter and carry the session's
bearer token. Nothing here retries: a failed call is reported to the caller,
which decides whether it is fatal (job start/complete) or just one failed
item.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from common.exceptions import ImportApiError, ImportJobError
from common.utils import guess_mime_type

logger = logging.getLogger(__name__)


@dataclass
class ImportJob:
    """Server-side job created by the start action"""

    job_id: str
    folder_id: Optional[str] = None
    album_map: Dict[str, str] = field(default_factory=dict)


@dataclass
class AssetUploadResult:
    """Outcome of a single upload-asset call"""

    success: bool
    asset_id: Optional[str] = None
    skipped: bool = False
    error: Optional[str] = None


class ImportApiClient:
    """Client for the create-job / upload-asset / upload-batch / complete API"""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 120.0,
        session: Optional[requests.Session] = None,
    ):
        if not base_url:
            raise ValueError("Import API URL must not be empty")
        if not token:
            raise ValueError("Import API token must not be empty")
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["Authorization"] = f"Bearer {token}"

    def _post(self, action: str, **kwargs) -> Dict[str, Any]:
        """POST to an action and decode the JSON body.

        Raises:
            ImportApiError: On transport errors or a non-JSON response
        """
        params = {"action": action}
        params.update(kwargs.pop("params", {}))
        try:
            response = self.session.post(
                self.base_url, params=params, timeout=self.timeout, **kwargs
            )
        except requests.exceptions.Timeout:
            raise ImportApiError(f"{action}: request timed out")
        except requests.exceptions.ConnectionError:
            raise ImportApiError(f"{action}: connection error")
        except requests.exceptions.RequestException as e:
            raise ImportApiError(f"{action}: {e}")

        try:
            data = response.json()
        except ValueError:
            raise ImportApiError(
                f"{action}: HTTP {response.status_code} with non-JSON body",
                status_code=response.status_code,
            )
        if not isinstance(data, dict):
            raise ImportApiError(
                f"{action}: unexpected response body", status_code=response.status_code
            )
        return data

    def start(self, summary: Dict[str, int], album_names: List[str]) -> ImportJob:
        """Create an import job.

        Args:
            summary: Totals announced to the server (total_photos, ...)
            album_names: Distinct album labels to pre-create

        Returns:
            ImportJob with the server's album map

        Raises:
            ImportJobError: If the job could not be created
        """
        try:
            data = self._post(
                "start", json={"summary": summary, "album_names": album_names}
            )
        except ImportApiError as e:
            raise ImportJobError(f"Failed to create import job: {e}", e.status_code)

        if not data.get("success"):
            raise ImportJobError(data.get("error") or "Failed to create import job")

        job = ImportJob(
            job_id=data["job_id"],
            folder_id=data.get("folder_id"),
            album_map=data.get("album_map") or {},
        )
        logger.info(f"Created import job {job.job_id} with {len(job.album_map)} album(s)")
        return job

    def upload_asset(
        self,
        filename: str,
        payload: bytes,
        metadata: Dict[str, Any],
        media_kind: Optional[str] = None,
    ) -> AssetUploadResult:
        """Upload one media payload with its JSON metadata.

        Raises:
            ImportApiError: On transport errors
        """
        files = {
            "file": (filename, payload, guess_mime_type(filename, media_kind)),
            "metadata": (None, json.dumps(metadata), "application/json"),
        }
        data = self._post("upload-asset", files=files)
        if not data.get("success"):
            return AssetUploadResult(success=False, error=data.get("error") or "upload rejected")
        return AssetUploadResult(
            success=True,
            asset_id=data.get("asset_id"),
            skipped=data.get("skipped") is True,
        )

    def upload_batch(
        self,
        asset_id: str,
        comments: List[Dict[str, Any]],
        reactions: List[Dict[str, Any]],
    ) -> None:
        """Attach comments and reactions to an uploaded asset.

        The outcome does not affect the item's status, so errors are logged
        and swallowed here.
        """
        try:
            self._post(
                "upload-batch",
                json={"asset_id": asset_id, "memories": comments, "reactions": reactions},
            )
        except ImportApiError as e:
            logger.warning(f"Failed to attach annotations to asset {asset_id}: {e}")

    def complete(self, job_id: str) -> None:
        """Finalize the import job.

        Raises:
            ImportJobError: If the server could not be reached
        """
        try:
            self._post("complete", params={"job_id": job_id})
        except ImportApiError as e:
            raise ImportJobError(f"Failed to complete import job {job_id}: {e}", e.status_code)
        logger.info(f"Completed import job {job_id}")
