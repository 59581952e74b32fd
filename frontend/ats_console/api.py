"""
HTTP client for the ATS candidate API

Every call returns the decoded response envelope. Non-2xx responses raise
``ApiError`` carrying the server's error message and code.
"""
import mimetypes
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import structlog

logger = structlog.get_logger()

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_MIME_TYPES = (PDF_MIME_TYPE, DOCX_MIME_TYPE)
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

_EXTENSION_MIME_TYPES = {".pdf": PDF_MIME_TYPE, ".docx": DOCX_MIME_TYPE}


class ApiError(Exception):
    """A failed API call"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        super().__init__(message)


def format_file_size(size: int) -> str:
    """Human readable size: ``1536`` -> ``"1.5 KB"``"""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(units) - 1:
        exponent += 1
    value = f"{size / 1024 ** exponent:.2f}".rstrip("0").rstrip(".")
    return f"{value} {units[exponent]}"


def is_valid_file_type(mime_type: Optional[str]) -> bool:
    return mime_type in ALLOWED_MIME_TYPES


def guess_mime_type(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    if suffix in _EXTENSION_MIME_TYPES:
        return _EXTENSION_MIME_TYPES[suffix]
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"


class CandidateApiService:
    """Thin wrapper over ``httpx.Client`` for the ``/api/candidates`` routes"""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("api_unreachable", method=method, url=url, error=str(e))
            raise ApiError(f"Could not reach the ATS API: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            error = body.get("error") if isinstance(body, dict) else None
            error = error or {}
            logger.info(
                "api_request_rejected",
                method=method,
                url=url,
                status_code=response.status_code,
                code=error.get("code"),
            )
            raise ApiError(
                error.get("message") or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                code=error.get("code"),
                details=error.get("details"),
            )
        return body

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    # Candidates

    def get_candidates(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """List candidates; empty filter values are not sent"""
        params = {
            key: value
            for key, value in (filters or {}).items()
            if value is not None and value != ""
        }
        return self._request("GET", self._url("/candidates"), params=params)

    def get_candidate(self, candidate_id: int) -> Dict[str, Any]:
        return self._request("GET", self._url(f"/candidates/{candidate_id}"))

    def create_candidate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", self._url("/candidates"), json=data)

    def update_candidate(self, candidate_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", self._url(f"/candidates/{candidate_id}"), json=data)

    def delete_candidate(self, candidate_id: int) -> Dict[str, Any]:
        return self._request("DELETE", self._url(f"/candidates/{candidate_id}"))

    # Documents

    def upload_document(
        self,
        candidate_id: int,
        filename: str,
        content: bytes,
        mime_type: Optional[str] = None,
        document_type: str = "cv",
    ) -> Dict[str, Any]:
        files = {"file": (filename, content, mime_type or guess_mime_type(filename))}
        return self._request(
            "POST",
            self._url(f"/candidates/{candidate_id}/documents"),
            files=files,
            data={"documentType": document_type},
        )

    def get_candidate_documents(self, candidate_id: int) -> Dict[str, Any]:
        return self._request("GET", self._url(f"/candidates/{candidate_id}/documents"))

    def delete_document(self, candidate_id: int, document_id: int) -> Dict[str, Any]:
        return self._request(
            "DELETE", self._url(f"/candidates/{candidate_id}/documents/{document_id}")
        )

    def health_check(self) -> Dict[str, Any]:
        """The health route lives at the server root, outside ``/api``"""
        root = httpx.URL(self.base_url).copy_with(path="/")
        return self._request("GET", str(root))

