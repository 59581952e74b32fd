"""
Candidate list state

Keeps the current page of candidates together with the filters that produced
it. Successful mutations are applied to the local list; failures record the
message in ``error`` and re-raise, leaving the rest of the state untouched.
A list reload that follows a successful mutation only records ``error``.
"""
from typing import Any, Dict, List, Optional

import structlog

from ats_console.api import ApiError, CandidateApiService
from ats_console.filters import DEFAULT_FILTERS, PAGE_RESETTING_FILTERS

logger = structlog.get_logger()


class CandidateListStore:
    def __init__(self, api: CandidateApiService, filters: Optional[Dict[str, Any]] = None):
        self.api = api
        self.filters: Dict[str, Any] = {**DEFAULT_FILTERS, **(filters or {})}
        self.candidates: List[Dict[str, Any]] = []
        self.pagination: Dict[str, int] = {
            "page": self.filters["page"],
            "limit": self.filters["limit"],
            "total": 0,
            "totalPages": 0,
        }
        self.loading = False
        self.error: Optional[str] = None

    def _failed(self, error: ApiError, action: str):
        self.error = error.message
        logger.info("candidate_store_failed", action=action, code=error.code)
        raise error

    def fetch(self) -> List[Dict[str, Any]]:
        self.loading = True
        self.error = None
        try:
            body = self.api.get_candidates(self.filters)
        except ApiError as e:
            self._failed(e, "fetch")
        finally:
            self.loading = False

        self.candidates = body.get("data") or []
        if body.get("pagination"):
            self.pagination = body["pagination"]
        return self.candidates

    def _refresh(self) -> None:
        try:
            self.fetch()
        except ApiError as e:
            logger.warning("candidate_list_refresh_failed", code=e.code)

    def update_filters(self, changes: Dict[str, Any]) -> List[Dict[str, Any]]:
        changes = dict(changes)
        if "page" not in changes and any(key in changes for key in PAGE_RESETTING_FILTERS):
            changes["page"] = 1
        self.filters.update(changes)
        return self.fetch()

    def clear_filters(self) -> List[Dict[str, Any]]:
        self.filters = dict(DEFAULT_FILTERS)
        return self.fetch()

    def go_to_page(self, page: int) -> List[Dict[str, Any]]:
        return self.update_filters({"page": max(page, 1)})

    def create_candidate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            body = self.api.create_candidate(data)
        except ApiError as e:
            self._failed(e, "create")
        # New candidates may land on any page under the current sort
        self._refresh()
        return body["data"]

    def update_candidate(self, candidate_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            body = self.api.update_candidate(candidate_id, data)
        except ApiError as e:
            self._failed(e, "update")
        updated = body["data"]
        self.candidates = [
            updated if candidate["id"] == candidate_id else candidate
            for candidate in self.candidates
        ]
        return updated

    def delete_candidate(self, candidate_id: int) -> None:
        try:
            self.api.delete_candidate(candidate_id)
        except ApiError as e:
            self._failed(e, "delete")
        was_last_on_page = len(self.candidates) == 1
        self.candidates = [c for c in self.candidates if c["id"] != candidate_id]
        if was_last_on_page and self.pagination["page"] > 1:
            self.filters["page"] = self.pagination["page"] - 1
            self._refresh()

    def upload_document(
        self,
        candidate_id: int,
        filename: str,
        content: bytes,
        mime_type: Optional[str] = None,
        document_type: str = "cv",
    ) -> Dict[str, Any]:
        try:
            body = self.api.upload_document(
                candidate_id, filename, content, mime_type=mime_type, document_type=document_type
            )
        except ApiError as e:
            self._failed(e, "upload")
        document = body["data"]
        self.candidates = [
            {**c, "documents": list(c.get("documents") or []) + [document]}
            if c["id"] == candidate_id
            else c
            for c in self.candidates
        ]
        return document
