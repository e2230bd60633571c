"""Attach canonical paper records to a project's resources.

A project document keeps its papers under ``resources.papers``. Each paper id
may appear at most once per project; exporting a paper twice is an error
rather than a silent overwrite.

The duplicate check and the append are two separate store calls. Two
concurrent exports of the same paper into the same project can both pass the
check; callers that need exactly-once semantics must serialize exports per
project.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from .errors import ExportError, ExportErrorKind, StoreError
from .models import CanonicalPaperRecord
from .store import DocumentStore

logger = logging.getLogger(__name__)

PAPERS_FIELD = "resources.papers"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clean_for_store(obj: Any) -> Any:
    """Drop every None value, recursively, from dicts and lists."""
    if isinstance(obj, dict):
        return {k: clean_for_store(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, (list, tuple)):
        return [clean_for_store(v) for v in obj if v is not None]
    return obj


def _existing_papers(project: dict) -> List[dict]:
    resources = project.get("resources")
    if not isinstance(resources, dict):
        return []
    papers = resources.get("papers")
    if not isinstance(papers, list):
        return []
    return [p for p in papers if isinstance(p, dict)]


class PaperExporter:
    def __init__(self, store: DocumentStore, collection: str = "projects", clock: Callable[[], datetime] = _utcnow) -> None:
        self.store = store
        self.collection = collection
        self.clock = clock

    async def export_record(self, project_id: str, record: CanonicalPaperRecord) -> CanonicalPaperRecord:
        """Append `record` to the project's papers and return it stamped with `added_at`.

        Raises `ExportError` (NOT_FOUND or DUPLICATE) without touching the store,
        and `StoreError` when a store call itself fails.
        """
        project = await self._get_project(project_id)
        if project is None:
            raise ExportError(ExportErrorKind.NOT_FOUND, project_id, record.id)

        if any(p.get("id") == record.id for p in _existing_papers(project)):
            raise ExportError(ExportErrorKind.DUPLICATE, project_id, record.id)

        stamped = record.model_copy(update={"added_at": self.clock()})
        payload = clean_for_store(stamped.model_dump(by_alias=True, mode="json"))
        try:
            await self.store.append_to_array_field(self.collection, project_id, PAPERS_FIELD, payload)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"appending to {self.collection}/{project_id} failed: {exc}") from exc
        logger.info("exported paper %s to project %s", record.id, project_id)
        return stamped

    async def paper_exists(self, project_id: str, paper_id: str) -> bool:
        project = await self._get_project(project_id)
        if project is None:
            return False
        return any(p.get("id") == paper_id for p in _existing_papers(project))

    async def _get_project(self, project_id: str) -> Optional[dict]:
        try:
            return await self.store.get_document(self.collection, project_id)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"reading {self.collection}/{project_id} failed: {exc}") from exc
