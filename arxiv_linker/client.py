from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, List, Optional

from . import ingest_reference_sync, resolve_assigned_projects_sync
from .config import get_settings
from .fetcher import HttpxTransport
from .models import IngestResult, JoinedProjectRecord
from .pipeline import ingest_references, link_reference
from .store import SqliteDocumentStore


class ArxivLinkerClient:
    """Lightweight synchronous client wrapping common operations.

    Examples:
        client = ArxivLinkerClient(db_path="data.db", user="uid-1")
        client.parse("https://arxiv.org/abs/2506.14767")
        client.export("https://arxiv.org/abs/2506.14767", project_id="p1")
    """

    def __init__(
        self,
        db_path: Optional[str | Path] = None,
        user: str = "anonymous",
        timeout: float = 30.0,
        concurrency: Optional[int] = None,
    ) -> None:
        self.db_path = str(db_path) if db_path is not None else None
        self.user = user
        self.timeout = timeout
        self.concurrency = concurrency if concurrency is not None else get_settings().concurrency

    def parse(self, reference: str) -> IngestResult:
        return ingest_reference_sync(reference, self.user, timeout=self.timeout)

    def parse_many(self, references: Iterable[str]) -> List[IngestResult]:
        async def _run() -> List[IngestResult]:
            async with HttpxTransport(timeout=self.timeout) as transport:
                return await ingest_references(references, self.user, transport, concurrency=self.concurrency)

        return asyncio.run(_run())

    def export(self, reference: str, project_id: str) -> IngestResult:
        store = self._store()

        async def _run() -> IngestResult:
            await store.init()
            async with HttpxTransport(timeout=self.timeout) as transport:
                return await link_reference(reference, project_id, self.user, transport, store)

        return asyncio.run(_run())

    def projects(self) -> List[JoinedProjectRecord]:
        return resolve_assigned_projects_sync(self._store().db_path, self.user)

    def _store(self) -> SqliteDocumentStore:
        if not self.db_path:
            raise RuntimeError("this operation needs a db_path")
        return SqliteDocumentStore(self.db_path)
