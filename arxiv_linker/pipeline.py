"""Ingestion pipeline for arxiv-linker.

This module provides:
- `ingest_reference` - resolve -> fetch -> normalize, falling back between sources
- `ingest_references` - the same for many references, deduplicated by identifier
- `link_reference` - ingest one reference and export it into a project

Failures are reported on the returned `IngestResult` instead of raised, so a
single bad reference never aborts a batch.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional, Sequence, Union

from .errors import ExportError, FetchError, InvalidReference, NormalizeError, StoreError
from .exporter import PaperExporter
from .fetcher import Transport, fetch_document
from .models import IngestResult, Source
from .normalizer import normalize
from .reference import extract_identifier
from .store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_SOURCES = (Source.FEED, Source.RENDERED)


async def ingest_reference(
    reference: str,
    acting_user: str,
    transport: Transport,
    sources: Sequence[Union[Source, str]] = DEFAULT_SOURCES,
) -> IngestResult:
    """Produce a canonical record for `reference`, trying `sources` in order."""
    identifier = extract_identifier(reference)
    if identifier is None:
        return IngestResult(reference=reference, success=False, error=str(InvalidReference(reference)))

    last_error: Optional[Exception] = None
    for source in sources:
        source = Source(source)
        try:
            raw = await fetch_document(identifier, source, transport, reference=reference)
            paper = normalize(raw, identifier, source, acting_user, reference=reference)
        except (FetchError, NormalizeError) as exc:
            logger.warning("%s source failed for %s: %s", source.value, identifier, exc)
            last_error = exc
            continue
        return IngestResult(reference=reference, success=True, paper=paper, source=source.value)

    return IngestResult(reference=reference, success=False, error=str(last_error) if last_error else "no source attempted")


async def ingest_references(
    references: Iterable[str],
    acting_user: str,
    transport: Transport,
    concurrency: int = 3,
    sources: Sequence[Union[Source, str]] = DEFAULT_SOURCES,
) -> List[IngestResult]:
    """Ingest many references concurrently; results follow input order.

    References resolving to an identifier already seen are dropped so the same
    paper is never fetched twice.
    """
    seen: set[str] = set()
    unique: List[str] = []
    for ref in references:
        key = extract_identifier(ref) or ref
        if key not in seen:
            seen.add(key)
            unique.append(ref)

    sem = asyncio.Semaphore(concurrency)

    async def _handle(ref: str) -> IngestResult:
        async with sem:
            return await ingest_reference(ref, acting_user, transport, sources=sources)

    return list(await asyncio.gather(*(_handle(r) for r in unique)))


async def link_reference(
    reference: str,
    project_id: str,
    acting_user: str,
    transport: Transport,
    store: DocumentStore,
    sources: Sequence[Union[Source, str]] = DEFAULT_SOURCES,
) -> IngestResult:
    """Ingest `reference` and attach the record to `project_id`."""
    result = await ingest_reference(reference, acting_user, transport, sources=sources)
    if not result.success or result.paper is None:
        return result

    try:
        paper = await PaperExporter(store).export_record(project_id, result.paper)
    except (ExportError, StoreError) as exc:
        return result.model_copy(update={"success": False, "error": str(exc)})
    return result.model_copy(update={"paper": paper})
