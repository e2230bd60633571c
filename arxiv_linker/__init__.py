"""arxiv_linker package

Public importable API for programmatic usage. Prefer importing the
high-level helpers from the package root::

	from arxiv_linker import ingest_reference, PaperExporter, resolve_assigned_projects

Use ``asyncio.run`` to call the async helpers from synchronous code.
"""

from .errors import ArxivLinkerError, ExportError, ExportErrorKind, FetchError, InvalidReference, NormalizeError
from .exporter import PaperExporter, clean_for_store
from .fetcher import HttpxTransport, fetch_document
from .joiner import resolve_assigned_projects
from .models import CanonicalPaperRecord, IngestResult, JoinedProjectRecord, Source
from .normalizer import normalize
from .pipeline import ingest_reference, ingest_references, link_reference
from .reference import extract_identifier, is_valid_reference
from .store import SqliteDocumentStore

__all__ = [
	"ArxivLinkerError",
	"CanonicalPaperRecord",
	"ExportError",
	"ExportErrorKind",
	"FetchError",
	"HttpxTransport",
	"IngestResult",
	"InvalidReference",
	"JoinedProjectRecord",
	"NormalizeError",
	"PaperExporter",
	"Source",
	"SqliteDocumentStore",
	"clean_for_store",
	"extract_identifier",
	"fetch_document",
	"ingest_reference",
	"ingest_references",
	"is_valid_reference",
	"link_reference",
	"normalize",
	"resolve_assigned_projects",
]

__version__ = "0.1.0"


def ingest_reference_sync(reference: str, acting_user: str, timeout: float = 30.0, **kwargs):
	"""Synchronous wrapper for `ingest_reference` over a fresh `HttpxTransport`.

	Example: ingest_reference_sync("https://arxiv.org/abs/2506.14767", "uid-1")
	"""
	import asyncio

	async def _run():
		async with HttpxTransport(timeout=timeout) as transport:
			return await ingest_reference(reference, acting_user, transport, **kwargs)

	return asyncio.run(_run())


def resolve_assigned_projects_sync(db_path: str, user_key: str, **kwargs):
	"""Synchronous wrapper for `resolve_assigned_projects` against a sqlite store."""
	import asyncio

	return asyncio.run(resolve_assigned_projects(SqliteDocumentStore(db_path), user_key, **kwargs))
