"""Resolve a student's assignments into hydrated project records.

Project documents are looked up with "id in [...]" queries, which the store
caps at 10 values, so the referenced ids are split into chunks and each chunk
is queried separately. The chunk queries run concurrently; the output is
always built by walking the assignments in their original order.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Sequence, TypeVar

from pydantic import ValidationError

from .config import MAX_IN_QUERY_VALUES
from .errors import FetchError
from .models import AssignmentRecord, JoinedProjectRecord, ProjectRecord
from .store import DOCUMENT_ID, DocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> List[List[T]]:
    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def _distinct(values: Sequence[str]) -> List[str]:
    seen: set[str] = set()
    out: List[str] = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


async def _fetch_chunk(store: DocumentStore, collection: str, chunk: List[str]) -> Dict[str, Dict[str, Any]]:
    docs = await store.query_where_in(collection, DOCUMENT_ID, chunk)
    return {d.id: d.data for d in docs}


async def resolve_assigned_projects(
    store: DocumentStore,
    user_key: str,
    chunk_size: int = MAX_IN_QUERY_VALUES,
    assignments_collection: str = "assignedProjects",
    projects_collection: str = "projects",
) -> List[JoinedProjectRecord]:
    """Return the projects assigned to `user_key`, in assignment order.

    Assignments whose project no longer exists are skipped with a warning.
    A failing store call aborts the whole resolution with `FetchError`.
    """
    if not 1 <= chunk_size <= MAX_IN_QUERY_VALUES:
        raise ValueError(f"chunk_size must be between 1 and {MAX_IN_QUERY_VALUES}")

    try:
        assignment_docs = await store.query_where(assignments_collection, "studentUid", "==", user_key)
    except Exception as exc:
        raise FetchError(assignments_collection, network_failure=True, detail=str(exc)) from exc

    assignments: List[AssignmentRecord] = []
    for doc in assignment_docs:
        try:
            assignments.append(AssignmentRecord.model_validate({**doc.data, "assignedProjectId": doc.id}))
        except ValidationError as exc:
            logger.warning("skipping malformed assignment %s: %s", doc.id, exc)
    if not assignments:
        return []

    chunks = chunked(_distinct([a.project_id for a in assignments]), chunk_size)
    chunk_of = {pid: idx for idx, chunk in enumerate(chunks) for pid in chunk}

    # every chunk query is awaited before a failure is raised
    maps = await asyncio.gather(*(_fetch_chunk(store, projects_collection, c) for c in chunks), return_exceptions=True)
    failures = [m for m in maps if isinstance(m, Exception)]
    if failures:
        raise FetchError(projects_collection, network_failure=True, detail=str(failures[0])) from failures[0]

    joined: List[JoinedProjectRecord] = []
    for assignment in assignments:
        data = maps[chunk_of[assignment.project_id]].get(assignment.project_id)
        if data is None:
            logger.warning(
                "project %s not found for student %s, skipping assignment %s",
                assignment.project_id,
                user_key,
                assignment.assigned_project_id,
            )
            continue
        try:
            project = ProjectRecord.model_validate(data)
        except ValidationError as exc:
            logger.warning("skipping assignment %s, project %s is malformed: %s", assignment.assigned_project_id, assignment.project_id, exc)
            continue
        joined.append(JoinedProjectRecord(**assignment.model_dump(), **project.model_dump()))

    logger.info("resolved %d of %d assignments for %s in %d chunk(s)", len(joined), len(assignments), user_key, len(chunks))
    return joined
