from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Source(str, Enum):
    """Where paper metadata is read from."""

    FEED = "feed"
    RENDERED = "rendered"


class _StoreModel(BaseModel):
    """Python attributes are snake_case; the store shape is camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CanonicalPaperRecord(_StoreModel):
    """Normalized metadata for one arXiv paper, independent of its source."""

    id: str
    title: str = ""
    abstract: str = ""
    authors: List[str] = []
    subjects: List[str] = []
    categories: List[str] = []
    submitted_date: str = ""
    updated_date: Optional[str] = None
    pdf_url: str
    arxiv_url: str
    doi: Optional[str] = None
    comments: Optional[str] = None
    added_at: Optional[datetime] = None
    added_by: str


class Task(_StoreModel):
    id: str
    title: str = ""
    description: str = ""
    completed: bool = False


AssignmentStatus = Literal["assigned", "in-progress", "completed", "submitted"]
Difficulty = Literal["Beginner", "Intermediate", "Advanced"]


class AssignmentRecord(_StoreModel):
    assigned_project_id: str
    project_id: str
    student_uid: str
    teacher_uid: str
    assigned_at: Optional[datetime] = None
    status: AssignmentStatus = "assigned"
    student_name: Optional[str] = None


class ProjectRecord(_StoreModel):
    title: str
    description: str = ""
    difficulty: Difficulty
    duration: str = ""
    tasks: List[Task] = []


class JoinedProjectRecord(AssignmentRecord, ProjectRecord):
    """An assignment hydrated with its project's details."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TransportResponse(BaseModel):
    ok: bool
    status: int
    body: str = ""


class StoredDocument(BaseModel):
    id: str
    data: Dict[str, Any] = {}


class IngestResult(BaseModel):
    """Outcome of ingesting a single reference."""

    reference: str
    success: bool = True
    paper: Optional[CanonicalPaperRecord] = None
    source: Optional[str] = None
    error: Optional[str] = None
