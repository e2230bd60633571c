"""Exception types raised by arxiv_linker components."""
from __future__ import annotations

from enum import Enum
from typing import Optional


class ArxivLinkerError(Exception):
    pass


class InvalidReference(ArxivLinkerError):
    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(f"invalid arXiv reference: {reference!r}")


class FetchError(ArxivLinkerError):
    """Transport-level failure: a non-ok status or a network error."""

    def __init__(self, target: str, status: Optional[int] = None, network_failure: bool = False, detail: Optional[str] = None) -> None:
        self.target = target
        self.status = status
        self.network_failure = network_failure
        if network_failure:
            msg = f"network failure fetching {target}"
        else:
            msg = f"fetching {target} failed with status {status}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class NormalizeError(ArxivLinkerError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class ExportErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"


class ExportError(ArxivLinkerError):
    def __init__(self, kind: ExportErrorKind, project_id: str, paper_id: Optional[str] = None) -> None:
        self.kind = kind
        self.project_id = project_id
        self.paper_id = paper_id
        if kind is ExportErrorKind.NOT_FOUND:
            msg = f"project {project_id} not found"
        else:
            msg = f"paper {paper_id} is already added to project {project_id}"
        super().__init__(msg)


class StoreError(ArxivLinkerError):
    """A document store primitive could not be applied."""
