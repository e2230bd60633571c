"""Reference resolution for arXiv abstract links.

Validates a reference string (usually a browser URL) and extracts the bare
identifier, plus the fixed URL templates derived from an identifier.
"""
from __future__ import annotations

import re
from typing import Optional

_REFERENCE_RE = re.compile(r"arxiv\.org/abs/([0-9]{4}\.[0-9]{4,5})")
_IDENTIFIER_RE = re.compile(r"[0-9]{4}\.[0-9]{4,5}")

PDF_URL_TEMPLATE = "https://arxiv.org/pdf/{id}.pdf"
ABS_URL_TEMPLATE = "https://arxiv.org/abs/{id}"
FEED_URL_TEMPLATE = "https://export.arxiv.org/api/query?id_list={id}"


def is_valid_reference(reference: str) -> bool:
    if not reference:
        return False
    return _REFERENCE_RE.search(reference) is not None


def extract_identifier(reference: str) -> Optional[str]:
    """Return the ``NNNN.NNNNN`` identifier found in `reference`, or None."""
    if not reference:
        return None
    m = _REFERENCE_RE.search(reference)
    return m.group(1) if m else None


def is_valid_identifier(identifier: str) -> bool:
    return bool(identifier) and _IDENTIFIER_RE.fullmatch(identifier) is not None


def pdf_url(identifier: str) -> str:
    return PDF_URL_TEMPLATE.format(id=identifier)


def abs_url(identifier: str) -> str:
    return ABS_URL_TEMPLATE.format(id=identifier)


def feed_url(identifier: str) -> str:
    return FEED_URL_TEMPLATE.format(id=identifier)
