"""Text cleanup helpers shared by the normalizers."""
from __future__ import annotations

import re
from typing import Optional

_WS_RE = re.compile(r"\s+")


def collapse_whitespace(text: Optional[str]) -> str:
    """Reduce every whitespace run to one space and strip the ends."""
    if text is None:
        return ""
    # non-breaking spaces show up in the rendered pages
    text = text.replace("\xa0", " ")
    return _WS_RE.sub(" ", text).strip()


def strip_label(text: Optional[str], label: str) -> str:
    """Remove a leading descriptor such as ``Title:`` and collapse whitespace."""
    cleaned = collapse_whitespace(text)
    if cleaned.startswith(label):
        cleaned = cleaned[len(label):]
    return cleaned.strip()


def optional_text(text: Optional[str]) -> Optional[str]:
    """Collapsed text, or None when nothing is left."""
    cleaned = collapse_whitespace(text)
    return cleaned or None
