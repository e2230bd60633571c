"""Normalization of raw arXiv documents into `CanonicalPaperRecord`.

Two strategies produce the same record shape:

- `FeedNormalizer` reads the Atom feed returned by the export API. It is
  authoritative and complete.
- `RenderedNormalizer` scrapes the abstract page HTML. It is the fallback
  when the feed cannot be reached, and relies on the page's class names.

The strategy is always chosen by an explicit `Source` tag, never by sniffing
the document, so callers can try one and fall back to the other.
"""
from __future__ import annotations

import re
from html.parser import HTMLParser
from typing import Dict, Iterator, List, Optional, Protocol, Union

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError, fromstring

from .errors import NormalizeError
from .models import CanonicalPaperRecord, Source
from .reference import abs_url, pdf_url
from .text import collapse_whitespace, optional_text, strip_label

ATOM_NS = {"atom": "http://www.w3.org/2005/Atom", "arxiv": "http://arxiv.org/schemas/atom"}

DOI_RESOLVER_PREFIX = "https://doi.org/"

_FIRST_REVISION_RE = re.compile(r"\[v1\]\s*(.+?)\s*\(")
_REVISION_RE = re.compile(r"\[v\d+\]\s+(.+?)\s+\(")


class Normalizer(Protocol):
    source: Source

    def normalize(
        self,
        raw: str,
        identifier: str,
        acting_user: str,
        reference: Optional[str] = None,
    ) -> CanonicalPaperRecord: ...


# -- Atom feed -----------------------------------------------------------------


def _read_text(node, path: str) -> Optional[str]:
    found = node.find(path, ATOM_NS)
    if found is None or found.text is None:
        return None
    return found.text


class FeedNormalizer:
    source = Source.FEED

    def normalize(
        self,
        raw: str,
        identifier: str,
        acting_user: str,
        reference: Optional[str] = None,
    ) -> CanonicalPaperRecord:
        try:
            root = fromstring(raw)
        except (ParseError, DefusedXmlException) as exc:
            raise NormalizeError(f"malformed feed: {exc}") from exc

        entry = root.find("atom:entry", ATOM_NS)
        if entry is None:
            raise NormalizeError("not found")
        # the export API answers unknown ids with an error entry
        entry_id = _read_text(entry, "atom:id") or ""
        if "/api/errors" in entry_id:
            raise NormalizeError("not found")

        authors: List[str] = []
        for author in entry.findall("atom:author", ATOM_NS):
            name = _read_text(author, "atom:name")
            if name is not None:
                authors.append(name.strip())

        category_nodes = entry.findall("atom:category", ATOM_NS)
        categories = [c.attrib.get("term", "") for c in category_nodes]
        subjects = [c.attrib.get("scheme", "") for c in category_nodes]

        updated = _read_text(entry, "atom:updated")

        return CanonicalPaperRecord(
            id=identifier,
            title=collapse_whitespace(_read_text(entry, "atom:title")),
            abstract=collapse_whitespace(_read_text(entry, "atom:summary")),
            authors=authors,
            subjects=[s for s in subjects if s],
            categories=[c for c in categories if c],
            submitted_date=(_read_text(entry, "atom:published") or "").strip(),
            updated_date=updated.strip() if updated is not None else None,
            pdf_url=pdf_url(identifier),
            arxiv_url=abs_url(identifier),
            doi=optional_text(_read_text(entry, "arxiv:doi")),
            comments=optional_text(_read_text(entry, "arxiv:comment")),
            added_by=acting_user,
        )


# -- Rendered abstract page ----------------------------------------------------

_VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"}
)


class _Element:
    __slots__ = ("tag", "attrs", "children")

    def __init__(self, tag: str, attrs: Dict[str, str]) -> None:
        self.tag = tag
        self.attrs = attrs
        self.children: List[Union["_Element", str]] = []

    @property
    def classes(self) -> List[str]:
        return self.attrs.get("class", "").split()

    def iter(self) -> Iterator["_Element"]:
        for child in self.children:
            if isinstance(child, _Element):
                yield child
                yield from child.iter()

    def text(self) -> str:
        parts: List[str] = []
        for child in self.children:
            parts.append(child.text() if isinstance(child, _Element) else child)
        return "".join(parts)

    def find_class(self, cls: str, tag: Optional[str] = None) -> Optional["_Element"]:
        for el in self.iter():
            if cls in el.classes and (tag is None or el.tag == tag):
                return el
        return None

    def find_all(self, tag: str) -> List["_Element"]:
        return [el for el in self.iter() if el.tag == tag]


class _TreeBuilder(HTMLParser):
    """Builds a loose element tree; stray end tags are ignored."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root = _Element("#document", {})
        self._stack: List[_Element] = [self.root]

    def handle_starttag(self, tag, attrs):
        el = _Element(tag, {k: v or "" for k, v in attrs})
        self._stack[-1].children.append(el)
        if tag not in _VOID_TAGS:
            self._stack.append(el)

    def handle_endtag(self, tag):
        for i in range(len(self._stack) - 1, 0, -1):
            if self._stack[i].tag == tag:
                del self._stack[i:]
                return

    def handle_data(self, data):
        self._stack[-1].children.append(data)


def _parse_html(raw: str) -> _Element:
    builder = _TreeBuilder()
    builder.feed(raw)
    builder.close()
    return builder.root


def parse_submission_history(text: str) -> tuple[str, Optional[str]]:
    """Return ``(submitted, updated)`` from a submission-history blob.

    `submitted` is the ``[v1]`` date or ``""``; `updated` is the last
    revision's date, present only when more than one revision is listed.
    """
    text = collapse_whitespace(text)
    m = _FIRST_REVISION_RE.search(text)
    submitted = m.group(1).strip() if m else ""
    revisions = _REVISION_RE.findall(text)
    updated = revisions[-1].strip() if len(revisions) > 1 else None
    return submitted, updated


def split_subjects(text: str) -> List[str]:
    """Split ``"Primary (code); Secondary (code)"`` into trimmed entries."""
    return [s.strip() for s in strip_label(text, "Subjects:").split(";") if s.strip()]


class RenderedNormalizer:
    source = Source.RENDERED

    def normalize(
        self,
        raw: str,
        identifier: str,
        acting_user: str,
        reference: Optional[str] = None,
    ) -> CanonicalPaperRecord:
        root = _parse_html(raw)

        title_el = root.find_class("title", tag="h1") or root.find_class("title")
        abstract_el = root.find_class("abstract")
        if title_el is None and abstract_el is None:
            raise NormalizeError("not found")

        authors: List[str] = []
        authors_el = root.find_class("authors")
        if authors_el is not None:
            for link in authors_el.find_all("a"):
                name = collapse_whitespace(link.text())
                if name:
                    authors.append(name)

        history_el = root.find_class("submission-history")
        submitted, updated = parse_submission_history(history_el.text() if history_el is not None else "")

        subjects_el = root.find_class("subjects")
        subjects = split_subjects(subjects_el.text()) if subjects_el is not None else []
        # only the primary subject's name, unlike the feed's category terms
        categories = [subjects[0].split("(")[0].strip()] if subjects else []

        doi = None
        doi_el = root.find_class("doi")
        if doi_el is not None:
            links = doi_el.find_all("a")
            href = links[0].attrs.get("href", "") if links else ""
            if href.startswith(DOI_RESOLVER_PREFIX):
                href = href[len(DOI_RESOLVER_PREFIX):]
            doi = href.strip() or None

        comments_el = root.find_class("comments")
        comments = strip_label(comments_el.text(), "Comments:") if comments_el is not None else ""

        return CanonicalPaperRecord(
            id=identifier,
            title=strip_label(title_el.text(), "Title:") if title_el is not None else "",
            abstract=strip_label(abstract_el.text(), "Abstract:") if abstract_el is not None else "",
            authors=authors,
            subjects=subjects,
            categories=categories,
            submitted_date=submitted,
            updated_date=updated,
            pdf_url=pdf_url(identifier),
            arxiv_url=reference or abs_url(identifier),
            doi=doi,
            comments=comments or None,
            added_by=acting_user,
        )


_NORMALIZERS: Dict[Source, Normalizer] = {
    Source.FEED: FeedNormalizer(),
    Source.RENDERED: RenderedNormalizer(),
}


def get_normalizer(source: Union[Source, str]) -> Normalizer:
    return _NORMALIZERS[Source(source)]


def normalize(
    raw: str,
    identifier: str,
    source: Union[Source, str],
    acting_user: str,
    reference: Optional[str] = None,
) -> CanonicalPaperRecord:
    """Parse `raw` with the strategy for `source`. Raises `NormalizeError`."""
    return get_normalizer(source).normalize(raw, identifier, acting_user, reference=reference)
