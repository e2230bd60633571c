"""Document store access for arxiv-linker.

The engine only needs four primitives, described by `DocumentStore`. The
bundled `SqliteDocumentStore` keeps JSON documents in a single `aiosqlite`
table so the CLI and the tests have a real store to work against.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

import aiosqlite

from .config import MAX_IN_QUERY_VALUES
from .errors import StoreError
from .models import StoredDocument

# pseudo field addressing a document's own id in queries
DOCUMENT_ID = "__name__"

SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    body TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (collection, id)
);
"""

_OPS = {"==": "=", "!=": "!=", "<": "<", "<=": "<=", ">": ">", ">=": ">="}


class DocumentStore(Protocol):
    async def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]: ...

    async def query_where(self, collection: str, field: str, op: str, value: Any) -> List[StoredDocument]: ...

    async def query_where_in(self, collection: str, key_field: str, values: List[Any]) -> List[StoredDocument]: ...

    async def append_to_array_field(self, collection: str, doc_id: str, field: str, value: Any) -> None: ...


def _field_expr(field: str) -> tuple[str, List[Any]]:
    if field == DOCUMENT_ID:
        return "id", []
    return "json_extract(body, ?)", [f"$.{field}"]


class SqliteDocumentStore:
    """JSON documents keyed by ``(collection, id)`` in SQLite."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)

    async def init(self) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.executescript(SCHEMA)
            await db.commit()

    async def put_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Create or replace a whole document (seeding and admin use only)."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                "INSERT OR REPLACE INTO documents (collection, id, body) VALUES (?, ?, ?)",
                (collection, doc_id, json.dumps(data, default=str)),
            )
            await db.commit()

    async def delete_document(self, collection: str, doc_id: str) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("DELETE FROM documents WHERE collection = ? AND id = ?", (collection, doc_id))
            await db.commit()

    async def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        async with aiosqlite.connect(self.db_path) as db:
            cur = await db.execute("SELECT body FROM documents WHERE collection = ? AND id = ?", (collection, doc_id))
            row = await cur.fetchone()
            if not row:
                return None
            return json.loads(row[0])

    async def query_where(self, collection: str, field: str, op: str, value: Any) -> List[StoredDocument]:
        if op not in _OPS:
            raise ValueError(f"unsupported operator: {op}")
        expr, params = _field_expr(field)
        sql = f"SELECT id, body FROM documents WHERE collection = ? AND {expr} {_OPS[op]} ? ORDER BY rowid"
        return await self._select(sql, [collection, *params, value])

    async def query_where_in(self, collection: str, key_field: str, values: Iterable[Any]) -> List[StoredDocument]:
        values = list(values)
        if len(values) > MAX_IN_QUERY_VALUES:
            raise ValueError(f"'in' queries accept at most {MAX_IN_QUERY_VALUES} values, got {len(values)}")
        if not values:
            return []
        expr, params = _field_expr(key_field)
        placeholders = ", ".join("?" for _ in values)
        sql = f"SELECT id, body FROM documents WHERE collection = ? AND {expr} IN ({placeholders}) ORDER BY rowid"
        return await self._select(sql, [collection, *params, *values])

    async def append_to_array_field(self, collection: str, doc_id: str, field: str, value: Any) -> None:
        """Add `value` to the array at dotted path `field` unless an equal element exists.

        The read and the write happen inside one immediate transaction, so the
        append cannot clobber a concurrent writer's change to the same document.
        """
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                cur = await db.execute("SELECT body FROM documents WHERE collection = ? AND id = ?", (collection, doc_id))
                row = await cur.fetchone()
                if not row:
                    raise StoreError(f"no document {collection}/{doc_id}")
                body = json.loads(row[0])

                *parents, leaf = field.split(".")
                node = body
                for key in parents:
                    node = node.setdefault(key, {})
                    if not isinstance(node, dict):
                        raise StoreError(f"{field} does not address an object path in {collection}/{doc_id}")
                array = node.setdefault(leaf, [])
                if not isinstance(array, list):
                    raise StoreError(f"{field} is not an array in {collection}/{doc_id}")
                if value not in array:
                    array.append(value)

                await db.execute(
                    "UPDATE documents SET body = ?, updated_at = CURRENT_TIMESTAMP WHERE collection = ? AND id = ?",
                    (json.dumps(body, default=str), collection, doc_id),
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    async def _select(self, sql: str, params: List[Any]) -> List[StoredDocument]:
        async with aiosqlite.connect(self.db_path) as db:
            cur = await db.execute(sql, params)
            rows = await cur.fetchall()
            return [StoredDocument(id=r[0], data=json.loads(r[1])) for r in rows]
