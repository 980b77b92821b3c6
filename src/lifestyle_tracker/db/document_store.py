"""Path-addressed JSON document store on SQLite.

Documents live at slash-separated paths such as
`accounts/{uid}/weeklyPlans/{weekOfISO}`; everything before the last segment
is the document's collection. Writes are last-write-wins per document.
"""

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

import aiosqlite
from loguru import logger

from .engine import get_db_path

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Failures a store round trip can raise
STORE_ERRORS = (aiosqlite.Error, OSError)


@dataclass
class Document:
    """A stored document and its location."""

    id: str
    path: str
    data: dict


Watcher = Callable[[list[Document]], None]


def split_path(path: str) -> tuple[str, str]:
    """Split a document path into (collection, document id)."""
    collection, sep, doc_id = path.strip("/").rpartition("/")
    if not sep or not collection or not doc_id:
        raise ValueError(f"Invalid document path: {path!r}")
    return collection, doc_id


class DocumentStore:
    """Async document store with collection watchers.

    Watchers registered with `watch` receive the full collection after every
    committed write to it, in the spirit of a live query subscription.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self._watchers: dict[str, list[Watcher]] = {}

    async def get(self, path: str) -> dict | None:
        """Get a document body by path."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT data FROM documents WHERE path = ?", (path.strip("/"),)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return json.loads(row[0])

    async def set(self, path: str, data: dict, merge: bool = False) -> None:
        """Write a document, replacing it unless `merge` is set.

        With `merge`, top-level fields of `data` are overlaid on the stored
        document.
        """
        collection, doc_id = split_path(path)
        path = f"{collection}/{doc_id}"
        async with aiosqlite.connect(self.db_path) as db:
            body = dict(data)
            if merge:
                cursor = await db.execute(
                    "SELECT data FROM documents WHERE path = ?", (path,)
                )
                row = await cursor.fetchone()
                if row is not None:
                    body = {**json.loads(row[0]), **data}

            await db.execute(
                """
                INSERT INTO documents (path, collection, doc_id, data)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(path) DO UPDATE SET
                    data = excluded.data,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (path, collection, doc_id, json.dumps(body)),
            )
            await db.commit()

        logger.debug("Wrote document {}", path)
        await self._notify(collection)

    async def add(self, collection: str, data: dict) -> str:
        """Create a document with a generated id and return the id."""
        doc_id = uuid4().hex[:20]
        await self.set(f"{collection.strip('/')}/{doc_id}", data)
        return doc_id

    async def delete(self, path: str) -> bool:
        """Delete a document. Returns True if it existed."""
        collection, doc_id = split_path(path)
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM documents WHERE path = ?", (f"{collection}/{doc_id}",)
            )
            await db.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug("Deleted document {}/{}", collection, doc_id)
            await self._notify(collection)
        return deleted

    async def list_documents(self, collection: str) -> list[Document]:
        """List all documents of a collection, oldest first."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT doc_id, path, data FROM documents
                WHERE collection = ?
                ORDER BY created_at, rowid
                """,
                (collection.strip("/"),),
            )
            rows = await cursor.fetchall()
            return [Document(id=r[0], path=r[1], data=json.loads(r[2])) for r in rows]

    async def query(self, collection: str, **equals: str) -> list[Document]:
        """List documents whose top-level fields equal the given values."""
        clauses = ["collection = ?"]
        params: list = [collection.strip("/")]
        for field_name, value in equals.items():
            if not _FIELD_RE.match(field_name):
                raise ValueError(f"Invalid field name: {field_name!r}")
            clauses.append("json_extract(data, ?) = ?")
            params.extend([f"$.{field_name}", value])

        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f"""
                SELECT doc_id, path, data FROM documents
                WHERE {' AND '.join(clauses)}
                ORDER BY created_at, rowid
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [Document(id=r[0], path=r[1], data=json.loads(r[2])) for r in rows]

    def watch(self, collection: str, callback: Watcher) -> Callable[[], None]:
        """Subscribe to a collection. Returns an unsubscribe function."""
        key = collection.strip("/")
        self._watchers.setdefault(key, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._watchers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    async def emit(self, collection: str) -> None:
        """Push the current collection snapshot to its watchers."""
        await self._notify(collection.strip("/"))

    async def _notify(self, collection: str) -> None:
        callbacks = list(self._watchers.get(collection, []))
        if not callbacks:
            return
        snapshot = await self.list_documents(collection)
        for callback in callbacks:
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Watcher for {} failed", collection)
