"""SQLite document store wrapper with CRUD operations.

Each collection is a table of ``(id, data)`` rows where ``data`` is the JSON
encoded record. Rows keep insertion order.
"""

import asyncio
import json
import logging
import re
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from easyclean.core.config import constants, settings


logger = logging.getLogger(__name__)

COLLECTIONS = [
    constants.TASKS_COLLECTION,
    constants.ZONES_COLLECTION,
    constants.SESSIONS_COLLECTION,
    constants.SESSION_HISTORY_COLLECTION,
]


class DatabaseError(RuntimeError):
    """Raised when a store operation fails."""


class RecordNotFoundError(KeyError):
    """Raised when a record does not exist in a collection."""


def _validate_collection_name(collection: str) -> None:
    """Validate that a collection name contains only alphanumeric characters and underscores."""
    if not re.match(r"^[a-zA-Z_][a-zA-Z0-9_]*$", collection):
        msg = f"Invalid collection name: {collection}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def _json_default(value: object) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def _encode(data: dict[str, Any]) -> str:
    return json.dumps(data, default=_json_default)


def new_record_id() -> str:
    """Generate an opaque record id."""
    return uuid.uuid4().hex


def get_db_path(db_path: str | None = None) -> Path:
    """Get the resolved SQLite database file path."""
    path_str = db_path or settings.sqlite_db_path
    return Path(path_str).resolve()


_db_connections: dict[tuple[int, int, str], aiosqlite.Connection] = {}
_db_lock = asyncio.Lock()


async def get_connection(*, db_path: str | None = None) -> aiosqlite.Connection:
    """Get or create a cached connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop = asyncio.get_running_loop()
    path = get_db_path(db_path)
    cache_key = (thread_id, id(loop), str(path))

    if cache_key in _db_connections:
        return _db_connections[cache_key]

    async with _db_lock:
        # Double-check after acquiring lock
        if cache_key in _db_connections:
            return _db_connections[cache_key]

        path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(str(path))
        await conn.execute("PRAGMA journal_mode = WAL")
        _db_connections[cache_key] = conn

        logger.info("Created new SQLite connection", extra={"db_path": str(path), "thread_id": thread_id})
        return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    loop = asyncio.get_running_loop()
    path = get_db_path(db_path)
    cache_key = (threading.get_ident(), id(loop), str(path))

    async with _db_lock:
        conn = _db_connections.pop(cache_key, None)
        if conn is not None:
            await conn.close()
            logger.info("Closed SQLite connection", extra={"db_path": str(path)})


async def init_db(*, db_path: str | None = None) -> None:
    """Create the collection tables if they do not exist."""
    conn = await get_connection(db_path=db_path)
    for collection in COLLECTIONS:
        await conn.execute(
            f"CREATE TABLE IF NOT EXISTS {collection} ("  # noqa: S608 - collection names are constants
            "seq INTEGER PRIMARY KEY AUTOINCREMENT, "
            "id TEXT NOT NULL UNIQUE, "
            "data TEXT NOT NULL)"
        )
    await conn.commit()
    logger.info("Database initialized", extra={"collections": COLLECTIONS})


async def create_record(*, collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a new record and return it with its assigned id.

    An ``id`` already present in ``data`` is kept, otherwise one is generated.
    """
    _validate_collection_name(collection)
    record = {**data, "id": str(data.get("id") or new_record_id())}
    try:
        conn = await get_connection()
        await conn.execute(
            f"INSERT INTO {collection} (id, data) VALUES (?, ?)",  # noqa: S608 - collection is validated
            (record["id"], _encode(record)),
        )
        await conn.commit()
    except Exception as e:
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to create record in {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.info("Created record", extra={"collection": collection, "record_id": record["id"]})
    return json.loads(_encode(record))


async def get_record(*, collection: str, record_id: str) -> dict[str, Any]:
    """Fetch a single record by ID, raising RecordNotFoundError if not found."""
    _validate_collection_name(collection)
    try:
        conn = await get_connection()
        cursor = await conn.execute(
            f"SELECT data FROM {collection} WHERE id = ?",  # noqa: S608 - collection is validated
            (record_id,),
        )
        row = await cursor.fetchone()
    except Exception as e:
        logger.error("get_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to get record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if row is None:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)
    return json.loads(row[0])


async def update_record(*, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Merge ``data`` into a record by ID and return the updated record."""
    if not data:
        msg = "Empty update payload"
        raise ValueError(msg)

    current = await get_record(collection=collection, record_id=record_id)
    updated = {**current, **data, "id": current["id"]}
    try:
        conn = await get_connection()
        await conn.execute(
            f"UPDATE {collection} SET data = ? WHERE id = ?",  # noqa: S608 - collection is validated
            (_encode(updated), record_id),
        )
        await conn.commit()
    except Exception as e:
        logger.error("update_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to update record in {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.info("Updated record", extra={"collection": collection, "record_id": record_id})
    return json.loads(_encode(updated))


async def delete_record(*, collection: str, record_id: str) -> None:
    """Delete a record by ID, raising RecordNotFoundError if not found."""
    _validate_collection_name(collection)
    try:
        conn = await get_connection()
        cursor = await conn.execute(
            f"DELETE FROM {collection} WHERE id = ?",  # noqa: S608 - collection is validated
            (record_id,),
        )
        await conn.commit()
    except Exception as e:
        logger.error("delete_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to delete record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if cursor.rowcount == 0:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)
    logger.info("Deleted record", extra={"collection": collection, "record_id": record_id})


async def list_records(*, collection: str) -> list[dict[str, Any]]:
    """List all records of a collection in insertion order."""
    _validate_collection_name(collection)
    try:
        conn = await get_connection()
        cursor = await conn.execute(f"SELECT data FROM {collection} ORDER BY seq ASC")  # noqa: S608
        rows = await cursor.fetchall()
    except Exception as e:
        logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to list records from {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.debug("Listed records", extra={"collection": collection, "count": len(rows)})
    return [json.loads(row[0]) for row in rows]
