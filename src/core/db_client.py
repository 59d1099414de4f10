"""SQLite document store client with CRUD operations.

Each collection is a table of JSON documents keyed by an opaque id. Queries
address document fields through ``json_extract`` with the JSON path bound as
a parameter, so field names coming from requests are never interpolated into
SQL text.
"""

import asyncio
import json
import logging
import re
import threading
import uuid
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from src.core.config import settings
from src.core.query import CONTAINS, EQUALS, NOT_EQUALS, AnyOf, Clause, Condition, SortSpec, contains_casefold


logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Raised when a store operation fails."""


class RecordNotFoundError(DatabaseError):
    """Raised when a record id does not exist in the collection."""


class DuplicateRecordError(DatabaseError):
    """Raised when a write violates a unique index."""


def _validate_collection_name(collection: str) -> None:
    """Validate that a collection name contains only alphanumeric characters and underscores."""
    if not re.match(r"^[a-zA-Z_][a-zA-Z0-9_]*$", collection):
        msg = f"Invalid collection name: {collection}. Only alphanumeric characters and underscores are allowed."
        raise ValueError(msg)


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string with a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _json_default(value: Any) -> str:
    if isinstance(value, datetime | date):
        return value.isoformat()
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def _dumps(value: Any) -> str:
    return json.dumps(value, default=_json_default)


def json_path(field: str) -> str | None:
    """Build the JSON path for a top-level document key.

    Returns None for names that cannot be expressed as a quoted path key;
    such a field is treated as absent from every document.
    """
    if '"' in field or "\\" in field:
        return None
    return f'$."{field}"'


def _compile_condition(condition: Condition) -> tuple[str, list[Any]]:
    path = json_path(condition.field)
    if path is None:
        # No document carries this field
        return ("0", []) if condition.op != NOT_EQUALS else ("1", [])

    if condition.op == EQUALS:
        return "json_extract(data, ?) = ?", [path, condition.value]
    if condition.op == NOT_EQUALS:
        return "json_extract(data, ?) IS NOT ?", [path, condition.value]
    if condition.op == CONTAINS:
        return "contains_ci(json_extract(data, ?), ?)", [path, condition.value]

    msg = f"Unsupported operator: {condition.op}"
    raise ValueError(msg)


def compile_filter(filters: tuple[Clause, ...] | list[Clause]) -> tuple[str, list[Any]]:
    """Compile filter clauses into a SQL WHERE expression and parameter list."""
    conditions = []
    params: list[Any] = []

    for clause in filters:
        if isinstance(clause, AnyOf):
            or_conditions = []
            for condition in clause.conditions:
                cond, cond_params = _compile_condition(condition)
                or_conditions.append(cond)
                params.extend(cond_params)
            conditions.append(f"({' OR '.join(or_conditions) or '0'})")
        else:
            cond, cond_params = _compile_condition(clause)
            conditions.append(cond)
            params.extend(cond_params)

    return " AND ".join(conditions), params


def compile_sort(sort: SortSpec | None) -> tuple[str, list[Any]]:
    """Compile a sort spec into an ORDER BY expression; ties keep insertion order."""
    if sort is None:
        return "rowid ASC", []

    path = json_path(sort.field)
    if path is None:
        return "rowid ASC", []

    direction = "DESC" if sort.descending else "ASC"
    return f"json_extract(data, ?) {direction}, rowid ASC", [path]


def _contains_ci(haystack: Any, needle: Any) -> int:
    return 1 if contains_casefold(haystack, needle) else 0


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
    loop_id = id(loop)
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    if cache_key in _db_connections:
        return _db_connections[cache_key]

    async with _db_lock:
        # Double-check after acquiring lock
        if cache_key in _db_connections:
            return _db_connections[cache_key]

        path.parent.mkdir(parents=True, exist_ok=True)

        conn = await aiosqlite.connect(str(path))
        await conn.execute("PRAGMA journal_mode = WAL")
        await conn.create_function("contains_ci", 2, _contains_ci, deterministic=True)

        _db_connections[cache_key] = conn

        logger.info(
            "Created new SQLite connection",
            extra={"db_path": str(path), "thread_id": thread_id, "loop_id": loop_id},
        )
        return conn


async def close_connection(*, db_path: str | None = None) -> None:
    """Close the cached SQLite connection for the current thread, loop, and db path."""
    thread_id = threading.get_ident()
    loop_id = id(asyncio.get_running_loop())
    path = get_db_path(db_path)
    cache_key = (thread_id, loop_id, str(path))

    async with _db_lock:
        conn = _db_connections.pop(cache_key, None)

    if conn is None:
        return

    try:
        await conn.close()
        logger.info(
            "Closed SQLite connection",
            extra={"thread_id": thread_id, "loop_id": loop_id, "db_path": str(path)},
        )
    except Exception as e:
        logger.warning(
            "Error closing SQLite connection",
            extra={"error": str(e), "thread_id": thread_id, "loop_id": loop_id},
        )


async def init_db(*, db_path: str | None = None) -> None:
    """Initialize the database schema by delegating to schema.init_db()."""
    from src.core import schema

    await schema.init_db(db_path=db_path)


def _row_to_document(row: tuple[str, str]) -> dict[str, Any]:
    record_id, data = row
    document = json.loads(data)
    document["id"] = record_id
    return document


async def create_record(*, collection: str, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a new document and return it with its assigned id and timestamps."""
    _validate_collection_name(collection)

    record_id = uuid.uuid4().hex
    now = utc_now()
    document = {**data, "id": record_id, "createdAt": now, "updatedAt": now}

    try:
        conn = await get_connection()
        query = f"INSERT INTO {collection} (id, data) VALUES (?, ?)"  # noqa: S608 - collection is validated
        await conn.execute(query, (record_id, _dumps(document)))
        await conn.commit()
    except aiosqlite.IntegrityError as e:
        logger.warning("create_record_duplicate", extra={"collection": collection, "error": str(e)})
        msg = f"Duplicate record in {collection}: {e}"
        raise DuplicateRecordError(msg) from e
    except Exception as e:
        logger.error("create_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to create record in {collection}: {e}"
        raise DatabaseError(msg) from e

    logger.info("Created record", extra={"collection": collection, "record_id": record_id})
    return json.loads(_dumps(document))


async def get_record(*, collection: str, record_id: str) -> dict[str, Any]:
    """Fetch a single document by id, raising RecordNotFoundError if absent."""
    _validate_collection_name(collection)

    try:
        conn = await get_connection()
        query = f"SELECT id, data FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (record_id,))
        row = await cursor.fetchone()
    except Exception as e:
        logger.error("get_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to get record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if row is None:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    return _row_to_document(row)


async def update_record(*, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into a document in one statement and return the updated document."""
    _validate_collection_name(collection)

    patch = {key: value for key, value in data.items() if key not in ("id", "createdAt")}
    patch["updatedAt"] = utc_now()

    assignments = []
    params: list[Any] = []
    for key, value in patch.items():
        path = json_path(key)
        if path is None:
            msg = f"Invalid field name: {key}"
            raise ValueError(msg)
        assignments.append("?, json(?)")
        params.extend([path, _dumps(value)])
    params.append(record_id)

    try:
        conn = await get_connection()
        query = f"UPDATE {collection} SET data = json_set(data, {', '.join(assignments)}) WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, params)
        await conn.commit()
    except aiosqlite.IntegrityError as e:
        logger.warning("update_record_duplicate", extra={"collection": collection, "record_id": record_id})
        msg = f"Duplicate record in {collection}: {e}"
        raise DuplicateRecordError(msg) from e
    except Exception as e:
        logger.error("update_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to update record in {collection}: {e}"
        raise DatabaseError(msg) from e

    if cursor.rowcount == 0:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    logger.info("Updated record", extra={"collection": collection, "record_id": record_id})
    return await get_record(collection=collection, record_id=record_id)


async def delete_record(*, collection: str, record_id: str) -> None:
    """Delete a document by id, raising RecordNotFoundError if absent."""
    _validate_collection_name(collection)

    try:
        conn = await get_connection()
        query = f"DELETE FROM {collection} WHERE id = ?"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, (record_id,))
        await conn.commit()
    except Exception as e:
        logger.error("delete_record_failed", extra={"collection": collection, "record_id": record_id, "error": str(e)})
        msg = f"Failed to delete record from {collection}: {e}"
        raise DatabaseError(msg) from e

    if cursor.rowcount == 0:
        msg = f"Record not found in {collection}: {record_id}"
        raise RecordNotFoundError(msg)

    logger.info("Deleted record", extra={"collection": collection, "record_id": record_id})


async def list_records(
    *,
    collection: str,
    filters: tuple[Clause, ...] | list[Clause] = (),
    sort: SortSpec | None = None,
) -> list[dict[str, Any]]:
    """List every document matching the filters, in sort order."""
    _validate_collection_name(collection)

    where_clause, params = compile_filter(filters)
    where_sql = f"WHERE {where_clause}" if where_clause else ""
    order_sql, order_params = compile_sort(sort)

    try:
        conn = await get_connection()
        query = f"SELECT id, data FROM {collection} {where_sql} ORDER BY {order_sql}"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, [*params, *order_params])
        rows = await cursor.fetchall()
    except Exception as e:
        logger.error("list_records_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to list records from {collection}: {e}"
        raise DatabaseError(msg) from e

    records = [_row_to_document(row) for row in rows]
    logger.info("Listed records", extra={"collection": collection, "count": len(records)})
    return records


async def get_first_record(
    *, collection: str, filters: tuple[Clause, ...] | list[Clause] = ()
) -> dict[str, Any] | None:
    """Return the first document matching the filters, or None."""
    _validate_collection_name(collection)

    where_clause, params = compile_filter(filters)
    where_sql = f"WHERE {where_clause}" if where_clause else ""

    try:
        conn = await get_connection()
        query = f"SELECT id, data FROM {collection} {where_sql} ORDER BY rowid ASC LIMIT 1"  # noqa: S608 - collection is validated
        cursor = await conn.execute(query, params)
        row = await cursor.fetchone()
    except Exception as e:
        logger.error("get_first_record_failed", extra={"collection": collection, "error": str(e)})
        msg = f"Failed to get first record from {collection}: {e}"
        raise DatabaseError(msg) from e

    return _row_to_document(row) if row is not None else None
