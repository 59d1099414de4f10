"""SQLite document schema management (code-first approach)."""

import logging

from src.core import db_client


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "users",
    "tasks",
]

# Expression indexes over document fields, keyed by collection
INDEXES: dict[str, list[str]] = {
    "users": [
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email ON users (json_extract(data, '$.email'))",
    ],
    "tasks": [
        "CREATE INDEX IF NOT EXISTS idx_tasks_owner ON tasks (json_extract(data, '$.owner'))",
    ],
}


def _table_sql(collection: str) -> str:
    return f"CREATE TABLE IF NOT EXISTS {collection} (id TEXT PRIMARY KEY, data TEXT NOT NULL)"


async def init_db(*, db_path: str | None = None) -> None:
    """Create every collection table and its indexes if they do not exist yet."""
    conn = await db_client.get_connection(db_path=db_path)

    for collection in COLLECTIONS:
        await conn.execute(_table_sql(collection))
        for index_sql in INDEXES.get(collection, []):
            await conn.execute(index_sql)
        logger.info("Collection ready", extra={"collection": collection})

    await conn.commit()
