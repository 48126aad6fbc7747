"""SQLite schema management (code-first approach)."""

import logging

from src.core import db_client


logger = logging.getLogger(__name__)


# Central list of all collections in the schema
COLLECTIONS = [
    "tasks",
    "reward_ledgers",
]


_TABLES: dict[str, str] = {
    "tasks": """
        CREATE TABLE IF NOT EXISTS tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            date TEXT NOT NULL,
            category TEXT NOT NULL DEFAULT 'general',
            estimated_time INTEGER NOT NULL DEFAULT 25,
            elapsed_time INTEGER NOT NULL DEFAULT 0,
            progress INTEGER NOT NULL DEFAULT 0 CHECK (progress BETWEEN 0 AND 100),
            completed INTEGER NOT NULL DEFAULT 0,
            completed_at TEXT,
            reward TEXT,
            legacy_id TEXT,
            created_at TEXT NOT NULL,
            created TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
            updated TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        )
    """,
    "reward_ledgers": """
        CREATE TABLE IF NOT EXISTS reward_ledgers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL UNIQUE,
            points INTEGER NOT NULL DEFAULT 0 CHECK (points >= 0),
            badges TEXT NOT NULL DEFAULT '[]',
            unlocked_rewards TEXT NOT NULL DEFAULT '[]',
            created TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
            updated TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        )
    """,
}

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_date ON tasks (user_id, date)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_legacy ON tasks (user_id, legacy_id)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all collections and indexes if they do not exist yet."""
    conn = await db_client.get_connection(db_path=db_path)

    for name in COLLECTIONS:
        await conn.execute(_TABLES[name])
        logger.debug("Ensured collection exists", extra={"collection": name})

    for statement in _INDEXES:
        await conn.execute(statement)

    await conn.commit()
    logger.info("Database schema initialized", extra={"collections": COLLECTIONS})
