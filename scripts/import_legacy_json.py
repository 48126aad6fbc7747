"""Import legacy JSON data (tasks.json, rewards.json) into the questflow store.

Every imported quest and the reward ledger are written under a single user id.
Missing files are reported and skipped. The import is idempotent - safe to
re-run: quests already imported for the user are not duplicated.

Usage:
    python -m scripts.import_legacy_json --data-dir ./data --user-id alice
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from src.core.config import settings
from src.core.db_client import close_connection, init_db
from src.core.errors import StoreUnavailableError
from src.services.legacy_import import ImportSummary, import_legacy_data


logger = logging.getLogger(__name__)

DEFAULT_USER_ID = "migration-user"


async def run_import(*, data_dir: Path, user_id: str, db_path: str | None) -> ImportSummary:
    """Initialize the database and import the legacy files."""
    if db_path:
        settings.sqlite_db_path = db_path
    await init_db()
    try:
        return await import_legacy_data(user_id=user_id, data_dir=data_dir)
    finally:
        await close_connection()


def main() -> None:
    """Main entry point for the import script."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Import legacy tasks.json and rewards.json for one user")
    parser.add_argument(
        "--data-dir",
        type=str,
        default="./data",
        help="Directory holding tasks.json and rewards.json (default: ./data)",
    )
    parser.add_argument(
        "--user-id",
        type=str,
        default=os.environ.get("MIGRATE_UID", DEFAULT_USER_ID),
        help="User id that will own the imported data (default: $MIGRATE_UID or migration-user)",
    )
    parser.add_argument(
        "--db-path",
        type=str,
        default=None,
        help="Path to database file (default: uses settings.sqlite_db_path)",
    )

    args = parser.parse_args()
    data_dir = Path(args.data_dir).resolve()

    try:
        summary = asyncio.run(run_import(data_dir=data_dir, user_id=args.user_id, db_path=args.db_path))
    except StoreUnavailableError as e:
        logger.error("Import failed: %s", e)
        sys.exit(1)

    logger.info("Import Summary:")
    for key, value in summary.model_dump().items():
        logger.info("  %s: %s", key, value)


if __name__ == "__main__":
    main()
