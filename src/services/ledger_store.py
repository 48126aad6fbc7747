"""Reward ledger adapter: one cumulative ledger record per user."""

import logging
from typing import Any

from src.core import db_client
from src.core.db_client import sanitize_param
from src.core.errors import StoreUnavailableError
from src.core.logging import span
from src.domain.reward import RewardState


logger = logging.getLogger(__name__)

COLLECTION = "reward_ledgers"


def _to_ledger(record: dict[str, Any]) -> RewardState:
    return RewardState(
        user_id=record["user_id"],
        points=record.get("points") or 0,
        badges=record.get("badges") or [],
        unlocked_rewards=record.get("unlocked_rewards") or [],
    )


def _to_record(ledger: RewardState) -> dict[str, Any]:
    return {
        "points": ledger.points,
        "badges": list(ledger.badges),
        "unlocked_rewards": list(ledger.unlocked_rewards),
    }


async def _find_record(user_id: str) -> dict[str, Any] | None:
    return await db_client.get_first_record(
        collection=COLLECTION,
        filter_query=f'user_id = "{sanitize_param(user_id)}"',
    )


async def get_ledger(*, user_id: str) -> RewardState:
    """Fetch the user's ledger, creating the default ledger on first read.

    Raises:
        StoreUnavailableError: If the store cannot be read or written
    """
    with span("ledger_store.get_ledger"):
        try:
            record = await _find_record(user_id)
            if record is not None:
                return _to_ledger(record)

            default = RewardState(user_id=user_id)
            try:
                record = await db_client.create_record(
                    collection=COLLECTION,
                    data={"user_id": user_id, **_to_record(default)},
                )
            except RuntimeError:
                # Another writer may have created it first
                record = await _find_record(user_id)
                if record is None:
                    raise
            logger.info("Created default reward ledger", extra={"user_id": user_id})
            return _to_ledger(record)
        except RuntimeError as e:
            logger.error("ledger_store_failed", extra={"operation": "get_ledger", "user_id": user_id, "error": str(e)})
            raise StoreUnavailableError("get_ledger", str(e)) from e


async def put_ledger(*, user_id: str, ledger: RewardState) -> None:
    """Persist the user's ledger (last writer wins)."""
    with span("ledger_store.put_ledger"):
        try:
            record = await _find_record(user_id)
            if record is None:
                await db_client.create_record(collection=COLLECTION, data={"user_id": user_id, **_to_record(ledger)})
            else:
                await db_client.update_record(collection=COLLECTION, record_id=record["id"], data=_to_record(ledger))
        except (KeyError, RuntimeError) as e:
            logger.error("ledger_store_failed", extra={"operation": "put_ledger", "user_id": user_id, "error": str(e)})
            raise StoreUnavailableError("put_ledger", str(e)) from e
