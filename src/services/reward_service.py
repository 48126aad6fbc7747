"""Reward engine: weighted reward draws applied to a user's ledger.

The draw is split in two steps:
- ``draw_reward_type`` maps one uniform value in [0, 100) to a reward category
  by walking the cumulative weights points=40, message=30, badge=20,
  unlockable=10 in that order and taking the first bucket with
  ``draw < cumulative``.
- ``apply_reward`` produces the concrete Reward for that category and returns
  an updated copy of the ledger. Badge and unlockable draws fall back to a
  points reward once the user owns every catalog entry.

``generate_reward`` combines both and never raises: any failure yields the
default congratulatory message and the ledger is returned unmodified.
"""

import logging
import math
import random
from collections.abc import Sequence
from typing import Protocol, TypeVar

from src.core.config import Constants
from src.core.errors import RewardGenerationFailedError
from src.core.logging import log_with_user_context, span
from src.domain.reward import Reward, RewardState, RewardType
from src.domain.reward_catalog import DEFAULT_REWARD_MESSAGE


logger = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything exposing ``random() -> float`` in [0, 1), e.g. ``random.Random``."""

    def random(self) -> float: ...


_default_rng = random.Random()


def default_reward() -> Reward:
    """Safe reward used whenever a draw cannot be completed."""
    return Reward(type=RewardType.MESSAGE, message=DEFAULT_REWARD_MESSAGE)


def draw_reward_type(draw: float) -> RewardType:
    """Map a uniform draw in [0, 100) to a reward category."""
    cumulative = 0
    for name, weight in Constants.REWARD_WEIGHTS:
        cumulative += weight
        if draw < cumulative:
            return RewardType(name)
    raise RewardGenerationFailedError(f"Reward draw out of range: {draw}")


def _pick(rng: RandomSource, items: Sequence[T]) -> T:
    if not items:
        raise RewardGenerationFailedError("Cannot pick from an empty catalog section")
    return items[math.floor(rng.random() * len(items))]


def _points_reward(ledger: RewardState, rng: RandomSource) -> tuple[Reward, RewardState]:
    points = math.floor(rng.random() * Constants.REWARD_POINTS_SPAN) + Constants.REWARD_POINTS_MIN
    reward = Reward(type=RewardType.POINTS, value=points, message=f"+{points} points!")
    return reward, ledger.model_copy(update={"points": ledger.points + points})


def apply_reward(
    ledger: RewardState,
    reward_type: RewardType,
    rng: RandomSource,
) -> tuple[Reward, RewardState]:
    """Produce the reward for a drawn category and the updated ledger.

    The input ledger is never modified; callers persist the returned copy.
    """
    pool = ledger.reward_pool

    if reward_type == RewardType.POINTS:
        return _points_reward(ledger, rng)

    if reward_type == RewardType.MESSAGE:
        return Reward(type=RewardType.MESSAGE, message=_pick(rng, pool.messages)), ledger

    if reward_type == RewardType.BADGE:
        available = [badge for badge in pool.badges if badge.id not in ledger.badges]
        if not available:
            return _points_reward(ledger, rng)
        badge = _pick(rng, available)
        reward = Reward(type=RewardType.BADGE, badge=badge, message=f"New badge unlocked: {badge.name}!")
        return reward, ledger.model_copy(update={"badges": [*ledger.badges, badge.id]})

    available_items = [item for item in pool.unlockables if item.id not in ledger.unlocked_rewards]
    if not available_items:
        return _points_reward(ledger, rng)
    unlockable = _pick(rng, available_items)
    reward = Reward(type=RewardType.UNLOCKABLE, unlockable=unlockable, message=f"Unlocked: {unlockable.name}!")
    return reward, ledger.model_copy(update={"unlocked_rewards": [*ledger.unlocked_rewards, unlockable.id]})


def generate_reward(
    ledger: RewardState,
    rng: RandomSource | None = None,
) -> tuple[Reward, RewardState]:
    """Draw a weighted-random reward and apply it to a copy of the ledger.

    Args:
        ledger: The user's current reward state (left untouched)
        rng: Random source; defaults to a module-level ``random.Random``

    Returns:
        Tuple of (reward, updated ledger). On any failure the default reward
        and the unchanged input ledger are returned.
    """
    source = rng or _default_rng
    with span("reward_service.generate_reward"):
        try:
            reward_type = draw_reward_type(source.random() * Constants.REWARD_WEIGHT_TOTAL)
            reward, updated = apply_reward(ledger, reward_type, source)
        except Exception as e:
            log_with_user_context(
                logger,
                "error",
                "Reward generation failed, using default reward",
                user_id=ledger.user_id if isinstance(ledger, RewardState) else None,
                error=str(e),
            )
            return default_reward(), ledger

        log_with_user_context(
            logger,
            "info",
            "Generated reward",
            user_id=ledger.user_id,
            reward_type=str(reward.type),
            drawn_type=str(reward_type),
        )
        return reward, updated
