"""Reward domain models: catalog entries, draw results, and the per-user ledger."""

from enum import StrEnum

from pydantic import Field, model_validator

from src.domain.base import CamelModel


class RewardType(StrEnum):
    """Discriminant of a drawn reward."""

    POINTS = "points"
    MESSAGE = "message"
    BADGE = "badge"
    UNLOCKABLE = "unlockable"


class Badge(CamelModel):
    """Badge that can be awarded once per user."""

    id: str
    name: str
    icon: str
    description: str = ""


class Unlockable(CamelModel):
    """Cosmetic item (theme, avatar, title) that can be unlocked once per user."""

    id: str
    name: str
    icon: str
    type: str


class RewardPool(CamelModel):
    """Static catalog of everything a reward draw can produce."""

    model_config = CamelModel.model_config | {"frozen": True}

    messages: tuple[str, ...]
    badges: tuple[Badge, ...]
    unlockables: tuple[Unlockable, ...]

    @property
    def badge_ids(self) -> list[str]:
        return [badge.id for badge in self.badges]

    @property
    def unlockable_ids(self) -> list[str]:
        return [item.id for item in self.unlockables]


class Reward(CamelModel):
    """Result of one reward draw.

    Exactly one of ``value``, ``badge`` or ``unlockable`` is populated for the
    points, badge and unlockable types; a message reward carries only ``message``.
    """

    type: RewardType
    message: str
    value: int | None = None
    badge: Badge | None = None
    unlockable: Unlockable | None = None

    @model_validator(mode="after")
    def check_payload_matches_type(self) -> "Reward":
        """Validate that the payload fields agree with the reward type."""
        expected = {
            RewardType.POINTS: ("value",),
            RewardType.MESSAGE: (),
            RewardType.BADGE: ("badge",),
            RewardType.UNLOCKABLE: ("unlockable",),
        }[self.type]
        for name in ("value", "badge", "unlockable"):
            present = getattr(self, name) is not None
            if present != (name in expected):
                raise ValueError(f"{self.type} reward has inconsistent field '{name}'")
        return self


def _default_pool() -> RewardPool:
    from src.domain.reward_catalog import DEFAULT_REWARD_POOL  # noqa: PLC0415

    return DEFAULT_REWARD_POOL


class RewardState(CamelModel):
    """Per-user cumulative reward ledger.

    ``badges`` and ``unlocked_rewards`` hold catalog ids in award order; each id
    appears at most once and must exist in ``reward_pool``.
    """

    user_id: str | None = None
    points: int = Field(default=0, ge=0)
    badges: list[str] = Field(default_factory=list)
    unlocked_rewards: list[str] = Field(default_factory=list)
    reward_pool: RewardPool = Field(default_factory=_default_pool)

    @model_validator(mode="after")
    def drop_duplicate_and_unknown_ids(self) -> "RewardState":
        """Keep only the first occurrence of each id known to the catalog."""
        self.badges = _unique_known(self.badges, self.reward_pool.badge_ids)
        self.unlocked_rewards = _unique_known(self.unlocked_rewards, self.reward_pool.unlockable_ids)
        return self


def _unique_known(ids: list[str], known: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for item in ids:
        if item in known and item not in seen:
            seen.add(item)
            result.append(item)
    return result
