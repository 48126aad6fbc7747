"""Tests for the weighted reward engine."""

import random
from collections import Counter

import pytest

from src.core.errors import RewardGenerationFailedError
from src.domain.reward import RewardState, RewardType
from src.domain.reward_catalog import DEFAULT_REWARD_MESSAGE, DEFAULT_REWARD_POOL
from src.services import reward_service
from tests.unit.mocks import ScriptedRandom


ALL_BADGES = [badge.id for badge in DEFAULT_REWARD_POOL.badges]
ALL_UNLOCKABLES = [item.id for item in DEFAULT_REWARD_POOL.unlockables]


class BrokenRandom:
    """Random source that always fails."""

    def random(self) -> float:
        raise RuntimeError("entropy unavailable")


@pytest.mark.unit
class TestDrawRewardType:
    """Tests for mapping a uniform draw onto the weighted categories."""

    @pytest.mark.parametrize(
        ("draw", "expected"),
        [
            (0.0, RewardType.POINTS),
            (39.999, RewardType.POINTS),
            (40.0, RewardType.MESSAGE),
            (69.999, RewardType.MESSAGE),
            (70.0, RewardType.BADGE),
            (89.999, RewardType.BADGE),
            (90.0, RewardType.UNLOCKABLE),
            (99.999, RewardType.UNLOCKABLE),
        ],
    )
    def test_boundaries_select_first_bucket_exceeding_draw(self, draw, expected):
        """Test that each boundary value falls into the next bucket."""
        assert reward_service.draw_reward_type(draw) == expected

    def test_out_of_range_draw_raises(self):
        """Test that a draw of 100 or more is rejected."""
        with pytest.raises(RewardGenerationFailedError):
            reward_service.draw_reward_type(100.0)

    def test_empirical_frequencies_match_weights(self):
        """Test that 100,000 uniform draws approximate 40/30/20/10 percent."""
        rng = random.Random(20240501)
        n = 100_000
        counts = Counter(reward_service.draw_reward_type(rng.random() * 100) for _ in range(n))

        expected = {
            RewardType.POINTS: 0.40,
            RewardType.MESSAGE: 0.30,
            RewardType.BADGE: 0.20,
            RewardType.UNLOCKABLE: 0.10,
        }
        for reward_type, share in expected.items():
            assert abs(counts[reward_type] / n - share) < 0.01


@pytest.mark.unit
class TestApplyReward:
    """Tests for turning a drawn category into a reward and ledger update."""

    def test_points_reward_range_low(self):
        """Test the smallest points reward is 10."""
        ledger = RewardState(user_id="u1", points=5)
        reward, updated = reward_service.apply_reward(ledger, RewardType.POINTS, ScriptedRandom(0.0))

        assert reward.type == RewardType.POINTS
        assert reward.value == 10
        assert reward.message == "+10 points!"
        assert updated.points == 15
        assert ledger.points == 5

    def test_points_reward_range_high(self):
        """Test the largest points reward is 59."""
        reward, updated = reward_service.apply_reward(RewardState(), RewardType.POINTS, ScriptedRandom(0.9999))

        assert reward.value == 59
        assert updated.points == 59

    def test_message_reward_leaves_ledger_untouched(self):
        """Test that a message reward picks from the catalog and does not change the ledger."""
        ledger = RewardState(user_id="u1", points=12, badges=["first-win"])
        reward, updated = reward_service.apply_reward(ledger, RewardType.MESSAGE, ScriptedRandom(0.0))

        assert reward.type == RewardType.MESSAGE
        assert reward.message == DEFAULT_REWARD_POOL.messages[0]
        assert updated.points == 12
        assert updated.badges == ["first-win"]

    def test_badge_reward_skips_owned_badges(self):
        """Test that a badge draw only considers badges the user does not hold."""
        ledger = RewardState(badges=["first-win"])
        reward, updated = reward_service.apply_reward(ledger, RewardType.BADGE, ScriptedRandom(0.0))

        assert reward.type == RewardType.BADGE
        assert reward.badge.id == "streak-3"
        assert reward.message == "New badge unlocked: 3-Day Streak!"
        assert updated.badges == ["first-win", "streak-3"]
        assert ledger.badges == ["first-win"]

    def test_badge_exhaustion_falls_back_to_points(self):
        """Test that a badge draw with every badge owned yields points."""
        ledger = RewardState(points=100, badges=ALL_BADGES)
        reward, updated = reward_service.apply_reward(ledger, RewardType.BADGE, ScriptedRandom(0.5))

        assert reward.type == RewardType.POINTS
        assert reward.value == 35
        assert reward.badge is None
        assert updated.points == 135
        assert updated.badges == ALL_BADGES

    def test_unlockable_reward(self):
        """Test that an unlockable draw records the unlocked item."""
        reward, updated = reward_service.apply_reward(RewardState(), RewardType.UNLOCKABLE, ScriptedRandom(0.99))

        assert reward.type == RewardType.UNLOCKABLE
        assert reward.unlockable.id == ALL_UNLOCKABLES[-1]
        assert reward.message == f"Unlocked: {reward.unlockable.name}!"
        assert updated.unlocked_rewards == [ALL_UNLOCKABLES[-1]]

    def test_unlockable_exhaustion_falls_back_to_points(self):
        """Test that exhausted unlockables never raise and yield points within range."""
        ledger = RewardState(unlocked_rewards=ALL_UNLOCKABLES)
        rng = random.Random(7)

        for _ in range(200):
            reward, _ = reward_service.apply_reward(ledger, RewardType.UNLOCKABLE, rng)
            assert reward.type == RewardType.POINTS
            assert 10 <= reward.value <= 59

    def test_badges_are_awarded_at_most_once(self):
        """Test that repeated badge draws never duplicate a badge."""
        ledger = RewardState()
        rng = random.Random(99)

        for _ in range(len(ALL_BADGES) + 5):
            _, ledger = reward_service.apply_reward(ledger, RewardType.BADGE, rng)

        assert sorted(ledger.badges) == sorted(ALL_BADGES)
        assert len(set(ledger.badges)) == len(ledger.badges)


@pytest.mark.unit
class TestGenerateReward:
    """Tests for the failure-absorbing reward entry point."""

    def test_draw_then_apply(self):
        """Test that the first value picks the category and the next one the payload."""
        ledger = RewardState(user_id="u1")
        rng = ScriptedRandom(0.75, 0.0)

        reward, updated = reward_service.generate_reward(ledger, rng)

        assert reward.type == RewardType.BADGE
        assert reward.badge.id == ALL_BADGES[0]
        assert updated.badges == [ALL_BADGES[0]]
        assert ledger.badges == []
        assert rng.calls == 2

    def test_failing_random_source_yields_default_reward(self):
        """Test that a broken random source produces the default message reward."""
        ledger = RewardState(user_id="u1", points=3)

        reward, updated = reward_service.generate_reward(ledger, BrokenRandom())

        assert reward.type == RewardType.MESSAGE
        assert reward.message == DEFAULT_REWARD_MESSAGE
        assert updated is ledger

    def test_out_of_range_draw_yields_default_reward(self):
        """Test that a draw outside [0, 100) is absorbed."""
        ledger = RewardState()

        reward, updated = reward_service.generate_reward(ledger, ScriptedRandom(1.0))

        assert reward == reward_service.default_reward()
        assert updated is ledger

    def test_default_rng_is_used_when_none_given(self):
        """Test that generate_reward works without an injected source."""
        reward, updated = reward_service.generate_reward(RewardState())

        assert reward.type in set(RewardType)
        assert updated.points >= 0
