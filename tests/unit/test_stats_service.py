"""Unit tests for stats_service."""

import pytest

from src.domain.reward import RewardState
from src.domain.update_models import TaskUpdate
from src.services import ledger_store, stats_service, task_service, task_store


@pytest.mark.unit
class TestCompletionRate:
    """Tests for the completion percentage."""

    @pytest.mark.parametrize(
        ("total", "completed", "expected"),
        [(0, 0, 0), (3, 1, 33), (3, 2, 67), (8, 1, 13), (2, 1, 50), (4, 4, 100)],
    )
    def test_completion_rate(self, total, completed, expected):
        """Test rounding of the completion percentage."""
        assert stats_service.completion_rate(total=total, completed=completed) == expected


@pytest.mark.unit
class TestGetUserStats:
    """Tests for the stats summary."""

    async def test_empty_user(self, patched_db):
        """Test stats for a user with no quests."""
        stats = await stats_service.get_user_stats(user_id="u1")

        assert stats.points == 0
        assert stats.total_tasks == 0
        assert stats.completion_rate == 0
        assert stats.badges == []
        assert stats.badges_earned == 0
        assert stats.badges_total == 8

    async def test_summary_resolves_catalog_entries(self, patched_db, sample_task_data):
        """Test that earned badges and unlocks are resolved to catalog entries."""
        done = await task_service.create_task(user_id="u1", data=sample_task_data)
        await task_service.create_task(user_id="u1", data=sample_task_data)
        await task_service.update_task(user_id="u1", task_id=done.id, changes=TaskUpdate(completed=True))
        await ledger_store.put_ledger(
            user_id="u1",
            ledger=RewardState(points=77, badges=["night-owl"], unlocked_rewards=["avatar-2"]),
        )

        stats = await stats_service.get_user_stats(user_id="u1")

        assert stats.points == 77
        assert stats.total_tasks == 2
        assert stats.completed_tasks == 1
        assert stats.completion_rate == 50
        assert [badge.name for badge in stats.badges] == ["Night Owl"]
        assert [item.name for item in stats.unlocked_rewards] == ["Star Avatar"]
        assert stats.badges_earned == 1
        dumped = stats.model_dump(by_alias=True)
        assert dumped["completionRate"] == 50
        assert dumped["badgesTotal"] == 8

    async def test_totals_count_every_page(self, patched_db, sample_task_data, monkeypatch):
        """Test that totals include quests beyond the first listing page."""
        monkeypatch.setattr(task_store.constants, "DEFAULT_PER_PAGE_LIMIT", 2)
        tasks = [await task_service.create_task(user_id="u1", data=sample_task_data) for _ in range(5)]
        await task_service.update_task(user_id="u1", task_id=tasks[-1].id, changes=TaskUpdate(completed=True))

        stats = await stats_service.get_user_stats(user_id="u1")

        assert stats.total_tasks == 5
        assert stats.completed_tasks == 1
        assert stats.completion_rate == 20
