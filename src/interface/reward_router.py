"""Reward ledger and stats HTTP endpoints."""

from fastapi import APIRouter, Depends

from src.domain.reward import RewardState
from src.interface.identity import get_current_user_id
from src.models.service_models import UserStats
from src.services import ledger_store, stats_service


router = APIRouter(tags=["rewards"])


@router.get("/rewards", response_model=RewardState)
async def get_rewards(user_id: str = Depends(get_current_user_id)) -> RewardState:
    """The caller's reward ledger along with the reward catalog."""
    return await ledger_store.get_ledger(user_id=user_id)


@router.get("/stats", response_model=UserStats)
async def get_stats(user_id: str = Depends(get_current_user_id)) -> UserStats:
    """Progress summary for the stats panel."""
    return await stats_service.get_user_stats(user_id=user_id)
