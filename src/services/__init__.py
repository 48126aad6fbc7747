from src.services import (
    ledger_store,
    reward_service,
    stats_service,
    task_service,
    task_state_machine,
    task_store,
)


__all__ = [
    "ledger_store",
    "reward_service",
    "stats_service",
    "task_service",
    "task_state_machine",
    "task_store",
]
