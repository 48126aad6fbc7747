"""Pure Python in-memory database for unit testing."""

import copy
from datetime import UTC, datetime
from typing import Any

from apscheduler.jobstores.base import JobLookupError


class InMemoryDBClient:
    """Pure Python in-memory database for unit testing.

    Mirrors the ``src.core.db_client`` functions: missing records raise
    KeyError and backend failures raise RuntimeError. Operations listed in
    ``failing`` raise RuntimeError, to simulate an unavailable store.
    """

    def __init__(self):
        """Initialize empty in-memory database."""
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._id_counter = 1000
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def _record_call(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        if operation in self.failing:
            raise RuntimeError(f"Simulated {operation} failure in {collection}")

    @staticmethod
    def _now() -> str:
        return datetime.now(UTC).isoformat().replace("+00:00", "Z")

    async def create_record(self, *, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """Create a new record and return it with id, created and updated set."""
        self._record_call("create_record", collection)

        record_id = str(self._id_counter)
        self._id_counter += 1

        now = self._now()
        record = {"id": record_id, "created": now, "updated": now, **copy.deepcopy(data)}
        self._collections.setdefault(collection, {})[record_id] = record
        return copy.deepcopy(record)

    async def get_record(self, *, collection: str, record_id: str) -> dict[str, Any]:
        """Get a record by ID, raising KeyError if it does not exist."""
        self._record_call("get_record", collection)

        records = self._collections.get(collection, {})
        if record_id not in records:
            raise KeyError(f"Record not found in {collection}: {record_id}")
        return copy.deepcopy(records[record_id])

    async def update_record(self, *, collection: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Update an existing record and return it."""
        if not data:
            raise ValueError("Empty update payload")
        self._record_call("update_record", collection)

        records = self._collections.get(collection, {})
        if record_id not in records:
            raise KeyError(f"Record not found in {collection}: {record_id}")

        record = records[record_id]
        record.update(copy.deepcopy(data))
        record["updated"] = self._now()
        return copy.deepcopy(record)

    async def delete_record(self, *, collection: str, record_id: str) -> None:
        """Delete a record, raising KeyError if it does not exist."""
        self._record_call("delete_record", collection)

        records = self._collections.get(collection, {})
        if record_id not in records:
            raise KeyError(f"Record not found in {collection}: {record_id}")
        del records[record_id]

    async def list_records(
        self,
        *,
        collection: str,
        page: int = 1,
        per_page: int = 50,
        filter_query: str = "",
        sort: str = "",
    ) -> list[dict[str, Any]]:
        """List records with optional filtering, sorting and pagination.

        Supports ``field = "value"`` and ``field != "value"`` joined with
        ``&&``, and ``column [ASC|DESC]`` sorts with id as tie-breaker.
        """
        self._record_call("list_records", collection)

        records = list(self._collections.get(collection, {}).values())
        if filter_query:
            records = [r for r in records if self._matches(filter_query, r)]
        records = self._apply_sort(records, sort)

        start_idx = (page - 1) * per_page
        return [copy.deepcopy(r) for r in records[start_idx : start_idx + per_page]]

    async def get_first_record(self, *, collection: str, filter_query: str) -> dict[str, Any] | None:
        """Get the first matching record or None."""
        records = await self.list_records(collection=collection, filter_query=filter_query, per_page=1)
        return records[0] if records else None

    def records(self, collection: str) -> list[dict[str, Any]]:
        """Snapshot of a collection, for assertions."""
        return [copy.deepcopy(r) for r in self._collections.get(collection, {}).values()]

    def _matches(self, filter_str: str, record: dict[str, Any]) -> bool:
        for condition in (c.strip() for c in filter_str.split("&&")):
            if "!=" in condition:
                field, value = (part.strip() for part in condition.split("!=", 1))
                if str(record.get(field)) == value.strip("'\""):
                    return False
            elif "=" in condition:
                field, value = (part.strip() for part in condition.split("=", 1))
                if str(record.get(field)) != value.strip("'\""):
                    return False
            else:
                raise RuntimeError(f"Invalid filter syntax: {condition}")
        return True

    def _apply_sort(self, records: list[dict], sort: str) -> list[dict]:
        by_id = sorted(records, key=lambda r: int(r["id"]))
        if not sort:
            return by_id

        parts = sort.split()
        field = parts[0]
        reverse = len(parts) > 1 and parts[1].upper() == "DESC"
        return sorted(by_id, key=lambda r: str(r.get(field) or ""), reverse=reverse)


class ScriptedRandom:
    """Random source returning a fixed sequence of values in [0, 1)."""

    def __init__(self, *values: float) -> None:
        self._values = list(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if not self._values:
            raise AssertionError("ScriptedRandom exhausted")
        return self._values.pop(0)


class FakeScheduler:
    """Records timer jobs instead of running them; tests drive ticks by hand."""

    def __init__(self) -> None:
        self.jobs: dict[str, dict[str, Any]] = {}
        self.removed: list[str] = []

    def add_job(self, func: Any, trigger: Any = None, **kwargs: Any) -> None:
        self.jobs[kwargs["id"]] = {"func": func, "trigger": trigger, **kwargs}

    def remove_job(self, job_id: str, jobstore: str | None = None) -> None:
        if job_id not in self.jobs:
            raise JobLookupError(job_id)
        del self.jobs[job_id]
        self.removed.append(job_id)
