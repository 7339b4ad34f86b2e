"""Durable per-user storage of in-progress timers.

All of a user's timers live in one JSON array under ``fieldtrack_timers_<user_id>``.
Reads filter that array by job; writes replace one job's slice and keep the rest.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.orm import Session

from fieldtrack.models.local_storage import LocalStorageEntry

logger = logging.getLogger(__name__)

STORAGE_KEY_PREFIX = "fieldtrack_timers_"

RUNNING = "running"
PAUSED = "paused"


def to_utc(dt: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(value))


def format_timestamp(dt: datetime) -> str:
    return to_utc(dt).isoformat()


@dataclass
class LocalTimer:
    id: str
    job_id: int
    component_id: int
    component_name: str
    start_time: datetime
    crew_count: int
    state: str = RUNNING
    pause_time: Optional[datetime] = None
    total_elapsed_ms: int = 0
    worker_names: List[str] = field(default_factory=list)

    @property
    def is_running(self) -> bool:
        return self.state == RUNNING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "jobId": self.job_id,
            "componentId": self.component_id,
            "componentName": self.component_name,
            "startTime": format_timestamp(self.start_time),
            "pauseTime": None if self.pause_time is None else format_timestamp(self.pause_time),
            "totalElapsedMs": int(self.total_elapsed_ms),
            "crewCount": int(self.crew_count),
            "state": self.state,
            "workerNames": list(self.worker_names),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocalTimer":
        state = data.get("state") or RUNNING
        if state not in (RUNNING, PAUSED):
            raise ValueError(f"Unknown timer state: {state}")

        pause_time = data.get("pauseTime")
        return cls(
            id=str(data["id"]),
            job_id=data["jobId"],
            component_id=data["componentId"],
            component_name=str(data.get("componentName") or ""),
            start_time=parse_timestamp(data["startTime"]),
            pause_time=parse_timestamp(pause_time) if pause_time else None,
            total_elapsed_ms=int(data.get("totalElapsedMs") or 0),
            crew_count=int(data.get("crewCount") or 1),
            state=state,
            worker_names=list(data.get("workerNames") or []),
        )


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class SqlStorage:
    """Key/value storage on the ``local_storage`` table.

    Writes join the caller's transaction; the caller commits.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_item(self, key: str) -> Optional[str]:
        row = self.db.get(LocalStorageEntry, key)
        return None if row is None else row.value

    def set_item(self, key: str, value: str) -> None:
        row = self.db.get(LocalStorageEntry, key)
        if row is None:
            self.db.add(LocalStorageEntry(key=key, value=value))
        else:
            row.value = value
        self.db.flush()


class TimerStore:
    def __init__(self, storage: KeyValueStorage, user_id: str) -> None:
        self.storage = storage
        self.user_id = str(user_id)

    @property
    def key(self) -> str:
        return f"{STORAGE_KEY_PREFIX}{self.user_id}"

    def _read_all(self) -> List[Dict[str, Any]]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError("Stored timers are not a list")
        return data

    def load_for_job(self, job_id: int) -> List[LocalTimer]:
        try:
            return [
                LocalTimer.from_dict(item)
                for item in self._read_all()
                if item.get("jobId") == job_id
            ]
        except Exception:
            logger.exception(
                "Error loading local timers",
                extra={"user_id": self.user_id, "job_id": job_id},
            )
            return []

    def save_for_job(self, job_id: int, timers: List[LocalTimer]) -> None:
        """Replace every stored timer of ``job_id`` with ``timers``.

        Callers pass the complete set for the job; other jobs are left as stored.
        """
        others = [item for item in self._read_all() if item.get("jobId") != job_id]
        others.extend(t.to_dict() for t in timers)
        self.storage.set_item(self.key, json.dumps(others))
