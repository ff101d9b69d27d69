"""Persistence for savings goals and spending alerts.

Collections are always loaded and saved whole. ``JsonFileRepository`` keeps
each collection as a plain JSON list of field-for-field records.
"""

import json
import os
from abc import ABC, abstractmethod
from dataclasses import asdict
from pathlib import Path
from typing import Callable, Generic, Iterable, Tuple, TypeVar, Union

from finpulse.domain import SavingsGoal, SpendingAlert
from finpulse.logging_setup import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


class StoreError(Exception):
    """Raised when a persisted collection cannot be read or written."""


class Repository(Generic[T], ABC):

    @abstractmethod
    def load_all(self) -> Tuple[T, ...]:
        pass

    @abstractmethod
    def save_all(self, items: Iterable[T]) -> None:
        pass


class InMemoryRepository(Repository[T]):

    def __init__(self, items: Iterable[T] = ()):
        self._items = tuple(items)
        self.saves = 0

    def load_all(self) -> Tuple[T, ...]:
        return self._items

    def save_all(self, items: Iterable[T]) -> None:
        self._items = tuple(items)
        self.saves += 1


class JsonFileRepository(Repository[T]):

    def __init__(self, path: Union[str, Path], decode: Callable[[dict], T]):
        self.path = Path(path)
        self.decode = decode

    def load_all(self) -> Tuple[T, ...]:
        if not self.path.exists():
            return ()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                rows = json.load(f)
            return tuple(self.decode(r) for r in rows)
        except (OSError, ValueError, TypeError, KeyError) as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e

    def save_all(self, items: Iterable[T]) -> None:
        rows = [asdict(i) for i in items]
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(rows, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e
        logger.debug("Saved %d records to %s", len(rows), self.path)


def goal_from_dict(d: dict) -> SavingsGoal:
    return SavingsGoal(
        id=str(d["id"]),
        name=d["name"],
        target_amount=float(d["target_amount"]),
        current_amount=float(d.get("current_amount", 0)),
    )


def alert_from_dict(d: dict) -> SpendingAlert:
    return SpendingAlert(
        id=str(d["id"]),
        category=d["category"],
        limit_amount=float(d["limit_amount"]),
        enabled=bool(d.get("enabled", True)),
    )


class PersonalizationStore:
    """Goals and alerts, each behind its own whole-collection repository."""

    def __init__(self, goals: Repository[SavingsGoal], alerts: Repository[SpendingAlert]):
        self.goals = goals
        self.alerts = alerts

    @classmethod
    def from_directory(cls, path: Union[str, Path]) -> "PersonalizationStore":
        base = Path(path)
        return cls(
            goals=JsonFileRepository(base / "goals.json", goal_from_dict),
            alerts=JsonFileRepository(base / "alerts.json", alert_from_dict),
        )

    @classmethod
    def in_memory(cls) -> "PersonalizationStore":
        return cls(goals=InMemoryRepository(), alerts=InMemoryRepository())

    def load_goals(self) -> Tuple[SavingsGoal, ...]:
        return self.goals.load_all()

    def save_goals(self, goals: Iterable[SavingsGoal]) -> None:
        self.goals.save_all(goals)

    def load_alerts(self) -> Tuple[SpendingAlert, ...]:
        return self.alerts.load_all()

    def save_alerts(self, alerts: Iterable[SpendingAlert]) -> None:
        self.alerts.save_all(alerts)
