from typing import Callable, Dict, List, NamedTuple
from datetime import datetime

from finpulse.logging_setup import get_logger

__all__ = [
    'event_bus', 'GOAL_CREATED', 'GOAL_UPDATED', 'ALERT_SAVED', 'ALERT_TOGGLED',
    'ALERT_OVER_LIMIT', 'Event', 'EventBus', 'register_default_handlers',
]

logger = get_logger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[Event, dict], dict]]] = {}

    def subscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        if name not in self._subscribers:
            self._subscribers[name] = []
        if handler not in self._subscribers[name]:
            self._subscribers[name].append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        results = []
        for handler in self._subscribers[name]:
            result = handler(event, payload)
            results.append(result)
        return results

    def unsubscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        if name in self._subscribers:
            if handler in self._subscribers[name]:
                self._subscribers[name].remove(handler)


GOAL_CREATED = "GOAL_CREATED"
GOAL_UPDATED = "GOAL_UPDATED"
ALERT_SAVED = "ALERT_SAVED"
ALERT_TOGGLED = "ALERT_TOGGLED"
ALERT_OVER_LIMIT = "ALERT_OVER_LIMIT"

event_bus = EventBus()


def log_change_handler(event: Event, payload: dict) -> dict:
    logger.info("%s %s", event.name, payload.get("id", ""))
    return {"logged": event.name}


def over_limit_handler(event: Event, payload: dict) -> dict:
    spent = payload.get("spent", 0)
    limit = payload.get("limit", 0)
    category = payload.get("category", "")

    if spent > limit:
        return {
            "alert": f"Spending limit exceeded for {category}: {spent:,.2f} / {limit:,.2f}",
            "category": category,
            "spent": spent,
            "limit": limit,
            "excess": spent - limit,
        }
    return {}


def register_default_handlers(bus: EventBus = event_bus) -> None:
    for name in (GOAL_CREATED, GOAL_UPDATED, ALERT_SAVED, ALERT_TOGGLED):
        bus.subscribe(name, log_change_handler)
    bus.subscribe(ALERT_OVER_LIMIT, over_limit_handler)


register_default_handlers()
