from typing import Any, Callable, Dict, Iterable, Optional, Set, Tuple
from uuid import uuid4

from finpulse.domain import AlertStatus, SavingsGoal, SpendingAlert, TimeWindow, TransactionRecord
from finpulse.events import (
    ALERT_OVER_LIMIT,
    ALERT_SAVED,
    ALERT_TOGGLED,
    GOAL_CREATED,
    GOAL_UPDATED,
    EventBus,
    event_bus,
)
from finpulse.functional import (
    Amount,
    Either,
    Right,
    active_alert_statuses,
    goal_progress,
    validate_alert,
    validate_goal,
)
from finpulse.logging_setup import get_logger
from finpulse.store import PersonalizationStore
from finpulse import transforms

logger = get_logger(__name__)


def new_id() -> str:
    return uuid4().hex[:9]


class PersonalizationService:
    """Savings goals and spending alerts for one user session.

    Every mutation updates the in-memory collection and immediately saves the
    whole collection back to the store. Rejected input returns ``Left`` with
    an error dict and touches neither.
    """

    def __init__(
        self,
        store: PersonalizationStore,
        bus: EventBus = event_bus,
        id_factory: Callable[[], str] = new_id,
    ):
        self.store = store
        self.bus = bus
        self.id_factory = id_factory
        self.goals: Tuple[SavingsGoal, ...] = ()
        self.alerts: Tuple[SpendingAlert, ...] = ()
        self._breached: Set[str] = set()

    def load(self) -> None:
        self.goals = self.store.load_goals()
        self.alerts = self.store.load_alerts()
        logger.debug("Loaded %d goals and %d alerts", len(self.goals), len(self.alerts))

    def create_goal(self, name: str, target_amount: Amount, current_amount: Amount = 0) -> Either[dict, SavingsGoal]:
        checked = validate_goal(name, target_amount, current_amount)
        if checked.is_left():
            logger.info("Goal rejected: %s", checked.get_error()["message"])
            return checked

        fields = checked.get_or_else({})
        goal = SavingsGoal(id=self.id_factory(), **fields)
        self.goals = transforms.add_goal(self.goals, goal)
        self.store.save_goals(self.goals)
        self.bus.publish(GOAL_CREATED, {"id": goal.id, "name": goal.name})
        return Right(goal)

    def update_goal(
        self,
        goal_id: str,
        name: Optional[str] = None,
        target_amount: Amount = None,
        current_amount: Amount = None,
    ) -> Either[dict, Tuple[SavingsGoal, ...]]:
        goal = next((g for g in self.goals if g.id == goal_id), None)
        if goal is None:
            logger.debug("update_goal: no goal with id %s", goal_id)
            return Right(self.goals)

        checked = validate_goal(
            name if name is not None else goal.name,
            target_amount if target_amount is not None else goal.target_amount,
            current_amount if current_amount is not None else goal.current_amount,
        )
        if checked.is_left():
            return checked

        fields = checked.get_or_else({})
        updated = transforms.update_goal(self.goals, goal_id, **fields)
        if updated != self.goals:
            self.goals = updated
            self.store.save_goals(self.goals)
            self.bus.publish(GOAL_UPDATED, {"id": goal_id})
        return Right(self.goals)

    def upsert_alert(self, category: str, limit_amount: Amount) -> Either[dict, SpendingAlert]:
        checked = validate_alert(category, limit_amount)
        if checked.is_left():
            logger.info("Alert rejected: %s", checked.get_error()["message"])
            return checked

        fields = checked.get_or_else({})
        self.alerts = transforms.upsert_alert(
            self.alerts, fields["category"], fields["limit_amount"], self.id_factory
        )
        self.store.save_alerts(self.alerts)
        alert = next(a for a in self.alerts if a.category == fields["category"])
        self.bus.publish(ALERT_SAVED, {"id": alert.id, "category": alert.category})
        return Right(alert)

    def set_alert_enabled(self, alert_id: str, enabled: bool) -> Tuple[SpendingAlert, ...]:
        if not any(a.id == alert_id for a in self.alerts):
            logger.debug("set_alert_enabled: no alert with id %s", alert_id)
            return self.alerts

        self.alerts = transforms.set_alert_enabled(self.alerts, alert_id, enabled)
        self.store.save_alerts(self.alerts)
        self.bus.publish(ALERT_TOGGLED, {"id": alert_id, "enabled": enabled})
        return self.alerts

    def goal_progress(self, goal: SavingsGoal) -> float:
        return goal_progress(goal)

    def alert_statuses(self, transactions: Iterable[TransactionRecord]) -> Tuple[AlertStatus, ...]:
        """Evaluate enabled alerts against the full, unwindowed transaction list.

        ``ALERT_OVER_LIMIT`` is published once when an alert crosses its
        limit, not on every evaluation. Dropping back under the limit (or a
        disabled alert) re-arms it.
        """
        statuses = active_alert_statuses(self.alerts, transactions)
        over = {s.alert.id for s in statuses if s.over_limit}
        for s in statuses:
            if s.over_limit and s.alert.id not in self._breached:
                results = self.bus.publish(ALERT_OVER_LIMIT, {
                    "id": s.alert.id,
                    "category": s.alert.category,
                    "spent": s.spent,
                    "limit": s.alert.limit_amount,
                })
                for r in results:
                    if "alert" in r:
                        logger.warning(r["alert"])
        self._breached = over
        return statuses


class DashboardService:
    """Runs the aggregation pipeline for one time window.

    The report keeps each intermediate step so the dashboard can show how a
    view was derived.
    """

    def __init__(self, transactions: Iterable[TransactionRecord]):
        self.transactions = tuple(transactions)
        self.series = transforms.aggregate_daily(self.transactions)

    def chart_report(self, window: TimeWindow) -> Dict[str, Any]:
        windowed = transforms.apply_time_window(self.series, window)
        report = {
            "window": window,
            "steps": [
                {"step": "aggregate_daily", "output": len(self.series)},
                {"step": "apply_time_window", "output": len(windowed)},
            ],
            "result": {
                "daily": windowed,
                "category_totals": transforms.to_category_totals(windowed),
                "weekdays": transforms.to_weekday_aggregates(windowed),
            },
        }
        return report

