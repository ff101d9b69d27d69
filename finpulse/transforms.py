import json
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional, Tuple

from finpulse.config import DEFAULT_CATEGORIES, WEEKDAY_LABELS
from finpulse.domain import (
    CategoryTotal,
    DailyAggregate,
    SavingsGoal,
    SpendingAlert,
    TimeWindow,
    TransactionRecord,
    TransactionType,
    WeekdayAggregate,
)
from finpulse.functional import Fallback, Parsed, ParsedDate
from finpulse.logging_setup import get_logger

logger = get_logger(__name__)


def load_transactions(path: str) -> Tuple[TransactionRecord, ...]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    rows = data["transactions"] if isinstance(data, dict) else data
    return tuple(
        TransactionRecord(
            id=str(r["id"]),
            label=r.get("transaction") or r.get("label", ""),
            value=float(r.get("value", 0)),
            type=TransactionType.from_label(r.get("type", "")),
            category=r.get("category", ""),
            date=r.get("date", ""),
            effective_value=float(r.get("effectiveValue", r.get("effective_value", 0))),
        )
        for r in rows
    )


# --- Aggregation pipeline


def parse_transaction_date(text: str) -> ParsedDate:
    """Parse a "dd/mm/yyyy" date.

    Never fails: anything that is not a valid day/month/year comes back as
    Fallback(today) so the record still lands somewhere on the chart.
    """
    parts = str(text).split("/")
    if len(parts) == 3:
        try:
            day, month, year = (int(p) for p in parts)
            return Parsed(date(year, month, day))
        except ValueError:
            pass
    logger.warning("Unparseable transaction date %r, using today", text)
    return Fallback(date.today())


def aggregate_daily(records: Iterable[TransactionRecord]) -> Tuple[DailyAggregate, ...]:
    grouped: dict[str, list[float]] = defaultdict(lambda: [0, 0])

    for r in records:
        key = parse_transaction_date(r.date).value.isoformat()
        # magnitudes are summed as stored, no abs()
        if r.type is TransactionType.INCOME:
            grouped[key][0] += r.value
        else:
            grouped[key][1] += r.value

    return tuple(
        DailyAggregate(date=key, income=inc, expense=exp)
        for key, (inc, exp) in sorted(grouped.items())
    )


def apply_time_window(
    series: Tuple[DailyAggregate, ...], window: TimeWindow
) -> Tuple[DailyAggregate, ...]:
    if not series:
        return ()
    ref = date.fromisoformat(series[-1].date)
    try:
        start = (ref - timedelta(days=window.days)).isoformat()
    except OverflowError:
        # windows reaching past year 1 keep everything
        start = date.min.isoformat()
    return tuple(d for d in series if d.date >= start)


def to_category_totals(series: Iterable[DailyAggregate]) -> Tuple[CategoryTotal, CategoryTotal]:
    income = 0
    expense = 0
    for d in series:
        income += d.income
        expense += d.expense
    return (
        CategoryTotal(name=TransactionType.INCOME.value, value=income),
        CategoryTotal(name=TransactionType.EXPENSE.value, value=expense),
    )


def weekday_index(iso_date: str) -> int:
    """0 = Sunday ... 6 = Saturday."""
    midnight = datetime.strptime(iso_date, "%Y-%m-%d")
    return midnight.isoweekday() % 7


def to_weekday_aggregates(series: Iterable[DailyAggregate]) -> Tuple[WeekdayAggregate, ...]:
    buckets = [[0, 0] for _ in WEEKDAY_LABELS]

    for d in series:
        idx = weekday_index(d.date)
        buckets[idx][0] += d.income
        buckets[idx][1] += d.expense

    return tuple(
        WeekdayAggregate(weekday=label, income=inc, expense=exp)
        for label, (inc, exp) in zip(WEEKDAY_LABELS, buckets)
    )


def records_from_daily(series: Iterable[DailyAggregate]) -> Tuple[TransactionRecord, ...]:
    """Turn a daily series back into records, one income and one expense per day."""
    out = []
    for d in series:
        day = date.fromisoformat(d.date).strftime("%d/%m/%Y")
        out.append(TransactionRecord(f"{d.date}-in", "daily income", d.income,
                                     TransactionType.INCOME, "", day))
        out.append(TransactionRecord(f"{d.date}-out", "daily expense", d.expense,
                                     TransactionType.EXPENSE, "", day))
    return tuple(out)


def category_options(
    records: Iterable[TransactionRecord], defaults: Iterable[str] = DEFAULT_CATEGORIES
) -> Tuple[str, ...]:
    return tuple(sorted(set(defaults) | {r.category for r in records if r.category}))


# --- Goals and alerts


def add_goal(goals: Tuple[SavingsGoal, ...], g: SavingsGoal) -> Tuple[SavingsGoal, ...]:
    return goals + (g,)


def update_goal(
    goals: Tuple[SavingsGoal, ...],
    gid: str,
    name: Optional[str] = None,
    target_amount: Optional[float] = None,
    current_amount: Optional[float] = None,
) -> Tuple[SavingsGoal, ...]:
    changes = {
        k: v
        for k, v in (("name", name), ("target_amount", target_amount), ("current_amount", current_amount))
        if v is not None
    }
    return tuple(replace(g, **changes) if g.id == gid else g for g in goals)


def upsert_alert(
    alerts: Tuple[SpendingAlert, ...], category: str, limit_amount: float, new_id: Callable[[], str]
) -> Tuple[SpendingAlert, ...]:
    if any(a.category == category for a in alerts):
        return tuple(
            replace(a, limit_amount=limit_amount, enabled=True) if a.category == category else a
            for a in alerts
        )
    return alerts + (SpendingAlert(id=new_id(), category=category, limit_amount=limit_amount, enabled=True),)


def set_alert_enabled(
    alerts: Tuple[SpendingAlert, ...], aid: str, enabled: bool
) -> Tuple[SpendingAlert, ...]:
    return tuple(replace(a, enabled=enabled) if a.id == aid else a for a in alerts)
