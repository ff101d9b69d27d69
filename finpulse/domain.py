from dataclasses import dataclass
from enum import Enum


class TransactionType(Enum):
    INCOME = "Income"
    EXPENSE = "Expense"

    @classmethod
    def from_label(cls, label: str) -> "TransactionType":
        # anything that is not income counts as an expense
        if str(label).strip().lower() in ("income", "receita"):
            return cls.INCOME
        return cls.EXPENSE


class TimeWindow(Enum):
    WEEK = 7
    MONTH = 30
    QUARTER = 90

    @property
    def days(self) -> int:
        return self.value

    @property
    def key(self) -> str:
        return f"{self.value}d"

    @property
    def label(self) -> str:
        return {
            TimeWindow.WEEK: "Last 7 days",
            TimeWindow.MONTH: "Last 30 days",
            TimeWindow.QUARTER: "Last quarter",
        }[self]

    @classmethod
    def from_key(cls, key: str) -> "TimeWindow":
        for w in cls:
            if w.key == key:
                return w
        return cls.QUARTER


class ChartType(Enum):
    AREA = "area"
    BAR = "bar"
    PIE = "pie"
    RADAR = "radar"
    RADIAL = "radial"


@dataclass(frozen=True)
class TransactionRecord:
    id: str
    label: str
    value: float                  # stored magnitude, sign convention is the caller's
    type: TransactionType
    category: str
    date: str                     # "dd/mm/yyyy"
    effective_value: float = 0.0  # not used by the aggregation


@dataclass(frozen=True)
class DailyAggregate:
    date: str  # ISO "YYYY-MM-DD", unique per series
    income: float
    expense: float


@dataclass(frozen=True)
class CategoryTotal:
    name: str  # "Income" or "Expense"
    value: float


@dataclass(frozen=True)
class WeekdayAggregate:
    weekday: str
    income: float
    expense: float


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    name: str
    target_amount: float
    current_amount: float = 0.0


@dataclass(frozen=True)
class SpendingAlert:
    id: str
    category: str
    limit_amount: float
    enabled: bool = True


@dataclass(frozen=True)
class AlertStatus:
    alert: SpendingAlert
    spent: float
    percentage: float
    over_limit: bool

    @property
    def excess(self) -> float:
        return max(self.spent - self.alert.limit_amount, 0.0)
