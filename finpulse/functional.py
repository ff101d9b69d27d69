import math
from abc import ABC, abstractmethod
from datetime import date
from typing import TypeVar, Generic, Callable, Iterable, Optional, Union
from finpulse.domain import AlertStatus, SavingsGoal, SpendingAlert, TransactionRecord
from finpulse.memo import compute_category_spending

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    @abstractmethod
    def is_none(self) -> bool:
        pass


class Some(Generic[T], Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def is_none(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Some({self._value})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Generic[T], Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def is_none(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def is_left(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Generic[E, T], Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def is_left(self) -> bool:
        return False

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Generic[E, T], Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def is_left(self) -> bool:
        return True

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


class ParsedDate(ABC):
    """A date that is always present, tagged with whether it was substituted."""

    def __init__(self, value: date):
        self._value = value

    @property
    def value(self) -> date:
        return self._value

    @abstractmethod
    def is_fallback(self) -> bool:
        pass

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self._value == other._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value.isoformat()})"


class Parsed(ParsedDate):

    def is_fallback(self) -> bool:
        return False


class Fallback(ParsedDate):

    def is_fallback(self) -> bool:
        return True


Amount = Union[int, float, str, None]


def _non_blank(text: str) -> Maybe[str]:
    return Some(text) if text else Nothing()


def _decimal_point(text: str) -> str:
    # "1.234,56" -> "1234.56"
    if "," in text:
        return text.replace(".", "").replace(",", ".")
    return text


def _to_float(raw: Union[int, float, str]) -> Maybe[float]:
    try:
        return Some(float(raw))
    except (ValueError, OverflowError):
        return Nothing()


def _finite(value: float) -> Maybe[float]:
    return Some(value) if math.isfinite(value) else Nothing()


def parse_amount(raw: Amount) -> Maybe[float]:
    """Parse a form amount ("1500", "1.234,56", 1500) into a float."""
    if raw is None or isinstance(raw, bool):
        return Nothing()
    if isinstance(raw, (int, float)):
        return _to_float(raw).bind(_finite)
    return (
        Some(str(raw).strip())
        .bind(_non_blank)
        .map(_decimal_point)
        .bind(_to_float)
        .bind(_finite)
    )


def _missing(field: str) -> dict:
    return {
        "error": "missing_field",
        "message": f"Field '{field}' is required",
        "field": field,
    }


def _amount(field: str, raw: Amount, positive: bool) -> Either[dict, float]:
    parsed = parse_amount(raw)
    if parsed.is_none():
        return Left({
            "error": "invalid_amount",
            "message": f"Field '{field}' must be a number, got {raw!r}",
            "field": field,
        })
    value = parsed.get_or_else(0.0)
    if positive and value <= 0:
        return Left({
            "error": "non_positive_amount",
            "message": f"Field '{field}' must be greater than zero",
            "field": field,
            "amount": value,
        })
    if value < 0:
        return Left({
            "error": "negative_amount",
            "message": f"Field '{field}' cannot be negative",
            "field": field,
            "amount": value,
        })
    return Right(value)


def validate_goal(name: Optional[str], target: Amount, current: Amount = 0) -> Either[dict, dict]:
    if not name or not str(name).strip():
        return Left(_missing("name"))
    if target is None or (isinstance(target, str) and not target.strip()):
        return Left(_missing("target_amount"))
    # an empty "current" form field means nothing saved yet
    if current is None or (isinstance(current, str) and not current.strip()):
        current = 0
    return _amount("target_amount", target, positive=True).bind(
        lambda t: _amount("current_amount", current, positive=False).map(
            lambda c: {"name": str(name).strip(), "target_amount": t, "current_amount": c}
        )
    )


def validate_alert(category: Optional[str], limit: Amount) -> Either[dict, dict]:
    if not category or not str(category).strip():
        return Left(_missing("category"))
    if limit is None or (isinstance(limit, str) and not limit.strip()):
        return Left(_missing("limit_amount"))
    return _amount("limit_amount", limit, positive=True).map(
        lambda l: {"category": str(category).strip(), "limit_amount": l}
    )


def goal_progress(goal: SavingsGoal) -> float:
    if goal.target_amount <= 0:
        return 0.0
    return max(min(goal.current_amount * 100 / goal.target_amount, 100.0), 0.0)


def evaluate_alert(alert: SpendingAlert, transactions: Iterable[TransactionRecord]) -> AlertStatus:
    spent = compute_category_spending(tuple(transactions), alert.category)
    if alert.limit_amount > 0:
        percentage = min(spent * 100 / alert.limit_amount, 100.0)
    else:
        percentage = 100.0 if spent > 0 else 0.0
    return AlertStatus(
        alert=alert,
        spent=spent,
        percentage=percentage,
        over_limit=spent > alert.limit_amount,
    )


def active_alert_statuses(
    alerts: Iterable[SpendingAlert], transactions: Iterable[TransactionRecord]
) -> tuple[AlertStatus, ...]:
    trans = tuple(transactions)
    return tuple(evaluate_alert(a, trans) for a in alerts if a.enabled)

