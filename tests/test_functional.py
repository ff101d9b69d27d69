from datetime import date

from finpulse.domain import SavingsGoal, SpendingAlert, TransactionRecord, TransactionType
from finpulse.functional import (
    Some, Nothing, Parsed, Fallback,
    active_alert_statuses, evaluate_alert, goal_progress, parse_amount,
    validate_alert, validate_goal,
)


def make_transactions():
    return (
        TransactionRecord("t1", "Salary", 1000, TransactionType.INCOME, "Salário", "01/01/2024"),
        TransactionRecord("t2", "Groceries", 200, TransactionType.EXPENSE, "Mercado", "01/01/2024"),
        TransactionRecord("t3", "Groceries", 50, TransactionType.EXPENSE, "Mercado", "02/01/2024"),
    )


def test_parsed_and_fallback_are_distinguishable():
    d = date(2024, 1, 1)
    assert Parsed(d) == Parsed(d)
    assert Parsed(d) != Fallback(d)
    assert Parsed(d).value == Fallback(d).value
    assert Fallback(d).is_fallback()


def test_parse_amount():
    assert parse_amount(1500) == Some(1500.0)
    assert parse_amount("1500") == Some(1500.0)
    assert parse_amount(" 99.5 ") == Some(99.5)
    assert parse_amount("1.234,56") == Some(1234.56)
    assert parse_amount("") == Nothing()
    assert parse_amount(None) == Nothing()
    assert parse_amount("abc") == Nothing()
    assert parse_amount("nan") == Nothing()
    assert parse_amount(True) == Nothing()


def test_parse_amount_result_chains_into_bind_and_map():
    doubled = parse_amount("1.000,50").map(lambda v: v * 2)
    assert doubled == Some(2001.0)
    assert parse_amount("   ").map(lambda v: v * 2).is_none()
    assert parse_amount("abc").bind(lambda v: Some(v)).get_or_else(-1.0) == -1.0


def test_parse_amount_rejects_non_finite_and_overflow():
    assert parse_amount(float("inf")) == Nothing()
    assert parse_amount("-inf") == Nothing()
    assert parse_amount("1e400") == Nothing()
    assert parse_amount(10 ** 400) == Nothing()


def test_validate_goal_success():
    result = validate_goal("Trip", "3000", "")
    assert result.is_right()
    assert result.get_or_else(None) == {"name": "Trip", "target_amount": 3000.0, "current_amount": 0.0}


def test_validate_goal_missing_fields():
    assert validate_goal("", 1000).get_error()["error"] == "missing_field"
    assert validate_goal("   ", 1000).get_error()["field"] == "name"
    assert validate_goal("Trip", None).get_error()["field"] == "target_amount"
    assert validate_goal("Trip", "").get_error()["field"] == "target_amount"


def test_validate_goal_rejects_degenerate_amounts():
    error = validate_goal("Trip", 0).get_error()
    assert error["error"] == "non_positive_amount"
    assert error["field"] == "target_amount"

    assert validate_goal("Trip", -10).get_error()["error"] == "non_positive_amount"
    assert validate_goal("Trip", "lots").get_error()["error"] == "invalid_amount"

    error = validate_goal("Trip", 1000, -5).get_error()
    assert error["error"] == "negative_amount"
    assert error["field"] == "current_amount"


def test_validate_alert():
    result = validate_alert("Mercado", "500")
    assert result.get_or_else(None) == {"category": "Mercado", "limit_amount": 500.0}

    assert validate_alert("", 500).get_error()["field"] == "category"
    assert validate_alert("Mercado", None).get_error()["field"] == "limit_amount"
    assert validate_alert("Mercado", 0).get_error()["error"] == "non_positive_amount"


def test_goal_progress():
    assert goal_progress(SavingsGoal("g1", "Trip", 1000, 250)) == 25
    assert goal_progress(SavingsGoal("g1", "Trip", 1000, 0)) == 0


def test_goal_progress_is_clamped():
    assert goal_progress(SavingsGoal("g1", "Trip", 1000, 1200)) == 100


def test_goal_progress_never_below_zero():
    # records read back from disk skip creation-time validation
    assert goal_progress(SavingsGoal("g1", "Trip", 1000, -250)) == 0


def test_goal_progress_non_positive_target():
    assert goal_progress(SavingsGoal("g1", "Trip", 0, 100)) == 0
    assert goal_progress(SavingsGoal("g1", "Trip", -5, 100)) == 0


def test_evaluate_alert_under_limit():
    status = evaluate_alert(SpendingAlert("a1", "Mercado", 500), make_transactions())
    assert status.spent == 250
    assert status.percentage == 50
    assert status.over_limit is False
    assert status.excess == 0


def test_evaluate_alert_over_limit():
    status = evaluate_alert(SpendingAlert("a1", "Mercado", 200), make_transactions())
    assert status.spent == 250
    assert status.percentage == 100
    assert status.over_limit is True
    assert status.excess == 50


def test_evaluate_alert_exactly_at_limit_is_not_over():
    status = evaluate_alert(SpendingAlert("a1", "Mercado", 250), make_transactions())
    assert status.percentage == 100
    assert status.over_limit is False


def test_evaluate_alert_non_positive_limit():
    status = evaluate_alert(SpendingAlert("a1", "Mercado", 0), make_transactions())
    assert status.percentage == 100
    assert status.over_limit is True

    quiet = evaluate_alert(SpendingAlert("a2", "Casa", 0), make_transactions())
    assert quiet.percentage == 0
    assert quiet.over_limit is False


def test_active_alert_statuses_skips_disabled():
    alerts = (
        SpendingAlert("a1", "Mercado", 500),
        SpendingAlert("a2", "Casa", 100, enabled=False),
        SpendingAlert("a3", "Salário", 100),
    )
    statuses = active_alert_statuses(alerts, make_transactions())
    assert [s.alert.id for s in statuses] == ["a1", "a3"]
    # income never counts as spending
    assert statuses[1].spent == 0
