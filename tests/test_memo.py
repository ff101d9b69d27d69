from finpulse.domain import TransactionRecord, TransactionType
from finpulse.memo import compute_category_spending


def make_tx(id, value, type, category, date="01/01/2024"):
    return TransactionRecord(id=id, label="", value=value, type=type, category=category, date=date)


def test_category_spending_example():
    trans = (
        make_tx("t1", 1000, TransactionType.INCOME, "Salário"),
        make_tx("t2", 200, TransactionType.EXPENSE, "Mercado"),
        make_tx("t3", 50, TransactionType.EXPENSE, "Mercado", "02/01/2024"),
    )
    assert compute_category_spending(trans, "Mercado") == 250


def test_category_spending_uses_absolute_values():
    trans = (
        make_tx("t1", -120, TransactionType.EXPENSE, "Comida"),
        make_tx("t2", 30, TransactionType.EXPENSE, "Comida"),
    )
    assert compute_category_spending(trans, "Comida") == 150


def test_category_spending_ignores_other_categories_and_income():
    trans = (
        make_tx("t1", 500, TransactionType.INCOME, "Mercado"),
        make_tx("t2", 80, TransactionType.EXPENSE, "Casa"),
    )
    assert compute_category_spending(trans, "Mercado") == 0


def test_category_spending_is_lifetime_scoped():
    # transactions a year apart both count, no time window applies
    trans = (
        make_tx("t1", 100, TransactionType.EXPENSE, "Mercado", "01/01/2023"),
        make_tx("t2", 100, TransactionType.EXPENSE, "Mercado", "01/01/2024"),
    )
    assert compute_category_spending(trans, "Mercado") == 200


def test_category_spending_empty():
    assert compute_category_spending((), "Mercado") == 0


def test_category_spending_is_cached():
    trans = tuple(make_tx(str(i), 10, TransactionType.EXPENSE, "Mercado") for i in range(100))
    compute_category_spending(trans, "Mercado")
    hits = compute_category_spending.cache_info().hits
    assert compute_category_spending(trans, "Mercado") == 1000
    assert compute_category_spending.cache_info().hits == hits + 1
