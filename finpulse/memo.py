from functools import lru_cache
from finpulse.domain import TransactionRecord, TransactionType


@lru_cache(maxsize=256)
def compute_category_spending(transactions: tuple[TransactionRecord, ...], category: str) -> float:
    # lifetime total: alerts look at every transaction, not the chart window
    return float(sum(
        abs(t.value) for t in transactions
        if t.type is TransactionType.EXPENSE and t.category == category
    ))
