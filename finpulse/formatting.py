from typing import Callable

from finpulse.config import CURRENCY_SYMBOL


def format_currency(amount: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format amount the Brazilian way, e.g. "R$ 1.234,56" or "-R$ 50,00"."""
    us = f"{abs(amount):,.2f}"
    br = us.replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if round(amount, 2) < 0 else ""
    return f"{sign}{symbol} {br}"


def format_percentage(value: float) -> str:
    return f"{value:.0f}%"


def format_progress_line(label: str, current: float, total: float,
                         money: Callable[[float], str] = format_currency) -> str:
    """Card headline for a goal or alert, e.g. "**Trip**: R$ 250,00 / R$ 1.000,00"."""
    return f"**{label}**: {money(current)} / {money(total)}"
