import logging

from finpulse.config import load_settings
from finpulse.domain import TimeWindow, TransactionType
from finpulse.formatting import format_currency, format_percentage, format_progress_line
from finpulse.logging_setup import _parse_level


def test_format_currency():
    assert format_currency(1234.56) == "R$ 1.234,56"
    assert format_currency(0) == "R$ 0,00"
    assert format_currency(-50) == "-R$ 50,00"
    assert format_currency(1000000) == "R$ 1.000.000,00"


def test_format_percentage():
    assert format_percentage(99.6) == "100%"


def test_format_progress_line():
    assert format_progress_line("Trip", 250, 1000) == "**Trip**: R$ 250,00 / R$ 1.000,00"
    assert format_progress_line("Mercado", 250, 200, lambda v: "•••") == "**Mercado**: ••• / •••"


def test_transaction_type_from_label():
    assert TransactionType.from_label("Receita") is TransactionType.INCOME
    assert TransactionType.from_label("income") is TransactionType.INCOME
    assert TransactionType.from_label("Despesa") is TransactionType.EXPENSE
    assert TransactionType.from_label("whatever") is TransactionType.EXPENSE


def test_time_window_days_and_keys():
    assert [w.days for w in TimeWindow] == [7, 30, 90]
    assert TimeWindow.from_key("30d") is TimeWindow.MONTH
    assert TimeWindow.from_key("bogus") is TimeWindow.QUARTER


def test_load_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("FINPULSE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("FINPULSE_TRANSACTIONS_FILE", raising=False)
    monkeypatch.setenv("FINPULSE_DEFAULT_WINDOW", "7d")

    settings = load_settings()
    assert settings.data_dir == tmp_path
    assert settings.transactions_file == tmp_path / "transactions.json"
    assert settings.default_window == "7d"


def test_parse_level(monkeypatch):
    assert _parse_level("debug") == logging.DEBUG
    assert _parse_level(30) == 30
    monkeypatch.setenv("FINPULSE_LOG_LEVEL", "ERROR")
    assert _parse_level(None) == logging.ERROR
    assert _parse_level("nonsense") == logging.INFO
