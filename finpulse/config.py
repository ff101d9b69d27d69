# config.py
import os
from dataclasses import dataclass
from pathlib import Path

# --- 1. CATEGORIES ---
# Offered in the alert category picker even before any transaction uses them.
DEFAULT_CATEGORIES = (
    "Salário",
    "Assinaturas",
    "Cartão de Crédito",
    "Comida",
    "Mercado",
    "Financiamento",
    "Internet",
    "Casa",
    "Pensão",
    "Reserva",
    "Investimentos",
    "Entretenimento",
    "Educação",
    "Transferência",
    "Depósito",
)

# --- 2. CALENDAR ---
# Sunday first, same order as the weekday buckets.
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

# --- 3. UI STYLING & COLORS ---
COLORS = {
    "income": "hsl(142, 76%, 36%)",
    "expense": "hsl(0, 84%, 60%)",
}

CURRENCY_SYMBOL = "R$"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    transactions_file: Path
    log_level: str
    default_window: str


def load_settings() -> Settings:
    """Read settings from FINPULSE_* environment variables."""
    data_dir = Path(os.getenv("FINPULSE_DATA_DIR", "data"))
    transactions_file = Path(
        os.getenv("FINPULSE_TRANSACTIONS_FILE", str(data_dir / "transactions.json"))
    )
    return Settings(
        data_dir=data_dir,
        transactions_file=transactions_file,
        log_level=os.getenv("FINPULSE_LOG_LEVEL", "INFO"),
        default_window=os.getenv("FINPULSE_DEFAULT_WINDOW", "90d"),
    )
