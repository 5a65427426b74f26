"""Configuration from environment variables"""
import os
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).parent.parent

# Load environment variables
load_dotenv(PROJECT_ROOT / ".env")


def _flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


# API keys from environment
ETHERSCAN_API_KEY = os.environ.get("ETHERSCAN_API_KEY")
HELIUS_API_KEY = os.environ.get("HELIUS_API_KEY")

# Only records at or after this date are analyzed
START_DATE = os.environ.get("WRAPPED_START_DATE", "2025-01-01")

# Use synthetic records when a provider key is missing
USE_MOCK_DATA = _flag("WRAPPED_USE_MOCK", True)

# Maximum records fetched per ledger
TX_LIMIT = _int("WRAPPED_TX_LIMIT", 100)

# Fetch live prices from CoinGecko (otherwise the resolver defaults are used)
FETCH_PRICES = _flag("WRAPPED_FETCH_PRICES", True)


def start_timestamp(start_date: str = None) -> int:
    """UTC midnight of the start date as epoch seconds"""
    start = datetime.strptime(start_date or START_DATE, "%Y-%m-%d")
    return int(start.replace(tzinfo=timezone.utc).timestamp())
