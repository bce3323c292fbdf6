# config.py
from functools import lru_cache
from pathlib import Path
from dotenv import load_dotenv
import os

load_dotenv(Path(__file__).parent.parent / ".env")


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@lru_cache
def settings():
    return {
        "VAULT_API_URL": os.getenv("VAULT_API_URL", "http://localhost:54321"),
        "VAULT_API_KEY": os.getenv("VAULT_API_KEY", "dev-key"),
        "VAULT_TABLE": os.getenv("VAULT_TABLE", "vaults"),
        "PRICE_API_URL": os.getenv(
            "PRICE_API_URL", "http://localhost:8000/prices?env=mainnet-beta"
        ),
        "YIELD_API_URL": os.getenv("YIELD_API_URL", "http://localhost:8000/staking-yields"),
        "REQUEST_TIMEOUT": float(os.getenv("REQUEST_TIMEOUT", "10")),
        "REFRESH_SECONDS": int(os.getenv("REFRESH_SECONDS", "60")),
        # Serve mock vaults when the store is unreachable (dev convenience)
        "MOCK_FALLBACK": _flag("MOCK_FALLBACK", "true"),
        "DEFAULT_WALLET": os.getenv("DEFAULT_WALLET", ""),
        "LOCAL_TZ": os.getenv("LOCAL_TZ", "UTC"),
        "APP_TITLE": os.getenv("APP_TITLE", "Vault Deck"),
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO"),
    }
