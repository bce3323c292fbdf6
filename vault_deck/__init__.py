"""Package init: shared constants."""
from __future__ import annotations

APP_NAME = "vault-deck"
APP_ICON = "🏦"
VERSION = "0.1.0"
