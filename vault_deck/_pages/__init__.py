"""Registry of Streamlit pages so main.py can route dynamically."""
from typing import Callable, Optional

from . import dashboard, vault_create, vaults

Page = Callable[[Optional[str]], None]

registry: dict[str, Page] = {
    "Dashboard": dashboard.render,
    "Vaults": vaults.render,
    "Create": vault_create.render,
}

__all__ = ["registry"]
