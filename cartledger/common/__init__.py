# Common utilities and shared modules
"""
Shared components used by the cart, expense and price tracker packages:
- Data models (Pydantic schemas)
- Database utilities
- Logging configuration
- Project configuration
"""

from .config import Config, PROJECT_ROOT
from .database import get_connection, init_db
from .logging import setup_logging

__all__ = [
    "Config",
    "PROJECT_ROOT",
    "get_connection",
    "init_db",
    "setup_logging",
]
