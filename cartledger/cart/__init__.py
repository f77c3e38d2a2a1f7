"""Cart Module - shopping cart items, price tracking fields and shopping tips."""

from .advisor import ShoppingAdvisor
from .store import CartStore, resolve_status

__all__ = ["CartStore", "ShoppingAdvisor", "resolve_status"]
