"""Key-value storage package."""
from __future__ import annotations

from . import keys
from .store import (
    clear_namespace,
    get_item,
    get_json,
    list_keys,
    remove_item,
    set_item,
    set_json,
)

__all__ = [
    "keys",
    "clear_namespace",
    "get_item",
    "get_json",
    "list_keys",
    "remove_item",
    "set_item",
    "set_json",
]
