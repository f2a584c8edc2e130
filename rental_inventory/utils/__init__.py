"""Utility modules."""

from rental_inventory.utils.identifiers import is_valid_id, new_id, normalize_id
from rental_inventory.utils.logger import bind_context, clear_context, get_logger, log_context

__all__ = [
    "get_logger",
    "bind_context",
    "clear_context",
    "log_context",
    "new_id",
    "is_valid_id",
    "normalize_id",
]
