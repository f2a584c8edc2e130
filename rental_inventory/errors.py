"""Error kinds reported by the inventory and facility repositories.

Callers (HTTP routes, CLI commands) decide how to present them; none of
them are retried inside the repositories.
"""


class InventoryError(Exception):
    """Base class for repository errors."""


class InvalidIdentifier(InventoryError, ValueError):
    """The supplied id is not a well-formed identifier. Raised before any store access."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid ID format: {value!r}")


class NotFound(InventoryError, LookupError):
    """No record matches the id under the requested soft-delete visibility."""

    def __init__(self, entity: str, record_id: str, include_deleted: bool = False):
        self.entity = entity
        self.record_id = record_id
        self.include_deleted = include_deleted
        super().__init__(f"{entity} not found: {record_id}")


class OperationFailed(InventoryError):
    """The record store failed; message carries the store's own error text."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Error {operation}: {message}")


class DuplicateImageId(InventoryError, ValueError):
    """An update would leave two images on one item sharing an id."""

    def __init__(self, item_id: str, image_ids: list[str]):
        self.item_id = item_id
        self.image_ids = image_ids
        super().__init__(f"Duplicate image id(s) on item {item_id}: {', '.join(image_ids)}")
