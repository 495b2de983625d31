"""Error taxonomy shared by repositories, the order validator and the HTTP layer.

Every error here is a recoverable, caller-facing fault. The API renders them with
``status_code`` and ``code``; nothing in this module is fatal to the process.
"""

from typing import Any


class BookhubError(Exception):
    """Base class for all domain errors."""

    status_code = 400
    code = "error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code, "detail": self.message}
        if self.details:
            body.update(self.details)
        return body


class ValidationError(BookhubError):
    """Malformed or missing required input."""

    status_code = 400
    code = "validation_error"


class NotFoundError(BookhubError):
    """A referenced entity does not exist."""

    status_code = 404
    code = "not_found"


class ConflictError(BookhubError):
    """Uniqueness violation (duplicate set for a pair, duplicate catalog entry, ...)."""

    status_code = 409
    code = "conflict"


class OrderRejectedError(BookhubError):
    """One or more order lines failed validation; nothing was persisted."""

    status_code = 422
    code = "order_rejected"

    def __init__(self, message: str, rejections: list):
        super().__init__(message)
        self.rejections = list(rejections)

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["rejections"] = [r.model_dump() for r in self.rejections]
        return body


class PriceMismatchError(OrderRejectedError):
    """Every rejected line disagrees with the current catalog price."""

    status_code = 409
    code = "price_mismatch"
