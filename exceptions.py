"""Error taxonomy shared by the crud layer and the HTTP handlers.

Every error knows the HTTP status it maps to, so endpoints never translate
them by hand; ``main.py`` installs a single handler for ``LedgerError``.
"""

from typing import Optional


class LedgerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message}


class ValidationError(LedgerError):
    status_code = 400


class NotFoundError(LedgerError):
    status_code = 404


class InsufficientStockError(LedgerError):
    status_code = 400

    def __init__(self, requested: int, available: int, product_id=None, product_name: Optional[str] = None):
        label = product_name or product_id
        super().__init__(
            f"Insufficient quantity for product {label}. Requested: {requested}, Available: {available}"
        )
        self.requested = requested
        self.available = available
        self.product_id = product_id

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update(
            requested=self.requested,
            available=self.available,
            product_id=str(self.product_id) if self.product_id is not None else None,
        )
        return payload


class CustomerHasInvoicesError(LedgerError):
    status_code = 400


class InternalError(LedgerError):
    status_code = 500

    def __init__(self, message: str = "Server error"):
        super().__init__(message)
