"""Domain errors raised by the application services.

The API layer translates these into the JSON envelope with the matching
HTTP status; services never build HTTP responses themselves.
"""

from typing import Any, Dict, List, Optional, Union

ErrorMap = Dict[str, Union[str, List[str]]]

class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str, errors: Optional[ErrorMap] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def to_errors(self) -> Dict[str, Any]:
        """Field-level errors with every value normalised to a list of messages."""
        return {
            field: value if isinstance(value, list) else [value]
            for field, value in self.errors.items()
        }

class ValidationError(DomainError):
    """Malformed, missing or out-of-range input."""
    status_code = 422

class InsufficientStock(ValidationError):
    """A reservation asked for more units than the product has in stock."""

    def __init__(self, requested: int, available: int, product_id: Optional[int] = None):
        super().__init__("Quantity Error", {"quantity": ["Not enough stock available"]})
        self.requested = requested
        self.available = available
        self.product_id = product_id

class NotFound(DomainError):
    """Entity is absent or owned by another tenant."""
    status_code = 404

class Forbidden(DomainError):
    status_code = 403

class Unauthorized(DomainError):
    status_code = 401
