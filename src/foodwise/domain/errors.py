"""Error types shared across the application."""


class FoodwiseError(Exception):
    """Base class for application errors."""


class ValidationError(FoodwiseError):
    """Raised when food attributes are incomplete and cannot be predicted."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class StorageReadError(FoodwiseError):
    """Raised by a backend when the persisted collection cannot be read."""


class StorageWriteError(FoodwiseError):
    """Raised by a backend when the persisted collection cannot be written."""
