"""
Error taxonomy raised by data sources.

Store failures are not listed here: SQLAlchemy errors propagate unchanged.
"""

from typing import Any


class DataPipeError(Exception):
    """Base class for datapipe exceptions."""
    def __init__(self, message: str, status_code: int = 400, code: int = 400, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.detail = detail


class NotFoundError(DataPipeError):
    """No row matched the requested key."""
    def __init__(self, key: Any = None, target: str = "record"):
        super().__init__(
            f"{target} not found: {key!r}",
            status_code=404,
            code=404,
            detail={"key": key, "target": target},
        )
        self.key = key
        self.target = target


class ConfigurationError(DataPipeError):
    """A data source was bound to a target it cannot serve."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500, code=500)
