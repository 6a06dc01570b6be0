"""
Exception handling for DocDesk application.

Infrastructure-level exceptions. Business rule violations live in
``docdesk.domain.errors``; HTTP-facing errors in ``docdesk.api.errors``.
"""

from typing import Any, Dict, Optional


class DocDeskException(Exception):
    """Base exception class for DocDesk application."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class DatabaseError(DocDeskException):
    """Raised when there's a database operation error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "DATABASE_ERROR", details)


class StoreUnavailableError(DocDeskException):
    """Raised when a write is attempted while the document store was never initialized."""

    def __init__(self, operation: str, reason: str = "") -> None:
        message = f"Document store not initialized. Cannot {operation}."
        super().__init__(
            message, "STORE_UNAVAILABLE", {"operation": operation, "reason": reason}
        )
