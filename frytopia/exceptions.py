"""
Exceptions raised by the Frytopia client and validation helpers.

Pages catch these at the edge and turn them into st.warning/st.error messages;
nothing below the pages swallows them.
"""

from typing import Dict, Optional


class FrytopiaError(Exception):
    """Base class for all Frytopia errors."""


class BackendError(FrytopiaError):
    """
    A call to the REST backend failed.

    Attributes:
        operation: Client operation that failed (e.g., "list_recipes")
        status_code: HTTP status code if the backend answered, else None
    """

    def __init__(self, operation: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message
        self.status_code = status_code


class BackendUnavailable(BackendError):
    """The backend could not be reached (connection error or timeout)."""


class ValidationError(FrytopiaError):
    """
    Input rejected locally before any network call.

    Attributes:
        field_errors: Mapping of form field name to a user-facing message
    """

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        super().__init__("; ".join(self.field_errors.values()))

    @property
    def first_message(self) -> str:
        """The first field message, used for banner-style display."""
        return next(iter(self.field_errors.values()), "")
