from __future__ import annotations

from typing import Iterable, Optional


class FuelSalesError(Exception):
    """
    Base for every condition the sale workflow recovers from.

    `user_message` is the short text shown in the transient notification.
    """

    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class MissingBranchError(FuelSalesError):
    default_message = "Branch ID not found"


class ValidationError(FuelSalesError, ValueError):
    default_message = "Please fill in all fields."

    def __init__(self, missing_fields: Iterable[str], message: Optional[str] = None):
        self.missing_fields = tuple(missing_fields)
        super().__init__(message)


class NetworkError(FuelSalesError):
    default_message = "Network error. Please check your connection"


class AuthError(FuelSalesError):
    default_message = "Session expired or invalid credentials"


class ServerError(FuelSalesError):
    default_message = "The server rejected the request"

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
