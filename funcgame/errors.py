from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base for errors that map to a client-visible HTTP response."""

    status_code = 500

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationFailed(ServiceError):
    status_code = 400


class AuthenticationFailed(ServiceError):
    status_code = 401

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class NotFound(ServiceError):
    status_code = 404

    @classmethod
    def entity(cls, name: str) -> "NotFound":
        return cls(f"{name} not found")


class BackendUnavailable(ServiceError):
    """Storage round trip failed. `message` is the raw backend text."""

    status_code = 500

    def __init__(self, message: str, *, table: Optional[str] = None, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.table = table
        self.operation = operation
