"""
Custom exceptions for Warrant.

This module defines the exception hierarchy for the library. Access
denials, missing records and configuration mistakes are kept as distinct
types so callers can map them to different outcomes (for example a 403
versus a 404 response).
"""

from __future__ import annotations

from typing import Any


class WarrantError(Exception):
    """
    Base exception for all Warrant errors.

    All Warrant-specific exceptions inherit from this class,
    making it easy to catch any library-related error.

    Attributes:
        message: Human-readable error description.
        details: Additional context about the error.

    Example:
        >>> try:
        ...     gate.authorize("destroy", account)
        ... except WarrantError as e:
        ...     logger.error(f"Warrant error: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


def _describe(subject: Any) -> str | None:
    if subject is None:
        return None
    if isinstance(subject, type):
        return subject.__name__
    record_id = getattr(subject, "id", None)
    if record_id is not None:
        return f"{type(subject).__name__}#{record_id}"
    return type(subject).__name__


class AccessDenied(WarrantError):
    """
    Raised when the current actor may not perform an action.

    This is the only exception raised deliberately by the authorization
    gate. It carries the attempted action and the subject it was
    attempted on (the instance when one was loaded, otherwise the class).

    Attributes:
        action: The action that was attempted (e.g. "update").
        subject: The instance or class the action was attempted on.

    Example:
        >>> raise AccessDenied(
        ...     "Only owners may close an account",
        ...     action="destroy",
        ...     subject=account,
        ... )
    """

    def __init__(
        self,
        message: str | None = None,
        action: Any = None,
        subject: Any = None,
    ) -> None:
        self.action = str(action) if action is not None else None
        self.subject = subject
        self.custom_message = message

        if message is None:
            message = "You are not authorized to access this page."

        details = {
            "action": self.action,
            "subject": _describe(subject),
        }
        super().__init__(message, details)


class RecordNotFound(WarrantError):
    """
    Raised by persistence adapters when a record cannot be loaded.

    The resource resolvers never catch this exception; it reaches the
    caller unchanged so it can be reported as "not found" rather than
    "forbidden".

    Attributes:
        model: The model (class or scope description) that was searched.
        record_id: The identifier that was looked up.
    """

    def __init__(self, model: Any, record_id: Any) -> None:
        self.model = model
        self.record_id = record_id

        model_name = model.__name__ if isinstance(model, type) else str(model)
        message = f"Couldn't find {model_name} with id={record_id!r}"

        details = {
            "model": model_name,
            "record_id": str(record_id),
        }
        super().__init__(message, details)


class ConfigurationError(WarrantError):
    """
    Raised when there is a configuration error in Warrant setup.

    This covers identifiers that cannot be classified into a model,
    invalid configuration values and association accessors that do not
    exist. These errors are surfaced immediately and never retried.

    Attributes:
        config_key: The configuration key that has an issue.
        expected: What was expected for this configuration.
        received: What was actually provided.

    Example:
        >>> raise ConfigurationError(
        ...     config_key="model_name",
        ...     expected="a registered model",
        ...     received="lottery/tickets"
        ... )
    """

    def __init__(
        self,
        config_key: str,
        expected: str | None = None,
        received: Any = None,
    ) -> None:
        self.config_key = config_key
        self.expected = expected
        self.received = received

        message = f"Configuration error for '{config_key}'"
        if expected:
            message += f": expected {expected}"
        if received is not None:
            message += f", got {received!r}"

        details = {
            "config_key": config_key,
            "expected": expected,
            "received": str(received) if received is not None else None,
        }
        super().__init__(message, details)


class AdapterNotAvailableError(ConfigurationError):
    """Raised when an optional persistence adapter's library is not installed."""

    def __init__(self, adapter_name: str, install_hint: str | None = None) -> None:
        self.adapter_name = adapter_name
        super().__init__(
            config_key="adapter",
            expected=install_hint or "an installed adapter backend",
            received=adapter_name,
        )
