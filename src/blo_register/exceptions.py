"""
Custom exceptions for the BLO Register application.

All application-specific exceptions inherit from BloRegisterError.
None of them is fatal to the process: every failure path leaves the
workspace in a usable state.
"""

from __future__ import annotations

from typing import Optional, Any


class BloRegisterError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (for debugging)
        recoverable: Whether the error can potentially be recovered from
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(BloRegisterError):
    """
    Invalid or missing configuration.

    Examples:
        - Missing AI_API_KEY when the assistant is used
        - Unknown report page size
    """

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details=details, recoverable=False)


class ValidationError(BloRegisterError):
    """
    Data validation failed for a single form-like submission.

    Examples:
        - Duplicate house number
        - Head of family younger than 18
        - Aadhaar not 12 digits, phone not 10 digits
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        expected: Optional[str] = None
    ):
        details = {}
        if field_name:
            details["field_name"] = field_name
        if field_value is not None:
            details["field_value"] = str(field_value)[:100]
        if expected:
            details["expected"] = expected
        super().__init__(message, details=details, recoverable=True)
        self.field_name = field_name


class RecordNotFoundError(BloRegisterError):
    """An update referenced a household, member or voter id that does not exist."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(
            f"{kind} not found: {record_id}",
            details={"kind": kind, "id": record_id},
            recoverable=True,
        )
        self.kind = kind
        self.record_id = record_id


class ImportParseError(BloRegisterError):
    """
    A census or voter spreadsheet could not be read at all.

    Sparse or malformed rows never raise this; only a structurally
    unreadable file does.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        reason: Optional[str] = None
    ):
        details = {}
        if file_path:
            details["file_path"] = file_path
        if reason:
            details["reason"] = reason[:300]
        super().__init__(message, details=details, recoverable=True)


class BackupFormatError(BloRegisterError):
    """
    A JSON backup is not valid JSON, or holds none of the known sections.
    """

    def __init__(self, message: str, file_path: Optional[str] = None):
        details = {"file_path": file_path} if file_path else None
        super().__init__(message, details=details, recoverable=True)


class StorageError(BloRegisterError):
    """
    Failed to save or load local data.

    Raised internally by the JSON store and logged; the in-memory state
    remains authoritative for the session.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        operation: Optional[str] = None  # "save" or "load"
    ):
        details = {}
        if file_path:
            details["file_path"] = file_path
        if operation:
            details["operation"] = operation
        super().__init__(message, details=details, recoverable=True)


class AssistantError(BloRegisterError):
    """
    The chat endpoint failed or returned nothing usable.
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        model: Optional[str] = None
    ):
        details = {}
        if provider:
            details["provider"] = provider
        if model:
            details["model"] = model
        super().__init__(message, details=details, recoverable=True)
