"""Custom exception hierarchy for recordgrid."""

from __future__ import annotations


class RecordGridError(Exception):
    """Base class for all custom errors raised by recordgrid."""


# --- 3-layer hierarchy ---

class DomainError(RecordGridError):
    """Base class for domain-level errors."""


class InfrastructureError(RecordGridError):
    """Base class for infrastructure-level errors."""


class ApplicationError(RecordGridError):
    """Base class for application-level errors."""


# --- Domain errors ---

class PolicyViolationError(DomainError):
    """Raised when an operation is refused by a grid policy or feature flag."""


class RecordNotFoundError(DomainError):
    """Raised when an identifier is not present in the current record set."""


class SessionStateError(DomainError):
    """Raised when an edit operation needs an open session and none is active."""


# --- Application errors ---

class MutationFailedError(ApplicationError):
    """Carries the persistence collaborator's failure message unchanged."""


# --- Infrastructure errors ---

class RecordSetLoadError(InfrastructureError):
    """Raised when a record-set file cannot be read or fails validation."""


class SettingsError(RecordGridError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
