"""
Error hierarchy for content gating.

Provides:
- ContentGateError: base for all gating failures
- InvalidResourceId: classifier input malformed (always becomes a denial)
- RoleResolutionFailure: role lookup failed (fail-closed denial)
- AuditWriteFailure: audit sink failed (absorbed, logged only)
- InvalidTransitionError: illegal preview timer command
- PreviewConfigError: invalid preview ceiling
- InvalidWatchTime: negative or non-numeric reported watch time
- DecisionInvariantError: an AccessDecision was built in an illegal shape
"""

from __future__ import annotations


class ContentGateError(Exception):
    """Base exception for content gating failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidResourceId(ContentGateError):
    """Raised when a resource id cannot be classified."""

    def __init__(self, resource_id: object):
        self.resource_id = resource_id
        self.error_code = "INVALID_RESOURCE_ID"
        super().__init__(f"Invalid resource id: {resource_id!r}")


class RoleResolutionFailure(ContentGateError):
    """
    Raised when the role lookup for a user fails.

    Callers turn this into a fail-closed denial whose reason differs from a
    policy denial, so the UI can offer "try again" instead of "upgrade".
    """

    def __init__(self, user_id: str, cause: Exception | None = None):
        self.user_id = user_id
        self.cause = cause
        self.error_code = "ROLE_RESOLUTION_FAILED"
        super().__init__(f"Failed to resolve roles for {user_id}")


class AuditWriteFailure(ContentGateError):
    """Raised by audit sinks that cannot persist a record."""


class InvalidTransitionError(ContentGateError):
    """Raised when a preview timer command is illegal in the current state."""

    def __init__(self, command: str, state: str):
        self.command = command
        self.state = state
        super().__init__(f"Cannot {command} while {state}")


class PreviewConfigError(ContentGateError, ValueError):
    """Raised when a preview ceiling is not a positive integer."""


class InvalidWatchTime(ContentGateError, ValueError):
    """Raised when a reported watch time is negative or not a number."""


class DecisionInvariantError(ContentGateError):
    """Raised when an AccessDecision violates its own invariants."""
