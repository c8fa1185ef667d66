"""Custom exceptions for the validation engine."""

from __future__ import annotations


class NonvalidError(Exception):
    """Base exception for validation engine failures."""


class ProtocolError(NonvalidError):
    """Raised when the validator is used outside its calling conventions."""


class SchemaError(ProtocolError):
    """Raised when a schema definition is malformed."""


class ContextError(ProtocolError):
    """Raised when navigation is requested outside a matching context."""


class MatcherError(ProtocolError):
    """Raised when matcher registration or invocation fails."""


class SessionStateError(ProtocolError):
    """Raised when a session is used in the wrong lifecycle state."""


class LinkError(ProtocolError):
    """Raised when deferred navigation is not completed properly."""


class UnconsumedLinkError(LinkError):
    """Raised when a deferred link is abandoned without being consumed."""


class LinkMisuseError(LinkError):
    """Raised when a deferred link is used as if it were a real value."""


class ConfigError(NonvalidError):
    """Raised when session configuration is invalid."""


class UnconsumedLinkWarning(UserWarning):
    """Emitted instead of UnconsumedLinkError when leaks are only reported."""
