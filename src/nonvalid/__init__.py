"""Schema-driven tree validation with in-callback navigation.

Public API:
- instance: create a validation session
- Validator: the session type
- Marker, END, OTHER, ERROR: marker tokens and reserved schema markers
- UNDEFINED: value standing for an absent member
- SessionConfig: session tunables
"""

from __future__ import annotations

from typing import Optional

from nonvalid.config import SessionConfig
from nonvalid.errors import (
    ConfigError,
    ContextError,
    LinkError,
    LinkMisuseError,
    MatcherError,
    NonvalidError,
    ProtocolError,
    SchemaError,
    SessionStateError,
    UnconsumedLinkError,
    UnconsumedLinkWarning,
)
from nonvalid.types import END, ERROR, OTHER, UNDEFINED, Marker
from nonvalid.validator import Validator


def instance(config: Optional[SessionConfig] = None) -> Validator:
    """Create a fresh validation session.

    Without an explicit config, ``NONVALID_*`` environment variables apply.
    """
    return Validator(config if config is not None else SessionConfig.from_env())


__all__ = [
    "instance",
    "Validator",
    "SessionConfig",
    "Marker",
    "END",
    "OTHER",
    "ERROR",
    "UNDEFINED",
    "NonvalidError",
    "ProtocolError",
    "SchemaError",
    "ContextError",
    "MatcherError",
    "SessionStateError",
    "LinkError",
    "LinkMisuseError",
    "UnconsumedLinkError",
    "UnconsumedLinkWarning",
    "ConfigError",
]
