"""Built-in matchers and the matcher calling convention."""

from __future__ import annotations

import inspect
import math
from typing import TYPE_CHECKING, Any, Callable, Hashable

from nonvalid.errors import MatcherError
from nonvalid.types import UNDEFINED, Marker, is_mapping, is_sequence

if TYPE_CHECKING:
    from nonvalid.validator import Validator

Predicate = Callable[[Any], Any]


def number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


def string(value: Any) -> bool:
    return isinstance(value, str)


def boolean(value: Any) -> bool:
    return isinstance(value, bool)


def null(value: Any) -> bool:
    return value is None


def undefined(value: Any) -> bool:
    return value is UNDEFINED


def defined(value: Any) -> bool:
    return value is not UNDEFINED


def integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def marker(value: Any) -> bool:
    return isinstance(value, Marker)


def function(value: Any) -> bool:
    return callable(value)


def sequence(value: Any) -> bool:
    return is_sequence(value)


def mapping(value: Any) -> bool:
    return is_mapping(value)


def get(value: Any) -> Any:
    return value


BUILTIN_MATCHERS: dict[str, Predicate] = {
    predicate.__name__: predicate
    for predicate in (
        number,
        string,
        boolean,
        null,
        undefined,
        defined,
        integer,
        marker,
        function,
        sequence,
        mapping,
        get,
    )
}


class Matcher:
    """Predicate bound to a validator session.

    Called with no argument it applies to the current value; with a plain
    argument it applies to that argument; with a navigation function it
    evaluates the function in deferred mode and applies to the resolved result.
    """

    def __init__(self, name: Hashable, predicate: Predicate, validator: "Validator") -> None:
        self.name = name
        self.predicate = predicate
        self._validator = validator

    def __call__(self, *args: Any) -> Any:
        if len(args) > 1:
            raise MatcherError("Matchers are supposed to be run with exactly one or no arguments.")
        state = self._validator._state
        if not args:
            if not state.values:
                raise MatcherError(
                    f"{display_name(self.name)}() called without arguments outside of any context."
                )
            return self.predicate(state.values[-1])
        value = args[0]
        if state.values and callable(value) and value is not state.values[-1]:
            return self.predicate(self._validator._navigate_deferred(value))
        return self.predicate(value)

    def __repr__(self) -> str:
        return f"Matcher({display_name(self.name)})"


def display_name(name: Hashable) -> str:
    return repr(name) if isinstance(name, Marker) else str(name)


def accepts_one_argument(predicate: Callable[..., Any]) -> bool:
    """True when the predicate takes exactly one required positional parameter."""

    try:
        signature = inspect.signature(predicate)
    except (TypeError, ValueError):
        return False
    required = 0
    for param in signature.parameters.values():
        if param.default is not inspect.Parameter.empty:
            continue
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            required += 1
        elif param.kind is inspect.Parameter.KEYWORD_ONLY:
            return False
    return required == 1


def callback_arity(func: Callable[..., Any]) -> int:
    """Number of positional arguments a schema callback receives (0, 1 or 2)."""

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 1
    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 2
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return min(count, 2)
