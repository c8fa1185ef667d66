"""Schema-driven validation sessions.

A ``Validator`` is one validation session. Calling it walks a value and a
schema in lock-step and returns ``False`` or the first truthy error::

    nv = nonvalid.instance()
    error = nv(payload, {
        "name": lambda: not nv.string(),
        "tags": [nv.end, lambda: not nv.string()],
    })
    if error:
        print(nv.error_path("payload"))

Callbacks may call the session again to validate the current value (or any
other value) against a sub-schema; nested calls share the session state.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Callable, Hashable, NoReturn, Optional, Union

from nonvalid.config import SessionConfig
from nonvalid.errors import (
    ContextError,
    LinkError,
    MatcherError,
    ProtocolError,
    SchemaError,
    SessionStateError,
    UnconsumedLinkError,
    UnconsumedLinkWarning,
)
from nonvalid.links import Link, consume, open_chain
from nonvalid.matchers import (
    BUILTIN_MATCHERS,
    Matcher,
    accepts_one_argument,
    callback_arity,
    display_name,
)
from nonvalid.paths import format_path
from nonvalid.schema import Callback, MapShape, SequenceShape, classify, literal_mismatch
from nonvalid.state import PathEntry, SessionState
from nonvalid.types import (
    END,
    ERROR,
    OTHER,
    UNDEFINED,
    Marker,
    has_key,
    is_mapping,
    is_sequence,
    ordered_keys,
)

logger = logging.getLogger(__name__)


class Validator:
    """Single-use validation session with navigation helpers for callbacks."""

    end = END
    other = OTHER
    error = ERROR

    def __init__(self, config: Optional[SessionConfig] = None) -> None:
        self._config = config or SessionConfig()
        self._state = SessionState()
        self._matchers: dict[Hashable, Matcher] = {
            name: Matcher(name, predicate, self) for name, predicate in BUILTIN_MATCHERS.items()
        }

    @property
    def config(self) -> SessionConfig:
        return self._config

    # Matchers -------------------------------------------------------------

    def __getattr__(self, name: str) -> Matcher:
        matchers = self.__dict__.get("_matchers")
        if matchers is not None and name in matchers:
            return matchers[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __getitem__(self, name: Hashable) -> Matcher:
        try:
            return self._matchers[name]
        except KeyError:
            raise MatcherError(f"Unknown matcher: {display_name(name)}") from None

    def add_matcher(self, *args: Any) -> None:
        """Register a one-parameter predicate as a matcher.

        Accepts ``(name, predicate)`` with a string or marker name, or a single
        named function whose ``__name__`` becomes the matcher name.
        """
        if len(args) == 2:
            name, predicate = args
            if not isinstance(name, (str, Marker)):
                raise MatcherError("Name of a matcher should be either string or marker.")
            if not callable(predicate):
                raise MatcherError("Second add_matcher argument must be a function.")
        elif len(args) == 1:
            predicate = args[0]
            name = getattr(predicate, "__name__", None) if callable(predicate) else None
            if not isinstance(name, str) or not name.isidentifier():
                raise MatcherError("Single add_matcher argument must be a named function.")
        else:
            raise MatcherError("add_matcher expects exactly one or two arguments.")
        if not accepts_one_argument(predicate):
            raise MatcherError("Matcher must accept exactly one parameter.")
        if name in self._matchers or (isinstance(name, str) and hasattr(self, name)):
            raise MatcherError(f'Validator already has property "{display_name(name)}".')
        self._matchers[name] = Matcher(name, predicate, self)
        logger.debug("Registered matcher %s", display_name(name))

    # Validation -----------------------------------------------------------

    def __call__(self, *args: Any) -> Any:
        state = self._state
        if state.depth == 0:
            if state.finished:
                self._abort(SessionStateError(
                    "To validate another value, create a new session with nonvalid.instance()."
                ))
            state.start()
            logger.debug("Validation session started")
        if len(args) not in (1, 2):
            self._abort(ProtocolError("Validator expects a schema, optionally preceded by a value."))
        state.depth += 1
        if len(args) == 2:
            value, schema = args
        else:
            if not state.values:
                self._abort(ContextError("Validator called with no value outside of any context."))
            (schema,) = args
            value = state.values[-1]
        error = self._inspect(schema, value)
        state.depth -= 1
        if state.depth == 0:
            state.finish()
            logger.debug("Validation session finished with error path %s", state.error_path)
        return error

    def _inspect(self, schema: Any, value: Any) -> Any:
        error = self._dispatch(schema, value)
        self._state.latch(error)
        return error

    def _dispatch(self, schema: Any, value: Any) -> Any:
        try:
            node = classify(schema)
        except SchemaError as exc:
            self._abort(exc)
        if isinstance(node, Callback):
            return self._run(node.func, value)
        if isinstance(node, MapShape):
            return self._descend(self._inspect_mapping, node, value)
        if isinstance(node, SequenceShape):
            return self._descend(self._inspect_sequence, node, value)
        return literal_mismatch(value, node.value)

    def _run(self, callback: Callable[..., Any], value: Any) -> Any:
        state = self._state
        state.values.append(value)
        arity = callback_arity(callback)
        try:
            if arity == 0:
                error = callback()
            elif arity == 1:
                error = callback(value)
            else:
                entry = state.current_entry()
                error = callback(value, entry.key if entry else None)
        except BaseException:
            if not state.finished:
                logger.debug("Callback raised; aborting validation session")
                state.reset()
            raise
        if state.finished:
            raise SessionStateError("Cannot proceed with validation after an error.")
        state.values.pop()
        return error or False

    def _descend(self, inspector: Callable[[Any, Any], Any], node: Any, value: Any) -> Any:
        self._state.ancestors.append(value)
        error = inspector(node, value)
        self._state.ancestors.pop()
        return error

    def _inspect_member(self, schema: Any, value: Any, key: Hashable, indexed: bool) -> Any:
        state = self._state
        limit = self._config.max_depth
        if limit is not None and len(state.path) >= limit:
            self._abort(ProtocolError(f"Validation descended below the maximum depth of {limit}."))
        state.path.append(PathEntry(key, indexed))
        error = self._inspect(schema, value)
        state.path.pop()
        return error

    def _inspect_mapping(self, node: MapShape, value: Any) -> Any:
        if not is_mapping(value):
            return node.shape_error or True
        for key, subschema in node.members:
            member = value[key] if has_key(value, key) else UNDEFINED
            error = self._inspect_member(subschema, member, key, False)
            if error:
                return error
        for key in ordered_keys(value):
            if has_key(node.declared, key):
                continue
            if node.catch_other is None:
                return True
            error = self._inspect_member(node.catch_other, value[key], key, False)
            if error:
                return error
        return False

    def _inspect_sequence(self, node: SequenceShape, value: Any) -> Any:
        if not is_sequence(value):
            return node.shape_error or True
        for index, subschema in enumerate(node.regular):
            member = value[index] if index < len(value) else UNDEFINED
            error = self._inspect_member(subschema, member, index, True)
            if error:
                return error
        for index in range(len(node.regular), len(value)):
            if node.catch_other is None:
                return True
            error = self._inspect_member(node.catch_other, value[index], index, True)
            if error:
                return error
        return False

    # Navigation -----------------------------------------------------------

    def value(self) -> Any:
        """Value handed to the running callback."""
        if not self._state.values:
            self._abort(ContextError("value() called outside of any context."))
        return self._anchor(self._state.values[-1], "value()")

    def root(self) -> Any:
        """Outermost container of the running validation."""
        if not self._state.ancestors:
            self._abort(ContextError("root() called outside of any mapping or sequence."))
        return self._anchor(self._state.ancestors[0], "root()")

    def up(self, levels: int = 0) -> Any:
        """Container ``levels`` steps above the immediate parent."""
        ancestors = self._state.ancestors
        if isinstance(levels, bool) or not isinstance(levels, int) or levels < 0:
            self._abort(ProtocolError("up() expects a non-negative integer."))
        if len(ancestors) <= levels:
            self._abort(ContextError("up() call navigates above any mapping or sequence."))
        return self._anchor(ancestors[-1 - levels], f"up({levels})")

    def key(self) -> Hashable:
        entry = self._state.current_entry()
        if entry is None:
            self._abort(ContextError("key() called outside of any context."))
        if entry.indexed:
            self._abort(ContextError("key() can be called for mappings only."))
        return entry.key

    def index(self) -> int:
        entry = self._state.current_entry()
        if entry is None:
            self._abort(ContextError("index() called outside of any context."))
        if not entry.indexed:
            self._abort(ContextError("index() can be called for sequences only."))
        return entry.key

    def _anchor(self, value: Any, origin: str) -> Any:
        state = self._state
        if state.deferred_depth == 0:
            return value
        chain, link = open_chain(value, origin)
        state.chains.append(chain)
        return link

    def _navigate_deferred(self, navigation: Callable[[], Any]) -> Any:
        state = self._state
        state.deferred_depth += 1
        completed = False
        try:
            result = navigation()
            completed = True
        finally:
            if state.deferred_depth > 0:
                state.deferred_depth -= 1
            if not completed and state.deferred_depth == 0:
                state.chains = []
        if not isinstance(result, Link):
            self._abort(LinkError("Callback didn't perform traversal or didn't return its result."))
        resolved = consume(result)
        if state.deferred_depth == 0:
            logger.debug("Deferred scope closed with %d chain(s)", len(state.chains))
            leaked = [chain for chain in state.chains if not chain.consumed]
            state.chains = []
            if leaked:
                self._report_leaks(leaked)
        return resolved

    def _report_leaks(self, leaked: list[Any]) -> None:
        origins = ", ".join(chain.origin for chain in leaked)
        message = f"Link created in deferred navigation was not consumed by any matcher: {origins}"
        policy = self._config.leak_policy
        if policy == "raise":
            self._abort(UnconsumedLinkError(message))
        logger.warning(message)
        if policy == "warn":
            warnings.warn(message, UnconsumedLinkWarning, stacklevel=4)

    # Paths ----------------------------------------------------------------

    def path(self, root_name: Optional[str] = None) -> Union[list[Hashable], str]:
        """Keys leading from the root to the value under inspection."""
        lifecycle = self._state.lifecycle
        if lifecycle == "finished":
            raise SessionStateError("path() called after validation.")
        if lifecycle == "idle":
            raise SessionStateError("path() called before validation.")
        return format_path(self._state.keys(), root_name)

    def error_path(self, root_name: Optional[str] = None) -> Union[list[Hashable], str, None]:
        """Keys leading to the first unresolved error, or None."""
        if not self._state.finished:
            raise SessionStateError("error_path() called before validation is completed.")
        if self._state.error_path is None:
            return None
        return format_path(self._state.error_path, root_name)

    def _abort(self, exc: ProtocolError) -> NoReturn:
        logger.warning("Aborting validation session: %s", exc)
        self._state.reset()
        raise exc
