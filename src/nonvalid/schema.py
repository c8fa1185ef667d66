"""Schema node classification.

A schema is written with plain Python values: callables, mappings, lists or
tuples, and literals. ``classify`` turns one schema level into a tagged node
and rejects malformed shapes before any member is inspected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, Union

from nonvalid.errors import SchemaError
from nonvalid.types import END, ERROR, OTHER, is_mapping, is_reserved, is_sequence, ordered_keys


@dataclass(frozen=True)
class Callback:
    """Schema node invoking a user callback."""

    func: Callable[..., Any]


@dataclass(frozen=True)
class MapShape:
    """Schema node expecting a mapping.

    Attributes:
        members: Declared ``(key, subschema)`` pairs in traversal order.
        declared: Every key of the schema, reserved markers included.
        catch_other: Callback for members the schema does not declare.
        shape_error: Error returned when the value is not a mapping.
    """

    members: tuple[tuple[Hashable, Any], ...]
    declared: frozenset[Hashable]
    catch_other: Optional[Callable[..., Any]] = None
    shape_error: Any = None


@dataclass(frozen=True)
class SequenceShape:
    """Schema node expecting a list or tuple.

    Attributes:
        regular: Element schemas compared position by position.
        catch_other: Callback for positions past the regular prefix.
        shape_error: Error returned when the value is not a sequence.
    """

    regular: tuple[Any, ...]
    catch_other: Optional[Callable[..., Any]] = None
    shape_error: Any = None


@dataclass(frozen=True)
class Literal:
    """Schema node compared strictly against the value."""

    value: Any


SchemaNode = Union[Callback, MapShape, SequenceShape, Literal]


def classify(schema: Any) -> SchemaNode:
    """Classify one schema level, validating its markers."""

    if callable(schema):
        return Callback(schema)
    if is_mapping(schema):
        return _classify_mapping(schema)
    if is_sequence(schema):
        return _classify_sequence(schema)
    return Literal(schema)


def _classify_mapping(schema: Any) -> MapShape:
    catch_other = None
    if OTHER in schema:
        catch_other = schema[OTHER]
        if not callable(catch_other):
            raise SchemaError("The catch-other callback must be a function.")
    shape_error = None
    if ERROR in schema:
        shape_error = schema[ERROR]
        if callable(shape_error) or not shape_error:
            raise SchemaError("The shape error must be a non-function truthy value.")
    for key in schema:
        if key is END:
            raise SchemaError(f"{key!r} is not expected in a mapping schema.")
    members = tuple(
        (key, schema[key]) for key in ordered_keys(schema) if not is_reserved(key)
    )
    return MapShape(
        members=members,
        declared=frozenset(schema),
        catch_other=catch_other,
        shape_error=shape_error,
    )


def _classify_sequence(schema: Any) -> SequenceShape:
    for item in schema:
        if is_reserved(item) and item is not END:
            raise SchemaError(f"{item!r} is not expected in a sequence schema.")
    end_index = len(schema)
    for index, item in enumerate(schema):
        if item is END:
            end_index = index
            break
    tail = schema[end_index + 1:]
    if len(tail) > 2:
        raise SchemaError("Found more than 2 elements after the end-of-sequence marker.")
    catch_other = None
    shape_error = None
    for item in tail:
        if item is END:
            raise SchemaError("Encountered multiple end-of-sequence markers.")
        if callable(item):
            if catch_other is not None:
                raise SchemaError("Encountered multiple catch-other callbacks.")
            catch_other = item
        elif item:
            if shape_error is not None:
                raise SchemaError("Encountered multiple shape error values.")
            shape_error = item
        else:
            raise SchemaError("Shape error must be a truthy value.")
    return SequenceShape(
        regular=tuple(schema[:end_index]),
        catch_other=catch_other,
        shape_error=shape_error,
    )


def literal_mismatch(value: Any, expected: Any) -> bool:
    """Strict comparison of a value against a literal schema."""

    # Numbers first: the same NaN object must still mismatch.
    if _is_number(value) and _is_number(expected):
        return bool(value != expected)
    if value is expected:
        return False
    if type(value) is type(expected) and isinstance(value, (str, bytes)):
        return value != expected
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
