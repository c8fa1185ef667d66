"""Core value types: marker tokens, the absent value and key ordering."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Collection, Hashable, Iterable, Optional


class Marker:
    """Opaque key token compared by identity.

    Markers annotate schemas (see ``END``, ``OTHER`` and ``ERROR``) and may be
    used as mapping keys or matcher names, distinct from any string.
    """

    __slots__ = ("description",)

    def __init__(self, description: Optional[str] = None) -> None:
        self.description = description

    def __repr__(self) -> str:
        if self.description is None:
            return "Marker()"
        return f"Marker({self.description})"


class _Undefined:
    """Singleton standing for an absent member."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()

END = Marker("nonvalid.end")
OTHER = Marker("nonvalid.other")
ERROR = Marker("nonvalid.error")
RESERVED_MARKERS = (END, OTHER, ERROR)


def is_reserved(item: Any) -> bool:
    return any(item is marker for marker in RESERVED_MARKERS)


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def has_key(container: Collection[Hashable], key: Hashable) -> bool:
    """Key membership that keeps ``True``/``False`` apart from ``1``/``0``.

    Python hashes ``True`` and ``1`` to the same slot, so plain ``in`` would
    let a bool key stand for an integer key and vice versa.
    """
    if key not in container:
        return False
    if not isinstance(key, (int, float)):
        return True
    is_bool = isinstance(key, bool)
    return any(
        isinstance(stored, bool) is is_bool
        for stored in container
        if isinstance(stored, (int, float)) and stored == key
    )


def index_value(key: Any) -> Optional[int]:
    """Return the array index a key denotes, or None.

    Non-negative integers qualify, as do canonical decimal strings: ``"0"`` and
    ``"25"`` but not ``"+0"``, ``"007"`` or ``"12."``.
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, str) and key.isascii() and key.isdigit():
        if key == "0" or not key.startswith("0"):
            return int(key)
    return None


def ordered_keys(keys: Iterable[Hashable]) -> list[Hashable]:
    """Order keys the way containers are traversed.

    Index-like keys come first in ascending numeric order, then the remaining
    keys in insertion order, then marker keys in insertion order.
    """
    indexed: list[Hashable] = []
    named: list[Hashable] = []
    marked: list[Hashable] = []
    for key in keys:
        if isinstance(key, Marker):
            marked.append(key)
        elif index_value(key) is not None:
            indexed.append(key)
        else:
            named.append(key)
    indexed.sort(key=index_value)
    return indexed + named + marked
