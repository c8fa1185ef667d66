"""Deferred navigation links.

While a matcher evaluates a navigation function, ``root()``, ``up()`` and
``value()`` hand out links instead of real values. A link is either
``Present`` (wrapping a real value) or ``Absent``; stepping into a member that
does not exist yields ``Absent`` instead of raising, and stepping from
``Absent`` stays ``Absent``::

    nv.get(lambda: nv.root().config["retries"])

Every attribute read that is not a dunder name is a step, including names that
start with an underscore, so a link never exposes its own state.

Every link derived from one anchor call belongs to the same chain. A chain is
consumed once any of its links is resolved by a matcher or used as a key into
another link; the validator checks that every chain opened inside a deferred
scope was consumed by the time that scope closes.
"""

from __future__ import annotations

from typing import Any, Hashable, NoReturn

from nonvalid.errors import LinkMisuseError
from nonvalid.types import UNDEFINED, Marker, has_key, index_value, is_mapping, is_sequence


class Chain:
    """Consumption obligation shared by the links of one anchor call."""

    __slots__ = ("origin", "consumed")

    def __init__(self, origin: str) -> None:
        self.origin = origin
        self.consumed = False

    def __repr__(self) -> str:
        state = "consumed" if self.consumed else "pending"
        return f"Chain({self.origin}, {state})"


def _chain_of(link: "Link") -> Chain:
    return object.__getattribute__(link, "_chain")


class Link:
    """Base class of deferred navigation results.

    Internal state is read through ``object.__getattribute__`` and behaviour is
    looked up on the type, since instance attribute reads are member steps.
    """

    __slots__ = ("_chain",)

    def __init__(self, chain: Chain) -> None:
        self._chain = chain

    def __getattribute__(self, name: str) -> Any:
        if name.startswith("__") and name.endswith("__"):
            return object.__getattribute__(self, name)
        return type(self)._step(self, name)

    def __getitem__(self, key: Any) -> "Link":
        if isinstance(key, Link):
            key = consume(key)
        return type(self)._step(self, key)

    def _step(self, key: Any) -> "Link":
        raise NotImplementedError

    def _resolve(self) -> Any:
        raise NotImplementedError

    def _misuse(self) -> NoReturn:
        raise LinkMisuseError(
            f"Link from {_chain_of(self).origin} was used improperly; "
            "pass it to a matcher or use it as a key."
        )

    def __bool__(self) -> bool:
        type(self)._misuse(self)

    def __len__(self) -> int:
        type(self)._misuse(self)

    def __iter__(self) -> NoReturn:
        type(self)._misuse(self)

    def __contains__(self, item: Any) -> bool:
        type(self)._misuse(self)


class Present(Link):
    """Link to a value that exists."""

    __slots__ = ("_value",)

    def __init__(self, value: Any, chain: Chain) -> None:
        super().__init__(chain)
        self._value = value

    def _step(self, key: Any) -> Link:
        found, member = lookup(type(self)._resolve(self), key)
        if found:
            return Present(member, _chain_of(self))
        return Absent(_chain_of(self))

    def _resolve(self) -> Any:
        return object.__getattribute__(self, "_value")

    def __repr__(self) -> str:
        return f"<Present link from {_chain_of(self).origin}>"


class Absent(Link):
    """Link to a member that does not exist."""

    __slots__ = ()

    def _step(self, key: Any) -> Link:
        return Absent(_chain_of(self))

    def _resolve(self) -> Any:
        return UNDEFINED

    def __repr__(self) -> str:
        return f"<Absent link from {_chain_of(self).origin}>"


def open_chain(value: Any, origin: str) -> tuple[Chain, Present]:
    chain = Chain(origin)
    return chain, Present(value, chain)


def consume(link: Link) -> Any:
    """Resolve a link to its real value and discharge its chain."""
    _chain_of(link).consumed = True
    return type(link)._resolve(link)


def lookup(container: Any, key: Any) -> tuple[bool, Any]:
    """Return ``(found, member)`` without raising for unsupported keys."""

    if is_mapping(container):
        if _is_member_key(key) and has_key(container, key):
            return True, container[key]
        return False, UNDEFINED
    if is_sequence(container):
        index = index_value(key)
        if index is not None and index < len(container):
            return True, container[index]
    return False, UNDEFINED


def _is_member_key(key: Hashable) -> bool:
    if isinstance(key, bool):
        return False
    return isinstance(key, (str, int, Marker))
