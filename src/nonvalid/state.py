"""Mutable per-session traversal state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Literal, Optional

Lifecycle = Literal["idle", "running", "finished"]


@dataclass(frozen=True)
class PathEntry:
    """One step from a container to a member.

    Attributes:
        key: Mapping key or sequence index.
        indexed: True when the container is a sequence.
    """

    key: Hashable
    indexed: bool


@dataclass
class SessionState:
    """Stacks and counters shared by every nested call of one session."""

    values: list[Any] = field(default_factory=list)
    ancestors: list[Any] = field(default_factory=list)
    path: list[PathEntry] = field(default_factory=list)
    error_path: Optional[list[Hashable]] = None
    lifecycle: Lifecycle = "idle"
    depth: int = 0
    deferred_depth: int = 0
    chains: list[Any] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.lifecycle == "finished"

    def start(self) -> None:
        self.lifecycle = "running"

    def finish(self) -> None:
        self.chains = []
        self.lifecycle = "finished"

    def reset(self) -> None:
        """Discard everything and mark the session finished."""
        self.values = []
        self.ancestors = []
        self.path = []
        self.error_path = None
        self.depth = 0
        self.deferred_depth = 0
        self.finish()

    def keys(self) -> list[Hashable]:
        return [entry.key for entry in self.path]

    def current_entry(self) -> Optional[PathEntry]:
        return self.path[-1] if self.path else None

    def latch(self, error: Any) -> None:
        """Track the first unresolved failure."""
        if error:
            if self.error_path is None:
                self.error_path = self.keys()
        else:
            self.error_path = None
