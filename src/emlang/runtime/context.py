"""
Frames and the heap.

A Frame holds the local bindings of one invocation (or of the top-level
program) and is discarded when the invocation returns. Frames never
point at their caller or at any enclosing frame: during evaluation only
the current frame and the heap are visible.

The Heap is the process-lifetime registry of named functions and class
templates. Evaluation is single-threaded, so the heap is only ever
written by the one active evaluation.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .values import Value, null_val


@dataclass
class Frame:
    """Local variable bindings for one invocation."""
    variables: Dict[str, Value] = field(default_factory=dict)
    name: str = "anonymous"  # For debugging

    def get(self, name: str) -> Value:
        """
        Read a variable.

        Returns an independent copy of the bound value, or Null when the
        name is unbound (absent variables read as Null, never an error).
        """
        value = self.variables.get(name)
        if value is None:
            return null_val()
        return value.clone()

    def set(self, name: str, value: Value) -> None:
        """Bind a name in this frame, replacing any previous binding."""
        self.variables[name] = value

    def slot(self, name: str) -> Optional[Value]:
        """The stored value itself, for in-place updates (None if unbound)."""
        return self.variables.get(name)

    def contains(self, name: str) -> bool:
        return name in self.variables

    def names(self) -> List[str]:
        return list(self.variables)


class Heap:
    """Shared registry of function and class definitions."""

    def __init__(self):
        self._entries: Dict[str, Value] = {}

    def define(self, name: str, value: Value) -> None:
        """Create or overwrite a heap entry."""
        self._entries[name] = value

    def lookup(self, name: str) -> Optional[Value]:
        return self._entries.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()


def create_frame(name: str = "global", bindings: Dict[str, Value] = None) -> Frame:
    """
    Create a new frame, optionally pre-populated.

    Args:
        name: Label used in debug output
        bindings: Initial variable bindings

    Returns:
        A fresh Frame holding the given bindings
    """
    frame = Frame(name=name)
    for var, value in (bindings or {}).items():
        frame.set(var, value)
    return frame
