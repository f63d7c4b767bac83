"""
Module: core.slicing

Purpose:
    Translate a slice plus the current sequence length into the concrete
    (start, step, slicelength) triple used to walk page positions.

Key Classes:
    - ResolvedSlice: Immutable resolved slice

Key Functions:
    - resolve_slice(): Clamp a slice against a length
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, slots=True)
class ResolvedSlice:
    """
    A slice clamped against a concrete sequence length.

    Attributes:
        start: First visited index
        step: Distance between visited indices (never zero, may be negative)
        slicelength: Number of indices visited

    Example:
        >>> resolve_slice(slice(None, None, -1), 3)
        ResolvedSlice(start=2, step=-1, slicelength=3)
        >>> list(resolve_slice(slice(0, 3, 2), 3).indices())
        [0, 2]
    """

    start: int
    step: int
    slicelength: int

    @property
    def is_extended(self) -> bool:
        """True if step != 1 (assignment requires an exact length match)."""
        return self.step != 1

    def indices(self) -> Iterator[int]:
        """Yield each visited index in visiting order."""
        for i in range(self.slicelength):
            yield self.start + i * self.step


def resolve_slice(s: slice, length: int) -> ResolvedSlice:
    """
    Resolve slice s against a sequence of the given length.

    Negative components are offset from the end and out-of-range
    bounds clamp to the valid range, as for builtin sequences.

    Args:
        s: Slice to resolve.
        length: Current sequence length.

    Returns:
        ResolvedSlice describing the visited positions.

    Raises:
        ValueError: If the slice step is zero.
    """
    start, stop, step = s.indices(length)
    return ResolvedSlice(start=start, step=step, slicelength=len(range(start, stop, step)))
