"""
Exceptions raised by the giac bridge.

Recoverable failures derive from :class:`GiacError`:

- :class:`InternalError`: the engine threw or reported a failure; carries the
  engine's message as a :class:`~giacffi.support.GiacString`.
- :class:`NoSolution`: a precondition checked by the bridge before calling
  the engine did not hold; carries a fixed English message.
- :class:`NarrowingError`: a Python integer does not fit the engine's native
  integer width.
- :class:`InvalidSourceError`: source text cannot be handed to the engine.

:class:`EnginePanic` is not part of that family. It signals a state
the bridge cannot continue from, such as a failed in-place arithmetic step
whose left operand is left unspecified by the engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .support import GiacString


class GiacError(Exception):
    """Base exception for every recoverable bridge error."""

    kind = "giac"

    def _payload(self) -> bytes:
        return str(self).encode("utf-8")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GiacError):
            return NotImplemented
        return self.kind == other.kind and self._payload() == other._payload()

    def __hash__(self) -> int:
        return hash((self.kind, self._payload()))


class InternalError(GiacError):
    """An error which occurred inside the giac library."""

    kind = "internal"

    def __init__(self, message: "GiacString"):
        self.message = message
        super().__init__(str(message))

    def _payload(self) -> bytes:
        return bytes(self.message)

    def __repr__(self) -> str:
        return f"InternalError({self.message!r})"


class NoSolution(GiacError):
    """The problem has no solution; detected by the bridge before the engine ran."""

    kind = "no_solution"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"NoSolution({self.message!r})"


class NarrowingError(GiacError, OverflowError):
    """A Python integer is out of range for the engine's native integer type."""

    kind = "narrowing"

    def __init__(self, value: int, ctype: str):
        self.value = value
        self.ctype = ctype
        super().__init__(f"{value} does not fit in a C {ctype}")


class InvalidSourceError(GiacError, ValueError):
    """Source text contains an interior NUL byte or cannot be encoded as UTF-8."""

    kind = "invalid_source"

    def __init__(self, position: int, reason: str = "a NUL byte"):
        self.position = position
        self.reason = reason
        super().__init__(f"source contains {reason} at position {position}")


class EnginePanic(RuntimeError):
    """
    The bridge reached a state it cannot safely continue from.

    Raised when an in-place arithmetic step fails (the left operand is
    released and may not be used again) and when the engine hands back a
    value that violates a bridge invariant.
    """


__all__ = [
    "GiacError",
    "InternalError",
    "NoSolution",
    "NarrowingError",
    "InvalidSourceError",
    "EnginePanic",
]
