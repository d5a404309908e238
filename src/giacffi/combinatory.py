"""Counting and random sampling."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .context import Context, resolve_context

if TYPE_CHECKING:
    from .gen import Gen, Operand


class CombinatoryMethods:
    __slots__ = ()

    def binomial(self, k: "Operand", ctx: Optional[Context] = None) -> "Gen":
        """Pascal binomial ``C(self, k)``; ``Gen(5).binomial(2)`` is ``10``."""
        return self._call("comb", k, ctx=resolve_context(ctx))

    def permutation(self, k: "Operand", ctx: Optional[Context] = None) -> "Gen":
        """Arrangements of ``k`` among ``self``; ``Gen(5).permutation(2)`` is ``20``."""
        return self._call("perm", k, ctx=resolve_context(ctx))

    def rand(self, ctx: Optional[Context] = None) -> "Gen":
        """Random integer ``p`` with ``0 <= p < self``."""
        return self._call("rand", ctx=resolve_context(ctx))


__all__ = ["CombinatoryMethods"]
