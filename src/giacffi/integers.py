"""
Integer arithmetic routines of the engine.

Methods are mixed into :class:`~giacffi.gen.Gen`; the symmetric routines
that do not belong to a single receiver are module-level functions.
Each wraps one giac command, see the giac manual section on integers
(https://www-fourier.ujf-grenoble.fr/~parisse/giac/doc/en/cascmd_en/node37.html).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from .context import Context, resolve_context
from .errors import EnginePanic, NoSolution
from .types import PseudoPrime

if TYPE_CHECKING:
    from .gen import Gen, Operand


class IntegerMethods:
    __slots__ = ()

    def gcd(self, b: "Operand", ctx: Optional[Context] = None) -> "Gen":
        """Greatest common divisor; ``Gen(18).gcd(15)`` is ``3``."""
        return self._call("gcd", b, ctx=resolve_context(ctx))

    def lcm(self, b: "Operand") -> "Gen":
        """Least common multiple; ``Gen(18).lcm(15)`` is ``90``."""
        return self._call("lcm", b)

    def ifactor(self, ctx: Optional[Context] = None) -> "Gen":
        """Factorization as a product: ``90`` gives ``2*3^2*5``."""
        return self._call("ifactor", ctx=resolve_context(ctx))

    def ifactors(self, ctx: Optional[Context] = None) -> "Gen":
        """Flat prime/exponent list: ``90`` gives ``[2,1,3,2,5,1]``."""
        return self._call("ifactors", ctx=resolve_context(ctx))

    def maple_ifactors(self, ctx: Optional[Context] = None) -> "Gen":
        """Maple-style factor list: ``90`` gives ``[1,[[2,1],[3,2],[5,1]]]``."""
        return self._call("maple_ifactors", ctx=resolve_context(ctx))

    def divisors(self, ctx: Optional[Context] = None) -> "Gen":
        return self._call("divisors", ctx=resolve_context(ctx))

    def iquo(self, b: "Operand") -> "Gen":
        """Integer quotient of the euclidean division by ``b``."""
        return self._call("iquo", b)

    def irem(self, b: "Operand") -> "Gen":
        """
        Remainder of the euclidean division by ``b``.

        The sign follows the engine's convention, not Python's ``%``.
        """
        return self._call("irem", b)

    def iquorem(self, b: "Operand") -> Tuple["Gen", "Gen"]:
        """Quotient and remainder as ``(q, r)``."""
        return self._call("iquorem", b, outputs=2)

    def is_even(self, ctx: Optional[Context] = None) -> bool:
        return self._flag("even", ctx)

    def is_odd(self, ctx: Optional[Context] = None) -> bool:
        return self._flag("odd", ctx)

    def is_pseudoprime(self) -> PseudoPrime:
        """
        Probabilistic primality test.

        Small numbers are certified (``PRIME``); large ones that pass the
        test are reported as ``PSEUDO_PRIME``.
        """
        code = self._small("is_pseudoprime")
        try:
            return PseudoPrime(code)
        except ValueError:
            raise EnginePanic(f"giac returned pseudoprime code {code}, expected 0, 1 or 2") from None

    def next_prime(self) -> "Gen":
        """Smallest prime strictly greater than this value."""
        return self._call("nextprime")

    def previous_prime(self) -> "Gen":
        """Largest prime strictly less than this value."""
        return self._call("prevprime")

    def nth_prime(self, ctx: Optional[Context] = None) -> "Gen":
        """The n-th prime; ``Gen(5).nth_prime()`` is ``11``."""
        return self._call("nthprime", ctx=resolve_context(ctx))

    def iegcd(self, b: "Operand") -> Tuple["Gen", "Gen", "Gen"]:
        """
        Extended euclid: ``(u, v, d)`` with ``u*self + v*b == d == gcd(self, b)``.
        """
        return self._call("iegcd", b, outputs=3)

    def pa2b2(self, ctx: Optional[Context] = None) -> Tuple["Gen", "Gen"]:
        """
        Write a prime ``p = 1 [4]`` as ``a^2 + b^2`` and return ``(a, b)``.

        Raises :class:`NoSolution` without calling the engine when ``p`` is
        not congruent to 1 modulo 4.
        """
        ctx = resolve_context(ctx)
        if not self.irem(4).try_sub(1).is_zero(ctx):
            raise NoSolution("p must be congruent to 1 modulo 4")
        return self._call("pa2b2", ctx=ctx, outputs=2)

    def euler(self, ctx: Optional[Context] = None) -> "Gen":
        """Euler's totient; ``Gen(21).euler()`` is ``12``."""
        return self._call("euler", ctx=resolve_context(ctx))


def iabcuv(a: "Operand", b: "Operand", c: "Operand",
           ctx: Optional[Context] = None) -> Tuple["Gen", "Gen"]:
    """
    Solve ``a*u + b*v = c`` and return ``(u, v)``.

    ``c`` must be a multiple of ``gcd(a, b)``, otherwise :class:`NoSolution`
    is raised before the engine is asked.
    """
    from .gen import Gen

    ctx = resolve_context(ctx)
    a, b, c = Gen.coerce(a), Gen.coerce(b), Gen.coerce(c)
    d = a.gcd(b, ctx)
    if not c.irem(d).is_zero(ctx):
        raise NoSolution("c must be a multiple of gcd(a, b)")
    return a._call("iabcuv", b, c, ctx=ctx, outputs=2)


def ichinrem(a: "Operand", amod: "Operand", b: "Operand",
             bmod: "Operand") -> Tuple["Gen", "Gen"]:
    """
    Chinese remainders.

    Returns ``(c, lcm(amod, bmod))`` such that every ``c + k*lcm(amod, bmod)``
    is congruent to ``a`` modulo ``amod`` and to ``b`` modulo ``bmod``.
    ``ichinrem(3, 5, 9, 13)`` gives ``(-17, 65)``.
    """
    from .gen import Gen

    a = Gen.coerce(a)
    amod = Gen.coerce(amod)
    c = a._call("ichinrem", amod, b, bmod)
    return c, amod.lcm(bmod)


def legendre_symbol(a: "Operand", n: "Operand") -> int:
    """Legendre symbol ``(a/n)``: ``1``, ``-1`` or ``0``."""
    from .gen import Gen

    return Gen.coerce(a)._small("legendre", n)


def jacobi_symbol(a: "Operand", n: "Operand") -> int:
    """Jacobi symbol ``(a/n)`` for odd ``n``."""
    from .gen import Gen

    return Gen.coerce(a)._small("jacobi", n)


__all__ = ["IntegerMethods", "iabcuv", "ichinrem", "legendre_symbol", "jacobi_symbol"]
