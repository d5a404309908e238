## giacffi values
## =====================================

## Copyright (c) 2025 giacffi contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
# 
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
# 
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
The :class:`Gen` value handle.

A Gen owns exactly one engine value. Every method that computes something
returns a new Gen (or a tuple of them) and raises
:class:`~giacffi.errors.GiacError` when giac rejects its arguments, since
giac may throw for almost any input that does not suit the routine.

Arithmetic is built on the engine's in-place primitives: ``a += b`` mutates
``a`` and ``a + b`` mutates a fresh clone of ``a``. Both raise
:class:`~giacffi.errors.EnginePanic` when the engine fails, and the operand
that was being mutated is released. Use :meth:`Gen.try_add` and friends to
get an ordinary :class:`~giacffi.errors.InternalError` instead.
"""

from __future__ import annotations

from typing import Optional, Union

from ._ffi import INT_MAX, INT_MIN, ULONG_MAX, ffi, get_lib, logger, own, release
from .combinatory import CombinatoryMethods
from .context import Context, resolve_context
from .errors import EnginePanic, InternalError, InvalidSourceError, NarrowingError
from .integers import IntegerMethods
from .support import GiacString, call_into, check
from .types import GenType

Operand = Union["Gen", int, float]


def _check_int(value: int) -> int:
    if not INT_MIN <= value <= INT_MAX:
        raise NarrowingError(value, "int")
    return int(value)


class Gen(IntegerMethods, CombinatoryMethods):
    """
    A giac expression.

    ``Gen()`` is an empty value (zero). ``Gen(42)`` and ``Gen(0.5)`` convert
    Python numbers, ``Gen("x^2-1", ctx)`` parses and evaluates source text,
    and ``Gen(other)`` deep-copies another Gen.
    """

    __slots__ = ("_handle", "__weakref__")

    def __init__(self, value: Union[None, "Gen", int, float, str] = None,
                 ctx: Optional[Context] = None):
        if isinstance(value, str):
            parsed = Gen.from_str(value, ctx)
            self._handle, parsed._handle = parsed._handle, None
            return

        lib = get_lib()
        if value is None:
            ptr = lib.giacffi_gen_allocate()
        elif isinstance(value, Gen):
            ptr = lib.giacffi_gen_clone(value._ptr)
        elif isinstance(value, int):
            ptr = lib.giacffi_gen_from_int(_check_int(value))
        elif isinstance(value, float):
            ptr = lib.giacffi_gen_from_double(value)
        else:
            raise TypeError(f"cannot build a giac value from {type(value).__name__}")
        self._handle = own(ptr, lib.giacffi_free_gen, "value")

    @classmethod
    def _adopt(cls, ptr, lib) -> "Gen":
        gen = cls.__new__(cls)
        gen._handle = own(ptr, lib.giacffi_free_gen, "value")
        return gen

    @property
    def _ptr(self):
        if self._handle is None:
            raise EnginePanic("giac value was released after a failed in-place operation")
        return self._handle

    def _poison(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            release(handle)

    # CONSTRUCTORS

    @classmethod
    def coerce(cls, value: Operand) -> "Gen":
        """Return ``value`` unchanged if it is a Gen, otherwise convert it."""
        if isinstance(value, Gen):
            return value
        return cls(value)

    @classmethod
    def from_int(cls, value: int) -> "Gen":
        """Build a machine integer; raises NarrowingError outside the C int range."""
        lib = get_lib()
        return cls._adopt(lib.giacffi_gen_from_int(_check_int(value)), lib)

    @classmethod
    def from_float(cls, value: float) -> "Gen":
        """Build a single precision float."""
        lib = get_lib()
        return cls._adopt(lib.giacffi_gen_from_float(float(value)), lib)

    @classmethod
    def from_double(cls, value: float) -> "Gen":
        lib = get_lib()
        return cls._adopt(lib.giacffi_gen_from_double(float(value)), lib)

    @classmethod
    def from_str(cls, source: str, ctx: Optional[Context] = None) -> "Gen":
        """
        Parse and evaluate ``source`` in ``ctx`` (the global context by default).

        Parser errors and evaluation errors are both reported as
        InternalError carrying the engine's text.
        """
        if "\0" in source:
            raise InvalidSourceError(source.index("\0"))
        try:
            encoded = source.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidSourceError(exc.start, "a character not encodable as UTF-8") from exc
        ctx = resolve_context(ctx)
        lib = get_lib()
        result = cls()
        check(lib.giacffi_gen_from_str(encoded, ctx._ptr, result._ptr), lib)
        return result

    @classmethod
    def factorial(cls, n: int) -> "Gen":
        """Exact ``n!``; ``Gen.factorial(24)`` prints ``620448401733239439360000``."""
        if not 0 <= n <= ULONG_MAX:
            raise NarrowingError(n, "unsigned long")
        lib = get_lib()
        return cls._adopt(lib.giacffi_gen_factorial(int(n)), lib)

    def clone(self) -> "Gen":
        """Deep copy; the result is independent of ``self``."""
        return Gen(self)

    def __copy__(self) -> "Gen":
        return self.clone()

    def __deepcopy__(self, memo) -> "Gen":
        return self.clone()

    # DATA

    def print(self) -> GiacString:
        """The engine's text form of the value."""
        lib = get_lib()
        return GiacString(lib.giacffi_gen_to_str(self._ptr), lib)

    def to_int(self) -> int:
        """Read the value back as a machine integer."""
        lib = get_lib()
        result = ffi.new("int *")
        check(lib.giacffi_gen_to_int(self._ptr, result), lib)
        return result[0]

    @property
    def gen_type(self) -> GenType:
        return GenType(get_lib().giacffi_gen_type(self._ptr))

    def is_zero(self, ctx: Optional[Context] = None) -> bool:
        return self._flag("is_zero", ctx)

    def __int__(self) -> int:
        return self.to_int()

    def __str__(self) -> str:
        return str(self.print())

    def __repr__(self) -> str:
        if self._handle is None:
            return "Gen(<released>)"
        return f"Gen({str(self)!r})"

    # SHIM PLUMBING

    def _call(self, name: str, *operands: Operand, ctx: Optional[Context] = None,
              outputs: int = 1):
        # ctx is passed through only for routines whose shim takes one
        inputs = [self._ptr]
        inputs.extend(Gen.coerce(op)._ptr for op in operands)
        shim = getattr(get_lib(), "giacffi_gen_" + name)
        slots = call_into(Gen, shim, inputs, outputs, ctx)
        return slots[0] if outputs == 1 else tuple(slots)

    def _flag(self, name: str, ctx: Optional[Context]) -> bool:
        ctx = resolve_context(ctx)
        lib = get_lib()
        result = ffi.new("bool *")
        check(getattr(lib, "giacffi_gen_" + name)(self._ptr, result, ctx._ptr), lib)
        return bool(result[0])

    def _small(self, name: str, *operands: Operand) -> int:
        lib = get_lib()
        inputs = [Gen.coerce(op)._ptr for op in operands]
        result = ffi.new("int8_t *")
        check(getattr(lib, "giacffi_gen_" + name)(self._ptr, *inputs, result), lib)
        return int(result[0])

    # ARITHMETIC

    def _inplace(self, op: str, other: Operand) -> "Gen":
        rhs = Gen.coerce(other)
        lib = get_lib()
        token = getattr(lib, "giacffi_gen_" + op)(self._ptr, rhs._ptr)
        if token != ffi.NULL:
            error = InternalError(GiacString(token, lib))
            logger.error("in-place %s failed, releasing left operand: %s", op, error)
            self._poison()
            raise EnginePanic(f"giac {op} failed: {error}") from error
        return self

    def _try(self, op: str, other: Operand) -> "Gen":
        rhs = Gen.coerce(other)
        lib = get_lib()
        result = self.clone()
        check(getattr(lib, "giacffi_gen_" + op)(result._ptr, rhs._ptr), lib)
        return result

    def __iadd__(self, other: Operand) -> "Gen":
        return self._inplace("add", other)

    def __isub__(self, other: Operand) -> "Gen":
        return self._inplace("sub", other)

    def __imul__(self, other: Operand) -> "Gen":
        return self._inplace("mul", other)

    def __itruediv__(self, other: Operand) -> "Gen":
        return self._inplace("div", other)

    def __add__(self, other: Operand) -> "Gen":
        if not isinstance(other, (Gen, int, float)):
            return NotImplemented
        return self.clone()._inplace("add", other)

    def __sub__(self, other: Operand) -> "Gen":
        if not isinstance(other, (Gen, int, float)):
            return NotImplemented
        return self.clone()._inplace("sub", other)

    def __mul__(self, other: Operand) -> "Gen":
        if not isinstance(other, (Gen, int, float)):
            return NotImplemented
        return self.clone()._inplace("mul", other)

    def __truediv__(self, other: Operand) -> "Gen":
        if not isinstance(other, (Gen, int, float)):
            return NotImplemented
        return self.clone()._inplace("div", other)

    def __radd__(self, other: Operand) -> "Gen":
        if not isinstance(other, (int, float)):
            return NotImplemented
        return Gen(other)._inplace("add", self)

    def __rsub__(self, other: Operand) -> "Gen":
        if not isinstance(other, (int, float)):
            return NotImplemented
        return Gen(other)._inplace("sub", self)

    def __rmul__(self, other: Operand) -> "Gen":
        if not isinstance(other, (int, float)):
            return NotImplemented
        return Gen(other)._inplace("mul", self)

    def __rtruediv__(self, other: Operand) -> "Gen":
        if not isinstance(other, (int, float)):
            return NotImplemented
        return Gen(other)._inplace("div", self)

    # The engine's remainder does not follow Python's sign rules, so there is
    # no __mod__; use irem() explicitly.

    def try_add(self, other: Operand) -> "Gen":
        """``self + other``, raising InternalError on failure instead of panicking."""
        return self._try("add", other)

    def try_sub(self, other: Operand) -> "Gen":
        return self._try("sub", other)

    def try_mul(self, other: Operand) -> "Gen":
        return self._try("mul", other)

    def try_div(self, other: Operand) -> "Gen":
        return self._try("div", other)

    # ALGEBRA

    def factor(self, ctx: Optional[Context] = None) -> "Gen":
        """
        Factorize the expression: ``x^2-1`` becomes ``(x-1)*(x+1)``.
        """
        return self._call("factor", ctx=resolve_context(ctx))

    def simplify(self, ctx: Optional[Context] = None) -> "Gen":
        """Simplify the expression: ``(x-1)*(x+1)`` becomes ``x^2-1``."""
        return self._call("simplify", ctx=resolve_context(ctx))

    def det(self, ctx: Optional[Context] = None) -> "Gen":
        """Determinant of a matrix: ``[[1,2],[3,4]]`` gives ``-2``."""
        return self._call("det", ctx=resolve_context(ctx))

    def float_to_rational(self, ctx: Optional[Context] = None) -> "Gen":
        """
        Rational ``q`` approaching this float with ``abs(q - self) < epsilon``.

        The precision is the context's epsilon, see :meth:`Context.set_epsilon`.
        """
        return self._call("float2rational", ctx=resolve_context(ctx))


__all__ = ["Gen"]
