## giacffi contexts
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
giac sessions.

A :class:`Context` owns an engine session: variable bindings plus numeric
options such as the epsilon used by rational approximation. Values produced
with a context own themselves and stay valid after the context is closed.

Contexts may be shared between threads for read-like work (parsing,
evaluation that binds nothing, algebra). Option setters need exclusive
access; serialise them against every other use of the same context.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

from ._ffi import ffi, get_lib, logger, own, release

if TYPE_CHECKING:  # pragma: no cover
    from .gen import Gen


class Context:
    """
    A giac session, with its own variables and options.

    Usage:
        with Context() as ctx:
            ctx.set_epsilon(1e-6)
            q = ctx.eval("12.9642857143").float_to_rational(ctx)
    """

    __slots__ = ("_handle", "_borrowed", "__weakref__")

    def __init__(self):
        lib = get_lib()
        self._handle = own(lib.giacffi_new_context(), lib.giacffi_free_context, "context")
        self._borrowed = False

    @classmethod
    def _borrow(cls, ptr) -> "Context":
        # The engine keeps ownership; a borrowed pointer may legitimately be NULL.
        ctx = cls.__new__(cls)
        ctx._handle = ptr
        ctx._borrowed = True
        return ctx

    @property
    def _ptr(self):
        if self._handle is None:
            raise ValueError("giac context has been closed")
        return self._handle

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def is_global(self) -> bool:
        return self._borrowed

    def eval(self, source: str) -> "Gen":
        """Parse and evaluate ``source`` in this context."""
        from .gen import Gen

        return Gen.from_str(source, self)

    def set_epsilon(self, epsilon: float) -> None:
        """
        Change the precision used by rational approximation.

        Takes effect for every later operation on this context; see
        :meth:`Gen.float_to_rational`.
        """
        get_lib().giacffi_options_set_epsilon(float(epsilon), self._ptr)

    @property
    def epsilon(self) -> float:
        return get_lib().giacffi_options_get_epsilon(self._ptr)

    @epsilon.setter
    def epsilon(self, value: float) -> None:
        self.set_epsilon(value)

    def close(self) -> None:
        """Release the session now. Closing twice is harmless."""
        if self._borrowed:
            raise ValueError("the global giac context cannot be closed")
        if self._handle is not None:
            handle, self._handle = self._handle, None
            release(handle)

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._borrowed:
            self.close()

    def __repr__(self) -> str:
        if self._borrowed:
            return "<giac global Context>"
        state = "closed" if self._handle is None else "open"
        return f"<giac Context ({state})>"


_GLOBAL_LOCK = threading.Lock()
_global: Optional[Context] = None


def global_context() -> Context:
    """
    Return the engine's singleton context.

    The first call primes the engine's global state; later calls return the
    same object. The underlying session is never released by the bridge.
    """
    global _global
    ctx = _global
    if ctx is not None:
        return ctx
    with _GLOBAL_LOCK:
        if _global is None:
            lib = get_lib()
            lib.giacffi_init_global_context()
            _global = Context._borrow(lib.giacffi_global_context)
            logger.debug("giac global context initialised")
        return _global


def resolve_context(ctx: Optional[Context]) -> Context:
    """``ctx`` itself, or the global context when ``ctx`` is None."""
    return ctx if ctx is not None else global_context()


def release_globals() -> None:
    """
    Release process-wide giac state.

    Meant for final teardown only, for instance to keep a leak checker
    quiet at interpreter exit. No engine value should be used afterwards.
    """
    get_lib().giacffi_release_globals()
    logger.info("giac globals released")


def _reset_global_context() -> None:
    # Forget the cached singleton; used when the shim table is swapped.
    global _global
    with _GLOBAL_LOCK:
        _global = None


__all__ = ["Context", "global_context", "resolve_context", "release_globals"]
