"""
Internal representations used to talk to the shim.

:class:`GiacString` owns a C string allocated by the engine; converting it
to a Python ``str`` copies, so keep the GiacString when only comparing or
passing the text along. :func:`check` turns a shim result token into an
exception, and :func:`call_into` implements the uniform "allocate slots,
call, wrap or raise" discipline used by every forwarded operation.
"""

from __future__ import annotations

from typing import Any, Callable, List

from ._ffi import ffi, get_lib, own
from .errors import InternalError


class GiacString:
    """
    An engine-allocated, null-terminated byte string.

    The pointer is released through the engine's string deallocator when
    this object is collected. Equality is byte-wise; ``str()`` decodes as
    UTF-8, replacing invalid sequences.
    """

    __slots__ = ("_ptr", "__weakref__")

    def __init__(self, ptr, lib=None):
        lib = lib if lib is not None else get_lib()
        self._ptr = own(ptr, lib.giacffi_free_str, "string")

    def __bytes__(self) -> bytes:
        return ffi.string(self._ptr)

    def __str__(self) -> str:
        return bytes(self).decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"GiacString({bytes(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GiacString):
            return bytes(self) == bytes(other)
        if isinstance(other, bytes):
            return bytes(self) == other
        if isinstance(other, str):
            return bytes(self) == other.encode("utf-8")
        return NotImplemented

    def __hash__(self) -> int:
        return hash(bytes(self))

    def __len__(self) -> int:
        return len(bytes(self))


def check(token, lib=None) -> None:
    """Raise :class:`InternalError` if ``token`` is a failure token."""
    if token != ffi.NULL:
        raise InternalError(GiacString(token, lib))


def call_into(factory: Callable[[], Any], shim: Callable[..., Any], inputs,
              outputs: int = 1, ctx=None) -> List[Any]:
    """
    Run ``shim`` writing into ``outputs`` freshly allocated value slots.

    ``factory`` builds an empty owning handle (its ``_ptr`` is passed to the
    shim). The shim is called as ``shim(*inputs, *slots)`` with the context
    pointer appended when ``ctx`` is given. On failure the slots are simply
    dropped, which releases them.
    """
    slots = [factory() for _ in range(outputs)]
    args = list(inputs)
    args.extend(slot._ptr for slot in slots)
    if ctx is not None:
        args.append(ctx._ptr)
    check(shim(*args))
    return slots


__all__ = ["GiacString", "check", "call_into"]
