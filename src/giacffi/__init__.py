# -*- coding: utf-8 -*-
"""
giacffi: safe Python bindings for the giac computer algebra system.

Usage:
    from giacffi import Context, Gen, ichinrem

    with Context() as ctx:
        print(ctx.eval("x^2-1").factor(ctx))       # (x-1)*(x+1)
        print(Gen(90).ifactor(ctx))                # 2*3^2*5
        c, m = ichinrem(3, 5, 9, 13)               # (-17, 65)

The engine itself is reached through a small C shim (``csrc/``) loaded with
cffi; see :mod:`giacffi._ffi` for how the shim library is located.
"""

from importlib.metadata import PackageNotFoundError, version

from ._ffi import library_available, library_origin, require_library, use_library
from .context import Context, global_context, release_globals
from .errors import (
    EnginePanic,
    GiacError,
    InternalError,
    InvalidSourceError,
    NarrowingError,
    NoSolution,
)
from .gen import Gen
from .integers import iabcuv, ichinrem, jacobi_symbol, legendre_symbol
from .support import GiacString
from .types import GenType, PseudoPrime

try:
    __version__ = version("giacffi")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

__all__ = [
    "Context",
    "EnginePanic",
    "Gen",
    "GenType",
    "GiacError",
    "GiacString",
    "InternalError",
    "InvalidSourceError",
    "NarrowingError",
    "NoSolution",
    "PseudoPrime",
    "global_context",
    "iabcuv",
    "ichinrem",
    "jacobi_symbol",
    "legendre_symbol",
    "library_available",
    "library_origin",
    "release_globals",
    "require_library",
    "use_library",
]
