## giacffi native boundary
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
cffi declarations and loader for the giac shim library.

The shim (built from ``csrc/`` by ``tools/build_shim.py``) is loaded in ABI
mode, so importing this module never needs a compiler. Loading is deferred
until the first engine call; importing :mod:`giacffi` on a machine without
giac is fine, and a descriptive :class:`OSError` is raised the first time
the engine is actually needed.

Environment variables:

- ``GIACFFI_LIB_PATH``: full path of the shim shared library
- ``GIACFFI_LIB_DIR``: directory containing the shim shared library
- ``GIACFFI_DEBUG``: ``1``/``true``/``yes`` logs loader and release activity
  to stderr
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from cffi import FFI

logger = logging.getLogger("giacffi")

if os.environ.get("GIACFFI_DEBUG", "").lower() in ("1", "true", "yes"):
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
    logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG)


# Mirrors csrc/giacffi_shim.h. Keep it macro-free.
CDEF = r"""
    typedef struct GiacGen GiacGen;
    typedef struct GiacContext GiacContext;
    typedef const char *giacffi_result;

    /* lifecycle */
    extern GiacContext *giacffi_global_context;
    void giacffi_init_global_context(void);
    GiacContext *giacffi_new_context(void);
    void giacffi_free_context(GiacContext *ctx);
    void giacffi_release_globals(void);
    void giacffi_free_str(const char *s);
    GiacGen *giacffi_gen_allocate(void);
    void giacffi_free_gen(GiacGen *g);

    /* constructors */
    giacffi_result giacffi_gen_from_str(const char *s, GiacContext *ctx, GiacGen *res);
    GiacGen *giacffi_gen_from_int(int i);
    GiacGen *giacffi_gen_from_float(float f);
    GiacGen *giacffi_gen_from_double(double d);
    GiacGen *giacffi_gen_factorial(unsigned long n);

    /* introspection */
    GiacGen *giacffi_gen_clone(GiacGen *g);
    unsigned char giacffi_gen_type(GiacGen *g);
    giacffi_result giacffi_gen_is_zero(GiacGen *g, bool *res, GiacContext *ctx);
    const char *giacffi_gen_to_str(GiacGen *g);
    giacffi_result giacffi_gen_to_int(GiacGen *g, int *res);

    /* arithmetic, in place on lhs */
    giacffi_result giacffi_gen_add(GiacGen *lhs, GiacGen *rhs);
    giacffi_result giacffi_gen_sub(GiacGen *lhs, GiacGen *rhs);
    giacffi_result giacffi_gen_mul(GiacGen *lhs, GiacGen *rhs);
    giacffi_result giacffi_gen_div(GiacGen *lhs, GiacGen *rhs);

    /* engine operations */
    giacffi_result giacffi_gen_gcd(GiacGen *a, GiacGen *b, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_lcm(GiacGen *a, GiacGen *b, GiacGen *res);
    giacffi_result giacffi_gen_ifactor(GiacGen *e, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_ifactors(GiacGen *e, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_maple_ifactors(GiacGen *e, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_divisors(GiacGen *e, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_iquo(GiacGen *a, GiacGen *b, GiacGen *res);
    giacffi_result giacffi_gen_irem(GiacGen *a, GiacGen *b, GiacGen *res);
    giacffi_result giacffi_gen_iquorem(GiacGen *a, GiacGen *b, GiacGen *q, GiacGen *r);
    giacffi_result giacffi_gen_even(GiacGen *a, bool *res, GiacContext *ctx);
    giacffi_result giacffi_gen_odd(GiacGen *a, bool *res, GiacContext *ctx);
    giacffi_result giacffi_gen_is_pseudoprime(GiacGen *a, int8_t *res);
    giacffi_result giacffi_gen_nextprime(GiacGen *a, GiacGen *res);
    giacffi_result giacffi_gen_prevprime(GiacGen *a, GiacGen *res);
    giacffi_result giacffi_gen_nthprime(GiacGen *a, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_iegcd(GiacGen *a, GiacGen *b, GiacGen *u, GiacGen *v, GiacGen *d);
    giacffi_result giacffi_gen_iabcuv(GiacGen *a, GiacGen *b, GiacGen *c, GiacGen *u, GiacGen *v,
                                      GiacContext *ctx);
    giacffi_result giacffi_gen_ichinrem(GiacGen *a, GiacGen *amod, GiacGen *b, GiacGen *bmod,
                                        GiacGen *res);
    giacffi_result giacffi_gen_pa2b2(GiacGen *p, GiacGen *a, GiacGen *b, GiacContext *ctx);
    giacffi_result giacffi_gen_euler(GiacGen *a, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_legendre(GiacGen *a, GiacGen *n, int8_t *res);
    giacffi_result giacffi_gen_jacobi(GiacGen *a, GiacGen *n, int8_t *res);
    giacffi_result giacffi_gen_comb(GiacGen *n, GiacGen *k, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_perm(GiacGen *n, GiacGen *k, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_rand(GiacGen *n, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_float2rational(GiacGen *e, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_factor(GiacGen *e, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_simplify(GiacGen *e, GiacGen *res, GiacContext *ctx);
    giacffi_result giacffi_gen_det(GiacGen *e, GiacGen *res, GiacContext *ctx);

    /* options */
    void giacffi_options_set_epsilon(double eps, GiacContext *ctx);
    double giacffi_options_get_epsilon(GiacContext *ctx);
    """

ffi = FFI()
ffi.cdef(CDEF)

INT_MIN = -(1 << (8 * ffi.sizeof("int") - 1))
INT_MAX = (1 << (8 * ffi.sizeof("int") - 1)) - 1
ULONG_MAX = (1 << (8 * ffi.sizeof("unsigned long"))) - 1

_LIB_LOCK = threading.Lock()
_lib: Any = None
_lib_origin: Optional[str] = None


def _platform_lib_name() -> str:
    if sys.platform == "darwin":
        return "libgiacffi_shim.dylib"
    if os.name == "nt":
        return "giacffi_shim.dll"
    return "libgiacffi_shim.so"


def candidate_paths() -> Iterable[str]:
    """Yield shim locations to try, in priority order."""
    path = os.environ.get("GIACFFI_LIB_PATH")
    if path:
        yield path

    directory = os.environ.get("GIACFFI_LIB_DIR")
    if directory:
        yield str(Path(directory).expanduser() / _platform_lib_name())

    # default install location of tools/build_shim.py
    bundled = Path(__file__).resolve().parent / _platform_lib_name()
    if bundled.exists():
        yield str(bundled)

    # let the dynamic loader search system paths
    yield _platform_lib_name()


def _load_shim():
    last_err: Optional[Exception] = None
    for cand in candidate_paths():
        try:
            lib = ffi.dlopen(cand)
        except OSError as exc:
            logger.debug("shim candidate %s rejected: %s", cand, exc)
            last_err = exc
            continue
        logger.debug("loaded giac shim from %s", cand)
        return lib, cand
    hint = (
        "Build it with tools/build_shim.py, then set GIACFFI_LIB_PATH to the "
        "full path of the library or GIACFFI_LIB_DIR to the folder containing it."
    )
    raise OSError(f"Could not load the giac shim library: {last_err}\n{hint}")


def get_lib():
    """Return the active shim function table, loading it on first use."""
    global _lib, _lib_origin
    lib = _lib
    if lib is not None:
        return lib
    with _LIB_LOCK:
        if _lib is None:
            _lib, _lib_origin = _load_shim()
        return _lib


def use_library(lib, origin: Optional[str] = None):
    """
    Install ``lib`` as the shim function table and return the previous one.

    ``lib`` must expose the functions declared in the cdef above. Passing
    ``None`` forgets the current table so the next call reloads from disk.
    """
    global _lib, _lib_origin
    with _LIB_LOCK:
        previous = _lib
        _lib = lib
        _lib_origin = origin if lib is not None else None
    return previous


def library_origin() -> Optional[str]:
    """Where the active shim was loaded from, if known."""
    return _lib_origin


def library_available() -> bool:
    """Return True when a shim is installed or can be loaded."""
    try:
        get_lib()
    except OSError:
        return False
    return True


def require_library() -> None:
    """
    Raise a descriptive error if no shim library can be loaded.
    """
    get_lib()


def _releaser(free: Callable[[Any], None], what: str) -> Callable[[Any], None]:
    # Destructors run from the garbage collector; they must never raise.
    def release(ptr) -> None:
        try:
            free(ptr)
        except Exception:
            logger.warning("failed to release giac %s", what, exc_info=True)

    return release


def own(ptr, free: Callable[[Any], None], what: str):
    """Attach ``free`` to ``ptr`` so the pointee is released exactly once."""
    if ptr == ffi.NULL:
        raise MemoryError(f"giac returned a null {what} pointer")
    return ffi.gc(ptr, _releaser(free, what))


def release(ptr) -> None:
    """Run the destructor attached by :func:`own` now instead of at collection."""
    ffi.release(ptr)


__all__ = [
    "ffi",
    "logger",
    "INT_MIN",
    "INT_MAX",
    "ULONG_MAX",
    "candidate_paths",
    "get_lib",
    "use_library",
    "library_origin",
    "library_available",
    "require_library",
    "own",
    "release",
]
