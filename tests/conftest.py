import gc

import pytest

from giacffi._ffi import library_origin, use_library
from giacffi.context import Context, _reset_global_context

from giac_fake import FakeGiacLib


@pytest.fixture
def fake_lib():
    """Route every engine call to a fresh FakeGiacLib for one test."""
    lib = FakeGiacLib()
    origin = library_origin()
    previous = use_library(lib, origin="fake")
    _reset_global_context()
    yield lib
    gc.collect()
    use_library(previous, origin=origin)
    _reset_global_context()


@pytest.fixture
def ctx(fake_lib):
    context = Context()
    yield context
    context.close()
