"""Tests for counting and random sampling."""

import pytest

from giacffi.errors import InternalError
from giacffi.gen import Gen

pytestmark = pytest.mark.usefixtures("fake_lib")


def test_binomial(ctx):
    assert Gen(5).binomial(Gen(2), ctx).to_int() == 10
    assert Gen(5).binomial(0).to_int() == 1


def test_permutation(ctx):
    assert Gen(5).permutation(Gen(2), ctx).to_int() == 20


@pytest.mark.parametrize("n", [1, 2, 10, 1000])
def test_rand_is_bounded(n, ctx):
    for _ in range(20):
        r = Gen(n).rand(ctx).to_int()
        assert 0 <= r < n


def test_rand_of_non_positive_bound(ctx):
    with pytest.raises(InternalError):
        Gen(0).rand(ctx)
