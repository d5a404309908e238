"""Tests for the Gen value handle."""

import copy
import gc

import pytest

from giacffi._ffi import INT_MAX, INT_MIN, ULONG_MAX
from giacffi.errors import EnginePanic, InternalError, InvalidSourceError, NarrowingError
from giacffi.gen import Gen
from giacffi.types import GenType

pytestmark = pytest.mark.usefixtures("fake_lib")


class TestConstruction:
    """Test the ways of building a value."""

    def test_empty_value_is_zero(self, ctx):
        g = Gen()
        assert g.is_zero(ctx)
        assert g.to_int() == 0

    @pytest.mark.parametrize("n", [0, 1, -1, 12, INT_MAX, INT_MIN])
    def test_int_round_trip(self, n):
        assert Gen(n).to_int() == n
        assert Gen.from_int(n).to_int() == n
        assert int(Gen(n)) == n

    def test_bool_is_accepted(self):
        assert Gen(True).to_int() == 1

    @pytest.mark.parametrize("n", [INT_MAX + 1, INT_MIN - 1, 2 ** 100])
    def test_narrowing_is_rejected(self, n, fake_lib):
        with pytest.raises(NarrowingError) as excinfo:
            Gen(n)
        assert excinfo.value.ctype == "int"
        assert fake_lib.calls["giacffi_gen_from_int"] == 0

    def test_doubles(self):
        assert str(Gen(0.5)) == "0.5"
        assert Gen.from_double(2.25).gen_type == GenType.DOUBLE

    def test_single_precision_float(self, fake_lib):
        g = Gen.from_float(0.1)
        assert fake_lib.value(g._ptr) != 0.1
        assert abs(fake_lib.value(g._ptr) - 0.1) < 1e-7

    def test_from_str(self, ctx):
        assert Gen.from_str("12", ctx).to_int() == 12
        assert Gen("2*3", ctx).to_int() == 6

    def test_parser_error_is_reported(self, ctx):
        with pytest.raises(InternalError) as excinfo:
            Gen.from_str("x^", ctx)
        assert "syntax error" in str(excinfo.value)

    def test_nul_in_source_is_rejected(self, ctx, fake_lib):
        with pytest.raises(InvalidSourceError) as excinfo:
            Gen.from_str("1+\x002", ctx)
        assert excinfo.value.position == 2
        assert fake_lib.calls["giacffi_gen_from_str"] == 0

    def test_unencodable_source_is_rejected(self, ctx, fake_lib):
        with pytest.raises(InvalidSourceError) as excinfo:
            Gen.from_str("1+\ud800", ctx)
        assert excinfo.value.position == 2
        assert "UTF-8" in str(excinfo.value)
        assert fake_lib.calls["giacffi_gen_from_str"] == 0

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            Gen([1, 2])

    def test_factorial(self):
        assert str(Gen.factorial(24)) == "620448401733239439360000"
        assert Gen.factorial(24).gen_type == GenType.ZINT
        assert Gen.factorial(0).to_int() == 1

    @pytest.mark.parametrize("n", [-1, ULONG_MAX + 1])
    def test_factorial_narrowing(self, n):
        with pytest.raises(NarrowingError) as excinfo:
            Gen.factorial(n)
        assert excinfo.value.ctype == "unsigned long"

    def test_coerce(self):
        g = Gen(3)
        assert Gen.coerce(g) is g
        assert Gen.coerce(4).to_int() == 4


class TestIntrospection:
    """Test printing, readback and type tags."""

    def test_print_returns_engine_string(self, ctx):
        s = Gen.from_str("[[1,2],[3,4]]", ctx).print()
        assert s == "[[1,2],[3,4]]"
        assert bytes(s) == b"[[1,2],[3,4]]"

    def test_repr(self):
        assert repr(Gen(7)) == "Gen('7')"

    @pytest.mark.parametrize("source,tag", [
        ("5", GenType.INT),
        ("x", GenType.IDENT),
        ("[1,2]", GenType.VECTOR),
        ("1/2", GenType.FRACTION),
        ("x^2+1", GenType.SYMBOLIC),
    ])
    def test_gen_type(self, source, tag, ctx):
        assert Gen.from_str(source, ctx).gen_type == tag

    def test_unknown_type_tag_keeps_value(self):
        tag = GenType(42)
        assert tag == 42
        assert tag.name == "UNKNOWN_42"

    def test_to_int_on_non_integer_fails(self, ctx):
        with pytest.raises(InternalError):
            Gen.from_str("x", ctx).to_int()

    def test_is_zero(self, ctx):
        assert not Gen(3).is_zero(ctx)
        assert Gen(0).is_zero()


class TestCopy:
    """Test that copies are independent."""

    def test_clone_is_independent(self):
        a = Gen(5)
        b = a.clone()
        b += 1
        assert a.to_int() == 5
        assert b.to_int() == 6

    def test_copy_module(self):
        a = Gen(5)
        assert copy.copy(a).to_int() == 5
        assert copy.deepcopy(a).to_int() == 5
        assert copy.copy(a)._ptr != a._ptr

    def test_gen_from_gen(self):
        a = Gen(8)
        assert Gen(a).to_int() == 8


class TestArithmetic:
    """Test operators and the in-place primitives."""

    def test_operators(self):
        a, b = Gen(7), Gen(3)
        assert (a + b).to_int() == 10
        assert (a - b).to_int() == 4
        assert (a * b).to_int() == 21
        assert str(a / b) == "7/3"
        assert a.to_int() == 7

    def test_python_numbers_on_either_side(self):
        a = Gen(6)
        assert (a + 1).to_int() == 7
        assert (1 + a).to_int() == 7
        assert (10 - a).to_int() == 4
        assert (2 * a).to_int() == 12
        assert str(1 / a) == "1/6"

    def test_in_place(self):
        a = Gen(6)
        ptr = a._ptr
        a += 4
        a *= Gen(2)
        a -= 5
        a /= 3
        assert a.to_int() == 5
        assert a._ptr == ptr

    @pytest.mark.parametrize("source", ["5", "2.5", "x^2+1"])
    def test_identities(self, source, ctx):
        v = Gen.from_str(source, ctx)
        assert str(v + 0) == str(v)
        assert str(v * 1) == str(v)
        assert (v - v).is_zero(ctx)

    def test_symbolic(self, ctx):
        e = Gen.from_str("x^4", ctx)
        g = e * ctx.eval("x^5")
        g += e
        assert str(g) == "x^9+x^4"

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            Gen(1) + "1"

    def test_no_modulo_operator(self):
        with pytest.raises(TypeError):
            Gen(7) % Gen(2)

    def test_failed_in_place_step_panics_and_releases(self, fake_lib):
        a = Gen(1)
        with pytest.raises(EnginePanic) as excinfo:
            a /= 0
        assert isinstance(excinfo.value.__cause__, InternalError)
        assert repr(a) == "Gen(<released>)"
        with pytest.raises(EnginePanic):
            a.to_int()

    def test_failed_producing_step_keeps_left_operand(self):
        a = Gen(1)
        with pytest.raises(EnginePanic):
            a / 0
        assert a.to_int() == 1

    def test_panic_is_logged(self, caplog):
        a = Gen(1)
        with pytest.raises(EnginePanic):
            a /= 0
        assert "in-place div failed" in caplog.text

    def test_try_variants(self):
        a = Gen(9)
        assert a.try_add(1).to_int() == 10
        assert a.try_sub(1).to_int() == 8
        assert a.try_mul(2).to_int() == 18
        assert a.try_div(3).to_int() == 3
        with pytest.raises(InternalError) as excinfo:
            a.try_div(0)
        assert excinfo.value.message == "Division by 0"
        assert a.to_int() == 9


class TestAlgebra:
    """Test the general algebra routines."""

    def test_factor(self, ctx):
        assert Gen.from_str("x^2-1", ctx).factor(ctx).print() == "(x-1)*(x+1)"

    def test_simplify(self, ctx):
        assert Gen.from_str("(x-1)*(x+1)", ctx).simplify(ctx).print() == "x^2-1"

    def test_det(self, ctx):
        assert Gen.from_str("[[1,2],[3,4]]", ctx).det(ctx).to_int() == -2

    def test_det_of_non_matrix(self, ctx):
        with pytest.raises(InternalError):
            Gen(3).det(ctx)

    def test_float_to_rational_uses_context_epsilon(self, ctx):
        ctx.set_epsilon(1e-6)
        q = Gen(12.9642857143).float_to_rational(ctx)
        assert q.print() == "363/28"

    def test_coarse_epsilon_gives_short_fraction(self, ctx):
        ctx.set_epsilon(0.1)
        assert str(Gen(0.3333).float_to_rational(ctx)) == "1/3"


class TestLifetime:
    """Test that every engine allocation is released exactly once."""

    def test_no_leaks(self, fake_lib, ctx):
        def work():
            a = Gen.from_str("x^2-1", ctx)
            b = a.factor(ctx)
            c = a + b
            c *= 2
            str(c)
            Gen(90).ifactors(ctx)
            Gen(17).iquorem(5)

        work()
        gc.collect()
        assert fake_lib.live_values == 0
        assert fake_lib.live_strings == 0
        assert fake_lib.double_frees == 0

    def test_failed_calls_do_not_leak(self, fake_lib, ctx):
        def work():
            for _ in range(3):
                try:
                    Gen(1).try_div(0)
                except InternalError:
                    pass
                try:
                    Gen.from_str("x^", ctx)
                except InternalError:
                    pass

        work()
        gc.collect()
        assert fake_lib.live_values == 0
        assert fake_lib.live_strings == 0
        assert fake_lib.double_frees == 0
