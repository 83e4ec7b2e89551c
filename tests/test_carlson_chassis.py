import jax
import jax.numpy as jnp
import numpy as np

from ellipjax import carlson
from ellipjax import checks

from tests._test_checks import _check


def test_jit_compiles_and_vectorizes():
    x = jnp.array([0.5, 0.2, 10.0], dtype=jnp.float64)
    y = jnp.array([1.0, 0.3, 12.5], dtype=jnp.float64)
    z = jnp.array([1.5, 0.4, 1.1], dtype=jnp.float64)
    value, status = carlson.carlson_rf_jit(x, y, z)
    _check(value.shape == (3,))
    _check(jnp.all(status == checks.STATUS_OK))
    for i in range(3):
        single, _ = carlson.carlson_rf(x[i], y[i], z[i])
        np.testing.assert_allclose(value[i], single, rtol=1e-15)


def test_equal_arguments():
    x = jnp.array([0.25, 1.0, 4.0, 1e-6, 1e6], dtype=jnp.float64)
    np.testing.assert_allclose(carlson.carlson_rf(x, x, x)[0], x ** -0.5, rtol=1e-14)
    np.testing.assert_allclose(carlson.carlson_rd(x, x, x)[0], x ** -1.5, rtol=1e-14)
    np.testing.assert_allclose(carlson.carlson_rj(x, x, x, x)[0], x ** -1.5, rtol=1e-14)
    np.testing.assert_allclose(carlson.carlson_rc(x, x)[0], x ** -0.5, rtol=1e-14)


def test_reference_values():
    # Carlson (1994), table of test values.
    cases = [
        (carlson.carlson_rf, (1.0, 2.0, 0.0), 1.3110287771461),
        (carlson.carlson_rf, (2.0, 3.0, 4.0), 0.58408284167715),
        (carlson.carlson_rc, (0.0, 0.25), np.pi),
        (carlson.carlson_rc, (2.25, 2.0), np.log(2.0)),
        (carlson.carlson_rd, (0.0, 2.0, 1.0), 1.7972103521034),
        (carlson.carlson_rd, (2.0, 3.0, 4.0), 0.16510527294261),
        (carlson.carlson_rj, (0.0, 1.0, 2.0, 3.0), 0.77688623778582),
        (carlson.carlson_rj, (2.0, 3.0, 4.0, 5.0), 0.14297579667157),
    ]
    for fn, args, expected in cases:
        value, status = fn(*args)
        _check(status == checks.STATUS_OK, fn.__name__)
        np.testing.assert_allclose(value, expected, rtol=1e-12, err_msg=fn.__name__)


def test_complete_first_kind():
    value, status = carlson.carlson_rf(0.0, 1.0, 1.0)
    _check(status == checks.STATUS_OK)
    np.testing.assert_allclose(value, 0.5 * np.pi, rtol=1e-15)


def test_rj_with_equal_last_arguments_is_rd():
    x = jnp.array([0.0, 0.3, 2.0], dtype=jnp.float64)
    y = jnp.array([1.0, 0.7, 3.0], dtype=jnp.float64)
    z = jnp.array([2.0, 1.1, 0.5], dtype=jnp.float64)
    rj, s1 = carlson.carlson_rj(x, y, z, z)
    rd, s2 = carlson.carlson_rd(x, y, z)
    _check(jnp.all((s1 == 0) & (s2 == 0)))
    np.testing.assert_allclose(rj, rd, rtol=1e-13)


def test_status_codes():
    value, status = carlson.carlson_rf(-1.0, 1.0, 1.0)
    _check(status == checks.STATUS_NEGATIVE)
    _check(jnp.isnan(value))

    value, status = carlson.carlson_rf(0.0, 0.0, 1.0)
    _check(status == checks.STATUS_TOO_SMALL)
    _check(jnp.isnan(value))

    _, status = carlson.carlson_rd(1.0, 1.0, 0.0)
    _check(status != checks.STATUS_OK)

    _, status = carlson.carlson_rj(1.0, 1.0, 1.0, 0.0)
    _check(status == checks.STATUS_TOO_SMALL)

    _, status = carlson.carlson_rf(1.0, 1.0, 1e308)
    _check(status == checks.STATUS_TOO_LARGE)


def test_nan_propagates_without_failure():
    value, status = carlson.carlson_rf(jnp.nan, 1.0, 1.0)
    _check(jnp.isnan(value))
    _check(status == checks.STATUS_OK)


def test_widely_separated_arguments_converge():
    value, status = carlson.carlson_rf(0.0, 1e-300, 1.0)
    _check(status == checks.STATUS_OK)
    _check(jnp.isfinite(value))
    # R_F(0, y, 1) ~ log(4/sqrt(y)) as y -> 0
    np.testing.assert_allclose(value, np.log(4.0) + 150.0 * np.log(10.0), rtol=1e-10)


def test_grad_path_matches_rd():
    def loss(t):
        return carlson.carlson_rf(0.5, 1.0, t)[0]

    g = jax.grad(loss)(jnp.float64(1.5))
    _check(jnp.isfinite(g))
    expected = -carlson.carlson_rd(0.5, 1.0, 1.5)[0] / 6.0
    np.testing.assert_allclose(g, expected, rtol=1e-10)
