import numpy as np
import pytest

from ellipjax import carlson
from ellipjax import validation

pytestmark = pytest.mark.parity
if not validation.parity_enabled():
    pytest.skip("Parity tests disabled. Set ELLIPJAX_RUN_PARITY=1 to enable.", allow_module_level=True)

mp = pytest.importorskip("mpmath")


def _reference(fn, *cols: np.ndarray) -> np.ndarray:
    return np.array([float(fn(*row)) for row in zip(*cols)], dtype=np.float64)


def _random_args(rng: np.random.Generator, n: int, k: int) -> list[np.ndarray]:
    return [10.0 ** rng.uniform(-3.0, 3.0, size=n) for _ in range(k)]


def test_rf_parity():
    rng = np.random.default_rng(3101)
    x, y, z = _random_args(rng, 400, 3)
    x[:50] = 0.0
    value, status = carlson.carlson_rf_jit(x, y, z)
    assert np.all(np.asarray(status) == 0)
    np.testing.assert_allclose(np.asarray(value), _reference(mp.elliprf, x, y, z), rtol=2e-14)


def test_rd_parity():
    rng = np.random.default_rng(3102)
    x, y, z = _random_args(rng, 400, 3)
    x[:50] = 0.0
    value, status = carlson.carlson_rd_jit(x, y, z)
    assert np.all(np.asarray(status) == 0)
    np.testing.assert_allclose(np.asarray(value), _reference(mp.elliprd, x, y, z), rtol=1e-13)


def test_rj_parity():
    rng = np.random.default_rng(3103)
    x, y, z, p = _random_args(rng, 300, 4)
    x[:40] = 0.0
    value, status = carlson.carlson_rj_jit(x, y, z, p)
    assert np.all(np.asarray(status) == 0)
    np.testing.assert_allclose(np.asarray(value), _reference(mp.elliprj, x, y, z, p), rtol=1e-13)


def test_rc_parity():
    rng = np.random.default_rng(3104)
    x, y = _random_args(rng, 400, 2)
    value, status = carlson.carlson_rc_jit(x, y)
    assert np.all(np.asarray(status) == 0)
    np.testing.assert_allclose(np.asarray(value), _reference(mp.elliprc, x, y), rtol=2e-14)
