"""Carlson symmetric elliptic integrals R_F, R_D, R_J and R_C.

Duplication algorithm of Carlson (1979), with the argument limits, error
tolerances and series coefficients of the SLATEC routines DRF, DRD, DRJ and
DRC. Every integral returns ``(value, status)``; ``status`` is one of the
``checks.STATUS_*`` codes and ``value`` is ``nan`` wherever it is nonzero.

The duplication loop runs as a fixed-length ``lax.scan`` that freezes its
state once the relative deviation drops below the tolerance, so the kernels
are ``jit``, ``vmap`` and reverse-mode differentiable.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import lax

from . import checks
from . import precision

jax.config.update("jax_enable_x64", True)

DUPLICATION_STEPS = 48

_TINY = float(jnp.finfo(jnp.float64).tiny)
_HUGE = float(jnp.finfo(jnp.float64).max)
_HALF_EPS = 0.5 * precision.WORKING_EPS

_RF_ERRTOL = (4.0 * _HALF_EPS) ** (1.0 / 6.0)
_RF_LOLIM = 5.0 * _TINY
_RF_UPLIM = _HUGE / 5.0

_RD_ERRTOL = (_HALF_EPS / 3.0) ** (1.0 / 6.0)
_RD_LOLIM = 2.0 / _HUGE ** (2.0 / 3.0)
_RD_UPLIM = (0.1 * _RD_ERRTOL / _TINY) ** (2.0 / 3.0)

_RJ_ERRTOL = (_HALF_EPS / 3.0) ** (1.0 / 6.0)
_RJ_LOLIM = (5.0 * _TINY) ** (1.0 / 3.0)
_RJ_UPLIM = 0.3 * (_HUGE / 5.0) ** (1.0 / 3.0)

_RC_ERRTOL = (_HALF_EPS / 16.0) ** (1.0 / 6.0)
_RC_LOLIM = 5.0 * _TINY
_RC_UPLIM = _HUGE / 5.0


def _status(negative: jax.Array, too_small: jax.Array, too_large: jax.Array) -> jax.Array:
    return jnp.where(
        negative,
        checks.STATUS_NEGATIVE,
        jnp.where(too_small, checks.STATUS_TOO_SMALL, jnp.where(too_large, checks.STATUS_TOO_LARGE, checks.STATUS_OK)),
    ).astype(jnp.int32)


def _sqrt0(x: jax.Array) -> jax.Array:
    # zero derivative at the origin keeps scan tangents finite
    pos = x > 0.0
    return jnp.where(pos, jnp.sqrt(jnp.where(pos, x, 1.0)), 0.0)


def _finish(value: jax.Array, status: jax.Array, done: jax.Array, has_nan: jax.Array) -> tuple[jax.Array, jax.Array]:
    status = jnp.where((status == checks.STATUS_OK) & ~done & ~has_nan, checks.STATUS_NO_CONVERGENCE, status)
    value = jnp.where(has_nan, jnp.nan, value)
    value = jnp.where(status == checks.STATUS_OK, value, jnp.nan)
    return value, status.astype(jnp.int32)


def _rc_scalar(x: jax.Array, y: jax.Array) -> tuple[jax.Array, jax.Array]:
    has_nan = jnp.isnan(x) | jnp.isnan(y)
    status = _status(
        (x < 0.0) | (y <= 0.0),
        x + y < _RC_LOLIM,
        jnp.maximum(x, y) > _RC_UPLIM,
    )
    ok = (status == checks.STATUS_OK) & ~has_nan
    x = jnp.where(ok, x, 1.0)
    y = jnp.where(ok, y, 1.0)

    def step(state, _):
        xn, yn, done = state
        mu = (xn + yn + yn) / 3.0
        sn = (yn + mu) / mu - 2.0
        done = done | (jnp.abs(sn) < _RC_ERRTOL)
        lam = 2.0 * _sqrt0(xn) * _sqrt0(yn) + yn
        xn = jnp.where(done, xn, 0.25 * (xn + lam))
        yn = jnp.where(done, yn, 0.25 * (yn + lam))
        return (xn, yn, done), None

    (xn, yn, done), _ = lax.scan(step, (x, y, jnp.asarray(False)), None, length=DUPLICATION_STEPS)
    mu = (xn + yn + yn) / 3.0
    sn = (yn + mu) / mu - 2.0
    s = sn * sn * (0.3 + sn * (1.0 / 7.0 + sn * (0.375 + sn * (9.0 / 22.0))))
    return _finish((1.0 + s) / jnp.sqrt(mu), status, done, has_nan)


def _rf_scalar(x: jax.Array, y: jax.Array, z: jax.Array) -> tuple[jax.Array, jax.Array]:
    has_nan = jnp.isnan(x) | jnp.isnan(y) | jnp.isnan(z)
    status = _status(
        jnp.minimum(jnp.minimum(x, y), z) < 0.0,
        jnp.minimum(jnp.minimum(x + y, x + z), y + z) < _RF_LOLIM,
        jnp.maximum(jnp.maximum(x, y), z) > _RF_UPLIM,
    )
    ok = (status == checks.STATUS_OK) & ~has_nan
    x = jnp.where(ok, x, 1.0)
    y = jnp.where(ok, y, 1.0)
    z = jnp.where(ok, z, 1.0)

    def step(state, _):
        xn, yn, zn, done = state
        mu = (xn + yn + zn) / 3.0
        dev = jnp.maximum(jnp.maximum(jnp.abs(2.0 - (mu + xn) / mu), jnp.abs(2.0 - (mu + yn) / mu)), jnp.abs(2.0 - (mu + zn) / mu))
        done = done | (dev < _RF_ERRTOL)
        xr, yr, zr = _sqrt0(xn), _sqrt0(yn), _sqrt0(zn)
        lam = xr * (yr + zr) + yr * zr
        xn = jnp.where(done, xn, 0.25 * (xn + lam))
        yn = jnp.where(done, yn, 0.25 * (yn + lam))
        zn = jnp.where(done, zn, 0.25 * (zn + lam))
        return (xn, yn, zn, done), None

    (xn, yn, zn, done), _ = lax.scan(step, (x, y, z, jnp.asarray(False)), None, length=DUPLICATION_STEPS)
    mu = (xn + yn + zn) / 3.0
    xd = 2.0 - (mu + xn) / mu
    yd = 2.0 - (mu + yn) / mu
    zd = 2.0 - (mu + zn) / mu
    e2 = xd * yd - zd * zd
    e3 = xd * yd * zd
    s = 1.0 + (e2 / 24.0 - 0.1 - 3.0 * e3 / 44.0) * e2 + e3 / 14.0
    return _finish(s / jnp.sqrt(mu), status, done, has_nan)


def _rd_scalar(x: jax.Array, y: jax.Array, z: jax.Array) -> tuple[jax.Array, jax.Array]:
    has_nan = jnp.isnan(x) | jnp.isnan(y) | jnp.isnan(z)
    status = _status(
        (jnp.minimum(x, y) < 0.0) | (z < 0.0),
        jnp.minimum(x + y, z) < _RD_LOLIM,
        jnp.maximum(jnp.maximum(x, y), z) > _RD_UPLIM,
    )
    ok = (status == checks.STATUS_OK) & ~has_nan
    x = jnp.where(ok, x, 1.0)
    y = jnp.where(ok, y, 1.0)
    z = jnp.where(ok, z, 1.0)
    zero = jnp.zeros_like(x)

    def step(state, _):
        xn, yn, zn, sigma, power4, done = state
        mu = 0.2 * (xn + yn + 3.0 * zn)
        dev = jnp.maximum(jnp.maximum(jnp.abs((mu - xn) / mu), jnp.abs((mu - yn) / mu)), jnp.abs((mu - zn) / mu))
        done = done | (dev < _RD_ERRTOL)
        xr, yr, zr = _sqrt0(xn), _sqrt0(yn), _sqrt0(zn)
        lam = xr * (yr + zr) + yr * zr
        sigma = jnp.where(done, sigma, sigma + power4 / (zr * (zn + lam)))
        power4 = jnp.where(done, power4, 0.25 * power4)
        xn = jnp.where(done, xn, 0.25 * (xn + lam))
        yn = jnp.where(done, yn, 0.25 * (yn + lam))
        zn = jnp.where(done, zn, 0.25 * (zn + lam))
        return (xn, yn, zn, sigma, power4, done), None

    init = (x, y, z, zero, zero + 1.0, jnp.asarray(False))
    (xn, yn, zn, sigma, power4, done), _ = lax.scan(step, init, None, length=DUPLICATION_STEPS)
    mu = 0.2 * (xn + yn + 3.0 * zn)
    xd = (mu - xn) / mu
    yd = (mu - yn) / mu
    zd = (mu - zn) / mu
    ea = xd * yd
    eb = zd * zd
    ec = ea - eb
    ed = ea - 6.0 * eb
    ef = ed + ec + ec
    s1 = ed * (-3.0 / 14.0 + 0.25 * (9.0 / 22.0) * ed - 1.5 * (3.0 / 26.0) * zd * ef)
    s2 = zd * (ef / 6.0 + zd * (-(9.0 / 22.0) * ec + zd * (3.0 / 26.0) * ea))
    value = 3.0 * sigma + power4 * (1.0 + s1 + s2) / (mu * jnp.sqrt(mu))
    return _finish(value, status, done, has_nan)


def _rj_scalar(x: jax.Array, y: jax.Array, z: jax.Array, p: jax.Array) -> tuple[jax.Array, jax.Array]:
    has_nan = jnp.isnan(x) | jnp.isnan(y) | jnp.isnan(z) | jnp.isnan(p)
    status = _status(
        jnp.minimum(jnp.minimum(x, y), z) < 0.0,
        jnp.minimum(jnp.minimum(jnp.minimum(x + y, x + z), y + z), p) < _RJ_LOLIM,
        jnp.maximum(jnp.maximum(jnp.maximum(x, y), z), p) > _RJ_UPLIM,
    )
    ok = (status == checks.STATUS_OK) & ~has_nan
    x = jnp.where(ok, x, 1.0)
    y = jnp.where(ok, y, 1.0)
    z = jnp.where(ok, z, 1.0)
    p = jnp.where(ok, p, 1.0)
    zero = jnp.zeros_like(x)

    def step(state, _):
        xn, yn, zn, pn, sigma, power4, rc_status, done = state
        mu = 0.2 * (xn + yn + zn + pn + pn)
        dev = jnp.maximum(
            jnp.maximum(jnp.abs((mu - xn) / mu), jnp.abs((mu - yn) / mu)),
            jnp.maximum(jnp.abs((mu - zn) / mu), jnp.abs((mu - pn) / mu)),
        )
        done = done | (dev < _RJ_ERRTOL)
        xr, yr, zr = _sqrt0(xn), _sqrt0(yn), _sqrt0(zn)
        lam = xr * (yr + zr) + yr * zr
        alfa = pn * (xr + yr + zr) + xr * yr * zr
        alfa = alfa * alfa
        beta = pn * (pn + lam) * (pn + lam)
        rc, rc_step_status = _rc_scalar(alfa, beta)
        rc_status = jnp.where(done | (rc_status != checks.STATUS_OK), rc_status, rc_step_status)
        sigma = jnp.where(done, sigma, sigma + power4 * rc)
        power4 = jnp.where(done, power4, 0.25 * power4)
        xn = jnp.where(done, xn, 0.25 * (xn + lam))
        yn = jnp.where(done, yn, 0.25 * (yn + lam))
        zn = jnp.where(done, zn, 0.25 * (zn + lam))
        pn = jnp.where(done, pn, 0.25 * (pn + lam))
        return (xn, yn, zn, pn, sigma, power4, rc_status, done), None

    init = (x, y, z, p, zero, zero + 1.0, jnp.asarray(checks.STATUS_OK, dtype=jnp.int32), jnp.asarray(False))
    (xn, yn, zn, pn, sigma, power4, rc_status, done), _ = lax.scan(step, init, None, length=DUPLICATION_STEPS)
    status = jnp.where(status == checks.STATUS_OK, rc_status, status)
    mu = 0.2 * (xn + yn + zn + pn + pn)
    xd = (mu - xn) / mu
    yd = (mu - yn) / mu
    zd = (mu - zn) / mu
    pd = (mu - pn) / mu
    ea = xd * (yd + zd) + yd * zd
    eb = xd * yd * zd
    ec = pd * pd
    e2 = ea - 3.0 * ec
    e3 = eb + 2.0 * pd * (ea - ec)
    c3 = 3.0 / 22.0
    c4 = 3.0 / 26.0
    s1 = 1.0 + e2 * (-3.0 / 14.0 + 0.75 * c3 * e2 - 1.5 * c4 * e3)
    s2 = eb * (0.5 / 3.0 + pd * (-c3 - c3 + pd * c4))
    s3 = pd * ea * (1.0 / 3.0 - pd * c3) - pd * ec / 3.0
    value = 3.0 * sigma + power4 * (s1 + s2 + s3) / (mu * jnp.sqrt(mu))
    return _finish(value, status, done, has_nan)


_rc_vec = jnp.vectorize(_rc_scalar)
_rf_vec = jnp.vectorize(_rf_scalar)
_rd_vec = jnp.vectorize(_rd_scalar)
_rj_vec = jnp.vectorize(_rj_scalar)


def carlson_rc(x, y) -> tuple[jax.Array, jax.Array]:
    """Degenerate integral ``R_C(x, y) = R_F(x, y, y)``; requires ``x >= 0, y > 0``."""
    return _rc_vec(precision.as_working(x), precision.as_working(y))


def carlson_rf(x, y, z) -> tuple[jax.Array, jax.Array]:
    r"""Integral of the first kind.

    .. math::

        R_F(x, y, z) = \frac{1}{2} \int_0^\infty \frac{dt}{\sqrt{(t+x)(t+y)(t+z)}}

    Requires ``x, y, z >= 0`` with at most one of them zero.
    """
    return _rf_vec(precision.as_working(x), precision.as_working(y), precision.as_working(z))


def carlson_rd(x, y, z) -> tuple[jax.Array, jax.Array]:
    r"""Integral of the second kind, ``R_D(x, y, z) = R_J(x, y, z, z)``.

    Requires ``x, y >= 0`` with at most one of them zero, and ``z > 0``.
    """
    return _rd_vec(precision.as_working(x), precision.as_working(y), precision.as_working(z))


def carlson_rj(x, y, z, p) -> tuple[jax.Array, jax.Array]:
    r"""Integral of the third kind.

    .. math::

        R_J(x, y, z, p) = \frac{3}{2} \int_0^\infty \frac{dt}{(t+p)\sqrt{(t+x)(t+y)(t+z)}}

    Requires ``x, y, z >= 0`` with at most one of them zero, and ``p > 0``.
    """
    return _rj_vec(
        precision.as_working(x),
        precision.as_working(y),
        precision.as_working(z),
        precision.as_working(p),
    )


carlson_rc_jit = jax.jit(carlson_rc)
carlson_rf_jit = jax.jit(carlson_rf)
carlson_rd_jit = jax.jit(carlson_rd)
carlson_rj_jit = jax.jit(carlson_rj)


__all__ = [
    "DUPLICATION_STEPS",
    "carlson_rc",
    "carlson_rf",
    "carlson_rd",
    "carlson_rj",
    "carlson_rc_jit",
    "carlson_rf_jit",
    "carlson_rd_jit",
    "carlson_rj_jit",
]
