from __future__ import annotations

import jax
import jax.numpy as jnp

from . import carlson
from . import checks
from . import precision

jax.config.update("jax_enable_x64", True)

_HALF_PI = 0.5 * jnp.pi


def _merge_status(first: jax.Array, second: jax.Array) -> jax.Array:
    return jnp.where(first != checks.STATUS_OK, first, second)


def _k_scalar(m: jax.Array) -> tuple[jax.Array, jax.Array]:
    in_domain = checks.parameter_in_domain(m)
    one = m == 1.0
    active = in_domain & ~one
    ms = jnp.where(active, m, 0.5)
    rf, status = carlson._rf_scalar(jnp.zeros_like(ms), 1.0 - ms, jnp.ones_like(ms))
    value = jnp.where(one, jnp.inf, rf)
    value = jnp.where(in_domain, value, jnp.nan)
    return value, jnp.where(active, status, checks.STATUS_OK)


def _ke_scalar(m: jax.Array) -> tuple[jax.Array, jax.Array, jax.Array]:
    # same K path as _k_kernel
    k, s1 = _k_scalar(m)
    in_domain = checks.parameter_in_domain(m)
    one = m == 1.0
    active = in_domain & ~one
    ms = jnp.where(active, m, 0.5)
    rd, s2 = carlson._rd_scalar(jnp.zeros_like(ms), 1.0 - ms, jnp.ones_like(ms))
    e = jnp.where(one, 1.0, k - ms * rd / 3.0)
    e = jnp.where(in_domain, e, jnp.nan)
    return k, e, jnp.where(active, _merge_status(s1, s2), checks.STATUS_OK)


def _raw_f(phi: jax.Array, m: jax.Array) -> tuple[jax.Array, jax.Array]:
    # assumes 0 <= m <= 1
    sinphi = jnp.sin(phi)
    cosphi = jnp.cos(phi)
    rf, status = carlson._rf_scalar(cosphi * cosphi, 1.0 - m * sinphi * sinphi, jnp.ones_like(phi))
    return sinphi * rf, status


def _f_scalar(phi: jax.Array, m: jax.Array) -> tuple[jax.Array, jax.Array]:
    in_domain = checks.parameter_in_domain(m)
    one = m == 1.0
    # Abramowitz & Stegun 17.4.3
    reduce = jnp.abs(phi) > _HALF_PI
    phi2 = phi + _HALF_PI
    r = jnp.mod(phi2, jnp.pi) - _HALF_PI
    k = jnp.floor(phi2 / jnp.pi)
    base = jnp.where(reduce, r, phi)
    singular = one & (jnp.abs(phi) >= _HALF_PI)
    active = in_domain & ~singular

    ms = jnp.where(active, m, 0.5)
    f, s1 = _raw_f(jnp.where(active, base, 0.5), ms)
    kk, s2 = _k_scalar(ms)
    value = jnp.where(reduce, f + 2.0 * k * kk, f)
    value = jnp.where(singular, jnp.sign(phi) * jnp.inf, value)
    value = jnp.where(in_domain, value, jnp.nan)
    status = _merge_status(s1, jnp.where(reduce, s2, checks.STATUS_OK))
    return value, jnp.where(active, status, checks.STATUS_OK)


def _e_inc_scalar(phi: jax.Array, m: jax.Array) -> tuple[jax.Array, jax.Array]:
    valid = checks.parameter_in_domain(m) & checks.phase_in_domain(phi)
    one = m == 1.0
    active = valid & ~one

    ms = jnp.where(active, m, 0.5)
    phis = jnp.where(active, phi, 0.5)
    sinphi = jnp.sin(phis)
    sinphi2 = sinphi * sinphi
    cosphi2 = jnp.cos(phis) ** 2
    y = 1.0 - ms * sinphi2
    rf, s1 = carlson._rf_scalar(cosphi2, y, jnp.ones_like(y))
    rd, s2 = carlson._rd_scalar(cosphi2, y, jnp.ones_like(y))
    value = sinphi * (rf - ms * sinphi2 * rd / 3.0)
    value = jnp.where(one, jnp.sin(phi), value)
    value = jnp.where(valid, value, jnp.nan)
    return value, jnp.where(active, _merge_status(s1, s2), checks.STATUS_OK)


def _pi_scalar(n: jax.Array, phi: jax.Array, m: jax.Array) -> tuple[jax.Array, jax.Array]:
    valid = (
        checks.parameter_in_domain(m)
        & checks.phase_in_domain(phi)
        & checks.characteristic_in_domain(n, phi)
    )
    one = m == 1.0
    singular = one & (jnp.abs(phi) >= _HALF_PI)
    active = valid & ~singular

    ns = jnp.where(active, n, 0.0)
    ms = jnp.where(active, m, 0.5)
    phis = jnp.where(active, phi, 0.5)
    sinphi = jnp.sin(phis)
    sinphi2 = sinphi * sinphi
    cosphi2 = jnp.cos(phis) ** 2
    y = 1.0 - ms * sinphi2
    rf, s1 = carlson._rf_scalar(cosphi2, y, jnp.ones_like(y))
    rj, s2 = carlson._rj_scalar(cosphi2, y, jnp.ones_like(y), 1.0 - ns * sinphi2)
    value = sinphi * (rf + ns * sinphi2 * rj / 3.0)
    value = jnp.where(singular, jnp.sign(phi) * jnp.inf, value)
    value = jnp.where(valid, value, jnp.nan)
    return value, jnp.where(active, _merge_status(s1, s2), checks.STATUS_OK)


_k_kernel = jax.jit(jnp.vectorize(_k_scalar))
_ke_kernel = jax.jit(jnp.vectorize(_ke_scalar))
_f_kernel = jax.jit(jnp.vectorize(_f_scalar))
_e_inc_kernel = jax.jit(jnp.vectorize(_e_inc_scalar))
_pi_kernel = jax.jit(jnp.vectorize(_pi_scalar))


def K(m) -> jax.Array:
    m = precision.as_working(m)
    checks.check_parameter(m, "K")
    value, status = _k_kernel(m)
    checks.check_status(status, "K")
    return value


def ellipke(m) -> tuple[jax.Array, jax.Array]:
    return _complete_pair(m, "ellipke")


def _complete_pair(m, label: str) -> tuple[jax.Array, jax.Array]:
    m = precision.as_working(m)
    checks.check_parameter(m, label)
    k, e, status = _ke_kernel(m)
    checks.check_status(status, label)
    return k, e


def E(phi_or_m, m=None) -> jax.Array:
    """``E(m)`` is the complete integral, ``E(phi, m)`` the incomplete one.

    The incomplete form has no periodic reduction and rejects ``|phi| > pi/2``.
    """
    if m is None:
        return _complete_pair(phi_or_m, "E")[1]
    phi = precision.as_working(phi_or_m)
    m = precision.as_working(m)
    checks.check_parameter(m, "E")
    checks.check_phase(phi, "E")
    value, status = _e_inc_kernel(phi, m)
    checks.check_status(status, "E")
    return value


def F(phi, m) -> jax.Array:
    phi = precision.as_working(phi)
    m = precision.as_working(m)
    checks.check_parameter(m, "F")
    value, status = _f_kernel(phi, m)
    checks.check_status(status, "F")
    return value


def Pi(n, phi, m) -> jax.Array:
    n = precision.as_working(n)
    phi = precision.as_working(phi)
    m = precision.as_working(m)
    checks.check_parameter(m, "Pi")
    checks.check_phase(phi, "Pi")
    checks.check_characteristic(n, phi, "Pi")
    value, status = _pi_kernel(n, phi, m)
    checks.check_status(status, "Pi")
    return value


def elliptic_k(m: jax.Array) -> jax.Array:
    return _k_kernel(precision.as_working(m))[0]


def elliptic_ke(m: jax.Array) -> tuple[jax.Array, jax.Array]:
    k, e, _ = _ke_kernel(precision.as_working(m))
    return k, e


def elliptic_e(m: jax.Array) -> jax.Array:
    return _ke_kernel(precision.as_working(m))[1]


def elliptic_e_inc(phi: jax.Array, m: jax.Array) -> jax.Array:
    return _e_inc_kernel(precision.as_working(phi), precision.as_working(m))[0]


def elliptic_f(phi: jax.Array, m: jax.Array) -> jax.Array:
    return _f_kernel(precision.as_working(phi), precision.as_working(m))[0]


def elliptic_pi(n: jax.Array, phi: jax.Array, m: jax.Array) -> jax.Array:
    return _pi_kernel(precision.as_working(n), precision.as_working(phi), precision.as_working(m))[0]


def elliptic_k_batch(m: jax.Array) -> jax.Array:
    return jax.vmap(elliptic_k)(precision.as_working(m))


def elliptic_f_batch(phi: jax.Array, m: jax.Array) -> jax.Array:
    return jax.vmap(elliptic_f)(precision.as_working(phi), precision.as_working(m))


elliptic_k_jit = jax.jit(elliptic_k)
elliptic_ke_jit = jax.jit(elliptic_ke)
elliptic_e_jit = jax.jit(elliptic_e)
elliptic_e_inc_jit = jax.jit(elliptic_e_inc)
elliptic_f_jit = jax.jit(elliptic_f)
elliptic_pi_jit = jax.jit(elliptic_pi)
elliptic_k_batch_jit = jax.jit(elliptic_k_batch)
elliptic_f_batch_jit = jax.jit(elliptic_f_batch)


__all__ = [
    "K",
    "E",
    "F",
    "Pi",
    "ellipke",
    "elliptic_k",
    "elliptic_ke",
    "elliptic_e",
    "elliptic_e_inc",
    "elliptic_f",
    "elliptic_pi",
    "elliptic_k_batch",
    "elliptic_f_batch",
    "elliptic_k_jit",
    "elliptic_ke_jit",
    "elliptic_e_jit",
    "elliptic_e_inc_jit",
    "elliptic_f_jit",
    "elliptic_pi_jit",
    "elliptic_k_batch_jit",
    "elliptic_f_batch_jit",
]
