from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import lax

from . import checks
from . import precision

jax.config.update("jax_enable_x64", True)

# Quadratic convergence needs fewer than ten steps in double precision.
AGM_MAX_STEPS = 24


def _agm_descent(m: jax.Array, tol: jax.Array) -> tuple[jax.Array, jax.Array, jax.Array, jax.Array]:
    def body(val, _):
        a, b, c, n, scale = val
        active = jnp.abs(c) > tol
        a_next = 0.5 * (a + b)
        b_next = jnp.sqrt(a * b)
        c_next = 0.5 * (a - b)
        ratio = jnp.where(active, c_next / a_next, 0.0)
        a = jnp.where(active, a_next, a)
        b = jnp.where(active, b_next, b)
        c = jnp.where(active, c_next, c)
        # doubling keeps 2**n exact
        scale = jnp.where(active, 2.0 * scale, scale)
        return (a, b, c, n + active.astype(jnp.int32), scale), ratio

    init = (
        jnp.ones_like(m),
        jnp.sqrt(1.0 - m),
        jnp.sqrt(m),
        jnp.asarray(0, dtype=jnp.int32),
        jnp.ones_like(m),
    )
    (a, _, _, n, scale), ratios = lax.scan(body, init, None, length=AGM_MAX_STEPS)
    return a, n, scale, ratios


def _landen_ascent(phi: jax.Array, n: jax.Array, ratios: jax.Array) -> jax.Array:
    def body(phi, step):
        ratio, active = step
        phi_next = 0.5 * (phi + jnp.arcsin(ratio * jnp.sin(phi)))
        return jnp.where(active, phi_next, phi), None

    active = jnp.arange(AGM_MAX_STEPS) < n
    phi, _ = lax.scan(body, phi, (ratios, active), reverse=True)
    return phi


def _am_general(u: jax.Array, m: jax.Array, tol: jax.Array) -> jax.Array:
    # assumes 0 < m < 1
    a, n, scale, ratios = _agm_descent(m, tol)
    phi = a * u * scale
    return _landen_ascent(phi, n, ratios)


def _gudermannian(u: jax.Array) -> jax.Array:
    return 2.0 * jnp.arctan(jnp.tanh(0.5 * u))


def _am_scalar(u: jax.Array, m: jax.Array, tol: jax.Array) -> jax.Array:
    in_domain = checks.parameter_in_domain(m)
    zero = m == 0.0
    one = m == 1.0
    ms = jnp.where(in_domain & ~zero & ~one, m, 0.5)
    phi = _am_general(u, ms, tol)
    phi = jnp.where(zero, u, jnp.where(one, _gudermannian(u), phi))
    return jnp.where(in_domain, phi, jnp.nan)


def _ellipj_scalar(u: jax.Array, m: jax.Array, tol: jax.Array) -> tuple[jax.Array, jax.Array, jax.Array]:
    in_domain = checks.parameter_in_domain(m)
    zero = m == 0.0
    one = m == 1.0
    ms = jnp.where(in_domain & ~zero & ~one, m, 0.5)
    phi = _am_general(u, ms, tol)
    sn = jnp.sin(phi)
    cn = jnp.cos(phi)
    dn = jnp.sqrt(1.0 - ms * sn * sn)

    sech = 1.0 / jnp.cosh(u)
    sn = jnp.where(zero, jnp.sin(u), jnp.where(one, jnp.tanh(u), sn))
    cn = jnp.where(zero, jnp.cos(u), jnp.where(one, sech, cn))
    dn = jnp.where(zero, 1.0, jnp.where(one, sech, dn))
    nan = jnp.nan * jnp.ones_like(sn)
    return (
        jnp.where(in_domain, sn, nan),
        jnp.where(in_domain, cn, nan),
        jnp.where(in_domain, dn, nan),
    )


_am_kernel = jax.jit(jnp.vectorize(_am_scalar))
_ellipj_kernel = jax.jit(jnp.vectorize(_ellipj_scalar))


def _prepare(u, m, tol, label: str) -> tuple[jax.Array, jax.Array, jax.Array]:
    u = precision.as_working(u)
    m = precision.as_working(m)
    checks.check_parameter(m, label)
    return u, m, precision.resolve_tol(tol)


def am(u, m, tol=None) -> jax.Array:
    """Jacobi amplitude ``phi`` with ``F(phi, m) = u``, by AGM descent and Landen ascent."""
    return _am_kernel(*_prepare(u, m, tol, "am"))


def _triple(u, m, tol, label: str) -> tuple[jax.Array, jax.Array, jax.Array]:
    return _ellipj_kernel(*_prepare(u, m, tol, label))


def ellipj(u, m, tol=None) -> tuple[jax.Array, jax.Array, jax.Array]:
    return _triple(u, m, tol, "ellipj")


def sn(u, m, tol=None) -> jax.Array:
    return _triple(u, m, tol, "sn")[0]


def cn(u, m, tol=None) -> jax.Array:
    return _triple(u, m, tol, "cn")[1]


def dn(u, m, tol=None) -> jax.Array:
    return _triple(u, m, tol, "dn")[2]


def cd(u, m, tol=None) -> jax.Array:
    _, c, d = _triple(u, m, tol, "cd")
    return c / d


def sd(u, m, tol=None) -> jax.Array:
    s, _, d = _triple(u, m, tol, "sd")
    return s / d


def nd(u, m, tol=None) -> jax.Array:
    return 1.0 / _triple(u, m, tol, "nd")[2]


def dc(u, m, tol=None) -> jax.Array:
    _, c, d = _triple(u, m, tol, "dc")
    return d / c


def nc(u, m, tol=None) -> jax.Array:
    return 1.0 / _triple(u, m, tol, "nc")[1]


def sc(u, m, tol=None) -> jax.Array:
    s, c, _ = _triple(u, m, tol, "sc")
    return s / c


def ns(u, m, tol=None) -> jax.Array:
    return 1.0 / _triple(u, m, tol, "ns")[0]


def ds(u, m, tol=None) -> jax.Array:
    s, _, d = _triple(u, m, tol, "ds")
    return d / s


def cs(u, m, tol=None) -> jax.Array:
    s, c, _ = _triple(u, m, tol, "cs")
    return c / s


def jacobi_am(u: jax.Array, m: jax.Array, tol: jax.Array | None = None) -> jax.Array:
    return _am_kernel(precision.as_working(u), precision.as_working(m), precision.resolve_tol(tol))


def jacobi_ellipj(u: jax.Array, m: jax.Array, tol: jax.Array | None = None) -> tuple[jax.Array, jax.Array, jax.Array]:
    return _ellipj_kernel(precision.as_working(u), precision.as_working(m), precision.resolve_tol(tol))


def jacobi_ellipj_batch(
    u: jax.Array, m: jax.Array, tol: jax.Array | None = None
) -> tuple[jax.Array, jax.Array, jax.Array]:
    return jax.vmap(jacobi_ellipj, in_axes=(0, 0, None))(
        precision.as_working(u), precision.as_working(m), precision.resolve_tol(tol)
    )


# Compiled cores take an explicit tolerance, resolved per call by the wrappers.
_jacobi_am_compiled = jax.jit(jacobi_am)
_jacobi_ellipj_compiled = jax.jit(jacobi_ellipj)
_jacobi_ellipj_batch_compiled = jax.jit(jacobi_ellipj_batch)


def jacobi_am_jit(u: jax.Array, m: jax.Array, tol: jax.Array | None = None) -> jax.Array:
    return _jacobi_am_compiled(u, m, precision.resolve_tol(tol))


def jacobi_ellipj_jit(
    u: jax.Array, m: jax.Array, tol: jax.Array | None = None
) -> tuple[jax.Array, jax.Array, jax.Array]:
    return _jacobi_ellipj_compiled(u, m, precision.resolve_tol(tol))


def jacobi_ellipj_batch_jit(
    u: jax.Array, m: jax.Array, tol: jax.Array | None = None
) -> tuple[jax.Array, jax.Array, jax.Array]:
    return _jacobi_ellipj_batch_compiled(u, m, precision.resolve_tol(tol))


__all__ = [
    "AGM_MAX_STEPS",
    "am",
    "ellipj",
    "sn",
    "cn",
    "dn",
    "cd",
    "sd",
    "nd",
    "dc",
    "nc",
    "sc",
    "ns",
    "ds",
    "cs",
    "jacobi_am",
    "jacobi_ellipj",
    "jacobi_ellipj_batch",
    "jacobi_am_jit",
    "jacobi_ellipj_jit",
    "jacobi_ellipj_batch_jit",
]
