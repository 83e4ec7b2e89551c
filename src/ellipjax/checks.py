from __future__ import annotations

import logging

import jax
import jax.numpy as jnp

jax.config.update("jax_enable_x64", True)

logger = logging.getLogger(__name__)

STATUS_OK = 0
STATUS_NEGATIVE = 1
STATUS_TOO_SMALL = 2
STATUS_TOO_LARGE = 3
STATUS_NO_CONVERGENCE = 4

_STATUS_TEXT = {
    STATUS_NEGATIVE: "negative argument",
    STATUS_TOO_SMALL: "argument below lower limit",
    STATUS_TOO_LARGE: "argument above upper limit",
    STATUS_NO_CONVERGENCE: "duplication did not converge",
}


class DomainError(ValueError):
    pass


class ProviderError(RuntimeError):
    def __init__(self, label: str, codes: tuple[int, ...]):
        self.label = label
        self.codes = codes
        text = ", ".join(f"{c} ({_STATUS_TEXT.get(c, 'unknown')})" for c in codes)
        super().__init__(f"{label}: symmetric integral failed with status {text}")


def _any_concrete(cond: jax.Array) -> bool | None:
    # None under tracing: the kernels flag these elements with nan instead.
    try:
        return bool(jnp.any(cond))
    except jax.errors.ConcretizationTypeError:
        return None


def _first_where(x: jax.Array, cond: jax.Array) -> float:
    x, cond = jnp.broadcast_arrays(x, cond)
    flat = jnp.ravel(cond)
    return float(jnp.ravel(x)[jnp.argmax(flat)])


def parameter_in_domain(m: jax.Array) -> jax.Array:
    # nan is outside [0, 1]
    return (m >= 0.0) & (m <= 1.0)


def phase_in_domain(phi: jax.Array) -> jax.Array:
    return ~(jnp.abs(phi) > 0.5 * jnp.pi)


def characteristic_in_domain(n: jax.Array, phi: jax.Array) -> jax.Array:
    return ~(1.0 - n * jnp.sin(phi) ** 2 <= 0.0)


def check_parameter(m: jax.Array, label: str) -> None:
    bad = ~parameter_in_domain(m)
    if _any_concrete(bad):
        value = _first_where(m, bad)
        logger.debug("%s: rejecting parameter m=%r", label, value)
        raise DomainError(f"{label}: expected 0 <= m <= 1, got m={value!r}")


def check_phase(phi: jax.Array, label: str) -> None:
    bad = ~phase_in_domain(phi)
    if _any_concrete(bad):
        value = _first_where(phi, bad)
        logger.debug("%s: rejecting phase phi=%r", label, value)
        raise DomainError(f"{label}: expected |phi| <= pi/2, got phi={value!r}")


def check_characteristic(n: jax.Array, phi: jax.Array, label: str) -> None:
    bad = ~characteristic_in_domain(n, phi)
    if _any_concrete(bad):
        value = _first_where(n, bad)
        logger.debug("%s: rejecting characteristic n=%r", label, value)
        raise DomainError(f"{label}: expected n*sin(phi)**2 < 1, got n={value!r}")


def check_status(status: jax.Array, label: str) -> None:
    failed = status != STATUS_OK
    if _any_concrete(failed):
        codes = tuple(sorted({int(c) for c in jnp.ravel(status).tolist()} - {STATUS_OK}))
        logger.error("%s: symmetric integral provider returned status %s", label, codes)
        raise ProviderError(label, codes)


__all__ = [
    "STATUS_OK",
    "STATUS_NEGATIVE",
    "STATUS_TOO_SMALL",
    "STATUS_TOO_LARGE",
    "STATUS_NO_CONVERGENCE",
    "DomainError",
    "ProviderError",
    "parameter_in_domain",
    "phase_in_domain",
    "characteristic_in_domain",
    "check_parameter",
    "check_phase",
    "check_characteristic",
    "check_status",
]
