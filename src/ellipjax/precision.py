from __future__ import annotations

import os
from contextlib import contextmanager

import jax
import jax.numpy as jnp

jax.config.update("jax_enable_x64", True)

WORKING_DTYPE = jnp.float64
WORKING_EPS = float(jnp.finfo(WORKING_DTYPE).eps)

_TOL_ENV = "ELLIPJAX_AGM_TOL"


def _tol_from_env() -> float:
    raw = os.getenv(_TOL_ENV)
    if raw is None or raw.strip() == "":
        return WORKING_EPS
    tol = float(raw)
    if not tol >= 0.0:
        raise ValueError(f"{_TOL_ENV}: expected a non-negative float, got {raw!r}")
    return tol


_TOL = _tol_from_env()


def as_working(x) -> jax.Array:
    return jnp.asarray(x, dtype=WORKING_DTYPE)


def set_tol(tol: float) -> None:
    global _TOL
    tol = float(tol)
    if not tol >= 0.0:
        raise ValueError(f"tolerance must be non-negative, got {tol}")
    _TOL = tol


def reset_tol() -> None:
    set_tol(_tol_from_env())


def get_tol() -> float:
    return _TOL


def resolve_tol(tol: float | jax.Array | None) -> jax.Array:
    return as_working(_TOL if tol is None else tol)


@contextmanager
def worktol(tol: float):
    old = _TOL
    set_tol(tol)
    try:
        yield
    finally:
        set_tol(old)


__all__ = [
    "WORKING_DTYPE",
    "WORKING_EPS",
    "as_working",
    "set_tol",
    "reset_tol",
    "get_tol",
    "resolve_tol",
    "worktol",
]
