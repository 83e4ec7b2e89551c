from __future__ import annotations

import argparse
import time

import jax
import jax.numpy as jnp
import numpy as np

from ellipjax import elliptic, jacobi

from _runlog import log_run

_KERNELS = {
    "k": lambda phi, m: elliptic.elliptic_k(m),
    "e": lambda phi, m: elliptic.elliptic_e(m),
    "f": lambda phi, m: elliptic.elliptic_f(phi, m),
    "am": lambda phi, m: jacobi.jacobi_am(phi, m),
    "ellipj": lambda phi, m: jacobi.jacobi_ellipj(phi, m),
}


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark ellipjax JAX kernels.")
    parser.add_argument("--samples", type=int, default=20000)
    parser.add_argument("--which", type=str, default="k", choices=sorted(_KERNELS))
    args = parser.parse_args()

    rng = np.random.default_rng(2143)
    m = jnp.asarray(rng.uniform(0.0, 0.999, size=args.samples))
    phi = jnp.asarray(rng.uniform(-10.0, 10.0, size=args.samples))

    fn = jax.jit(_KERNELS[args.which])
    jax.block_until_ready(fn(phi, m))
    t0 = time.perf_counter()
    jax.block_until_ready(fn(phi, m))
    t1 = time.perf_counter()
    ms = (t1 - t0) * 1000.0

    print(f"ellipjax ({args.which}) | samples={args.samples} | time_ms={ms:.2f}")
    log_run(
        "benchmark_elliptic",
        f"benchmark_elliptic.py --samples {args.samples} --which {args.which}",
        f"time_ms={ms:.2f}",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
