from __future__ import annotations

import argparse

import mpmath as mp
import numpy as np

import ellipjax

from _runlog import log_run


def _rel_err(got: np.ndarray, ref: np.ndarray) -> float:
    scale = np.maximum(np.abs(ref), 1e-300)
    return float(np.max(np.abs(got - ref) / scale))


def _cases(rng: np.random.Generator, n: int) -> dict[str, tuple[np.ndarray, np.ndarray]]:
    m = rng.uniform(0.0, 0.999, size=n)
    phi = rng.uniform(-0.5 * np.pi, 0.5 * np.pi, size=n)
    big_phi = rng.uniform(-10.0, 10.0, size=n)
    u = rng.uniform(-6.0, 6.0, size=n)
    out = {
        "K": (np.asarray(ellipjax.K(m)), np.array([float(mp.ellipk(a)) for a in m])),
        "E": (np.asarray(ellipjax.E(m)), np.array([float(mp.ellipe(a)) for a in m])),
        "F": (np.asarray(ellipjax.F(big_phi, m)), np.array([float(mp.ellipf(p, a)) for p, a in zip(big_phi, m)])),
        "E(phi)": (np.asarray(ellipjax.E(phi, m)), np.array([float(mp.ellipe(p, a)) for p, a in zip(phi, m)])),
        "Pi": (
            np.asarray(ellipjax.Pi(0.5, phi, m)),
            np.array([float(mp.ellippi(0.5, p, a)) for p, a in zip(phi, m)]),
        ),
    }
    s, c, d = ellipjax.ellipj(u, m)
    for name, got in (("sn", s), ("cn", c), ("dn", d)):
        ref = np.array([float(mp.ellipfun(name, x, m=a)) for x, a in zip(u, m)])
        out[name] = (np.asarray(got), ref)
    return out


def main() -> int:
    parser = argparse.ArgumentParser(description="Compare ellipjax against mpmath.")
    parser.add_argument("--samples", type=int, default=500)
    parser.add_argument("--dps", type=int, default=30)
    parser.add_argument("--seed", type=int, default=7)
    args = parser.parse_args()

    mp.mp.dps = args.dps
    rng = np.random.default_rng(args.seed)
    worst = 0.0
    for name, (got, ref) in _cases(rng, args.samples).items():
        err = _rel_err(got, ref)
        worst = max(worst, err)
        print(f"{name:8s} | samples={args.samples} | max_rel_err={err:.3e}")

    log_run(
        "compare_mpmath",
        f"compare_mpmath.py --samples {args.samples} --dps {args.dps} --seed {args.seed}",
        f"max_rel_err={worst:.3e}",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
