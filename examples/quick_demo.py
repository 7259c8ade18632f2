#!/usr/bin/env python3
"""
TPE Framework - Quick Demo
==========================

Minimizes f(x, y) = x^2 + y with x continuous in [-5, 5] (Parzen estimator)
and y a choice in {1, 2, 3} (histogram estimator), first with the raw
ask/tell API and then through ``TpeSearch``.

Usage:
    python examples/quick_demo.py
"""

from __future__ import annotations

import time

import numpy as np

from tpe_framework import (
    CategoricalRange,
    Range,
    TpeOptimizerBuilder,
    TpeSearch,
    histogram_estimator,
    parzen_estimator,
)

CHOICES = [1, 2, 3]
N_TRIALS = 500
SEED = 42


def objective(x: float, y: int) -> float:
    """Min = 1 at x=0, y=1."""
    return x ** 2 + y


def run_ask_tell() -> None:
    rng = np.random.default_rng(SEED)
    builder = TpeOptimizerBuilder()
    x_opt = builder.build(parzen_estimator(), Range(-5.0, 5.0))
    y_opt = builder.build(histogram_estimator(), CategoricalRange(len(CHOICES)))

    best = (float("inf"), None, None)
    t0 = time.perf_counter()
    for _ in range(N_TRIALS):
        x = x_opt.ask(rng)
        y_idx = y_opt.ask(rng)
        value = objective(x, CHOICES[int(y_idx)])
        x_opt.tell(x, value)
        y_opt.tell(y_idx, value)
        if value < best[0]:
            best = (value, x, CHOICES[int(y_idx)])
    elapsed = time.perf_counter() - t0

    print(f"  best value : {best[0]:.6f}")
    print(f"  best x     : {best[1]:.6f}")
    print(f"  best y     : {best[2]}")
    print(f"  time       : {elapsed:.2f}s")
    print(f"  x optimizer: {x_opt}")


def run_search() -> None:
    search = TpeSearch({"x": (-5.0, 5.0), "y": CHOICES})
    result = search.optimize(
        lambda c: objective(c["x"], c["y"]),
        n_trials=N_TRIALS,
        seed=SEED,
        verbose=True,
        print_every=100,
    )
    print()
    print(result)
    print("  improvements:")
    for trial, value in result.best_value_history:
        print(f"    trial {trial:4d}  {value:.6f}")


def main():
    print("=" * 60)
    print("  TPE Framework - ask/tell (x in [-5, 5], y in {1, 2, 3})")
    print("=" * 60)
    run_ask_tell()

    print()
    print("=" * 60)
    print("  TPE Framework - TpeSearch")
    print("=" * 60)
    run_search()


if __name__ == "__main__":
    main()
