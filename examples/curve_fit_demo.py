#!/usr/bin/env python3
"""
TPE Framework - Curve Fit Demo
==============================

Fits y = a * exp(-b * x) to noisy samples two ways: Levenberg-Marquardt with
dual-number Jacobians, and TPE searching (a, b) on the mean absolute error.

Usage:
    python examples/curve_fit_demo.py
"""

from __future__ import annotations

import time

import numpy as np

from tpe_framework import LmOptimizer, TpeSearch
from tpe_framework.dual import exp

TRUE_PARAMS = (2.0, 0.5)


def model(x, p):
    return p[0] * exp(-p[1] * x)


def make_data(seed: int = 0, n: int = 50, noise: float = 0.02):
    rng = np.random.default_rng(seed)
    x = np.linspace(0.0, 10.0, n)
    y = TRUE_PARAMS[0] * np.exp(-TRUE_PARAMS[1] * x) + rng.normal(0.0, noise, n)
    return x, y


def run_lm(x, y):
    opt = LmOptimizer((x, y), model).set_init_param([1.0, 1.0]).set_max_iter(100)
    t0 = time.perf_counter()
    p = opt.optimize(verbose=True)
    return p, opt.get_error(), time.perf_counter() - t0


def run_tpe(x, y, n_trials: int = 400):
    def mae(config: dict) -> float:
        pred = config["a"] * np.exp(-config["b"] * x)
        return float(np.mean(np.abs(y - pred)))

    search = TpeSearch({"a": (0.0, 5.0), "b": (0.0, 2.0)})
    t0 = time.perf_counter()
    result = search.optimize(mae, n_trials=n_trials, seed=42)
    p = np.array([result.best_params["a"], result.best_params["b"]])
    return p, result.best_value, time.perf_counter() - t0


def main():
    x, y = make_data()

    print("=" * 60)
    print(f"  Fitting y = a * exp(-b x), true (a, b) = {TRUE_PARAMS}")
    print("=" * 60)

    print("\n  Levenberg-Marquardt")
    print("  " + "-" * 40)
    p_lm, err_lm, t_lm = run_lm(x, y)

    print("\n  TPE (400 trials)")
    print("  " + "-" * 40)
    p_tpe, err_tpe, t_tpe = run_tpe(x, y)

    print()
    print(f"  {'Method':8s} | {'a':>9s} | {'b':>9s} | {'MAE':>10s} | {'time':>7s}")
    print("  " + "-" * 54)
    print(f"  {'LM':8s} | {p_lm[0]:9.5f} | {p_lm[1]:9.5f} | {err_lm:10.6f} | {t_lm:6.2f}s")
    print(f"  {'TPE':8s} | {p_tpe[0]:9.5f} | {p_tpe[1]:9.5f} | {err_tpe:10.6f} | {t_tpe:6.2f}s")


if __name__ == "__main__":
    main()
