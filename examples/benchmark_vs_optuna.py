#!/usr/bin/env python3
"""
TPE Framework - Benchmark vs Optuna
===================================

Compares TpeSearch with Optuna's TPESampler and random search on small
continuous and mixed continuous+categorical problems.

Requires the ``benchmark`` extra (``pip install -e .[benchmark]``).

Usage:
    python examples/benchmark_vs_optuna.py
"""

from __future__ import annotations

import time
import warnings

import numpy as np
import optuna

from tpe_framework import TpeSearch

warnings.filterwarnings("ignore")  # suppress optuna experimental warnings

# ═══════════════════════════════════════════════════════════════════════════
#  BENCHMARKS
# ═══════════════════════════════════════════════════════════════════════════

_ACT_PENALTIES = {"relu": 0.0, "tanh": 0.5, "gelu": 0.2, "swish": 0.8}


def sphere_3d(config: dict) -> float:
    """Min = 0 at origin."""
    return config["x0"] ** 2 + config["x1"] ** 2 + config["x2"] ** 2


def rastrigin_2d(config: dict) -> float:
    """Min = 0 at origin.  Multimodal."""
    x = np.array([config["x0"], config["x1"]])
    return float(20 + np.sum(x ** 2 - 10 * np.cos(2 * np.pi * x)))


def square_plus_choice(config: dict) -> float:
    """Min = 1 at x=0, y=1."""
    return config["x"] ** 2 + config["y"]


def mixed_2c_1cat(config: dict) -> float:
    """Min = 0 at x=0.3, y=0.7, relu."""
    return (config["x"] - 0.3) ** 2 + (config["y"] - 0.7) ** 2 + _ACT_PENALTIES[config["activation"]]


BENCHMARKS = [
    ("Sphere 3-D", sphere_3d, {"x0": (-5.0, 5.0), "x1": (-5.0, 5.0), "x2": (-5.0, 5.0)}),
    ("Rastrigin 2-D", rastrigin_2d, {"x0": (-5.12, 5.12), "x1": (-5.12, 5.12)}),
    ("Square+Choice", square_plus_choice, {"x": (-5.0, 5.0), "y": [1, 2, 3]}),
    ("Mixed2c1cat", mixed_2c_1cat, {
        "x": (0.0, 1.0),
        "y": (0.0, 1.0),
        "activation": ["relu", "tanh", "gelu", "swish"],
    }),
]

BUDGET = 300
SEEDS = [42, 123, 7]


# ═══════════════════════════════════════════════════════════════════════════
#  RUNNERS
# ═══════════════════════════════════════════════════════════════════════════

def run_tpe_framework(func, param_space, budget, seed):
    search = TpeSearch(param_space)
    t0 = time.perf_counter()
    result = search.optimize(func, n_trials=budget, seed=seed)
    return result.best_value, time.perf_counter() - t0


def run_optuna(func, param_space, budget, seed):
    optuna.logging.set_verbosity(optuna.logging.WARNING)

    def objective(trial):
        config = {}
        for name, spec in param_space.items():
            if isinstance(spec, tuple):
                config[name] = trial.suggest_float(name, spec[0], spec[1])
            else:
                config[name] = trial.suggest_categorical(name, spec)
        return func(config)

    sampler = optuna.samplers.TPESampler(seed=seed)
    study = optuna.create_study(direction="minimize", sampler=sampler)
    t0 = time.perf_counter()
    study.optimize(objective, n_trials=budget, show_progress_bar=False)
    return study.best_value, time.perf_counter() - t0


def run_random(func, param_space, budget, seed):
    rng = np.random.default_rng(seed)
    t0 = time.perf_counter()
    best = float("inf")
    for _ in range(budget):
        config = {}
        for name, spec in param_space.items():
            if isinstance(spec, tuple):
                config[name] = rng.uniform(spec[0], spec[1])
            else:
                config[name] = spec[rng.integers(len(spec))]
        best = min(best, func(config))
    return best, time.perf_counter() - t0


RUNNERS = [
    ("TPE-FW", run_tpe_framework),
    ("Optuna", run_optuna),
    ("Random", run_random),
]


# ═══════════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════════

def main():
    print("=" * 78)
    print(f"  TPE Framework vs Optuna / Random (budget={BUDGET}, avg over {len(SEEDS)} seeds)")
    print("=" * 78)

    header = f"  {'Benchmark':16s}"
    for rname, _ in RUNNERS:
        header += f" | {rname:>18s}"
    print(header)
    print("  " + "-" * (16 + 21 * len(RUNNERS)))

    wins = {rn: 0 for rn, _ in RUNNERS}
    for bname, func, space in BENCHMARKS:
        row = f"  {bname:16s}"
        scores = {}
        for rname, rfunc in RUNNERS:
            runs = [rfunc(func, space, BUDGET, s) for s in SEEDS]
            avg = float(np.mean([v for v, _ in runs]))
            secs = float(np.mean([t for _, t in runs]))
            scores[rname] = avg
            row += f" | {avg:10.4f} ({secs:4.1f}s)"
        wins[min(scores, key=scores.get)] += 1
        print(row)

    print()
    for rn, _ in RUNNERS:
        print(f"  {rn:10s}  {wins[rn]:2d}/{len(BENCHMARKS)}  {'█' * wins[rn]}")


if __name__ == "__main__":
    main()
