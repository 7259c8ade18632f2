import math
import unittest

import numpy as np

from tpe_framework import (
    CategoricalRange,
    InvalidConfig,
    InvalidObservation,
    OptimizerError,
    Range,
    TpeConfig,
    TpeOptimizer,
    TpeOptimizerBuilder,
    histogram_estimator,
    parzen_estimator,
)


def _run_sphere(seed: int, n_trials: int = 60):
    rng = np.random.default_rng(seed)
    opt = TpeOptimizer(parzen_estimator(), Range(-5.0, 5.0))
    asked = []
    for _ in range(n_trials):
        x = opt.ask(rng)
        asked.append(x)
        opt.tell(x, x ** 2)
    return asked, opt


class TestTpeConfig(unittest.TestCase):
    def test_defaults(self):
        config = TpeConfig()
        self.assertEqual(config.gamma, 0.25)
        self.assertEqual(config.candidates, 24)

    def test_gamma_bounds(self):
        TpeConfig(gamma=1.0)
        for gamma in (0.0, -0.1, 1.5, float("nan")):
            with self.assertRaises(InvalidConfig):
                TpeConfig(gamma=gamma)

    def test_candidates_bounds(self):
        TpeConfig(candidates=1)
        with self.assertRaises(InvalidConfig):
            TpeConfig(candidates=0)
        with self.assertRaises(InvalidConfig):
            TpeConfig(candidates=2.5)


class TestTpeOptimizerBuilder(unittest.TestCase):
    def test_build_with_overrides(self):
        opt = TpeOptimizerBuilder().gamma(0.1).candidates(64).build(parzen_estimator(), Range(0.0, 1.0))
        self.assertIsInstance(opt, TpeOptimizer)
        self.assertEqual(opt.config.gamma, 0.1)
        self.assertEqual(opt.config.candidates, 64)

    def test_invalid_gamma_fails_at_build(self):
        builder = TpeOptimizerBuilder().gamma(1.5)
        with self.assertRaises(InvalidConfig):
            builder.build(parzen_estimator(), Range(-5.0, 5.0))

    def test_invalid_candidates_fails_at_build(self):
        with self.assertRaises(InvalidConfig):
            TpeOptimizerBuilder().candidates(0).build(parzen_estimator(), Range(-5.0, 5.0))

    def test_estimator_space_mismatch(self):
        with self.assertRaises(InvalidConfig):
            TpeOptimizerBuilder().build(parzen_estimator(), CategoricalRange(3))
        with self.assertRaises(InvalidConfig):
            TpeOptimizer(histogram_estimator(), Range(0.0, 1.0))

    def test_unknown_estimator(self):
        with self.assertRaises(TypeError):
            TpeOptimizer(object(), Range(0.0, 1.0))


class TestAsk(unittest.TestCase):
    def test_continuous_values_stay_in_bounds(self):
        rng = np.random.default_rng(0)
        for low, high in [(-5.0, 5.0), (1.0, 1.0001), (-1e6, 1e6), (0.0, 1.0)]:
            opt = TpeOptimizer(parzen_estimator(), Range(low, high))
            for i in range(80):
                x = opt.ask(rng)
                self.assertIsInstance(x, float)
                self.assertGreaterEqual(x, low)
                self.assertLessEqual(x, high)
                # objective pushes toward the upper bound
                opt.tell(x, -x + 0.01 * i)

    def test_categorical_values_are_indices(self):
        rng = np.random.default_rng(1)
        for n in (1, 2, 3, 7):
            opt = TpeOptimizer(histogram_estimator(), CategoricalRange(n))
            for _ in range(50):
                y = opt.ask(rng)
                self.assertEqual(y, math.floor(y))
                self.assertTrue(0 <= y < n)
                opt.tell(y, float(y))

    def test_empty_history_uses_prior(self):
        opt = TpeOptimizer(parzen_estimator(), Range(-5.0, 5.0))
        x = opt.ask(np.random.default_rng(5))
        self.assertTrue(-5.0 <= x <= 5.0)
        self.assertEqual(opt.n_observations, 0)

    def test_equal_scores_pick_first_candidate(self):
        # with no history l and g are both the uniform prior, so every score ties
        opt = TpeOptimizer(parzen_estimator(), Range(-5.0, 5.0))
        x = opt.ask(np.random.default_rng(5))
        expected = np.random.default_rng(5).uniform(-5.0, 5.0, 24)[0]
        self.assertEqual(x, float(expected))

    def test_rng_must_be_generator(self):
        opt = TpeOptimizer(parzen_estimator(), Range(-5.0, 5.0))
        with self.assertRaises(TypeError):
            opt.ask(42)

    def test_deterministic_with_same_seed(self):
        asked_a, _ = _run_sphere(seed=2024)
        asked_b, _ = _run_sphere(seed=2024)
        self.assertEqual(asked_a, asked_b)

        asked_c, _ = _run_sphere(seed=2025)
        self.assertNotEqual(asked_a, asked_c)

    def test_ask_does_not_mutate_history(self):
        _, opt = _run_sphere(seed=3, n_trials=20)
        before = opt.history
        opt.ask(np.random.default_rng(0))
        self.assertEqual(opt.history, before)

    def test_categorical_prefers_good_category(self):
        rng = np.random.default_rng(11)
        opt = TpeOptimizer(histogram_estimator(), CategoricalRange(4))
        for i in range(40):
            opt.tell(float(i % 4), 0.0 if i % 4 == 2 else 1.0)
        picks = [opt.ask(rng) for _ in range(50)]
        self.assertGreater(picks.count(2.0), 40)


class TestTell(unittest.TestCase):
    def setUp(self):
        self.opt = TpeOptimizer(parzen_estimator(), Range(-5.0, 5.0))
        self.opt.tell(1.0, 1.0)

    def test_non_finite_objective_rejected(self):
        for bad in (float("nan"), float("inf"), -float("inf")):
            n_before = self.opt.n_observations
            with self.assertRaises(InvalidObservation):
                self.opt.tell(0.0, bad)
            self.assertEqual(self.opt.n_observations, n_before)

    def test_out_of_range_value_rejected(self):
        with self.assertRaises(InvalidObservation):
            self.opt.tell(5.5, 1.0)
        with self.assertRaises(InvalidObservation):
            self.opt.tell(float("nan"), 1.0)
        self.assertEqual(self.opt.n_observations, 1)

    def test_non_numeric_rejected(self):
        with self.assertRaises(InvalidObservation):
            self.opt.tell("a", 1.0)
        with self.assertRaises(OptimizerError):
            self.opt.tell(0.0, None)
        self.assertEqual(self.opt.n_observations, 1)

    def test_categorical_upper_bound_is_exclusive(self):
        opt = TpeOptimizer(histogram_estimator(), CategoricalRange(3))
        opt.tell(2.0, 0.0)
        with self.assertRaises(InvalidObservation):
            opt.tell(3.0, 0.0)
        self.assertEqual(opt.n_observations, 1)

    def test_history_order(self):
        self.opt.tell(-2.0, 4.0)
        self.opt.tell(0.5, 0.25)
        self.assertEqual([t.value for t in self.opt.history], [1.0, -2.0, 0.5])
        self.assertEqual(self.opt.value_history(), [1.0, 4.0, 0.25])


class TestHistoryViews(unittest.TestCase):
    def test_best_trial_earliest_wins_ties(self):
        opt = TpeOptimizer(parzen_estimator(), Range(-5.0, 5.0))
        self.assertIsNone(opt.best_trial)
        for x, v in [(1.0, 3.0), (2.0, 1.0), (3.0, 1.0), (4.0, 2.0)]:
            opt.tell(x, v)
        idx, trial = opt.best_trial
        self.assertEqual(idx, 1)
        self.assertEqual(trial.value, 2.0)

    def test_best_value_history_is_non_increasing(self):
        rng = np.random.default_rng(9)
        opt = TpeOptimizer(parzen_estimator(), Range(-5.0, 5.0))
        for _ in range(100):
            x = opt.ask(rng)
            opt.tell(x, float(np.sin(3 * x) + 0.1 * x * x))

        best = opt.best_value_history()
        values = [v for _, v in best]
        indices = [i for i, _ in best]
        self.assertTrue(all(b < a for a, b in zip(values, values[1:])))
        self.assertTrue(all(b > a for a, b in zip(indices, indices[1:])))
        self.assertEqual(values[-1], min(opt.value_history()))

    def test_statistics_and_repr(self):
        _, opt = _run_sphere(seed=4, n_trials=10)
        stats = opt.get_statistics()
        self.assertEqual(stats["n_observations"], 10)
        self.assertEqual(stats["estimator"], "ParzenEstimator")
        self.assertFalse(stats["categorical"])
        self.assertIn("TpeOptimizer(continuous", repr(opt))

        cat = TpeOptimizer(histogram_estimator(), CategoricalRange(3))
        self.assertTrue(cat.is_categorical)
        self.assertTrue(cat.get_statistics()["categorical"])
        self.assertIn("TpeOptimizer(categorical", repr(cat))


class TestEndToEnd(unittest.TestCase):
    def test_minimize_square(self):
        # f(x) = x^2 over [-5, 5], 500 trials
        asked, opt = _run_sphere(seed=42, n_trials=500)
        idx, best = opt.best_trial
        self.assertLess(best.objective, 1e-2)
        self.assertLess(abs(best.value), 0.1)

    def test_minimize_shifted_square_with_builder(self):
        rng = np.random.default_rng(0)
        opt = TpeOptimizerBuilder().gamma(0.15).candidates(32).build(parzen_estimator(), Range(0.0, 10.0))
        for _ in range(300):
            x = opt.ask(rng)
            opt.tell(x, (x - 7.3) ** 2)
        _, best = opt.best_trial
        self.assertLess(abs(best.value - 7.3), 0.2)


if __name__ == '__main__':
    unittest.main(verbosity=2)
