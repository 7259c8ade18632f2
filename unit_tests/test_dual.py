import math
import unittest

import numpy as np

from tpe_framework.dual import Dual, cos, exp, log, sin, sqrt, tanh


class TestDualArithmetic(unittest.TestCase):
    def setUp(self):
        self.a, self.b = Dual.variables([2.0, 3.0])

    def test_seeding(self):
        np.testing.assert_array_equal(self.a.grad, [1.0, 0.0])
        np.testing.assert_array_equal(self.b.grad, [0.0, 1.0])
        c = Dual.constant(5.0, 2)
        np.testing.assert_array_equal(c.grad, [0.0, 0.0])

    def test_add_sub_with_constants(self):
        y = 1.0 + self.a - self.b + 4
        self.assertAlmostEqual(float(y), 4.0)
        np.testing.assert_allclose(y.grad, [1.0, -1.0])

        y = 10 - self.a
        self.assertAlmostEqual(float(y), 8.0)
        np.testing.assert_allclose(y.grad, [-1.0, 0.0])

    def test_product_rule(self):
        y = self.a * self.b * 2
        self.assertAlmostEqual(float(y), 12.0)
        np.testing.assert_allclose(y.grad, [6.0, 4.0])

    def test_quotient_rule(self):
        y = self.a / self.b
        np.testing.assert_allclose(y.grad, [1 / 3, -2 / 9])
        y = 1.0 / self.a
        np.testing.assert_allclose(y.grad, [-0.25, 0.0])

    def test_powers(self):
        y = self.a ** 3
        self.assertAlmostEqual(float(y), 8.0)
        np.testing.assert_allclose(y.grad, [12.0, 0.0])

        y = 2.0 ** self.b
        np.testing.assert_allclose(y.grad, [0.0, 8.0 * math.log(2.0)])

        y = self.a ** self.b  # d/da = b a^(b-1), d/db = a^b ln a
        np.testing.assert_allclose(y.grad, [12.0, 8.0 * math.log(2.0)])

        y = self.a ** 0
        self.assertEqual(float(y), 1.0)
        np.testing.assert_allclose(y.grad, [0.0, 0.0])

    def test_negation_and_abs(self):
        y = abs(-self.a)
        self.assertEqual(float(y), 2.0)
        np.testing.assert_allclose(y.grad, [1.0, 0.0])

    def test_numpy_scalar_on_the_left(self):
        y = np.float64(3.0) * self.a
        self.assertIsInstance(y, Dual)
        np.testing.assert_allclose(y.grad, [3.0, 0.0])

    def test_comparisons(self):
        self.assertTrue(self.a < self.b)
        self.assertTrue(self.b >= 3.0)
        self.assertFalse(self.a > 2.0)


class TestElementaryFunctions(unittest.TestCase):
    def test_match_analytic_derivatives(self):
        x0 = 0.7
        (x,) = Dual.variables([x0])
        cases = [
            (exp, math.exp(x0)),
            (log, 1 / x0),
            (sqrt, 0.5 / math.sqrt(x0)),
            (sin, math.cos(x0)),
            (cos, -math.sin(x0)),
            (tanh, 1 - math.tanh(x0) ** 2),
        ]
        for fn, expected in cases:
            with self.subTest(fn=fn.__name__):
                self.assertAlmostEqual(float(fn(x).grad[0]), expected, places=12)

    def test_plain_numbers_pass_through(self):
        self.assertAlmostEqual(exp(1.0), math.e)
        self.assertAlmostEqual(log(math.e), 1.0)
        self.assertAlmostEqual(sqrt(4.0), 2.0)
        self.assertIsInstance(sin(0.3), float)

    def test_matches_finite_differences_on_model(self):
        def model(x, p):
            return p[0] * exp(-p[1] * x) + p[2] * sin(x)

        p0 = np.array([2.0, 0.5, 0.3])
        out = model(1.7, Dual.variables(p0))

        h = 1e-6
        for i in range(3):
            dp = np.zeros(3)
            dp[i] = h
            fd = (model(1.7, list(p0 + dp)) - model(1.7, list(p0 - dp))) / (2 * h)
            self.assertAlmostEqual(out.grad[i], fd, places=6)


if __name__ == '__main__':
    unittest.main(verbosity=2)
