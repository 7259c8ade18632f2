import unittest

from tpe_framework.gamma import n_good, split_good_bad


class TestGammaSplit(unittest.TestCase):
    def test_n_good(self):
        self.assertEqual(n_good(0, 0.25), 0)
        self.assertEqual(n_good(1, 0.25), 1)
        self.assertEqual(n_good(4, 0.25), 1)
        self.assertEqual(n_good(5, 0.25), 2)
        self.assertEqual(n_good(100, 0.25), 25)
        self.assertEqual(n_good(10, 1.0), 10)

    def test_ceil_is_robust_to_float_products(self):
        # 0.3 * 10 == 3.0000000000000004 in floating point
        self.assertEqual(n_good(10, 0.3), 3)

    def test_split_by_objective(self):
        values = [10.0, 20.0, 30.0, 40.0]
        objectives = [4.0, 1.0, 3.0, 2.0]
        good, bad = split_good_bad(values, objectives, 0.5)
        self.assertEqual(good, [20.0, 40.0])
        self.assertEqual(bad, [30.0, 10.0])

    def test_ties_keep_insertion_order(self):
        values = [1.0, 2.0, 3.0, 4.0]
        objectives = [0.5, 0.5, 0.5, 0.5]
        good, bad = split_good_bad(values, objectives, 0.5)
        self.assertEqual(good, [1.0, 2.0])
        self.assertEqual(bad, [3.0, 4.0])

    def test_empty_history(self):
        self.assertEqual(split_good_bad([], [], 0.25), ([], []))

    def test_single_trial_is_good(self):
        good, bad = split_good_bad([7.0], [1.0], 0.01)
        self.assertEqual(good, [7.0])
        self.assertEqual(bad, [])

    def test_length_mismatch(self):
        with self.assertRaises(ValueError):
            split_good_bad([1.0, 2.0], [1.0], 0.5)


if __name__ == '__main__':
    unittest.main(verbosity=2)
