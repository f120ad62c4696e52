import random
import unittest

from crypto.errors import InvalidParameter, NotInvertible, RandomnessFailure
from crypto.numtheory import extended_gcd, gcd, mod_inverse, uniform_random


class _BrokenRng:
    def randint(self, lo, hi):
        raise OSError("no entropy")


class NumTheoryTest(unittest.TestCase):
    def test_gcd(self):
        self.assertEqual(gcd(12, 18), 6)
        self.assertEqual(gcd(-12, 18), 6)
        self.assertEqual(gcd(0, 7), 7)
        self.assertEqual(gcd(17, 5), 1)

    def test_extended_gcd_bezout(self):
        for a, b in [(240, 46), (17, 5), (2**127 - 1, 2**61 - 1), (0, 9)]:
            g, x, y = extended_gcd(a, b)
            self.assertEqual(g, gcd(a, b))
            self.assertEqual(a * x + b * y, g)

    def test_mod_inverse(self):
        self.assertEqual(mod_inverse(3, 11), 4)
        self.assertEqual(mod_inverse(5, 12), 5)
        # negative Bezout coefficient gets normalised
        self.assertEqual(mod_inverse(7, 40), 23)
        m = 2**521 - 1
        self.assertEqual((123456789 * mod_inverse(123456789, m)) % m, 1)

    def test_mod_inverse_not_invertible(self):
        with self.assertRaises(NotInvertible):
            mod_inverse(6, 12)

    def test_uniform_random_bounds(self):
        rng = random.Random(7)
        for _ in range(200):
            self.assertTrue(10 <= uniform_random(10, 20, rng) <= 20)
        self.assertEqual(uniform_random(5, 5, rng), 5)

    def test_uniform_random_empty_range(self):
        with self.assertRaises(InvalidParameter):
            uniform_random(3, 2)

    def test_uniform_random_entropy_failure(self):
        with self.assertRaises(RandomnessFailure):
            uniform_random(1, 10, _BrokenRng())


if __name__ == "__main__":
    unittest.main()
