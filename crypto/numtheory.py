from __future__ import annotations

import random
from random import SystemRandom

from crypto.errors import InvalidParameter, NotInvertible, RandomnessFailure


# Default entropy source; callers pass their own (seeded random.Random in tests)
def default_rng() -> random.Random:
    return SystemRandom()


# Euclid's algorithm, always non-negative
def gcd(a: int, b: int) -> int:
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def extended_gcd(a: int, b: int) -> tuple[int, int, int]:
    """
    Extended Euclidean algorithm.

    Returns (g, x, y) such that a*x + b*y == g == gcd(a, b).
    Iterative so big operands never hit the recursion limit.
    """
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x
        old_y, y = y, old_y - q * y
    if old_r < 0:
        old_r, old_x, old_y = -old_r, -old_x, -old_y
    return old_r, old_x, old_y


# x in [0, n) with a*x = 1 (mod n)
def mod_inverse(a: int, n: int) -> int:
    if n < 1:
        raise InvalidParameter(f"modulus must be positive, got {n}")
    g, x, _ = extended_gcd(a % n, n)
    if g != 1:
        raise NotInvertible(f"{a} has no inverse modulo {n} (gcd = {g})")
    return x % n  # x may come back negative


# Uniform integer in the closed range [lo, hi]
def uniform_random(lo: int, hi: int, rng: random.Random | None = None) -> int:
    if lo > hi:
        raise InvalidParameter(f"empty range [{lo}, {hi}]")
    rng = rng if rng is not None else default_rng()
    try:
        return rng.randint(lo, hi)
    except (OSError, NotImplementedError) as e:
        raise RandomnessFailure(f"entropy source failed: {e}") from e
