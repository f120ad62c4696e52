# Failure kinds raised by the knapsack primitives and protocol layers


class KnapsackError(Exception):
    pass


# Bad caller input: non-positive key length, inverted range bounds, negative encodings
class InvalidParameter(KnapsackError, ValueError):
    pass


# The entropy source failed (or gave up) while sampling
class RandomnessFailure(KnapsackError, RuntimeError):
    pass


# gcd(a, n) != 1 so a has no inverse mod n
class NotInvertible(KnapsackError, ValueError):
    pass


# Message has more bits than the public key has entries
class KeyTooShort(KnapsackError, ValueError):
    pass


# Diagnostic decrypt: recovered bits don't add back up to the unblinded ciphertext
class VerificationFailed(KnapsackError, ValueError):
    pass


# Key file could not be parsed into integers
class KeyFileError(KnapsackError, ValueError):
    pass
