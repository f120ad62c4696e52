from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from hashlib import sha256
from typing import Optional, Sequence, Tuple

from core.solver import solve_superincreasing, sum_with_mask
from crypto.errors import InvalidParameter, KeyTooShort, NotInvertible, RandomnessFailure, VerificationFailed
from crypto.numtheory import default_rng, gcd, mod_inverse, uniform_random
from crypto.utils import bits_to_bytes, bytes_to_bits, int_from_bytes, int_to_bytes

log = logging.getLogger(__name__)

KEY_ID_LENGTH = 10


# Merkle–Hellman knapsack key pair. Built once by generate() and never mutated.
# A private view (as loaded from a private key file) carries public_key=None.
@dataclass(frozen=True)
class KeyPair:
    public_key: Optional[Tuple[int, ...]]
    private_key: Tuple[int, ...]
    modulus: int
    multiplier: int
    multiplier_inverse: int

    @property
    def key_length(self) -> int:
        return len(self.private_key)

    # what gets handed to the sender
    def public_view(self) -> Tuple[int, ...]:
        if self.public_key is None:
            raise InvalidParameter("key pair has no public key attached")
        return self.public_key

    # what the receiver keeps: everything needed to decrypt
    def private_view(self) -> KeyPair:
        return KeyPair(None, self.private_key, self.modulus, self.multiplier, self.multiplier_inverse)

    def decrypt(self, ciphertext: int, verify: bool = False) -> bytes:
        return decrypt(self, ciphertext, verify)


def random_superincreasing_sequence(length: int, rng: random.Random | None = None) -> list[int]:
    """
    Draw a random superincreasing sequence of `length` elements.

    Element i comes from [(2^i - 1)(2^L + 1) + 1, 2^i (2^L + 1)]. The lower
    bound already exceeds the largest possible sum of elements 0..i-1, so
    the sequence is superincreasing by construction.
    """
    if length < 1:
        raise InvalidParameter(f"key length must be > 0, got {length}")
    rng = rng if rng is not None else default_rng()
    step = (1 << length) + 1  # 2^L + 1
    out = []
    for i in range(length):
        hi = (1 << i) * step
        lo = hi - step + 1
        out.append(uniform_random(lo, hi, rng))
    return out


# Build a key pair: superincreasing private key, modulus M, multiplier W coprime to M
def generate(key_length: int, rng: random.Random | None = None, max_attempts: int | None = None) -> KeyPair:
    if key_length < 1:
        raise InvalidParameter(f"key length must be > 0, got {key_length}")
    rng = rng if rng is not None else default_rng()
    private_key = random_superincreasing_sequence(key_length, rng)

    # M in [2^(2L+1) + 1, 2^(2L+2) - 1], always above sum(private_key)
    m = uniform_random((1 << (2 * key_length + 1)) + 1, (1 << (2 * key_length + 2)) - 1, rng)

    # Resample W' in [2, M-2] until W = W'/gcd(W', M) is invertible mod M.
    # No hard cap unless max_attempts is given; in practice a few draws suffice.
    attempts = 0
    while True:
        if max_attempts is not None and attempts >= max_attempts:
            raise RandomnessFailure(f"no invertible multiplier found after {attempts} attempts")
        attempts += 1
        w_prime = uniform_random(2, m - 2, rng)
        w = w_prime // gcd(w_prime, m)
        if w < 2:  # W' divided M; W = 1 would leave the private key undisguised
            continue
        try:
            wi = mod_inverse(w, m)
        except NotInvertible:
            continue
        break
    log.debug("knapsack of length %d: multiplier found after %d attempt(s)", key_length, attempts)

    public_key = tuple((n * w) % m for n in private_key)
    return KeyPair(public_key, tuple(private_key), m, w, wi)


# First 10 bytes of sha256 over the key's integers - only for telling keys apart by eye
def key_id(key: Sequence[int]) -> bytes:
    h = sha256()
    for n in key:
        h.update(int_to_bytes(n))
    return h.digest()[:KEY_ID_LENGTH]


# Sum of the public key entries selected by the message bits (MSB first)
def encrypt(public_key: Sequence[int], plaintext: bytes) -> int:
    bits = bytes_to_bits(plaintext)
    if len(public_key) < len(bits):
        raise KeyTooShort(f"public key holds {len(public_key)} bits, message needs {len(bits)}")
    return sum(pk for bit, pk in zip(bits, public_key) if bit)


def encrypt_bytes(public_key: Sequence[int], plaintext: bytes) -> bytes:
    return int_to_bytes(encrypt(public_key, plaintext))


def encrypt_string(public_key: Sequence[int], message: str) -> bytes:
    return encrypt_bytes(public_key, message.encode())


def decrypt(key_pair: KeyPair, ciphertext: int, verify: bool = False) -> bytes:
    """
    Recover the plaintext bytes of `ciphertext`.

    The result is always len(private_key) // 8 bytes long, so a message
    shorter than the key comes back followed by zero bytes; trimming is up
    to the caller. A ciphertext that isn't a real subset sum of the public
    key decrypts to garbage rather than an error. Pass verify=True to check
    the recovered bits against the unblinded ciphertext instead.
    """
    # multiply by W^-1 mod M to undo the blinding
    c = (ciphertext * key_pair.multiplier_inverse) % key_pair.modulus
    bits = solve_superincreasing(key_pair.private_key, c)
    if verify and sum_with_mask(key_pair.private_key, bits) != c:
        raise VerificationFailed("ciphertext is not a subset sum of this key")
    return bits_to_bytes(bits)


def decrypt_bytes(key_pair: KeyPair, data: bytes, verify: bool = False) -> bytes:
    return decrypt(key_pair, int_from_bytes(data), verify)
