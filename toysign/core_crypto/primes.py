"""
Prime Sampling

- Deterministic primality test (6k +/- 1 trial division)
- Random prime sampling by rejection
- Pairs of distinct random primes

Primes are kept below MAX_KEY_VAL so a key's modulus fits in 32 bits. This
makes keys trivially crackable and is only meant for demonstration.
"""

import secrets
from random import Random
from typing import Optional, Tuple


# Primes are drawn from [MIN_PRIME_CANDIDATE, MAX_KEY_VAL)
MAX_KEY_VAL = 65536
MIN_PRIME_CANDIDATE = 3

# The smallest bound with two primes (3 and 5) to choose from
_MIN_PAIR_BOUND = 6


def is_prime(n: int) -> bool:
    """
    Check primality with the 6k +/- 1 trial division test.

    Every prime above 3 has the form 6k - 1 or 6k + 1, so after ruling
    out multiples of 2 and 3 only those divisors up to sqrt(n) are tried.

    Args:
        n: Number to test

    Returns:
        True if n is prime, False otherwise
    """
    if n <= 3:
        return n > 1
    if n % 2 == 0 or n % 3 == 0:
        return False

    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6

    return True


def _system_rng() -> Random:
    return secrets.SystemRandom()


def random_prime(rng: Optional[Random] = None, max_exclusive: int = MAX_KEY_VAL) -> int:
    """
    Draw a random prime from [3, max_exclusive).

    Keeps drawing uniform candidates until one passes is_prime(). There is
    no retry limit; the expected number of draws grows with
    ln(max_exclusive).

    Args:
        rng: Random source (random.Random compatible). A fresh
             secrets.SystemRandom() is used when omitted.
        max_exclusive: Exclusive upper bound for the prime

    Returns:
        A prime p with 3 <= p < max_exclusive

    Raises:
        ValueError: If the range holds no prime
    """
    if max_exclusive <= MIN_PRIME_CANDIDATE:
        raise ValueError(
            f"Prime bound must be greater than {MIN_PRIME_CANDIDATE} (got {max_exclusive})"
        )
    if rng is None:
        rng = _system_rng()

    while True:
        candidate = rng.randrange(MIN_PRIME_CANDIDATE, max_exclusive)
        if is_prime(candidate):
            return candidate


def two_distinct_primes(rng: Optional[Random] = None,
                        max_exclusive: int = MAX_KEY_VAL) -> Tuple[int, int]:
    """
    Draw two different random primes below max_exclusive.

    Both primes are redrawn whenever they collide.

    Returns:
        Tuple (p, q) with p != q

    Raises:
        ValueError: If the range cannot hold two distinct primes
    """
    if max_exclusive < _MIN_PAIR_BOUND:
        raise ValueError(
            f"Prime bound must be at least {_MIN_PAIR_BOUND} to hold two "
            f"distinct primes (got {max_exclusive})"
        )
    if rng is None:
        rng = _system_rng()

    while True:
        p = random_prime(rng, max_exclusive)
        q = random_prime(rng, max_exclusive)
        if p != q:
            return p, q
