"""
Modular Arithmetic

Number theory helpers used by key generation, signing and verification:
- Greatest common divisor / least common multiple
- Carmichael's totient for a two-prime modulus
- Modular exponentiation (square-and-multiply algorithm)
- Extended Euclidean Algorithm and modular inverse

Python integers never overflow, so products such as base * base are exact
before every reduction.
"""

from typing import Tuple

from .errors import PreconditionViolation


def gcd(a: int, b: int) -> int:
    """
    Compute the greatest common divisor using Euclidean algorithm.

    Args:
        a: First integer
        b: Second integer

    Returns:
        GCD of a and b
    """
    a, b = abs(a), abs(b)
    while b:
        a, b = b, a % b
    return a


def lcm(a: int, b: int) -> int:
    """Least common multiple, lcm(a, b) = a * b / gcd(a, b)."""
    if a == 0 or b == 0:
        return 0
    return abs(a * b) // gcd(a, b)


def is_coprime(x: int, y: int) -> bool:
    """Two numbers are coprime when their only common factor is 1."""
    return gcd(x, y) == 1


def carmichael_totient(p: int, q: int) -> int:
    """
    Carmichael's totient of n = p * q for distinct primes p and q.

    Args:
        p: First prime (>= 2)
        q: Second prime (>= 2)

    Returns:
        lcm(p - 1, q - 1)
    """
    if p < 2 or q < 2:
        raise ValueError("Totient factors must be primes >= 2")
    return lcm(p - 1, q - 1)


def mod_exp(base: int, exponent: int, modulus: int) -> int:
    """
    Modular exponentiation using square-and-multiply algorithm.

    Computes (base^exponent) mod modulus without materialising the full
    power.

    Algorithm (right-to-left binary method):
    1. Start with result = 1
    2. For each bit of exponent (from LSB to MSB):
       - If bit is 1, multiply result by base (mod modulus)
       - Square the base (mod modulus)

    Args:
        base: The base number
        exponent: The exponent (must be non-negative)
        modulus: The modulus (must be positive)

    Returns:
        (base^exponent) mod modulus

    Raises:
        ValueError: If exponent < 0 or modulus <= 0
    """
    if exponent < 0:
        raise ValueError("Exponent must be non-negative")
    if modulus <= 0:
        raise ValueError("Modulus must be positive")
    if modulus == 1:
        return 0

    base = base % modulus
    result = 1

    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1

    return result


# Name used by the signing code
mod_pow = mod_exp


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """
    Extended Euclidean Algorithm (iterative).

    Finds integers x, y such that: a*x + b*y = gcd(a, b)

    Returns:
        Tuple (gcd, x, y)
    """
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1

    while r != 0:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_x, x = x, old_x - quotient * x
        old_y, y = y, old_y - quotient * y

    return old_r, old_x, old_y


def mod_inverse(a: int, m: int) -> int:
    """
    Compute modular multiplicative inverse using Extended Euclidean Algorithm.

    Finds x in [0, m) such that (a * x) mod m = 1. The caller must make
    sure gcd(a, m) == 1; anything else is a bug in the caller.

    Args:
        a: The number to find inverse of
        m: The modulus

    Returns:
        Modular inverse of a mod m

    Raises:
        PreconditionViolation: If the inverse doesn't exist
    """
    if m <= 1:
        raise PreconditionViolation(f"Modular inverse needs a modulus > 1 (got {m})")

    g, x, _ = extended_gcd(a, m)
    if g != 1:
        raise PreconditionViolation(
            f"Modular inverse doesn't exist (gcd({a}, {m}) = {g})"
        )

    while x < 0:
        x += m
    x %= m

    if x <= 0:
        raise PreconditionViolation(f"Received non-positive inverse of {a} mod {m}")

    return x


def check_exponent_pair(signing_exponent: int, verifying_exponent: int,
                        totient: int) -> None:
    """
    Sanity check for a generated key pair.

    Raises:
        PreconditionViolation: If (d * e) mod totient != 1
    """
    if (signing_exponent * verifying_exponent) % totient != 1:
        raise PreconditionViolation(
            f"Exponent pair is not inverse modulo {totient}: "
            f"({signing_exponent} * {verifying_exponent}) mod {totient} != 1"
        )
