"""
Key Pair Generation

1. Choose two different primes p and q
2. Compute the modulus n = p * q
3. Compute Carmichael's totient t = lcm(p - 1, q - 1)
4. Choose a signing exponent d with 1 < d < t and gcd(d, t) = 1
5. Compute the verifying exponent e = d^(-1) mod t

The private key is (n, d), the public key is (n, e). The signing exponent
is the randomly chosen one and the verifying exponent is derived from it,
the reverse of the usual RSA naming.
"""

import secrets
from dataclasses import dataclass
from random import Random
from typing import Optional, Tuple

from ..core_crypto.errors import InvalidInputError
from ..core_crypto.modular import (
    carmichael_totient, check_exponent_pair, is_coprime, mod_inverse
)
from ..core_crypto.primes import MAX_KEY_VAL, two_distinct_primes


# Moduli, exponents and signatures exchanged as text must stay below this
MAX_MODULUS = MAX_KEY_VAL * MAX_KEY_VAL


DECIMAL_DIGITS = frozenset('0123456789')
HEX_DIGITS = frozenset('0123456789abcdefABCDEF')


# ============================================================================
# Boundary Values
# ============================================================================

def _is_digits(text: str, alphabet: frozenset) -> bool:
    return bool(text) and all(c in alphabet for c in text)


def parse_key_value(text: str, name: str = "value") -> int:
    """
    Parse a decimal (or 0x-prefixed hexadecimal) unsigned integer.

    Args:
        text: The text to parse
        name: What the value is, for error messages

    Returns:
        The parsed integer

    Raises:
        InvalidInputError: If text is not an unsigned integer
    """
    if isinstance(text, bool) or not isinstance(text, (str, int)):
        raise InvalidInputError(f"{name} must be text, got {type(text).__name__}")
    if isinstance(text, int):
        value = text
    else:
        cleaned = text.strip()
        if cleaned[:2].lower() == '0x' and _is_digits(cleaned[2:], HEX_DIGITS):
            value = int(cleaned[2:], 16)
        elif _is_digits(cleaned, DECIMAL_DIGITS):
            value = int(cleaned, 10)
        else:
            raise InvalidInputError(f"{name} is not an unsigned integer: {text!r}")
    if value < 0:
        raise InvalidInputError(f"{name} must not be negative (got {value})")
    return value


def _check_range(value: int, name: str, low: int, high: Optional[int]) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {type(value).__name__}")
    if value < low:
        raise InvalidInputError(f"{name} must be at least {low} (got {value})")
    if high is not None and value >= high:
        raise InvalidInputError(f"{name} must be below {high} (got {value})")
    return value


def validate_key_values(modulus: int, exponent: int,
                        max_modulus: Optional[int] = MAX_MODULUS) -> Tuple[int, int]:
    """
    Check a (modulus, exponent) pair handed in by a caller.

    Args:
        modulus: Key modulus, at least 2
        exponent: Signing or verifying exponent
        max_modulus: Exclusive upper bound for both values (None: unbounded)

    Raises:
        InvalidInputError: If either value is not an int or is out of range
    """
    _check_range(modulus, "modulus", 2, max_modulus)
    _check_range(exponent, "exponent", 0, max_modulus)
    return modulus, exponent


def validate_signature_value(signature: int,
                             max_modulus: Optional[int] = MAX_MODULUS) -> int:
    """Check a signature value handed in by a caller."""
    return _check_range(signature, "signature", 0, max_modulus)


# ============================================================================
# Key Types
# ============================================================================

def _parse_key_text(text: str) -> Tuple[int, int]:
    parts = [part.strip() for part in text.split(',')]
    if len(parts) != 2:
        raise InvalidInputError(f"Key must be written as 'modulus, exponent': {text!r}")
    modulus = parse_key_value(parts[0], "modulus")
    exponent = parse_key_value(parts[1], "exponent")
    return validate_key_values(modulus, exponent)


@dataclass(frozen=True)
class PrivateKey:
    """Signing half of a key pair: (modulus, signing exponent)."""
    modulus: int
    exponent: int

    def __post_init__(self):
        validate_key_values(self.modulus, self.exponent, max_modulus=None)

    @classmethod
    def from_text(cls, text: str) -> 'PrivateKey':
        """Parse 'modulus, exponent' text."""
        return cls(*_parse_key_text(text))

    def __str__(self) -> str:
        return f"{self.modulus}, {self.exponent}"


@dataclass(frozen=True)
class PublicKey:
    """Verifying half of a key pair: (modulus, verifying exponent)."""
    modulus: int
    exponent: int

    def __post_init__(self):
        validate_key_values(self.modulus, self.exponent, max_modulus=None)

    @classmethod
    def from_text(cls, text: str) -> 'PublicKey':
        """Parse 'modulus, exponent' text."""
        return cls(*_parse_key_text(text))

    def __str__(self) -> str:
        return f"{self.modulus}, {self.exponent}"


@dataclass(frozen=True)
class KeyPair:
    """
    Generated credential. The modulus is shared by both halves.

    Example:
        >>> from random import Random
        >>> keys = KeyPair.generate(rng=Random(7))
        >>> keys.private_key.modulus == keys.public_key.modulus
        True
    """
    modulus: int
    signing_exponent: int
    verifying_exponent: int

    @classmethod
    def generate(cls, rng: Optional[Random] = None, max_key_val: int = MAX_KEY_VAL,
                 sanity_check: bool = False) -> 'KeyPair':
        """Generate a new key pair (see generate_key_pair)."""
        return generate_key_pair(rng, max_key_val=max_key_val, sanity_check=sanity_check)

    @property
    def private_key(self) -> PrivateKey:
        """Private key (n, d)."""
        return PrivateKey(self.modulus, self.signing_exponent)

    @property
    def public_key(self) -> PublicKey:
        """Public key (n, e)."""
        return PublicKey(self.modulus, self.verifying_exponent)

    def __repr__(self) -> str:
        return f"KeyPair(modulus={self.modulus}, verifying_exponent={self.verifying_exponent})"


# ============================================================================
# Generation
# ============================================================================

def choose_signing_exponent(totient: int, rng: Optional[Random] = None) -> int:
    """
    Pick a random exponent in (1, totient) that is coprime to totient.

    Candidates are drawn uniformly and rejected until one is coprime.

    Raises:
        ValueError: If totient leaves no candidate (totient < 3)
    """
    if totient < 3:
        raise ValueError(f"Totient must be at least 3 (got {totient})")
    if rng is None:
        rng = secrets.SystemRandom()

    while True:
        candidate = rng.randrange(2, totient)
        if is_coprime(candidate, totient):
            return candidate


def compute_verifying_exponent(signing_exponent: int, totient: int) -> int:
    """The verifying exponent is the modular inverse of the signing exponent."""
    return mod_inverse(signing_exponent, totient)


def generate_key_pair(rng: Optional[Random] = None, max_key_val: int = MAX_KEY_VAL,
                      sanity_check: bool = False) -> KeyPair:
    """
    Generate a key pair.

    Args:
        rng: Random source, consumed by every rejection-sampling draw.
             Pass a seeded random.Random for reproducible keys.
        max_key_val: Exclusive upper bound for the two primes
        sanity_check: Verify (d * e) mod t == 1 before returning

    Returns:
        New KeyPair

    Raises:
        PreconditionViolation: If the sanity check fails (a bug, never bad input)
    """
    if rng is None:
        rng = secrets.SystemRandom()

    p, q = two_distinct_primes(rng, max_key_val)
    modulus = p * q
    totient = carmichael_totient(p, q)

    signing_exponent = choose_signing_exponent(totient, rng)
    verifying_exponent = compute_verifying_exponent(signing_exponent, totient)

    if sanity_check:
        check_exponent_pair(signing_exponent, verifying_exponent, totient)

    return KeyPair(modulus, signing_exponent, verifying_exponent)
