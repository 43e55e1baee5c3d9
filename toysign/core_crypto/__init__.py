# Core Cryptography Module
"""
Number theory and hashing building blocks including:
- Modular arithmetic (gcd, totient, modular exponentiation and inverse)
- Prime testing and random prime sampling
- Pluggable 32-bit message digests
- Shared error types
"""

from .errors import (
    ToySignError,
    InvalidInputError,
    PreconditionViolation,
)

from .modular import (
    gcd,
    lcm,
    is_coprime,
    carmichael_totient,
    mod_exp,
    mod_pow,
    extended_gcd,
    mod_inverse,
    check_exponent_pair,
)

from .primes import (
    MAX_KEY_VAL,
    is_prime,
    random_prime,
    two_distinct_primes,
)

from .digest import (
    DEFAULT_DIGEST,
    DIGEST_FUNCTIONS,
    get_digest_function,
    hash_message,
    siphash13,
    sip13_digest,
    sha256_digest,
)

__all__ = [
    'ToySignError', 'InvalidInputError', 'PreconditionViolation',
    'gcd', 'lcm', 'is_coprime', 'carmichael_totient', 'mod_exp', 'mod_pow',
    'extended_gcd', 'mod_inverse', 'check_exponent_pair',
    'MAX_KEY_VAL', 'is_prime', 'random_prime', 'two_distinct_primes',
    'DEFAULT_DIGEST', 'DIGEST_FUNCTIONS', 'get_digest_function', 'hash_message',
    'siphash13', 'sip13_digest', 'sha256_digest',
]
