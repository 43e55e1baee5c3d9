# Keys Module
"""
Key pairs, signing and verification:
- Key pair generation (keypair.py)
- Signing and verification (signing.py)

The private key (n, d) signs; the public key (n, e) verifies.
"""

from .keypair import (
    MAX_MODULUS,
    KeyPair,
    PrivateKey,
    PublicKey,
    generate_key_pair,
    choose_signing_exponent,
    compute_verifying_exponent,
    parse_key_value,
    validate_key_values,
)

from .signing import (
    Signer,
    Verifier,
    sign_message,
    verify_signature,
    sign_digest,
    verify_digest,
)

__all__ = [
    'MAX_MODULUS', 'KeyPair', 'PrivateKey', 'PublicKey', 'generate_key_pair',
    'choose_signing_exponent', 'compute_verifying_exponent', 'parse_key_value',
    'validate_key_values',
    'Signer', 'Verifier', 'sign_message', 'verify_signature',
    'sign_digest', 'verify_digest',
]
