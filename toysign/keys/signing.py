"""
Signing and Verification

Signing raises the message digest to the signing exponent modulo n.
Verifying raises the signature to the verifying exponent modulo n and
compares the result with the digest reduced modulo n (the 32-bit digest
may be larger than a small modulus).
"""

from typing import Optional

from ..core_crypto.digest import DigestFunction, Message, hash_message, sip13_digest
from ..core_crypto.modular import mod_pow
from .keypair import (
    MAX_MODULUS, KeyPair, PrivateKey, PublicKey,
    validate_key_values, validate_signature_value
)


def sign_digest(digest_value: int, modulus: int, signing_exponent: int) -> int:
    """Signature of an already computed digest: digest^d mod n."""
    return mod_pow(digest_value, signing_exponent, modulus)


def verify_digest(digest_value: int, signature: int, modulus: int,
                  verifying_exponent: int) -> bool:
    """Check signature^e mod n against digest mod n."""
    recovered = mod_pow(signature, verifying_exponent, modulus)
    return recovered == digest_value % modulus


def sign_message(message: Message, modulus: int, signing_exponent: int,
                 digest: DigestFunction = sip13_digest,
                 max_modulus: Optional[int] = MAX_MODULUS) -> int:
    """
    Sign a message with a private key.

    Args:
        message: Message text or bytes
        modulus: Private key modulus
        signing_exponent: Private key exponent
        digest: Digest function applied to the message bytes
        max_modulus: Exclusive bound for key values (None: unbounded)

    Returns:
        Signature in [0, modulus)

    Raises:
        InvalidInputError: If the key values are malformed
    """
    validate_key_values(modulus, signing_exponent, max_modulus)
    return sign_digest(hash_message(message, digest), modulus, signing_exponent)


def verify_signature(message: Message, signature: int, modulus: int,
                     verifying_exponent: int,
                     digest: DigestFunction = sip13_digest,
                     max_modulus: Optional[int] = MAX_MODULUS) -> bool:
    """
    Verify a message signature with a public key.

    A wrong signature is a normal outcome and returns False.

    Args:
        message: Message text or bytes
        signature: Signature to check
        modulus: Public key modulus
        verifying_exponent: Public key exponent
        digest: Digest function applied to the message bytes
        max_modulus: Exclusive bound for key values (None: unbounded)

    Returns:
        True if the signature matches, False otherwise

    Raises:
        InvalidInputError: If the key or signature values are malformed
    """
    validate_key_values(modulus, verifying_exponent, max_modulus)
    validate_signature_value(signature, max_modulus)
    return verify_digest(hash_message(message, digest), signature, modulus, verifying_exponent)


class Signer:
    """
    Signs messages with a private key.

    Example:
        >>> keys = KeyPair.generate()
        >>> signature = Signer.from_key_pair(keys).sign("meow")
        >>> Verifier.from_key_pair(keys).verify("meow", signature)
        True
    """

    def __init__(self, private_key: PrivateKey, digest: DigestFunction = sip13_digest):
        self._private_key = private_key
        self._digest = digest

    @classmethod
    def from_key_pair(cls, key_pair: KeyPair,
                      digest: DigestFunction = sip13_digest) -> 'Signer':
        return cls(key_pair.private_key, digest)

    @property
    def private_key(self) -> PrivateKey:
        return self._private_key

    def sign(self, message: Message) -> int:
        """Sign a message; the same message always gives the same signature."""
        key = self._private_key
        return sign_message(message, key.modulus, key.exponent, self._digest, max_modulus=None)


class Verifier:
    """Verifies message signatures against a public key."""

    def __init__(self, public_key: PublicKey, digest: DigestFunction = sip13_digest):
        self._public_key = public_key
        self._digest = digest

    @classmethod
    def from_key_pair(cls, key_pair: KeyPair,
                      digest: DigestFunction = sip13_digest) -> 'Verifier':
        return cls(key_pair.public_key, digest)

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    def verify(self, message: Message, signature: int) -> bool:
        """
        Verify a signature.

        Returns:
            True if valid, False otherwise
        """
        key = self._public_key
        return verify_signature(message, signature, key.modulus, key.exponent,
                                self._digest, max_modulus=None)
