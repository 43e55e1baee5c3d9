"""
Message Digests

Maps a message of any length to a fixed-width (32-bit) unsigned integer.
Signing only needs a deterministic digest, so the function is pluggable:

- sip13: SipHash-1-3 with an all-zero key over the message followed by a
         0xFF terminator byte, truncated to 32 bits (default)
- sha256: first 4 bytes of SHA-256 via the cryptography library

Neither is meant to provide real security at this digest width.
"""

from typing import Callable, Dict, List, Union

from cryptography.hazmat.primitives import hashes

from .errors import InvalidInputError


Message = Union[str, bytes]
DigestFunction = Callable[[bytes], int]

DIGEST_BITS = 32
MASK_32 = 0xFFFFFFFF
MASK_64 = 0xFFFFFFFFFFFFFFFF

# SipHash initialisation constants ("somepseudorandomlygeneratedbytes")
_SIP_V0 = 0x736f6d6570736575
_SIP_V1 = 0x646f72616e646f6d
_SIP_V2 = 0x6c7967656e657261
_SIP_V3 = 0x7465646279746573

# Appended after the message bytes before hashing
MESSAGE_TERMINATOR = b'\xff'


def message_bytes(message: Message) -> bytes:
    """Encode a text message as UTF-8; bytes pass through unchanged."""
    if isinstance(message, str):
        return message.encode('utf-8')
    if isinstance(message, (bytes, bytearray, memoryview)):
        return bytes(message)
    raise InvalidInputError(f"Message must be str or bytes, not {type(message).__name__}")


def _rotl64(value: int, amount: int) -> int:
    """Left rotate a 64-bit integer."""
    return ((value << amount) | (value >> (64 - amount))) & MASK_64


def _sip_round(v0: int, v1: int, v2: int, v3: int):
    """One SipRound over the four state words."""
    v0 = (v0 + v1) & MASK_64
    v1 = _rotl64(v1, 13) ^ v0
    v0 = _rotl64(v0, 32)

    v2 = (v2 + v3) & MASK_64
    v3 = _rotl64(v3, 16) ^ v2

    v0 = (v0 + v3) & MASK_64
    v3 = _rotl64(v3, 21) ^ v0

    v2 = (v2 + v1) & MASK_64
    v1 = _rotl64(v1, 17) ^ v2
    v2 = _rotl64(v2, 32)

    return v0, v1, v2, v3


def siphash13(data: bytes, k0: int = 0, k1: int = 0) -> int:
    """
    SipHash-1-3 (one compression round, three finalisation rounds).

    Args:
        data: Bytes to hash
        k0: Low 64 bits of the key
        k1: High 64 bits of the key

    Returns:
        64-bit hash value
    """
    v0 = k0 ^ _SIP_V0
    v1 = k1 ^ _SIP_V1
    v2 = k0 ^ _SIP_V2
    v3 = k1 ^ _SIP_V3

    length = len(data)
    tail_start = length - (length % 8)

    # Compression: one round per little-endian 64-bit word
    for i in range(0, tail_start, 8):
        m = int.from_bytes(data[i:i + 8], byteorder='little')
        v3 ^= m
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
        v0 ^= m

    # Last word: leftover bytes with the length in the top byte
    b = ((length & 0xFF) << 56) | int.from_bytes(data[tail_start:], byteorder='little')
    v3 ^= b
    v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
    v0 ^= b

    # Finalisation
    v2 ^= 0xFF
    for _ in range(3):
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)

    return v0 ^ v1 ^ v2 ^ v3


def sip13_digest(data: bytes) -> int:
    """Default 32-bit digest: SipHash-1-3 of data + 0xFF, low 32 bits."""
    return siphash13(data + MESSAGE_TERMINATOR) & MASK_32


def sha256_bytes(data: bytes) -> bytes:
    """Full 32-byte SHA-256 of data."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return digest.finalize()


def sha256_digest(data: bytes) -> int:
    """32-bit digest: the first 4 bytes of SHA-256, big-endian."""
    return int.from_bytes(sha256_bytes(data)[:4], byteorder='big')


DIGEST_FUNCTIONS: Dict[str, DigestFunction] = {
    'sip13': sip13_digest,
    'sha256': sha256_digest,
}

DEFAULT_DIGEST = 'sip13'


def get_digest_function(name: str) -> DigestFunction:
    """
    Look up a digest function by name.

    Raises:
        InvalidInputError: If no digest has that name
    """
    try:
        return DIGEST_FUNCTIONS[name]
    except KeyError:
        raise InvalidInputError(
            f"Unknown digest '{name}' (choose from {', '.join(digest_names())})"
        ) from None


def digest_names() -> List[str]:
    return sorted(DIGEST_FUNCTIONS)


def hash_message(message: Message, digest: DigestFunction = sip13_digest) -> int:
    """Digest a str or bytes message with the given digest function."""
    return digest(message_bytes(message))
