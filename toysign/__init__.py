"""
toysign - a minimal public-key signature scheme built from elementary
number theory.

Keys are deliberately small (primes below 65536) and the digest is not
cryptographic. Do not use this for anything that needs real security.
"""

__version__ = "1.0.0"
