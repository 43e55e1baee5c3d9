"""
Error types shared by the toysign modules.

- InvalidInputError: bad values handed in from outside (recoverable)
- PreconditionViolation: an internal invariant was broken (a bug)
"""


class ToySignError(Exception):
    """Base class for all toysign errors."""
    pass


class InvalidInputError(ToySignError, ValueError):
    """Raised when a key, signature or option supplied by the caller is malformed."""
    pass


class PreconditionViolation(ToySignError, RuntimeError):
    """Raised when an internal invariant fails (e.g. inverse of a non-coprime value)."""
    pass
