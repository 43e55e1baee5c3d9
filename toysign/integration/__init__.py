# Integration Module
"""
Audit logging of key generation, signing and verification.

Keys are identified by public key fingerprints; private exponents and
message text are never stored.
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import event_logger
    return getattr(event_logger, name)

__all__ = [
    'EventType',
    'KeyEvent',
    'EventLogger',
    'key_fingerprint',
    'message_id',
    'create_event_logger',
]
