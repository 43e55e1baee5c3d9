"""
Event Logger Module

Records key generation, signing and verification as structured events,
giving an audit trail of every operation performed with a key.

Features:
- Key generation events
- Signing events
- Verification events (success and failure)
- Invalid input events
- Keys identified by a SHA-256 fingerprint of the modulus; private
  exponents are never recorded

Author: toysign
"""

import json
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from ..core_crypto.digest import Message, message_bytes, sha256_bytes
from ..keys.keypair import KeyPair


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
FINGERPRINT_LENGTH = 16


# ============================================================================
# Fingerprints
# ============================================================================

def key_fingerprint(modulus: int) -> str:
    """
    Short identifier for a key.

    The modulus is shared by the private and public halves and is public,
    so both halves of a key pair get the same fingerprint.

    Args:
        modulus: The key modulus

    Returns:
        First 16 hex characters of SHA-256 over the decimal modulus
    """
    return sha256_bytes(str(modulus).encode()).hex()[:FINGERPRINT_LENGTH]


def message_id(message: Message) -> str:
    """Short SHA-256 identifier for a message, so its text is not stored."""
    return sha256_bytes(message_bytes(message)).hex()[:FINGERPRINT_LENGTH]


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of events that can be logged."""

    KEY_GENERATED = "key_generated"
    MESSAGE_SIGNED = "message_signed"
    SIGNATURE_VERIFIED = "signature_verified"
    SIGNATURE_FAILED = "signature_failed"
    INVALID_INPUT = "invalid_input"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class KeyEvent:
    """A single logged operation."""
    event_type: EventType
    fingerprint: str  # key fingerprint, or "none"
    timestamp: int  # Unix timestamp
    details: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> str:
        """Convert event to a compact JSON record."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'key': self.fingerprint,
            'time': self.timestamp,
            'iso_time': datetime.fromtimestamp(self.timestamp).isoformat(),
            'details': self.details,
        }, separators=(',', ':'))

    @classmethod
    def from_record(cls, record: Union[str, Dict[str, Any]]) -> 'KeyEvent':
        """Parse an event from a JSON record (string or decoded dict)."""
        data = json.loads(record) if isinstance(record, str) else record
        return cls(
            event_type=EventType(data['type']),
            fingerprint=data['key'],
            timestamp=data['time'],
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | "
            f"key:{self.fingerprint}"
        )


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    In-memory audit log of key operations.

    Example:
        logger = EventLogger()
        keys = KeyPair.generate()
        logger.log_key_generated(keys)
        logger.print_audit_log()
    """

    def __init__(self, events: Optional[List[KeyEvent]] = None):
        """
        Initialize the event logger.

        Args:
            events: Optional existing events (e.g. from import_log)
        """
        self._events: List[KeyEvent] = list(events or [])
        self._callbacks: List[Callable[[KeyEvent], None]] = []

    def _add_event(self, event: KeyEvent) -> KeyEvent:
        self._events.append(event)

        for callback in self._callbacks:
            try:
                callback(event)
            except Exception:
                pass  # Don't let callbacks break logging

        return event

    def _new_event(self, event_type: EventType, fingerprint: str,
                   details: Optional[Dict[str, Any]] = None) -> KeyEvent:
        return self._add_event(KeyEvent(
            event_type=event_type,
            fingerprint=fingerprint,
            timestamp=int(time.time()),
            details=details or {},
        ))

    def add_callback(self, callback: Callable[[KeyEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[KeyEvent], None]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ========================================================================
    # Key Events
    # ========================================================================

    def log_key_generated(self, key_pair: KeyPair, max_key_val: Optional[int] = None) -> KeyEvent:
        """
        Log a key generation.

        Only the public half is recorded.

        Args:
            key_pair: The generated key pair
            max_key_val: Prime bound used for generation

        Returns:
            The logged event
        """
        details: Dict[str, Any] = {
            'modulus': key_pair.modulus,
            'bits': key_pair.modulus.bit_length(),
        }
        if max_key_val is not None:
            details['max_key_val'] = max_key_val
        return self._new_event(EventType.KEY_GENERATED,
                               key_fingerprint(key_pair.modulus), details)

    def log_sign(self, modulus: int, message: Message, signature: int,
                 digest_name: str = "sip13") -> KeyEvent:
        """
        Log a signing operation.

        The message is identified by hash only.

        Args:
            modulus: Modulus of the signing key
            message: The signed message
            signature: The produced signature
            digest_name: Name of the digest used

        Returns:
            The logged event
        """
        return self._new_event(EventType.MESSAGE_SIGNED, key_fingerprint(modulus), {
            'msg_id': message_id(message),
            'signature': signature,
            'digest': digest_name,
        })

    def log_verify(self, modulus: int, message: Message, signature: int,
                   valid: bool, digest_name: str = "sip13") -> KeyEvent:
        """Log a verification and its outcome."""
        event_type = EventType.SIGNATURE_VERIFIED if valid else EventType.SIGNATURE_FAILED
        return self._new_event(event_type, key_fingerprint(modulus), {
            'msg_id': message_id(message),
            'signature': signature,
            'digest': digest_name,
        })

    def log_invalid_input(self, operation: str, reason: str) -> KeyEvent:
        """Log rejected input for an operation."""
        return self._new_event(EventType.INVALID_INPUT, "none", {
            'operation': operation,
            'reason': reason,
        })

    # ========================================================================
    # Retrieval
    # ========================================================================

    @property
    def length(self) -> int:
        return len(self._events)

    def get_all_events(self) -> List[KeyEvent]:
        """All logged events, oldest first."""
        return list(self._events)

    def get_events_by_type(self, event_type: EventType) -> List[KeyEvent]:
        """Get all events of a specific type."""
        return [e for e in self._events if e.event_type == event_type]

    def get_key_events(self, modulus: int) -> List[KeyEvent]:
        """Get all events recorded for one key."""
        fingerprint = key_fingerprint(modulus)
        return [e for e in self._events if e.fingerprint == fingerprint]

    def get_recent_events(self, count: int = 10) -> List[KeyEvent]:
        """Get the most recent events."""
        return self._events[-count:] if len(self._events) > count else list(self._events)

    def print_audit_log(self, last_n: Optional[int] = None) -> None:
        """Print the audit log in a readable format."""
        events = self._events
        if last_n:
            events = events[-last_n:]

        print("\n" + "=" * 70)
        print("KEY AUDIT LOG")
        print("=" * 70)

        for event in events:
            print(event)
            if event.details:
                for k, v in event.details.items():
                    print(f"    {k}: {v}")

        print("=" * 70)
        print(f"Total events: {len(self._events)}")
        print("=" * 70)

    def export_log(self) -> str:
        """Export the entire audit log as JSON."""
        return json.dumps([json.loads(e.to_record()) for e in self._events], indent=2)

    @classmethod
    def import_log(cls, json_str: str) -> 'EventLogger':
        """Import an audit log from JSON."""
        records = json.loads(json_str)
        return cls(events=[KeyEvent.from_record(r) for r in records])


# ============================================================================
# Convenience Functions
# ============================================================================

def create_event_logger() -> EventLogger:
    """Create a new, empty event logger."""
    return EventLogger()
