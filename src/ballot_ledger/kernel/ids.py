"""
Time-ordered identifiers for ballots, events and commands

IDs follow the UUIDv7 layout: a 48-bit millisecond timestamp followed by
random bits, so sorting IDs as strings sorts them by creation time.
"""

import secrets
import time


def generate_id() -> str:
    """
    Generate a UUIDv7-style identifier

    Returns:
        36-character hyphenated hex string, e.g.
        "01908e9a-3b87-7a1c-8f00-123456789abc"
    """
    timestamp_ms = int(time.time() * 1000) & 0xFFFFFFFFFFFF
    rand_a = secrets.randbits(12)
    rand_b = secrets.randbits(62)

    value = (timestamp_ms << 80) | (0x7 << 76) | (rand_a << 64) | (0b10 << 62) | rand_b
    digits = f"{value:032x}"

    return f"{digits[:8]}-{digits[8:12]}-{digits[12:16]}-{digits[16:20]}-{digits[20:]}"
