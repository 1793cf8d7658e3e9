"""
Hash comparison utilities.

Hamming distance between 64-bit dHashes plus the helpers needed around
it: similarity percentage, duplicate verdict, signed storage conversion
and text parsing/formatting.
"""

import re
from typing import Optional

from imghasher.utils.dhash import HASH_BITS, HASH_MASK

DEFAULT_DUPLICATE_THRESHOLD = 10

_SIGN_BIT = 1 << (HASH_BITS - 1)
_HEX_RE = re.compile(r"[0-9a-f]{%d}" % (HASH_BITS // 4))


def hamming_distance(hash1: int, hash2: int) -> int:
    """
    Compute Hamming distance between two hashes.

    Both values are reduced to their low 64 bits first, so the signed
    storage form of a hash compares equal to its unsigned form.

    Args:
        hash1, hash2: Integer hashes from compute_grayscale_hash()

    Returns:
        Number of differing bits (0-64)

    Example:
        >>> hamming_distance(0b1011, 0b0001)
        2
    """
    return bin((hash1 ^ hash2) & HASH_MASK).count('1')


def similarity(distance: int) -> float:
    """Percentage of matching bits for a distance: (1 - d/64) * 100."""
    score = (1 - distance / HASH_BITS) * 100.0
    return max(0.0, min(100.0, score))


def duplicate_threshold() -> int:
    """
    Configured near-duplicate threshold (hashing.duplicate_threshold).

    Raises:
        ValueError: Value is not a whole number in 0..64
    """
    from imghasher.utils.config import get_config
    raw = get_config().get("hashing.duplicate_threshold", DEFAULT_DUPLICATE_THRESHOLD)
    error = ValueError(
        f"Invalid hashing.duplicate_threshold: {raw!r} (expected an integer 0-{HASH_BITS})"
    )
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise error
    try:
        value = int(raw)
    except ValueError:
        raise error from None
    if not 0 <= value <= HASH_BITS:
        raise error
    return value


def is_duplicate(hash1: int, hash2: int, threshold: Optional[int] = None) -> bool:
    """
    Check if two hashes represent duplicate/similar images.

    Args:
        hash1, hash2: Integer hashes
        threshold: Max Hamming distance for duplicates. None uses the
                   configured value (default 10)
                  - 0-5: Nearly identical
                  - 6-10: Very similar
                  - 11-15: Similar
                  - 16+: Different

    Returns:
        True if images are duplicates
    """
    if threshold is None:
        threshold = duplicate_threshold()
    return hamming_distance(hash1, hash2) <= threshold


def to_signed64(value: int) -> int:
    """Unsigned hash → signed 64-bit int (SQLite INTEGER is signed)."""
    value &= HASH_MASK
    if value & _SIGN_BIT:
        value -= 1 << HASH_BITS
    return value


def from_signed64(value: int) -> int:
    """Signed 64-bit storage value → unsigned hash."""
    return value & HASH_MASK


def hash_to_hex(value: int) -> str:
    """16 lowercase hex digits, zero padded."""
    return f"{value & HASH_MASK:016x}"


def parse_hash(text: str) -> int:
    """
    Parse a hash from text.

    Accepts decimal ("9114861776524122264"), signed decimal as stored in
    SQLite ("-1"), 0x-prefixed hex, or exactly 16 bare hex digits.
    All-digit strings are always read as decimal.

    Raises:
        ValueError: Not a hash, or wider than 64 bits
    """
    s = text.strip().lower()
    if not s:
        raise ValueError("Empty hash")

    if s.startswith("0x"):
        value = int(s[2:], 16)
        if value < 0:
            raise ValueError(f"Not a hash: {text}")
    elif s.lstrip("-").isdigit():
        value = int(s, 10)
        if value < 0:
            if value < -_SIGN_BIT:
                raise ValueError(f"Hash out of 64-bit range: {text}")
            return from_signed64(value)
    elif _HEX_RE.fullmatch(s):
        value = int(s, 16)
    else:
        raise ValueError(f"Not a hash: {text}")

    if value > HASH_MASK:
        raise ValueError(f"Hash out of 64-bit range: {text}")
    return value
