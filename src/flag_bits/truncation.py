"""
Truncation & Classification Module.

Bits that are not covered by any defined flag are "unknown". This module computes the known-bit mask and the
normality of a flags type, and truncates or classifies raw bits against it.

Truncation is a single mask with ``known_mask``. For a *normal* flags type (every known bit belongs to a single-bit
flag, and there are no zero-bit flags) that is enough to produce a normalized value. For other types a truncated value
is only guaranteed to carry no unknown bits: a multi-bit flag may still be partially set.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from flag_bits.bits import bits_not, is_single_bit

if TYPE_CHECKING:
    from flag_bits.registry import Flag, FlagsType


def compute_known_mask(flags: Iterable["Flag"]) -> int:
    """Bitwise OR of the bit patterns of every flag."""
    mask = 0
    for flag in flags:
        mask |= flag.bits
    return mask


def compute_is_normal(flags: Iterable["Flag"]) -> bool:
    """Check whether a flag list describes a normal flags type.

    A flags type is normal if none of its flags are zero-bit flags, and every known bit is set in at least one
    single-bit flag.

    Args:
        flags: The ordered flag definitions.

    Returns:
        True if the flags describe a normal flags type.
    """
    known = 0
    single = 0
    for flag in flags:
        if flag.bits == 0:
            return False
        known |= flag.bits
        if is_single_bit(flag.bits):
            single |= flag.bits

    return known & ~single == 0


def truncate(flags_type: "FlagsType", bits: int) -> int:
    """Mask bits down to the known bits of the flags type."""
    return bits & flags_type.known_mask


def from_bits(flags_type: "FlagsType", bits: int) -> int | None:
    """Truncate bits, reporting absence if truncation would drop every bit of a nonzero input.

    Args:
        flags_type: The flags type to truncate against.
        bits: Raw bits.

    Returns:
        The truncated bits, or None if ``bits`` is nonzero and has no known bits set.
    """
    truncated = truncate(flags_type, bits)
    if truncated == 0 and bits != 0:
        return None
    return truncated


def from_bits_exact(flags_type: "FlagsType", bits: int) -> int | None:
    """Return bits unchanged if they contain no unknown bits, otherwise None."""
    if bits & ~flags_type.known_mask:
        return None
    return bits


def from_name(flags_type: "FlagsType", name: str) -> int | None:
    """Linear scan for the first flag called ``name`` (case-sensitive), returning its bits or None."""
    for flag in flags_type.flags:
        if flag.name == name:
            return flag.bits
    return None


def is_normalized(flags_type: "FlagsType", bits: int) -> bool:
    """Check whether bits are normalized for the flags type.

    Normalized bits contain no unknown bits, and every flag that intersects them is fully contained. A zero-bit flag
    never intersects anything, so it does not affect the result.

    Args:
        flags_type: The flags type to classify against.
        bits: The bits to classify.

    Returns:
        True if the bits are normalized.
    """
    if bits & bits_not(flags_type.known_mask, flags_type.bits_width):
        return False

    for flag in flags_type.flags:
        if flag.bits & bits and flag.bits & ~bits:
            return False

    return True
