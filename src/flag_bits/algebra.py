"""
Set-Algebra Module.

Set operations over the bits of a flags type. Inputs may carry unknown bits; every operation truncates its result
to the known bits of the flags type, so no operation ever introduces an unknown bit.

The predicates (``contains``, ``intersects``, ``is_empty``, ``is_all``) work directly on raw bits and do not
truncate.
"""

from typing import TYPE_CHECKING

from flag_bits.bits import bits_not
from flag_bits.truncation import truncate

if TYPE_CHECKING:
    from flag_bits.registry import FlagsType


def empty(flags_type: "FlagsType") -> int:
    return 0


def all_bits(flags_type: "FlagsType") -> int:
    return flags_type.known_mask


def union(flags_type: "FlagsType", a: int, b: int) -> int:
    return truncate(flags_type, a | b)


def intersection(flags_type: "FlagsType", a: int, b: int) -> int:
    return truncate(flags_type, a & b)


def difference(flags_type: "FlagsType", a: int, b: int) -> int:
    return truncate(flags_type, a & bits_not(b, flags_type.bits_width))


def symmetric_difference(flags_type: "FlagsType", a: int, b: int) -> int:
    return truncate(flags_type, a ^ b)


def complement(flags_type: "FlagsType", a: int) -> int:
    """Complement within the known bits.

    For the empty value this is exactly ``known_mask``, i.e. the ``all`` value.
    """
    return truncate(flags_type, bits_not(a, flags_type.bits_width))


def is_empty(bits: int) -> bool:
    return bits == 0


def is_all(flags_type: "FlagsType", bits: int) -> bool:
    """Check whether every known bit is set. Unknown bits are irrelevant."""
    return bits & flags_type.known_mask == flags_type.known_mask


def contains(bits: int, other: int) -> bool:
    """Check whether every bit of ``other`` is set in ``bits``."""
    return other & ~bits == 0


def intersects(bits: int, other: int) -> bool:
    """Check whether ``bits`` and ``other`` share at least one set bit."""
    return bits & other != 0
