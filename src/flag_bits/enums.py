"""
Flag Bits Enumerations.

This module defines the enums used throughout flag_bits to standardise constants across the package.
"""

from enum import Enum


class BitsWidth(Enum):
    """Enum representing the supported unsigned integer widths backing a flags type.

    The value of each member is the width in bits.

    Attributes:
        U8: 8-bit unsigned integer.
        U16: 16-bit unsigned integer.
        U32: 32-bit unsigned integer.
        U64: 64-bit unsigned integer.
        U128: 128-bit unsigned integer.
    """

    U8 = 8
    U16 = 16
    U32 = 32
    U64 = 64
    U128 = 128

    @property
    def max_bits(self) -> int:
        """The value with every bit of this width set."""
        return (1 << self.value) - 1

    def __str__(self) -> str:
        return self.name.lower()
