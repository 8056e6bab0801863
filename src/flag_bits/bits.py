"""
Bits Primitive Module.

Flags values are stored as plain Python ints. Python ints are unbounded, so this module supplies the fixed-width
behaviour the rest of the package relies on: validating that a value fits its width, bitwise NOT within the width, and
hex rendering.
"""

from flag_bits.enums import BitsWidth
from flag_bits.exceptions import BitsTypeError, BitsValueError, BitsWidthError


def configure_bits_width(bits_width: BitsWidth | int | str) -> BitsWidth:
    """Configure a BitsWidth object.

    Converts ints (``8``) and strings (``"u8"``, ``"U8"``, ``"8"``) to BitsWidth members (if required).

    Args:
        bits_width: The bits width to configure.

    Returns:
        A BitsWidth member.

    Raises:
        BitsWidthError: If the input does not name a supported width.
    """
    if isinstance(bits_width, BitsWidth):
        return bits_width

    if isinstance(bits_width, str):
        key = bits_width.strip().upper()
        if key in BitsWidth.__members__:
            return BitsWidth[key]
        if key.isdigit():
            bits_width = int(key)

    if isinstance(bits_width, int) and not isinstance(bits_width, bool):
        try:
            return BitsWidth(bits_width)
        except ValueError:
            pass

    raise BitsWidthError(
        f"Unsupported bits width: {bits_width!r}. Available: {[str(w) for w in BitsWidth]}."
    )


def check_bits(bits: int, bits_width: BitsWidth) -> int:
    """Ensures a raw bits value is an unsigned integer that fits in the bits width.

    Args:
        bits: The bits value.
        bits_width: The width the value must fit in.

    Returns:
        The validated bits value.

    Raises:
        BitsTypeError: If the value is not an integer.
        BitsValueError: If the value is negative or wider than the bits width.
    """
    # bool is an int subclass, but True/False as a bit pattern is almost certainly a mistake
    if not isinstance(bits, int) or isinstance(bits, bool):
        raise BitsTypeError(f"Bits value must be an integer, not {type(bits).__name__}.")

    if bits < 0 or bits > bits_width.max_bits:
        raise BitsValueError(f"Bits value {bits} does not fit in an unsigned {bits_width.value}-bit integer.")

    return bits


def bits_not(bits: int, bits_width: BitsWidth) -> int:
    """Bitwise NOT of a value within its bits width."""
    return ~bits & bits_width.max_bits


def is_single_bit(bits: int) -> bool:
    """Check whether exactly one bit is set."""
    return bits != 0 and (bits & (bits - 1)) == 0


def to_hex(bits: int) -> str:
    """Render bits as ``0x`` followed by the minimum number of lowercase hex digits.

    Args:
        bits: The bits value.

    Returns:
        The hex string, e.g. ``0x40``. Zero renders as ``0x0``.
    """
    return f"{bits:#x}"


def to_binary(bits: int, bits_width: BitsWidth) -> str:
    """Render bits as a zero-padded binary string the full width of the type, e.g. ``0b00001101``."""
    return f"0b{bits:0{bits_width.value}b}"
