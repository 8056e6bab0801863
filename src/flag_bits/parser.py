"""
Flags Text Codec Module.

Flags values are written as text using the following grammar::

    Flags     := Flag ('|' Flag)*
    Flag      := Name | HexNumber
    Name      := the name of any defined flag, matched case-sensitively
    HexNumber := '0x' [0-9a-fA-F]+

Whitespace around tokens is ignored. Formatting writes the components of the value in declaration order, named flags
first and then any leftover bits as a single hex number, e.g. ``A | C | 0x40``. The empty value is written as the
empty string, and the empty string (or any all-whitespace text) parses back to the empty value.

Parsing does not truncate: unknown bits written as hex are kept, so formatting a value and parsing the result gives
back exactly the original bits.
"""

import re
from typing import TYPE_CHECKING

from flag_bits.bits import to_hex
from flag_bits.exceptions import EmptyFlagError, InvalidHexFlagError, InvalidNamedFlagError
from flag_bits.iteration import iter_components
from flag_bits.truncation import from_name

if TYPE_CHECKING:
    from flag_bits.registry import FlagsType
    from flag_bits.value import FlagsValue

SEPARATOR = " | "
HEX_PREFIX = "0x"
HEX_PATTERN = re.compile(r"0x[0-9a-fA-F]+")


def to_text(flags_type: "FlagsType", bits: int) -> str:
    """Format bits as flags text.

    Args:
        flags_type: The flags type whose names are written.
        bits: The bits to format.

    Returns:
        The flags text, or an empty string if no bits are set.
    """
    tokens = []
    for component in iter_components(flags_type, bits):
        if component.name is None:
            tokens.append(to_hex(component.bits))
        else:
            tokens.append(component.name)
    return SEPARATOR.join(tokens)


def parse_hex(flags_type: "FlagsType", token: str, position: int) -> int:
    """Parse a ``0x`` token as an unsigned integer of the flags type's bits width.

    Args:
        flags_type: The flags type whose bits width bounds the number.
        token: The trimmed token, including its ``0x`` prefix.
        position: Character offset of the token, used in error reporting.

    Returns:
        The parsed bits.

    Raises:
        InvalidHexFlagError: If the token is malformed or the number does not fit in the bits width.
    """
    if not HEX_PATTERN.fullmatch(token):
        raise InvalidHexFlagError(token=token, position=position)

    bits = int(token[len(HEX_PREFIX) :], 16)
    if bits > flags_type.bits_width.max_bits:
        raise InvalidHexFlagError(
            f"Invalid hex flag '{token}' at position {position}: "
            f"does not fit in an unsigned {flags_type.bits_width.value}-bit integer.",
            token=token,
            position=position,
        )
    return bits


def parse_bits(flags_type: "FlagsType", text: str) -> int:
    """Parse flags text into raw bits, without truncation.

    Args:
        flags_type: The flags type whose names are recognised.
        text: The flags text.

    Returns:
        The bitwise OR of every token.

    Raises:
        EmptyFlagError: If a token between separators is empty.
        InvalidHexFlagError: If a ``0x`` token is malformed or too wide.
        InvalidNamedFlagError: If a token is not a defined flag name.
    """
    if not text.strip():
        return 0

    parsed = 0
    offset = 0
    for raw_token in text.split("|"):
        token = raw_token.strip()
        position = offset + len(raw_token) - len(raw_token.lstrip())
        offset += len(raw_token) + 1

        if not token:
            raise EmptyFlagError(token=token, position=position)

        # Names take priority. Flag names can't start with "0x", so this never shadows a hex number.
        flag_bits = from_name(flags_type, token)
        if flag_bits is not None:
            parsed |= flag_bits
        elif token.startswith(HEX_PREFIX):
            parsed |= parse_hex(flags_type, token, position)
        else:
            raise InvalidNamedFlagError(token=token, position=position)

    return parsed


def from_text(flags_type: "FlagsType", text: str) -> "FlagsValue":
    """Parse flags text into a flags value, keeping any unknown bits."""
    return flags_type.from_bits_retain(parse_bits(flags_type, text))
