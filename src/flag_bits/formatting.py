"""
String formatting routines for describing flags types

This module provides utilities for creating human-readable, multi-line descriptions of flags types within flag-bits.
"""

from typing import TYPE_CHECKING

from flag_bits.bits import to_binary, to_hex

if TYPE_CHECKING:
    from flag_bits.registry import FlagsType


def flags_type_repr(flags_type: "FlagsType") -> str:
    """Return a multi-line description of a flags type.

    Args:
        flags_type: A FlagsType object

    Returns:
        A formatted multi-line string listing the flags in declaration order, followed by the derived properties of
        the flags type.
    """
    lines = [f"<flag_bits.FlagsType> {flags_type.name} ({flags_type.bits_width})"]

    repr_items = {}
    if flags_type.flags:
        repr_items["Flags"] = format_flags(flags_type)

    repr_items["Properties"] = {
        "Known mask": (to_hex(flags_type.known_mask), to_binary(flags_type.known_mask, flags_type.bits_width)),
        "Normal": flags_type.is_normal,
    }

    lines.extend(format_repr_items(repr_items))
    return "\n".join(lines)


def format_flags(flags_type: "FlagsType") -> dict:
    """Format flag definitions for display in a flags type description.

    Args:
        flags_type: A FlagsType object.

    Returns:
        A dictionary mapping flag names to tuples of their hex and binary bit patterns.
    """
    return {flag.name: (to_hex(flag.bits), to_binary(flag.bits, flags_type.bits_width)) for flag in flags_type.flags}


def format_repr_items(repr_items: dict) -> list[str]:
    """Format nested dictionary items into indented, aligned text lines.

    Args:
        repr_items: Dictionary with section headers as keys and nested dictionaries as values.

    Returns:
        List of formatted strings with headers and key-value pairs, properly aligned and indented for display.
    """

    lines = []

    # Calculate maximum key length for alignment across all sections
    max_key_length = max([len(key) for _, header_dict in repr_items.items() for key in header_dict])

    for header, header_dict in repr_items.items():
        lines.append(format_headers(header))

        for key, value in header_dict.items():
            # Work out how much padding needs to be added to the key for alignment
            padding = max_key_length - len(key)

            # Ensure value is always a tuple for consistent processing
            values = value if isinstance(value, tuple) else (value,)

            lines.append(format_key_value_pairs(key + " " * padding, *values))
    return lines


def format_headers(header: str) -> str:
    """Format a section header string.

    Args:
        header: The header text to format.

    Returns:
        Capitalized header string with trailing colon.
    """
    return f"{header.capitalize()}:"


def format_key_value_pairs(key: str, *args) -> str:
    """Format a key with one or more values into an indented, aligned line.

    Args:
        key: The key string
        *args: Variable number of values to display after the key

    Returns:
        Formatted string with consistent indent, key, colon separator, and values.
    """
    values_str = "  ".join(str(value) for value in args)
    return f"    {key} : {values_str}"
