"""
Flag Definition Registry Module.

A ``FlagsType`` is an immutable, ordered list of named bit patterns over a fixed bits width. It is the equivalent of a
flags class: instead of generating a new type for every set of flags, each set of flags is described by one
``FlagsType`` object and its values are ``FlagsValue`` objects bound to it.

For example, a set of file permissions could be defined as follows:

    > permissions = FlagsType(
    >     "Permissions",
    >     {"READ": 0b001, "WRITE": 0b010, "EXECUTE": 0b100, "ALL": 0b111},
    >     bits_width="u8",
    > )
    > rw = permissions["READ"] | permissions["WRITE"]
    > str(rw)
    'READ | WRITE'

The order of the flags matters: it is the priority order used when decomposing a value into flags, and so also the
order of names when a value is formatted as text.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from flag_bits.bits import check_bits, configure_bits_width, is_single_bit, to_hex
from flag_bits.enums import BitsWidth
from flag_bits.exceptions import DuplicateFlagNameError, FlagDefinitionError, FlagNotFoundError
from flag_bits.formatting import flags_type_repr
from flag_bits.parser import HEX_PREFIX, from_text
from flag_bits.truncation import (
    compute_is_normal,
    compute_known_mask,
    from_bits,
    from_bits_exact,
    from_name,
    truncate,
)
from flag_bits.value import FlagsValue

logger = logging.getLogger(__name__)

FlagsDefinition = Mapping[str, int] | Iterable["Flag | tuple[str, int]"]


@dataclass(frozen=True)
class Flag:
    """A named bit pattern within a flags type.

    Attributes:
        name: Name of the flag, unique within its flags type.
        bits: The bit pattern of the flag. Zero is allowed.
    """

    name: str
    bits: int

    def is_zero(self) -> bool:
        """Check whether this is a zero-bit flag."""
        return self.bits == 0

    def is_single_bit(self) -> bool:
        """Check whether exactly one bit is set in this flag."""
        return is_single_bit(self.bits)


class FlagsType:
    """An ordered, immutable registry of flags over a fixed bits width.

    Attributes:
        name: Name of the flags type, used in value representations.
        bits_width: The unsigned integer width shared by every flag and value of this type.
        flags: The flags, in declaration order.
        known_mask: Bitwise OR of the bits of every flag.
        is_normal: True if there are no zero-bit flags and every known bit belongs to a single-bit flag.
    """

    def __init__(self, name: str, flags: FlagsDefinition = (), bits_width: BitsWidth | int | str = BitsWidth.U32):
        """Create a flags type.

        Args:
            name: Name of the flags type.
            flags: The flag definitions in declaration order, either as a ``{name: bits}`` mapping, or an iterable of
                   ``(name, bits)`` pairs or ``Flag`` objects.
            bits_width: The bits width of the flags type.

        Raises:
            FlagDefinitionError: If the type name or a flag name is invalid.
            DuplicateFlagNameError: If a flag name is defined more than once.
            BitsWidthError: If the bits width is not supported.
            BitsValueError: If a flag's bits do not fit in the bits width.
        """
        if not isinstance(name, str) or not name:
            raise FlagDefinitionError(f"Flags type name must be a non-empty string: {name!r}")

        self._name = name
        self._bits_width = configure_bits_width(bits_width)
        self._flags = self._build_flags(flags)
        self._known_mask = compute_known_mask(self._flags)
        self._is_normal = compute_is_normal(self._flags)

        logger.debug(
            "Defined flags type '%s' (%s): %d flags, known mask %s, normal=%s",
            self._name,
            self._bits_width,
            len(self._flags),
            to_hex(self._known_mask),
            self._is_normal,
        )

    def _build_flags(self, flags: FlagsDefinition) -> tuple[Flag, ...]:
        """Validate flag definitions and convert them to an ordered tuple of ``Flag`` objects."""
        items = flags.items() if isinstance(flags, Mapping) else flags

        built = []
        seen = set()
        for item in items:
            flag = item if isinstance(item, Flag) else Flag(*item)
            self._check_name(flag.name)
            check_bits(flag.bits, self._bits_width)

            if flag.name in seen:
                raise DuplicateFlagNameError(f"Flag name is not unique in '{self._name}': {flag.name}")
            seen.add(flag.name)
            built.append(flag)

        return tuple(built)

    @staticmethod
    def _check_name(name: Any) -> None:
        """Ensures a flag name can be written and read back in flags text.

        Args:
            name: The flag name.

        Raises:
            FlagDefinitionError: If the name is not a non-empty string, contains the ``|`` separator, has surrounding
                                 whitespace, or starts with the ``0x`` hex prefix.
        """
        if not isinstance(name, str) or not name:
            raise FlagDefinitionError(f"Flag name must be a non-empty string: {name!r}")

        if "|" in name:
            raise FlagDefinitionError(f"Flag name must not contain '|': {name!r}")

        if name != name.strip():
            raise FlagDefinitionError(f"Flag name must not have surrounding whitespace: {name!r}")

        if name.startswith(HEX_PREFIX):
            raise FlagDefinitionError(f"Flag name must not start with '{HEX_PREFIX}': {name!r}")

    @property
    def name(self) -> str:
        return self._name

    @property
    def bits_width(self) -> BitsWidth:
        return self._bits_width

    @property
    def flags(self) -> tuple[Flag, ...]:
        return self._flags

    @property
    def known_mask(self) -> int:
        return self._known_mask

    @property
    def is_normal(self) -> bool:
        return self._is_normal

    def get_flag(self, name: str) -> Flag:
        """Retrieves a flag definition by name.

        Args:
            name: The flag name, matched case-sensitively.

        Returns:
            The matching flag.

        Raises:
            FlagNotFoundError: If no flag has that name.
        """
        for flag in self._flags:
            if flag.name == name:
                return flag
        raise FlagNotFoundError(f"No flag named '{name}' in flags type '{self._name}'.")

    def to_dict(self) -> dict[str, int]:
        """Return the flags as a ``{name: bits}`` dict, in declaration order."""
        return {flag.name: flag.bits for flag in self._flags}

    def describe(self) -> str:
        """Return a multi-line, human-readable description of the flags type."""
        return flags_type_repr(self)

    def empty(self) -> FlagsValue:
        """A value with no bits set."""
        return FlagsValue(self, 0)

    def all(self) -> FlagsValue:
        """A value with every known bit set."""
        return FlagsValue(self, self._known_mask)

    def from_bits(self, bits: int) -> FlagsValue | None:
        """Create a value from raw bits, truncating unknown bits.

        Args:
            bits: Raw bits.

        Returns:
            The truncated value, or None if ``bits`` is nonzero but none of its bits are known.
        """
        truncated = from_bits(self, check_bits(bits, self._bits_width))
        if truncated is None:
            return None
        return FlagsValue(self, truncated)

    def from_bits_truncate(self, bits: int) -> FlagsValue:
        """Create a value from raw bits, silently dropping unknown bits."""
        return FlagsValue(self, truncate(self, check_bits(bits, self._bits_width)))

    def from_bits_exact(self, bits: int) -> FlagsValue | None:
        """Create a value from raw bits, or return None if any of them are unknown."""
        exact = from_bits_exact(self, check_bits(bits, self._bits_width))
        if exact is None:
            return None
        return FlagsValue(self, exact)

    def from_bits_retain(self, bits: int) -> FlagsValue:
        """Create a value from raw bits exactly as given, including unknown bits."""
        return FlagsValue(self, bits)

    def from_name(self, name: str) -> FlagsValue | None:
        """Create a value from the name of a flag, or return None if no flag has that name."""
        bits = from_name(self, name)
        if bits is None:
            return None
        return FlagsValue(self, bits)

    def from_text(self, text: str) -> FlagsValue:
        """Parse flags text, such as ``"A | B | 0x40"``, into a value. Unknown bits are kept."""
        return from_text(self, text)

    def from_iter(self, values: Iterable[FlagsValue | str | int]) -> FlagsValue:
        """Combine values by bitwise OR without truncation, the inverse of iterating a value."""
        value = self.empty()
        value.extend(values)
        return value

    def __getitem__(self, name: str) -> FlagsValue:
        return FlagsValue(self, self.get_flag(name).bits)

    def __len__(self) -> int:
        return len(self._flags)

    def __iter__(self) -> Iterator[Flag]:
        return iter(self._flags)

    def __eq__(self, other: object) -> bool:
        """Check if two FlagsType instances are equal.

        Args:
            other: The object to compare.

        Returns:
            bool: True if the name, bits width and ordered flags are equal, False otherwise.
        """
        if not isinstance(other, FlagsType):
            return False

        return self._name == other._name and self._bits_width == other._bits_width and self._flags == other._flags

    def __hash__(self) -> int:
        return hash((self._name, self._bits_width, self._flags))

    def __repr__(self) -> str:
        """Return a helpful representation of the flags type, listing all flags."""
        members = ", ".join(f"{flag.name}={to_hex(flag.bits)}" for flag in self._flags)
        return f"<{self._name} ({members})>"
