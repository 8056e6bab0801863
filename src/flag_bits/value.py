"""
Flags Value Module.

A ``FlagsValue`` is a bits value bound to a ``FlagsType``. It is not restricted to the known bits of its type: raw
bits are accepted as given. Every set operation, however, truncates its result, so unknown bits never spread through
the algebra.

Operands of binary operations can be another value of the same flags type, the name of a flag, or raw bits:

    > value = permissions.empty()
    > value.insert("READ")
    > value |= permissions["WRITE"]
    > value.contains(0b011)
    True
"""

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Self

from flag_bits import algebra
from flag_bits.bits import check_bits, to_hex
from flag_bits.exceptions import BitsTypeError, FlagNotFoundError, FlagsTypeMismatchError
from flag_bits.iteration import iter_components, iter_names, value_names
from flag_bits.parser import to_text
from flag_bits.truncation import from_name, is_normalized, truncate

if TYPE_CHECKING:
    from flag_bits.registry import FlagsType


def coerce_bits(flags_type: "FlagsType", other: "FlagsValue | str | int") -> int:
    """Resolve an operand to raw bits of the given flags type.

    Args:
        flags_type: The flags type the operand must belong to.
        other: A value of the same flags type, a flag name, or raw bits.

    Returns:
        The bits of the operand.

    Raises:
        FlagsTypeMismatchError: If the operand is a value of a different flags type.
        FlagNotFoundError: If the operand is a name that is not defined.
        BitsTypeError: If the operand is not a supported type.
        BitsValueError: If raw bits do not fit in the bits width.
    """
    if isinstance(other, FlagsValue):
        if other.flags_type is not flags_type and other.flags_type != flags_type:
            raise FlagsTypeMismatchError(
                f"Cannot combine a '{other.flags_type.name}' value with a '{flags_type.name}' value."
            )
        return other.bits

    if isinstance(other, str):
        bits = from_name(flags_type, other)
        if bits is None:
            raise FlagNotFoundError(f"No flag named '{other}' in flags type '{flags_type.name}'.")
        return bits

    if isinstance(other, int) and not isinstance(other, bool):
        return check_bits(other, flags_type.bits_width)

    raise BitsTypeError(f"Flags operand must be a FlagsValue, flag name or integer, not {type(other).__name__}.")


class FlagsValue:
    """A set of flags, stored as the raw bits of a flags type.

    Attributes:
        flags_type: The flags type the value belongs to.
        bits: The raw bits, possibly including unknown bits.
    """

    __slots__ = ("_flags_type", "_bits")

    def __init__(self, flags_type: "FlagsType", bits: int = 0):
        self._flags_type = flags_type
        self._bits = check_bits(bits, flags_type.bits_width)

    @property
    def flags_type(self) -> "FlagsType":
        return self._flags_type

    @property
    def bits(self) -> int:
        return self._bits

    def _new(self, bits: int) -> Self:
        return type(self)(self._flags_type, bits)

    def _coerce(self, other: "FlagsValue | str | int") -> int:
        return coerce_bits(self._flags_type, other)

    # Classification

    def is_empty(self) -> bool:
        """Check whether no bits are set."""
        return algebra.is_empty(self._bits)

    def is_all(self) -> bool:
        """Check whether every known bit is set. Unknown bits are ignored."""
        return algebra.is_all(self._flags_type, self._bits)

    def is_normalized(self) -> bool:
        """Check whether the value has no unknown bits and no partially-set multi-bit flags."""
        return is_normalized(self._flags_type, self._bits)

    def contains(self, other: "FlagsValue | str | int") -> bool:
        """Check whether every bit of ``other`` is also set in this value."""
        return algebra.contains(self._bits, self._coerce(other))

    def intersects(self, other: "FlagsValue | str | int") -> bool:
        """Check whether this value and ``other`` share any set bit."""
        return algebra.intersects(self._bits, self._coerce(other))

    def truncate(self) -> Self:
        """Return a copy of this value with unknown bits removed."""
        return self._new(truncate(self._flags_type, self._bits))

    # Set algebra, each result truncated

    def union(self, other: "FlagsValue | str | int") -> Self:
        return self._new(algebra.union(self._flags_type, self._bits, self._coerce(other)))

    def intersection(self, other: "FlagsValue | str | int") -> Self:
        return self._new(algebra.intersection(self._flags_type, self._bits, self._coerce(other)))

    def difference(self, other: "FlagsValue | str | int") -> Self:
        return self._new(algebra.difference(self._flags_type, self._bits, self._coerce(other)))

    def symmetric_difference(self, other: "FlagsValue | str | int") -> Self:
        return self._new(algebra.symmetric_difference(self._flags_type, self._bits, self._coerce(other)))

    def complement(self) -> Self:
        return self._new(algebra.complement(self._flags_type, self._bits))

    # In-place mutation

    def insert(self, other: "FlagsValue | str | int") -> None:
        """Set the bits of ``other`` in this value (in-place union)."""
        self._bits = algebra.union(self._flags_type, self._bits, self._coerce(other))

    def remove(self, other: "FlagsValue | str | int") -> None:
        """Clear the bits of ``other`` in this value (in-place difference)."""
        self._bits = algebra.difference(self._flags_type, self._bits, self._coerce(other))

    def toggle(self, other: "FlagsValue | str | int") -> None:
        """Flip the bits of ``other`` in this value (in-place symmetric difference)."""
        self._bits = algebra.symmetric_difference(self._flags_type, self._bits, self._coerce(other))

    def set(self, other: "FlagsValue | str | int", value: bool) -> None:
        """Insert ``other`` if ``value`` is true, otherwise remove it."""
        if value:
            self.insert(other)
        else:
            self.remove(other)

    def extend(self, values: Iterable["FlagsValue | str | int"]) -> None:
        """OR the raw bits of every item into this value, keeping unknown bits."""
        for other in values:
            self._bits |= self._coerce(other)

    # Decomposition

    def iter(self) -> Iterator[Self]:
        """Yield the flags set in this value, in declaration order, followed by any leftover bits.

        ORing the yielded values together gives exactly the bits of this value.
        """
        for component in iter_components(self._flags_type, self._bits):
            yield self._new(component.bits)

    def iter_names(self) -> Iterator[tuple[str, Self]]:
        """Yield ``(name, value)`` for each flag set in this value, in declaration order. Leftover bits are dropped."""
        for component in iter_names(self._flags_type, self._bits):
            yield component.name, self._new(component.bits)

    def names(self) -> Iterator[str]:
        """Yield the names of the flags whose bit pattern is exactly this value."""
        return value_names(self._flags_type, self._bits)

    def to_text(self) -> str:
        """Format the value as flags text, such as ``"A | C | 0x40"``."""
        return to_text(self._flags_type, self._bits)

    def copy(self) -> Self:
        return self._new(self._bits)

    # Python protocol

    def __or__(self, other: "FlagsValue | str | int") -> Self:
        return self.union(other)

    def __and__(self, other: "FlagsValue | str | int") -> Self:
        return self.intersection(other)

    def __xor__(self, other: "FlagsValue | str | int") -> Self:
        return self.symmetric_difference(other)

    def __sub__(self, other: "FlagsValue | str | int") -> Self:
        return self.difference(other)

    def __invert__(self) -> Self:
        return self.complement()

    __ror__ = __or__
    __rand__ = __and__
    __rxor__ = __xor__

    def __rsub__(self, other: "FlagsValue | str | int") -> Self:
        return self._new(algebra.difference(self._flags_type, self._coerce(other), self._bits))

    def __ior__(self, other: "FlagsValue | str | int") -> Self:
        self.insert(other)
        return self

    def __iand__(self, other: "FlagsValue | str | int") -> Self:
        self._bits = algebra.intersection(self._flags_type, self._bits, self._coerce(other))
        return self

    def __ixor__(self, other: "FlagsValue | str | int") -> Self:
        self.toggle(other)
        return self

    def __isub__(self, other: "FlagsValue | str | int") -> Self:
        self.remove(other)
        return self

    def __contains__(self, other: "FlagsValue | str | int") -> bool:
        return self.contains(other)

    def __iter__(self) -> Iterator[Self]:
        return self.iter()

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __int__(self) -> int:
        return self._bits

    def __copy__(self) -> Self:
        return self.copy()

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        text = self.to_text() or to_hex(0)
        return f"{self._flags_type.name}({text})"

    def __eq__(self, other: object) -> bool:
        """Check if two FlagsValue instances are equal.

        Args:
            other: The object to compare.

        Returns:
            bool: True if both values have the same flags type and exactly the same bits, False otherwise.
        """
        if not isinstance(other, FlagsValue):
            return False

        return self._flags_type == other._flags_type and self._bits == other._bits

    # Make class instances unhashable, values can be mutated in place
    __hash__ = None
