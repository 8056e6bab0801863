"""
Canonical Decomposition Module.

Decomposes the bits of a flags value into an ordered sequence of named components, using a greedy scan over the flag
definitions in declaration order:

1. Start with ``remaining`` set to the bits of the value.
2. For each flag, in declaration order, skip it if it is a zero-bit flag. Otherwise, if all of its bits are still in
   ``remaining``, yield it and clear its bits from ``remaining``.
3. Optionally yield whatever is left in ``remaining`` as a final, unnamed component.

Declaration order is the tie-break. An earlier flag may consume bits a later, overlapping flag needs, in which case
the later flag is skipped. For example, with ``A = 0b01`` declared before ``AB = 0b11``, the bits ``0b11`` decompose
to ``A`` and then a leftover of ``0b10``; declaring ``AB`` first yields ``AB`` alone.
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from flag_bits.registry import FlagsType


class Component(NamedTuple):
    """A single component of a decomposed flags value.

    Attributes:
        name: The flag name, or None for the leftover component.
        bits: The bits of this component.
    """

    name: str | None
    bits: int


def decompose(flags_type: "FlagsType", bits: int, include_leftover: bool) -> Iterator[Component]:
    """Greedily decompose bits into named components, in declaration order.

    Args:
        flags_type: The flags type whose flags are matched.
        bits: The bits to decompose.
        include_leftover: Whether to yield the bits that no flag consumed as a final unnamed component.

    Yields:
        A ``Component`` for each consumed flag, then optionally the leftover.
    """
    remaining = bits

    for flag in flags_type.flags:
        if remaining == 0:
            break

        if flag.bits == 0:
            continue

        if flag.bits & remaining == flag.bits:
            remaining &= ~flag.bits
            yield Component(flag.name, flag.bits)

    if include_leftover and remaining != 0:
        yield Component(None, remaining)


def iter_components(flags_type: "FlagsType", bits: int) -> Iterator[Component]:
    """Decompose bits, including any leftover. The union of the yielded bits is exactly ``bits``."""
    return decompose(flags_type, bits, include_leftover=True)


def iter_names(flags_type: "FlagsType", bits: int) -> Iterator[Component]:
    """Decompose bits into named components only, dropping any leftover."""
    return decompose(flags_type, bits, include_leftover=False)


def value_names(flags_type: "FlagsType", bits: int) -> Iterator[str]:
    """Yield the names of every flag whose bit pattern is exactly ``bits``, in declaration order.

    Unlike ``decompose``, zero-bit flags are included, so the empty value yields the names of any zero-bit flags.
    """
    for flag in flags_type.flags:
        if flag.bits == bits:
            yield flag.name
