"""
Flag Column Management Module.

This module provides a small registry of flags types, and of Polars DataFrame columns whose integer values are the
bits of one of those flags types.

Typical use:
    1) Register a flags type by name (from a dict, a list of ``(name, bits)`` pairs or an existing ``FlagsType``).
    2) Register a DataFrame column as a flag column associated with that flags type.
    3) Use FlagColumn.add_flag / remove_flag with Polars expressions to set/clear flag bits, and FlagColumn.format /
       parse to convert between bits and flags text.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Self

import polars as pl

from flag_bits.bits import bits_not
from flag_bits.enums import BitsWidth
from flag_bits.exceptions import (
    BitsWidthError,
    ColumnNotFoundError,
    DuplicateFlagsTypeError,
    FlagsTypeError,
    FlagsTypeNotFoundError,
)
from flag_bits.parser import parse_bits, to_text
from flag_bits.registry import FlagsType
from flag_bits.value import FlagsValue, coerce_bits

logger = logging.getLogger(__name__)

FlagsTypeDefinition = FlagsType | Mapping[str, int] | list[tuple[str, int]] | tuple[tuple[str, int], ...]

POLARS_DTYPES = {
    BitsWidth.U8: pl.UInt8,
    BitsWidth.U16: pl.UInt16,
    BitsWidth.U32: pl.UInt32,
    BitsWidth.U64: pl.UInt64,
}


def polars_dtype(bits_width: BitsWidth) -> type[pl.DataType]:
    """Return the unsigned Polars integer dtype for a bits width.

    Args:
        bits_width: The bits width of a flags type.

    Returns:
        The matching Polars dtype.

    Raises:
        BitsWidthError: If there is no Polars dtype for the bits width.
    """
    try:
        return POLARS_DTYPES[bits_width]
    except KeyError:
        raise BitsWidthError(f"No Polars column type for bits width: {bits_width}")


@dataclass
class FlagColumn:
    """Represents a flag column in a DataFrame.

    A flag column stores the bits of a specific flags type. Each flag column is associated with a base data column.

    Attributes:
        name: Name of the flag column in the DataFrame.
        base: Name of the associated value/data column.
        flags_type: The flags type that defines the available flags and their bits.
    """

    name: str
    base: str
    flags_type: FlagsType

    @property
    def dtype(self) -> type[pl.DataType]:
        """The Polars dtype of the flag column."""
        return polars_dtype(self.flags_type.bits_width)

    def _col(self) -> pl.Expr:
        # Results always use the unsigned dtype of the flags type
        return pl.col(self.name).cast(self.dtype)

    def _lit(self, bits: int) -> pl.Expr:
        return pl.lit(bits, dtype=self.dtype)

    def add_flag(self, df: pl.DataFrame, flag: FlagsValue | str | int, expr: pl.Expr = pl.lit(True)) -> pl.DataFrame:
        """Adds a flag value to this FlagColumn using a bitwise OR operation.

        Args:
            df: The dataframe to add the flag value to.
            flag: The flag to add, as a value, a flag name or raw bits.
            expr: A Polars expression defining the condition for applying the flag.
                  Defaults to `pl.lit(True)`, meaning all rows are flagged.

        Returns:
            A new DataFrame with the flag column updated, cast to the dtype of the flags type.
        """
        bits = coerce_bits(self.flags_type, flag)
        return df.with_columns(
            pl.when(expr).then(self._col() | self._lit(bits)).otherwise(self._col()).alias(self.name)
        )

    def remove_flag(
        self, df: pl.DataFrame, flag: FlagsValue | str | int, expr: pl.Expr = pl.lit(True)
    ) -> pl.DataFrame:
        """Remove a flag value from this FlagColumn using a bitwise AND operation.

        Args:
            df: The dataframe to remove the flag value from.
            flag: The flag to remove, as a value, a flag name or raw bits.
            expr: A Polars expression defining the condition for removing the flag.
                  Defaults to `pl.lit(True)`, meaning flag remove from all rows.

        Returns:
            A new DataFrame with the flag column updated, cast to the dtype of the flags type.
        """
        bits = coerce_bits(self.flags_type, flag)
        keep = bits_not(bits, self.flags_type.bits_width)
        return df.with_columns(
            pl.when(expr).then(self._col() & self._lit(keep)).otherwise(self._col()).alias(self.name)
        )

    def truncate(self, df: pl.DataFrame) -> pl.DataFrame:
        """Remove unknown bits from every row of this FlagColumn.

        Args:
            df: The dataframe containing the flag column.

        Returns:
            A new DataFrame with the flag column masked to the known bits of the flags type.
        """
        return df.with_columns((self._col() & self._lit(self.flags_type.known_mask)).alias(self.name))

    def contains(self, flag: FlagsValue | str | int) -> pl.Expr:
        """Polars expression that is true for rows where every bit of ``flag`` is set."""
        bits = self._lit(coerce_bits(self.flags_type, flag))
        return (self._col() & bits) == bits

    def intersects(self, flag: FlagsValue | str | int) -> pl.Expr:
        """Polars expression that is true for rows sharing any set bit with ``flag``."""
        bits = self._lit(coerce_bits(self.flags_type, flag))
        return (self._col() & bits) != 0

    def format(self, df: pl.DataFrame) -> pl.Series:
        """Format every row of this FlagColumn as flags text.

        Args:
            df: The dataframe containing the flag column.

        Returns:
            A String Series of flags text, with the same name as the flag column. Nulls stay null.
        """
        return df[self.name].map_elements(lambda bits: to_text(self.flags_type, bits), return_dtype=pl.String)

    def parse(self, texts: pl.Series) -> pl.Series:
        """Parse a Series of flags text into bits for this FlagColumn.

        Args:
            texts: A String Series of flags text.

        Returns:
            A Series of bits named after the flag column, using the column dtype. Unknown bits are kept.
        """
        return texts.map_elements(lambda text: parse_bits(self.flags_type, text), return_dtype=self.dtype).alias(
            self.name
        )

    def __eq__(self, other: object) -> bool:
        """Check if two FlagColumn instances are equal.

        Args:
            other: The object to compare.

        Returns:
            bool: True if the FlagColumn instances are equal, False otherwise.
        """
        if not isinstance(other, FlagColumn):
            return False

        return self.name == other.name and self.base == other.base and self.flags_type == other.flags_type

    # Make class instances unhashable
    __hash__ = None


class FlagManager:
    """Registry for flags types and flag columns.

    This class:
      * registers **flags types** under a string name;
      * registers **flag columns** that reference a base data column and a specific flags type.
    """

    def __init__(self) -> None:
        self._flags_types: dict[str, FlagsType] = {}
        self._flag_columns: dict[str, FlagColumn] = {}

    @property
    def flags_types(self) -> dict[str, FlagsType]:
        """Registered flags types."""
        return self._flags_types

    @property
    def flag_columns(self) -> dict[str, FlagColumn]:
        """Registered flag columns."""
        return self._flag_columns

    def register_flags_type(
        self,
        flags_type_name: str,
        flags_type: FlagsTypeDefinition,
        bits_width: BitsWidth | int | str = BitsWidth.U32,
    ) -> None:
        """Registers a flags type with the flag manager.

        For example, a quality_control flags type could be defined as follows:

        > flags_type_name = "quality_control"
        > flag_dict = {
        >     "OUT_OF_RANGE": 1,
        >     "SPIKE": 2,
        >     "LOW_BATTERY": 4,
        > }

        The flag_dict itself can be passed to this method, or a FlagsType object can be created from the dict:
        > flags_type = FlagsType(flags_type_name, flag_dict, bits_width="u8")

        Args:
            flags_type_name: The name to register the flags type under.
            flags_type: The flags type, or the flag definitions to build one from.
            bits_width: The bits width used when building a flags type from flag definitions.

        Raises:
            DuplicateFlagsTypeError: If a flags type is already registered under the name.
            FlagsTypeError: If the flags type is not a valid type.
        """
        if flags_type_name in self._flags_types:
            raise DuplicateFlagsTypeError(f"Flags type '{flags_type_name}' already exists.")

        if isinstance(flags_type, FlagsType):
            self._flags_types[flags_type_name] = flags_type

        elif isinstance(flags_type, (Mapping, list, tuple)):
            self._flags_types[flags_type_name] = FlagsType(flags_type_name, flags_type, bits_width)

        else:
            raise FlagsTypeError(
                f"Unknown type of flags type: {type(flags_type)}. "
                f"Expected dict[str, int], a list of (name, bits) pairs or a ``FlagsType``."
            )

        logger.debug("Registered flags type '%s'", flags_type_name)

    def get_flags_type(self, flags_type_name: str) -> FlagsType:
        """Return a registered flags type.

        Args:
            flags_type_name: The registered flags type name

        Returns:
            The ``FlagsType`` registered under the name.
        """
        try:
            return self._flags_types[flags_type_name]
        except KeyError:
            raise FlagsTypeNotFoundError(f"No such flags type: '{flags_type_name}'")

    def register_flag_column(self, name: str, base: str, flags_type_name: str) -> None:
        """Mark the specified existing column as a flag column.

        Args:
            name: A column name to mark as a flag column.
            base: Name of the value/data column this flag column refers to.
            flags_type_name: The name of the flags type.
        """
        flag_column = self._flag_columns.get(name)
        if flag_column:
            raise FlagsTypeError(
                f"Flag column '{name}' already registered. Base: '{flag_column.base}'; Type: '{flags_type_name}'."
            )
        else:
            flags_type = self.get_flags_type(flags_type_name)
            flag_column = FlagColumn(name, base, flags_type)
            self._flag_columns[name] = flag_column
            logger.debug("Registered flag column '%s' (base '%s', type '%s')", name, base, flags_type_name)

    def get_flag_column(self, name: str) -> FlagColumn:
        """Look up a registered flag column by name.

        Args:
            name: Flag column name.

        Returns:
            The corresponding ``FlagColumn`` object.
        """
        try:
            return self._flag_columns[name]
        except KeyError:
            raise ColumnNotFoundError(f"No such flag column: '{name}'.")

    def copy(self) -> Self:
        """Create a copy of this flag manager object."""
        out = FlagManager()

        # Flags types are immutable, so the copy can share them
        for name, flags_type in self._flags_types.items():
            out.register_flags_type(name, flags_type)

        # register flag columns in the new copy with the name their flags type is registered under
        type_names = {id(flags_type): name for name, flags_type in self._flags_types.items()}
        for name, flag_column in self._flag_columns.items():
            out.register_flag_column(name, flag_column.base, type_names[id(flag_column.flags_type)])

        return out

    def __copy__(self) -> Self:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        """Check if two FlagManager instances are equal.

        Args:
            other: The object to compare.

        Returns:
            bool: True if the FlagManager instances are equal, False otherwise.
        """
        if not isinstance(other, FlagManager):
            return False

        return self._flags_types == other._flags_types and self._flag_columns == other._flag_columns

    # Make class instances unhashable
    __hash__ = None
