import copy
import logging
from typing import Any

import polars as pl
import pytest
from polars.testing import assert_series_equal

from flag_bits.enums import BitsWidth
from flag_bits.exceptions import (
    BitsWidthError,
    ColumnNotFoundError,
    DuplicateFlagsTypeError,
    FlagNotFoundError,
    FlagsTypeError,
    FlagsTypeMismatchError,
    FlagsTypeNotFoundError,
    InvalidNamedFlagError,
)
from flag_bits.flag_manager import FlagColumn, FlagManager, polars_dtype
from flag_bits.registry import FlagsType

QC_FLAGS = {"A": 0b0001, "B": 0b0010, "C": 0b1100}


class TestRegisterFlagsType:
    def test_add_valid_dict_flags_type(self) -> None:
        """Test adding a new valid dict based flags type."""
        flag_manager = FlagManager()
        flag_manager.register_flags_type("new_flags", QC_FLAGS, bits_width="u8")
        assert flag_manager.get_flags_type("new_flags") == FlagsType("new_flags", QC_FLAGS, bits_width="u8")

    def test_add_valid_pairs_flags_type(self) -> None:
        """Test adding a new flags type from (name, bits) pairs keeps their order."""
        flag_manager = FlagManager()
        flag_manager.register_flags_type("new_flags", [("B", 2), ("A", 1)])
        flags_type = flag_manager.get_flags_type("new_flags")
        assert [flag.name for flag in flags_type] == ["B", "A"]
        assert flags_type.bits_width == BitsWidth.U32

    def test_add_valid_class_flags_type(self) -> None:
        """Test adding an existing FlagsType object."""
        flag_manager = FlagManager()
        flags_type = FlagsType("anything", QC_FLAGS)
        flag_manager.register_flags_type("new_flags", flags_type)
        assert flag_manager.flags_types["new_flags"] is flags_type

    def test_add_duplicate_flags_type_raises_error(self) -> None:
        """Test adding a duplicate flags type raises error."""
        flag_manager = FlagManager()
        flag_manager.register_flags_type("quality_control", QC_FLAGS)

        with pytest.raises(DuplicateFlagsTypeError):
            flag_manager.register_flags_type("quality_control", QC_FLAGS)

    @pytest.mark.parametrize("flags_type", ["A", 1, None], ids=["str", "int", "none"])
    def test_add_invalid_flags_type_raises_error(self, flags_type: Any) -> None:
        """Test adding an unsupported flags type definition raises error."""
        with pytest.raises(FlagsTypeError):
            FlagManager().register_flags_type("quality_control", flags_type)

    def test_registration_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test registrations are logged at debug level."""
        flag_manager = FlagManager()
        with caplog.at_level(logging.DEBUG, logger="flag_bits.flag_manager"):
            flag_manager.register_flags_type("quality_control", QC_FLAGS)
            flag_manager.register_flag_column("flags", "value", "quality_control")

        assert "Registered flags type 'quality_control'" in caplog.text
        assert "Registered flag column 'flags' (base 'value', type 'quality_control')" in caplog.text


class TestRegisterFlagColumn:
    @staticmethod
    def setup_flag_manager() -> FlagManager:
        flag_manager = FlagManager()
        flag_manager.register_flags_type("quality_control", QC_FLAGS, bits_width="u8")
        return flag_manager

    def test_flag_column_success(self) -> None:
        """Test registering a flag column with a valid flags type."""
        flag_manager = self.setup_flag_manager()
        flag_manager.register_flag_column("flag_column", "base_column", "quality_control")
        assert flag_manager.get_flag_column("flag_column") == FlagColumn(
            "flag_column", "base_column", flag_manager.get_flags_type("quality_control")
        )

    def test_flag_column_invalid_flags_type_raises_error(self) -> None:
        """Test registering a flag column with a non-existent flags type raises error."""
        flag_manager = self.setup_flag_manager()

        with pytest.raises(FlagsTypeNotFoundError):
            flag_manager.register_flag_column("flag_column", "base_column", "bad_type")

    def test_flag_column_duplicate_column_name_raises_error(self) -> None:
        """Test registering a flag column with a duplicate column name raises error."""
        flag_manager = self.setup_flag_manager()
        flag_manager.register_flag_column("flag_column", "base_column", "quality_control")

        with pytest.raises(FlagsTypeError):
            flag_manager.register_flag_column("flag_column", "base_column", "quality_control")

    def test_get_flag_column_error(self) -> None:
        """Test that requesting an unregistered flag column raises error."""
        with pytest.raises(ColumnNotFoundError):
            self.setup_flag_manager().get_flag_column("no_column")

    def test_get_flags_type_error(self) -> None:
        """Test that requesting an unregistered flags type raises error."""
        with pytest.raises(FlagsTypeNotFoundError):
            self.setup_flag_manager().get_flags_type("bad_type")


class TestCopy:
    @staticmethod
    def setup_flag_manager() -> FlagManager:
        flag_manager = FlagManager()
        flag_manager.register_flags_type("type1", QC_FLAGS)
        flag_manager.register_flags_type("type2", FlagsType("type2", {"FLAG_1": 1, "FLAG_2": 2}))
        flag_manager.register_flag_column(name="flag_col_1", base="base1", flags_type_name="type1")
        flag_manager.register_flag_column(name="flag_col_2", base="base2", flags_type_name="type2")
        return flag_manager

    def assert_copy(self, flag_manager: FlagManager, flag_manager_copy: FlagManager) -> None:
        # Check we have a different object but with the same contents
        assert flag_manager_copy == flag_manager
        assert flag_manager_copy is not flag_manager

        # Flags types are immutable, so they are shared
        for name, flags_type in flag_manager.flags_types.items():
            assert flag_manager_copy.flags_types[name] is flags_type

        for name, flag_column in flag_manager.flag_columns.items():
            copy_flag_column = flag_manager_copy.flag_columns[name]
            assert copy_flag_column is not flag_column
            assert copy_flag_column == flag_column

        # Test that the copy created is independent of the original
        flag_manager.register_flags_type("new_type", {"A": 1})
        flag_manager.register_flag_column(name="new_flags", base="base3", flags_type_name="new_type")

        # Copy should not see the new entries
        assert "new_type" not in flag_manager_copy.flags_types
        assert "new_flags" not in flag_manager_copy.flag_columns

    def test_copy(self) -> None:
        """Test that the copy method copies the full structure of the flag manager object."""
        flag_manager = self.setup_flag_manager()
        self.assert_copy(flag_manager, flag_manager.copy())

    def test_standard_lib_copy(self) -> None:
        """Test that the standard library copy module works as expected."""
        flag_manager = self.setup_flag_manager()
        self.assert_copy(flag_manager, copy.copy(flag_manager))


class TestFlagManagerEquality:
    def test_equality(self) -> None:
        original = FlagManager()
        original.register_flags_type("qc", QC_FLAGS)
        same = FlagManager()
        same.register_flags_type("qc", QC_FLAGS)
        assert original == same

    def test_different_object(self) -> None:
        assert FlagManager() != {}

    def test_unhashable(self) -> None:
        with pytest.raises(TypeError):
            hash(FlagManager())


class TestPolarsDtype:
    @pytest.mark.parametrize(
        "bits_width,expected",
        [(BitsWidth.U8, pl.UInt8), (BitsWidth.U16, pl.UInt16), (BitsWidth.U32, pl.UInt32), (BitsWidth.U64, pl.UInt64)],
        ids=["u8", "u16", "u32", "u64"],
    )
    def test_dtype(self, bits_width: BitsWidth, expected: type[pl.DataType]) -> None:
        assert polars_dtype(bits_width) == expected

    def test_u128_raises_error(self) -> None:
        """Test there is no column dtype for 128-bit flags types."""
        with pytest.raises(BitsWidthError):
            polars_dtype(BitsWidth.U128)


class TestFlagColumnOperations:
    flags_type = FlagsType("quality_control", QC_FLAGS, bits_width="u8")

    def setup_flag_column(self) -> FlagColumn:
        return FlagColumn("flags", "value", self.flags_type)

    @staticmethod
    def setup_df() -> pl.DataFrame:
        return pl.DataFrame(
            {
                "value": [1, 2, 3],
                "flags": pl.Series([0, 0b0001, 0b1000_0101], dtype=pl.UInt8),
            }
        )

    def test_add_flag_no_expr(self) -> None:
        """Test that adding a flag with no expression sets the flag on every row."""
        result = self.setup_flag_column().add_flag(self.setup_df(), "C")
        expected = pl.Series("flags", [0b1100, 0b1101, 0b1000_1101], dtype=pl.UInt8)
        assert_series_equal(result["flags"], expected)

    def test_add_flag_with_expr(self) -> None:
        """Test that adding a flag with an expression only sets it on matching rows."""
        result = self.setup_flag_column().add_flag(self.setup_df(), self.flags_type["B"], pl.col("value").gt(1))
        expected = pl.Series("flags", [0, 0b0011, 0b1000_0111], dtype=pl.UInt8)
        assert_series_equal(result["flags"], expected)

    def test_add_flag_twice(self) -> None:
        """Test that adding a flag twice uses the bitwise math, so doesn't actually add the value twice."""
        flag_column = self.setup_flag_column()
        once = flag_column.add_flag(self.setup_df(), "A")
        twice = flag_column.add_flag(once, "A")
        assert_series_equal(once["flags"], twice["flags"])

    def test_add_unknown_flag_raises_error(self) -> None:
        """Test that trying to add an undefined flag name raises error."""
        with pytest.raises(FlagNotFoundError):
            self.setup_flag_column().add_flag(self.setup_df(), "D")

    def test_add_flag_of_other_type_raises_error(self) -> None:
        """Test that trying to add a flag of another flags type raises error."""
        other = FlagsType("other", QC_FLAGS, bits_width="u16")
        with pytest.raises(FlagsTypeMismatchError):
            self.setup_flag_column().add_flag(self.setup_df(), other["A"])

    def test_remove_flag_no_expr(self) -> None:
        """Test that removing a flag with no expression clears it on every row, leaving other bits alone."""
        result = self.setup_flag_column().remove_flag(self.setup_df(), "A")
        expected = pl.Series("flags", [0, 0, 0b1000_0100], dtype=pl.UInt8)
        assert_series_equal(result["flags"], expected)

    def test_remove_flag_with_expr(self) -> None:
        """Test that removing a flag with an expression only clears it on matching rows."""
        result = self.setup_flag_column().remove_flag(self.setup_df(), "A", pl.col("value").eq(3))
        expected = pl.Series("flags", [0, 0b0001, 0b1000_0100], dtype=pl.UInt8)
        assert_series_equal(result["flags"], expected)

    def test_truncate(self) -> None:
        """Test that truncation removes unknown bits from every row."""
        result = self.setup_flag_column().truncate(self.setup_df())
        expected = pl.Series("flags", [0, 0b0001, 0b0101], dtype=pl.UInt8)
        assert_series_equal(result["flags"], expected)

    def test_contains(self) -> None:
        """Test the contains expression requires every bit of the flag."""
        df = self.setup_df().with_columns(pl.Series("flags", [0b0100, 0b1100, 0b1101], dtype=pl.UInt8))
        result = df.select(self.setup_flag_column().contains("C").alias("has_c"))["has_c"]
        expected = pl.Series("has_c", [False, True, True])
        assert_series_equal(result, expected)

    def test_intersects(self) -> None:
        """Test the intersects expression requires any bit of the flag."""
        df = self.setup_df().with_columns(pl.Series("flags", [0b0100, 0b0011, 0], dtype=pl.UInt8))
        result = df.select(self.setup_flag_column().intersects("C").alias("touches_c"))["touches_c"]
        expected = pl.Series("touches_c", [True, False, False])
        assert_series_equal(result, expected)

    def test_format(self) -> None:
        """Test formatting every row as flags text."""
        result = self.setup_flag_column().format(self.setup_df())
        expected = pl.Series("flags", ["", "A", "A | 0x84"], dtype=pl.String)
        assert_series_equal(result, expected)

    def test_format_keeps_nulls(self) -> None:
        """Test null rows stay null when formatted."""
        df = pl.DataFrame({"flags": pl.Series([0b1101, None], dtype=pl.UInt8)})
        result = self.setup_flag_column().format(df)
        expected = pl.Series("flags", ["A | C", None], dtype=pl.String)
        assert_series_equal(result, expected)

    def test_parse(self) -> None:
        """Test parsing flags text into bits, keeping unknown bits."""
        texts = pl.Series("text", ["A", "C | 0x80", ""])
        result = self.setup_flag_column().parse(texts)
        expected = pl.Series("flags", [0b0001, 0b1000_1100, 0], dtype=pl.UInt8)
        assert_series_equal(result, expected)

    def test_format_parse_round_trip(self) -> None:
        """Test that parsing formatted text gives back the original column."""
        flag_column = self.setup_flag_column()
        df = pl.DataFrame({"flags": pl.Series(range(256), dtype=pl.UInt8)})
        assert_series_equal(flag_column.parse(flag_column.format(df)), df["flags"])

    def test_parse_error(self) -> None:
        """Test that invalid flags text in a Series raises the parse error for the offending token."""
        texts = pl.Series("text", ["A", "nope"])
        with pytest.raises(InvalidNamedFlagError) as exc_info:
            self.setup_flag_column().parse(texts)

        assert exc_info.value.token == "nope"
        assert exc_info.value.position == 0

    def test_u128_column_raises_error(self) -> None:
        """Test that operations on a 128-bit flag column raise error."""
        flag_column = FlagColumn("flags", "value", FlagsType("wide", {"A": 1}, bits_width="u128"))
        with pytest.raises(BitsWidthError):
            flag_column.add_flag(self.setup_df(), "A")


class TestFlagColumnEquality:
    flags_type = FlagsType("quality_control", QC_FLAGS, bits_width="u8")

    def test_equality(self) -> None:
        assert FlagColumn("flags", "value", self.flags_type) == FlagColumn("flags", "value", self.flags_type)

    def test_different_base(self) -> None:
        assert FlagColumn("flags", "value", self.flags_type) != FlagColumn("flags", "other", self.flags_type)

    def test_different_object(self) -> None:
        assert FlagColumn("flags", "value", self.flags_type) != "flags"


class TestFlagColumnDtype:
    flags_type = FlagsType("wide", {"A": 1, "HIGH": 1 << 40}, bits_width="u64")

    def setup_flag_column(self) -> FlagColumn:
        return FlagColumn("flags", "value", self.flags_type)

    @staticmethod
    def setup_df() -> pl.DataFrame:
        # Default integer dtype, Int64
        return pl.DataFrame({"value": [1, 2], "flags": [(1 << 40) | 1, 0]})

    def test_remove_flag_casts_column(self) -> None:
        """Test that removing a flag from an Int64 column gives a column of the flags type dtype."""
        result = self.setup_flag_column().remove_flag(self.setup_df(), "A")
        expected = pl.Series("flags", [1 << 40, 0], dtype=pl.UInt64)
        assert_series_equal(result["flags"], expected)

    def test_add_flag_casts_column(self) -> None:
        """Test that adding a flag to some rows of an Int64 column casts every row."""
        result = self.setup_flag_column().add_flag(self.setup_df(), "HIGH", pl.col("value").eq(2))
        expected = pl.Series("flags", [(1 << 40) | 1, 1 << 40], dtype=pl.UInt64)
        assert_series_equal(result["flags"], expected)

    def test_truncate_casts_column(self) -> None:
        """Test that truncating an Int64 column gives a column of the flags type dtype."""
        df = pl.DataFrame({"flags": [(1 << 41) | 1]})
        result = self.setup_flag_column().truncate(df)
        expected = pl.Series("flags", [1], dtype=pl.UInt64)
        assert_series_equal(result["flags"], expected)

    def test_contains_on_int64_column(self) -> None:
        """Test filtering an Int64 column on a flag."""
        result = self.setup_df().filter(self.setup_flag_column().contains("HIGH"))
        assert result["value"].to_list() == [1]
