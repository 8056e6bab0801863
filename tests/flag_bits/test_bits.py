from typing import Any

import pytest

from flag_bits.bits import bits_not, check_bits, configure_bits_width, is_single_bit, to_binary, to_hex
from flag_bits.enums import BitsWidth
from flag_bits.exceptions import BitsTypeError, BitsValueError, BitsWidthError


class TestBitsWidth:
    @pytest.mark.parametrize(
        "bits_width,expected",
        [
            (BitsWidth.U8, 0xFF),
            (BitsWidth.U16, 0xFFFF),
            (BitsWidth.U32, 0xFFFF_FFFF),
            (BitsWidth.U64, 0xFFFF_FFFF_FFFF_FFFF),
            (BitsWidth.U128, (1 << 128) - 1),
        ],
        ids=["u8", "u16", "u32", "u64", "u128"],
    )
    def test_max_bits(self, bits_width: BitsWidth, expected: int) -> None:
        """Test the all-bits-set value of each width."""
        assert bits_width.max_bits == expected

    def test_str(self) -> None:
        """Test the string form of a width."""
        assert str(BitsWidth.U16) == "u16"


class TestConfigureBitsWidth:
    @pytest.mark.parametrize(
        "bits_width",
        [BitsWidth.U8, 8, "u8", "U8", "8", " u8 "],
        ids=["enum", "int", "lower", "upper", "digits", "padded"],
    )
    def test_valid(self, bits_width: Any) -> None:
        """Test that supported width representations resolve to the enum member."""
        assert configure_bits_width(bits_width) == BitsWidth.U8

    @pytest.mark.parametrize(
        "bits_width",
        [7, 256, "u7", "int8", "", True, 8.0, None],
        ids=["int7", "int256", "u7", "int8", "empty", "bool", "float", "none"],
    )
    def test_invalid(self, bits_width: Any) -> None:
        """Test that unsupported widths raise error."""
        with pytest.raises(BitsWidthError):
            configure_bits_width(bits_width)


class TestCheckBits:
    def test_valid(self) -> None:
        """Test that values within the width are returned unchanged."""
        assert check_bits(0, BitsWidth.U8) == 0
        assert check_bits(255, BitsWidth.U8) == 255

    def test_too_wide(self) -> None:
        """Test that a value wider than the width raises error."""
        with pytest.raises(BitsValueError):
            check_bits(256, BitsWidth.U8)

    def test_negative(self) -> None:
        """Test that a negative value raises error."""
        with pytest.raises(BitsValueError):
            check_bits(-1, BitsWidth.U8)

    @pytest.mark.parametrize("bits", [1.0, "1", True, None], ids=["float", "str", "bool", "none"])
    def test_wrong_type(self, bits: Any) -> None:
        """Test that a non-integer value raises error."""
        with pytest.raises(BitsTypeError):
            check_bits(bits, BitsWidth.U8)


class TestBitsNot:
    def test_stays_within_width(self) -> None:
        """Test that NOT only flips bits within the width."""
        assert bits_not(0b0000_1111, BitsWidth.U8) == 0b1111_0000
        assert bits_not(0, BitsWidth.U16) == 0xFFFF
        assert bits_not(0xFFFF, BitsWidth.U16) == 0


class TestIsSingleBit:
    @pytest.mark.parametrize("bits,expected", [(0, False), (1, True), (0b1000, True), (0b1100, False)])
    def test_is_single_bit(self, bits: int, expected: bool) -> None:
        """Test detection of values with exactly one bit set."""
        assert is_single_bit(bits) is expected


class TestRendering:
    def test_to_hex(self) -> None:
        """Test minimal lowercase hex rendering."""
        assert to_hex(0) == "0x0"
        assert to_hex(0x40) == "0x40"
        assert to_hex(0xAB) == "0xab"

    def test_to_binary(self) -> None:
        """Test zero-padded binary rendering."""
        assert to_binary(0b1101, BitsWidth.U8) == "0b00001101"
