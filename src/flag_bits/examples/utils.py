import contextlib
import os
import sys
from typing import Iterator

from flag_bits import FlagsType


@contextlib.contextmanager
def suppress_output() -> Iterator:
    original_stdout = sys.stdout
    sys.stdout = open(os.devnull, "w")
    try:
        yield
    finally:
        sys.stdout.close()
        sys.stdout = original_stdout


def get_example_flags_type() -> FlagsType:
    # Quality-control flags for sensor readings, with one composite flag declared after its parts
    return FlagsType(
        "QualityFlags",
        [
            ("MISSING", 0b0001),
            ("SPIKE", 0b0010),
            ("OUT_OF_RANGE", 0b0100),
            ("LOW_BATTERY", 0b1000),
            ("SUSPECT", 0b0110),
        ],
        bits_width="u8",
    )
