from typing import TYPE_CHECKING, Any

import autosemver

if TYPE_CHECKING:
    # These imports are only for static type checkers (e.g., Pyright, IDEs).
    # At runtime, they are not executed, so the modules won't be imported unless needed.
    from flag_bits.enums import BitsWidth
    from flag_bits.flag_manager import FlagManager
    from flag_bits.registry import Flag, FlagsType
    from flag_bits.value import FlagsValue

try:
    __version__ = autosemver.packaging.get_current_version(project_name="flag_bits")
except Exception:
    __version__ = "0.0.0"


# Declare the public API of the package. This tells `from flag_bits import *` what to include.
__all__ = ["BitsWidth", "Flag", "FlagManager", "FlagsType", "FlagsValue"]  # noqa


def __getattr__(name: str) -> Any:
    # NOTE: We use __getattr__ for lazy imports instead of top-level imports because setuptools may evaluate
    #   this module during build (e.g., to use the value of flag_bits.__version__), before the submodules can be
    #   imported. It also keeps `import flag_bits` from importing Polars until the flag manager is actually used.

    if name == "BitsWidth":
        from flag_bits.enums import BitsWidth  # noqa: PLC0415

        return BitsWidth

    if name == "Flag":
        from flag_bits.registry import Flag  # noqa: PLC0415

        return Flag

    if name == "FlagsType":
        from flag_bits.registry import FlagsType  # noqa: PLC0415

        return FlagsType

    if name == "FlagsValue":
        from flag_bits.value import FlagsValue  # noqa: PLC0415

        return FlagsValue

    if name == "FlagManager":
        from flag_bits.flag_manager import FlagManager  # noqa: PLC0415

        return FlagManager

    raise AttributeError(f"module {__name__} has no attribute {name}")
