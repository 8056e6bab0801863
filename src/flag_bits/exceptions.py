class FlagBitsError(Exception):
    """Base class for custom errors in the flag-bits package."""


class BitsError(FlagBitsError):
    """Base class for errors with raw bits values and widths."""


class BitsWidthError(BitsError):
    """Raised when a bits width is not one of the supported widths."""


class BitsTypeError(BitsError):
    """Raised when a bits value is not an integer."""


class BitsValueError(BitsError):
    """Raised when a bits value is negative or does not fit in its bits width."""


class FlagDefinitionError(FlagBitsError):
    """Raised when a flag name or bit pattern is invalid."""


class DuplicateFlagNameError(FlagDefinitionError):
    """Raised when a flag name is defined more than once within a flags type."""


class FlagNotFoundError(FlagBitsError):
    """Raised when a flag lookup by name fails."""


class FlagsTypeMismatchError(FlagBitsError):
    """Raised when an operation combines values belonging to different flags types."""


class ParseError(FlagBitsError, ValueError):
    """Base class for errors raised when parsing flags text.

    Attributes:
        token: The offending token, after surrounding whitespace was trimmed.
        position: Character offset of the token within the parsed text.
    """

    def __init__(self, msg: str, token: str = "", position: int = 0):
        self.token = token
        self.position = position
        super().__init__(msg)


class EmptyFlagError(ParseError):
    """Raised when flags text contains an empty token, such as ``"A | | B"``."""

    def __init__(self, msg: str | None = None, token: str = "", position: int = 0):
        if not msg:
            msg = f"Encountered empty flag at position {position}."
        super().__init__(msg, token, position)


class InvalidNamedFlagError(ParseError):
    """Raised when a token is neither a defined flag name nor a hex number."""

    def __init__(self, msg: str | None = None, token: str = "", position: int = 0):
        if not msg:
            msg = f"Unrecognized named flag '{token}' at position {position}."
        super().__init__(msg, token, position)


class InvalidHexFlagError(ParseError):
    """Raised when a ``0x`` token is malformed or does not fit in the bits width."""

    def __init__(self, msg: str | None = None, token: str = "", position: int = 0):
        if not msg:
            msg = f"Invalid hex flag '{token}' at position {position}."
        super().__init__(msg, token, position)


class FlagsTypeError(FlagBitsError):
    """Base class for flags-type registration errors."""


class DuplicateFlagsTypeError(FlagsTypeError):
    """Raised when a flags type is already registered under a name."""


class FlagsTypeNotFoundError(FlagsTypeError):
    """Raised when a flags type can't be found."""


class ColumnNotFoundError(FlagBitsError):
    """Raised when a requested flag column does not exist."""
