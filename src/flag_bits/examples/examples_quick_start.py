# [start_block_1]
from flag_bits import FlagsType

# [end_block_1]
from flag_bits.examples.utils import get_example_flags_type, suppress_output


def create_flags_type() -> FlagsType:
    # [start_block_2]
    permissions = FlagsType(
        "Permissions",
        {"READ": 0b001, "WRITE": 0b010, "EXECUTE": 0b100},
        bits_width="u8",
    )
    # [end_block_2]
    print(permissions.describe())
    return permissions


def combine_flags() -> None:
    with suppress_output():
        permissions = create_flags_type()

    # [start_block_3]
    read_write = permissions["READ"] | permissions["WRITE"]
    print(read_write)  # READ | WRITE
    print(read_write.contains("READ"))  # True
    print(~read_write)  # EXECUTE
    # [end_block_3]


def mutate_flags() -> None:
    with suppress_output():
        permissions = create_flags_type()

    # [start_block_4]
    value = permissions.empty()
    value.insert("READ")
    value.set("EXECUTE", True)
    value.toggle("READ")
    print(repr(value))  # Permissions(EXECUTE)
    # [end_block_4]


def unknown_bits() -> None:
    with suppress_output():
        permissions = create_flags_type()

    # [start_block_5]
    # Raw bits are kept as given, including bits that no flag defines
    raw = permissions.from_bits_retain(0b1000_0001)
    print(raw)  # READ | 0x80

    # Set operations and truncation always remove unknown bits
    print(raw.truncate())  # READ
    print(raw | "WRITE")  # READ | WRITE

    # from_bits reports absence if none of the bits are known
    print(permissions.from_bits(0b1000_0000))  # None
    # [end_block_5]


def text_round_trip() -> None:
    with suppress_output():
        permissions = create_flags_type()

    # [start_block_6]
    value = permissions.from_text("READ | 0x40")
    text = str(value)
    print(text)  # READ | 0x40
    print(permissions.from_text(text) == value)  # True
    # [end_block_6]


def declaration_order() -> None:
    # [start_block_7]
    flags = get_example_flags_type()
    value = flags["SPIKE"] | flags["OUT_OF_RANGE"]

    # SPIKE and OUT_OF_RANGE are declared before SUSPECT, so they consume its bits first
    print([name for name, _ in value.iter_names()])  # ['SPIKE', 'OUT_OF_RANGE']
    print(list(value.names()))  # ['SUSPECT']
    # [end_block_7]
