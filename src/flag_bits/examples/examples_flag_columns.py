import polars as pl

from flag_bits import FlagManager
from flag_bits.examples.utils import get_example_flags_type, suppress_output


def create_df() -> pl.DataFrame:
    # [start_block_1]
    df = pl.DataFrame(
        {
            "temperature": [24, 22, -35, 26, 50, 29],
            "battery": [3.1, 3.0, 2.9, 2.2, 2.1, 3.3],
            "temperature_flags": pl.Series([0, 0, 0, 0, 0, 0], dtype=pl.UInt8),
        }
    )
    # [end_block_1]
    print(df)
    return df


def create_flag_manager() -> FlagManager:
    # [start_block_2]
    flag_manager = FlagManager()
    flag_manager.register_flags_type("quality_control", get_example_flags_type())
    flag_manager.register_flag_column("temperature_flags", "temperature", "quality_control")
    # [end_block_2]
    return flag_manager


def flag_rows() -> None:
    with suppress_output():
        df = create_df()
        flag_manager = create_flag_manager()

    # [start_block_3]
    flag_column = flag_manager.get_flag_column("temperature_flags")
    df = flag_column.add_flag(df, "OUT_OF_RANGE", (pl.col("temperature") < -20) | (pl.col("temperature") > 40))
    df = flag_column.add_flag(df, "LOW_BATTERY", pl.col("battery") < 2.5)
    df = df.with_columns(flag_column.format(df).alias("flags_text"))
    # [end_block_3]
    print(df)


def filter_flagged_rows() -> None:
    with suppress_output():
        df = create_df()
        flag_manager = create_flag_manager()
        flag_column = flag_manager.get_flag_column("temperature_flags")
        df = flag_column.add_flag(df, "LOW_BATTERY", pl.col("battery") < 2.5)

    # [start_block_4]
    low_battery = df.filter(flag_column.contains("LOW_BATTERY"))
    # [end_block_4]
    print(low_battery)
