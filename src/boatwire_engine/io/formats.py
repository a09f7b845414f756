"""Tabular helpers for Parquet I/O of cable results."""

from collections.abc import Sequence

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from boatwire_engine.core.schemas import CableAnalysis, FuseRecommendation

CABLE_COLUMNS = [
    "connection_id",
    "current_a",
    "voltage_drop",
    "voltage_drop_percent",
    "power_loss_w",
    "recommended_section_mm2",
    "recommended_fuse_a",
    "status",
]

FUSE_COLUMNS = [
    "connection_id",
    "section_mm2",
    "max_cable_current_a",
    "current_a",
    "recommended_fuse_a",
    "status",
]


def ensure_columns(df: pd.DataFrame, required_columns: list[str]) -> None:
    """Ensure dataframe has required columns.

    Args:
        df: DataFrame to check
        required_columns: List of required column names

    Raises:
        ValueError: If any required columns are missing
    """
    missing = set(required_columns) - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def cables_to_frame(analyses: Sequence[CableAnalysis]) -> pd.DataFrame:
    """One row per cable analysis, in connection order."""
    return pd.DataFrame([a.model_dump() for a in analyses], columns=CABLE_COLUMNS)


def fuses_to_frame(recommendations: Sequence[FuseRecommendation]) -> pd.DataFrame:
    return pd.DataFrame([r.model_dump() for r in recommendations], columns=FUSE_COLUMNS)


def write_parquet_table(df: pd.DataFrame, path: str) -> None:
    """Write a result table to Parquet.

    Args:
        df: Table to write
        path: Output path
    """
    table = pa.Table.from_pandas(df, preserve_index=False)
    pq.write_table(table, path, compression="snappy")


def read_cables_table(path: str) -> pd.DataFrame:
    """Read a cable analysis table written by :func:`write_parquet_table`.

    Args:
        path: Path to Parquet file

    Returns:
        DataFrame indexed by connection_id
    """
    df = pd.read_parquet(path)
    ensure_columns(df, CABLE_COLUMNS)
    return df.set_index("connection_id")
