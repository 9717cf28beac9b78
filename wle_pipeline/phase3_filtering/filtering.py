"""
Feature Filtering Module
========================
Removes bookkeeping columns (row index, timestamps, window markers) and the
sparse per-window aggregate statistics, which are identified by name prefix.
"""

import logging
from typing import Iterable, List, Sequence, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE = (
    "X",
    "raw_timestamp_part_1",
    "cvtd_timestamp",
    "new_window",
    "num_window",
)

DEFAULT_PREFIXES = (
    "avg",
    "max",
    "min",
    "stddev",
    "var",
    "amplitude",
    "kurtosis",
    "skewness",
)


def excluded_columns(
    columns: Iterable[str],
    exact: Sequence[str] = DEFAULT_EXCLUDE,
    prefixes: Sequence[str] = DEFAULT_PREFIXES,
) -> List[str]:
    """Names in `columns` matching an exact name or starting with a prefix (case-sensitive)."""
    exact = set(exact)
    prefixes = tuple(prefixes)
    return [c for c in columns if c in exact or (prefixes and str(c).startswith(prefixes))]


def filter_features(
    df: pd.DataFrame,
    exact: Sequence[str] = DEFAULT_EXCLUDE,
    prefixes: Sequence[str] = DEFAULT_PREFIXES,
) -> pd.DataFrame:
    """
    Drop excluded columns, keeping every other column in its original order.

    Exact names that are not present are ignored, so filtering a filtered
    table returns an identical table.
    """
    drop = excluded_columns(df.columns, exact=exact, prefixes=prefixes)
    filtered = df.drop(columns=drop)

    logger.info(f"Dropped {len(drop)} columns: {df.shape[1]} -> {filtered.shape[1]}")
    return filtered


def split_features_target(
    df: pd.DataFrame,
    label_col: str = "classe",
) -> Tuple[pd.DataFrame, pd.Series]:
    """Separate the label from all remaining columns (subject identifier included)."""
    if label_col not in df.columns:
        raise ValueError(f"Label column '{label_col}' not in data")

    X = df.drop(columns=[label_col])
    y = df[label_col]
    return X, y
