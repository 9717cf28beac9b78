"""
Summary Module
==============
Grouped descriptive statistics for one sensor variable.
"""

import logging

import pandas as pd

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["min", "q25", "median", "mean", "q75", "max"]


def describe_by_class(
    df: pd.DataFrame,
    value_col: str,
    subject: str,
    subject_col: str = "user_name",
    label_col: str = "classe",
) -> pd.DataFrame:
    """
    Min, quartiles, median, mean and max of `value_col` per class label,
    restricted to the rows of one subject.

    Returns:
        DataFrame indexed by class label with columns
        min, q25, median, mean, q75, max
    """
    for col in (value_col, subject_col, label_col):
        if col not in df.columns:
            raise ValueError(f"Column '{col}' not in data")

    rows = df[df[subject_col] == subject]
    if rows.empty:
        raise ValueError(f"Subject '{subject}' not found in column '{subject_col}'")

    grouped = rows.groupby(label_col, observed=True)[value_col]
    summary = pd.DataFrame({
        "min": grouped.min(),
        "q25": grouped.quantile(0.25),
        "median": grouped.median(),
        "mean": grouped.mean(),
        "q75": grouped.quantile(0.75),
        "max": grouped.max(),
    })[SUMMARY_COLUMNS]

    logger.info(f"Summarised {value_col} for {subject}: {len(rows)} rows, {len(summary)} classes")
    return summary
