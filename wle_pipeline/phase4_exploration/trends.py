"""
Trend Plot Module
=================
Low-pass smoothed trend of one sensor variable over time, one line per class
label and one panel per subject.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns
from scipy.signal import butter, filtfilt

logger = logging.getLogger(__name__)

TREND_COLUMNS = ["subject", "label", "time", "value", "smoothed"]


def smooth_series(values, cutoff: float = 0.05, order: int = 2) -> np.ndarray:
    """
    Zero-phase Butterworth low-pass over an evenly indexed sequence.

    Args:
        values: 1-D sequence
        cutoff: Normalised cutoff frequency in (0, 1), 1 = Nyquist
        order: Filter order

    Returns:
        Smoothed array; sequences too short for filtfilt padding are returned unchanged
    """
    if not (0.0 < cutoff < 1.0):
        raise ValueError("cutoff must be in (0, 1).")

    y = np.asarray(values, dtype=float)
    b, a = butter(order, cutoff, btype="low")

    padlen = 3 * max(len(a), len(b))
    if len(y) <= padlen:
        return y.copy()

    return filtfilt(b, a, y)


def smoothed_trends(
    df: pd.DataFrame,
    value_col: str,
    time_col: str,
    subject_col: str = "user_name",
    label_col: str = "classe",
    cutoff: float = 0.05,
    order: int = 2,
) -> pd.DataFrame:
    """
    Long-form smoothed trends, one series per (subject, label), ordered by time.

    Returns:
        DataFrame with columns subject, label, time, value, smoothed
    """
    for col in (value_col, time_col, subject_col, label_col):
        if col not in df.columns:
            raise ValueError(f"Column '{col}' not in data")

    parts = []
    for (subject, label), group in df.groupby([subject_col, label_col], observed=True):
        group = group.dropna(subset=[value_col, time_col]).sort_values(time_col, kind="stable")
        if group.empty:
            continue
        values = group[value_col].to_numpy(dtype=float)
        parts.append(pd.DataFrame({
            "subject": subject,
            "label": label,
            "time": group[time_col].to_numpy(),
            "value": values,
            "smoothed": smooth_series(values, cutoff=cutoff, order=order),
        }))

    if not parts:
        return pd.DataFrame(columns=TREND_COLUMNS)

    trends = pd.concat(parts, ignore_index=True)
    logger.info(f"Smoothed {value_col}: {len(parts)} series, {len(trends)} points")
    return trends


def plot_smoothed_trends(
    trends: pd.DataFrame,
    out_path: Union[str, Path],
    value_label: str = "value",
    col_wrap: int = 3,
) -> Path:
    """Facet the smoothed trends by subject (hue = class label) and save as PNG."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    sns.set_style("whitegrid")
    grid = sns.relplot(
        data=trends,
        x="time",
        y="smoothed",
        hue="label",
        col="subject",
        col_wrap=col_wrap,
        kind="line",
        height=3,
        aspect=1.4,
        facet_kws={"sharex": False},
    )
    grid.set_axis_labels("time", value_label)
    grid.set_titles("{col_name}")
    grid.figure.tight_layout()
    grid.savefig(out_path, dpi=150)
    plt.close(grid.figure)

    logger.info(f"Saved trend plot to {out_path}")
    return out_path
