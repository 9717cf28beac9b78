"""Phase 4: Exploration - Grouped summaries and smoothed trend plots."""

from .summary import describe_by_class
from .trends import smooth_series, smoothed_trends, plot_smoothed_trends

__all__ = [
    "describe_by_class",
    "smooth_series",
    "smoothed_trends",
    "plot_smoothed_trends",
]
