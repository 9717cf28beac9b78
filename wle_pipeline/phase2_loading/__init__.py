"""Phase 2: Loading - Parse CSVs and coerce subject/label columns to categorical."""

from .loading import load_table, load_datasets, align_categories

__all__ = [
    "load_table",
    "load_datasets",
    "align_categories",
]
