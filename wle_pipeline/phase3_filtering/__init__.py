"""Phase 3: Filtering - Drop bookkeeping and sparse aggregate-statistic columns."""

from .filtering import (
    DEFAULT_EXCLUDE,
    DEFAULT_PREFIXES,
    excluded_columns,
    filter_features,
    split_features_target,
)

__all__ = [
    "DEFAULT_EXCLUDE",
    "DEFAULT_PREFIXES",
    "excluded_columns",
    "filter_features",
    "split_features_target",
]
