"""Phase 5: Training - Cross-validated decision tree and random forest."""

from .training import (
    FittedModel,
    make_cv,
    build_preprocessor,
    fit_classifier,
    fit_decision_tree,
    fit_random_forest,
)

__all__ = [
    "FittedModel",
    "make_cv",
    "build_preprocessor",
    "fit_classifier",
    "fit_decision_tree",
    "fit_random_forest",
]
