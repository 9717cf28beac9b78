"""Phase 6: Evaluation - Confusion matrices and evaluation-set predictions."""

from .evaluation import (
    confusion_table,
    evaluate_on_training,
    predict_evaluation,
    top_features,
    format_cv_summary,
)

__all__ = [
    "confusion_table",
    "evaluate_on_training",
    "predict_evaluation",
    "top_features",
    "format_cv_summary",
]
