"""
Evaluation Module
=================
Applies fitted models to the unfiltered training table (confusion matrix
against the true label) and to the evaluation table (raw predictions).
No retraining happens here.
"""

import logging
from typing import Dict, Any, List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    classification_report,
    cohen_kappa_score,
    confusion_matrix,
)

from ..phase5_training import FittedModel

logger = logging.getLogger(__name__)


def confusion_table(y_true, y_pred, labels: Sequence[str]) -> pd.DataFrame:
    """Confusion matrix with true labels as rows ('Reference') and predictions as columns."""
    labels = list(labels)
    cm = confusion_matrix(np.asarray(y_true, dtype=object), np.asarray(y_pred, dtype=object), labels=labels)
    return pd.DataFrame(
        cm,
        index=pd.Index(labels, name="Reference"),
        columns=pd.Index(labels, name="Prediction"),
    )


def evaluate_on_training(
    model: FittedModel,
    table: pd.DataFrame,
    label_col: str = "classe",
    labels: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """
    Predict every row of the (unfiltered) training table and compare with its label.

    Returns:
        Dictionary with:
            - 'confusion': Confusion matrix DataFrame
            - 'accuracy': Fraction of correct predictions
            - 'kappa': Cohen's kappa
            - 'report': Per-class precision/recall/F1 text
            - 'y_pred': Predicted labels
    """
    if label_col not in table.columns:
        raise ValueError(f"Label column '{label_col}' not in data")

    labels = list(labels) if labels is not None else list(model.classes)
    y_true = table[label_col].astype(str).to_numpy()
    y_pred = model.predict(table)

    accuracy = accuracy_score(y_true, y_pred)
    kappa = cohen_kappa_score(y_true, y_pred, labels=labels)

    logger.info(f"{model.name} on training table: accuracy={accuracy:.4f}, kappa={kappa:.4f}")

    return {
        "confusion": confusion_table(y_true, y_pred, labels),
        "accuracy": float(accuracy),
        "kappa": float(kappa),
        "report": classification_report(y_true, y_pred, labels=labels, zero_division=0),
        "y_pred": y_pred,
    }


def predict_evaluation(
    model: FittedModel,
    table: pd.DataFrame,
    id_col: str = "problem_id",
) -> pd.Series:
    """Predicted label per evaluation row, indexed by id_col when present."""
    y_pred = model.predict(table)
    if id_col in table.columns:
        index = pd.Index(table[id_col].to_numpy(), name=id_col)
    else:
        index = table.index
    return pd.Series(y_pred, index=index, name=model.name)


def _source_columns(preprocessor) -> List[str]:
    # One output column per one-hot category, one per imputed numeric column
    sources: List[str] = []
    for name, transformer, cols in preprocessor.transformers_:
        if name == "cat":
            for col, cats in zip(cols, transformer.categories_):
                sources.extend([col] * len(cats))
        elif name == "num":
            sources.extend(transformer.get_feature_names_out(cols))
    return sources


def top_features(model: FittedModel, n: int = 10) -> pd.DataFrame:
    """Impurity-based importances per original feature column, largest first."""
    estimator = model.pipeline.named_steps["model"]
    preprocessor = model.pipeline.named_steps["preprocess"]

    importance = pd.Series(estimator.feature_importances_, index=_source_columns(preprocessor))
    importance = importance.groupby(level=0, sort=False).sum().sort_values(ascending=False)

    return (
        importance.head(n)
        .rename_axis("feature")
        .reset_index(name="importance")
    )


def format_cv_summary(model: FittedModel) -> str:
    """Printable table of mean/sd CV accuracy per parameter setting, best one marked."""
    res = model.cv_results
    n_splits = sum(1 for c in res.columns if c.startswith("split") and c.endswith("_test_score"))
    param_cols = [c for c in res.columns if c.startswith("param_")]

    table = pd.DataFrame({c.replace("param_model__", "").replace("param_", ""): res[c] for c in param_cols})
    table["accuracy"] = res["mean_test_score"].round(4)
    table["accuracy_sd"] = res["std_test_score"].round(4)
    table["selected"] = ""
    table.loc[res["rank_test_score"].idxmin(), "selected"] = "*"

    lines = [
        f"{model.name}",
        f"{n_splits}-fold cross-validation, {len(model.feature_columns)} predictors, classes {model.classes}",
        table.to_string(index=False),
        f"Selected: {model.best_params} (accuracy {model.cv_accuracy:.4f})",
    ]
    return "\n".join(lines)
