"""
Training Module
===============
Fits a classification tree and a random forest under stratified k-fold
cross-validation. Each classifier is a scikit-learn Pipeline
(one-hot subject identifier + median-imputed sensor readings -> estimator),
tuned over a small grid and refit on the full filtered table.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.ensemble import RandomForestClassifier
from sklearn.impute import SimpleImputer
from sklearn.model_selection import GridSearchCV, StratifiedKFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder
from sklearn.tree import DecisionTreeClassifier

logger = logging.getLogger(__name__)

DEFAULT_SEED = 12345
DEFAULT_TREE_GRID = {"ccp_alpha": [0.0, 0.001, 0.01]}
DEFAULT_FOREST_GRID = {"max_features": ["sqrt", 0.3, 0.6]}


@dataclass(frozen=True)
class FittedModel:
    """Cross-validated classifier refit on the full filtered training table."""

    name: str
    pipeline: Pipeline
    feature_columns: List[str]
    classes: List[str]
    cv_accuracy: float
    cv_accuracy_std: float
    best_params: Dict[str, Any]
    cv_results: pd.DataFrame = field(repr=False)

    def predict(self, table: pd.DataFrame) -> np.ndarray:
        """Predict class labels for any table containing the feature columns."""
        missing = [c for c in self.feature_columns if c not in table.columns]
        if missing:
            raise KeyError(f"{self.name}: table is missing feature columns {missing}")
        return self.pipeline.predict(table[self.feature_columns])


def make_cv(n_splits: int = 5, seed: int = DEFAULT_SEED) -> StratifiedKFold:
    """Shuffled, seeded k-fold splitter (no repeats)."""
    return StratifiedKFold(n_splits=n_splits, shuffle=True, random_state=seed)


def build_preprocessor(X: pd.DataFrame) -> ColumnTransformer:
    """
    One-hot encode categorical columns (categories from the pandas dtype, or
    the sorted observed values for object columns) and median-impute numeric ones.
    """
    cat_cols = list(X.select_dtypes(include=["category", "object"]).columns)
    num_cols = [c for c in X.columns if c not in cat_cols]

    transformers = []
    if cat_cols:
        categories = [
            list(X[c].cat.categories) if isinstance(X[c].dtype, pd.CategoricalDtype)
            else sorted(X[c].dropna().unique().tolist())
            for c in cat_cols
        ]
        transformers.append(("cat", OneHotEncoder(categories=categories, handle_unknown="ignore"), cat_cols))
    if num_cols:
        transformers.append(("num", SimpleImputer(strategy="median"), num_cols))

    return ColumnTransformer(transformers, remainder="drop", sparse_threshold=0)


def fit_classifier(
    name: str,
    estimator,
    param_grid: Dict[str, Sequence],
    X: pd.DataFrame,
    y: pd.Series,
    cv: StratifiedKFold,
    n_jobs: Optional[int] = None,
) -> FittedModel:
    """
    Grid-search `estimator` by cross-validated accuracy and refit the best
    setting on all of X.

    Args:
        name: Display name
        estimator: Unfitted scikit-learn classifier
        param_grid: Estimator parameter grid (unprefixed names)
        X: Feature table
        y: Class labels
        cv: Splitter shared by every classifier
        n_jobs: Parallel fold/parameter evaluation (None = serial)
    """
    pipeline = Pipeline([
        ("preprocess", build_preprocessor(X)),
        ("model", estimator),
    ])
    grid = {f"model__{k}": list(v) for k, v in (param_grid or {}).items()}

    logger.info(f"Fitting {name}: {len(X)} samples, {X.shape[1]} features, grid={param_grid}")

    search = GridSearchCV(
        pipeline,
        param_grid=grid or [{}],
        scoring="accuracy",
        cv=cv,
        refit=True,
        n_jobs=n_jobs,
    )
    search.fit(X, y)

    best = search.best_index_
    cv_results = pd.DataFrame(search.cv_results_)
    best_params = {k.replace("model__", "", 1): v for k, v in search.best_params_.items()}

    model = FittedModel(
        name=name,
        pipeline=search.best_estimator_,
        feature_columns=list(X.columns),
        classes=[str(c) for c in search.best_estimator_.classes_],
        cv_accuracy=float(search.best_score_),
        cv_accuracy_std=float(cv_results.loc[best, "std_test_score"]),
        best_params=best_params,
        cv_results=cv_results,
    )

    logger.info(
        f"{name}: CV accuracy={model.cv_accuracy:.4f} (±{model.cv_accuracy_std:.4f}), best={best_params}"
    )
    return model


def fit_decision_tree(
    X: pd.DataFrame,
    y: pd.Series,
    cv: StratifiedKFold,
    param_grid: Optional[Dict[str, Sequence]] = None,
    seed: int = DEFAULT_SEED,
) -> FittedModel:
    """Classifier A: a single classification tree tuned over cost-complexity pruning."""
    return fit_classifier(
        "Decision tree",
        DecisionTreeClassifier(random_state=seed),
        param_grid if param_grid is not None else DEFAULT_TREE_GRID,
        X, y, cv,
    )


def fit_random_forest(
    X: pd.DataFrame,
    y: pd.Series,
    cv: StratifiedKFold,
    param_grid: Optional[Dict[str, Sequence]] = None,
    n_estimators: int = 100,
    seed: int = DEFAULT_SEED,
    n_jobs: Optional[int] = -1,
) -> FittedModel:
    """Classifier B: a random forest tuned over max_features, folds evaluated in parallel."""
    return fit_classifier(
        "Random forest",
        RandomForestClassifier(n_estimators=n_estimators, random_state=seed),
        param_grid if param_grid is not None else DEFAULT_FOREST_GRID,
        X, y, cv,
        n_jobs=n_jobs,
    )
