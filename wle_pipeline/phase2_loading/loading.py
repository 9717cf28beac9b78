"""
Loading Module
==============
Parses the training and evaluation CSVs into DataFrames and coerces the
subject identifier and class label to categorical dtype.

The evaluation table is re-encoded with the training table's categories so a
model fitted on one can predict on the other.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple, Union

import pandas as pd

logger = logging.getLogger(__name__)

SUBJECT_COL = "user_name"
LABEL_COL = "classe"
CLASS_LABELS = ("A", "B", "C", "D", "E")

# Sparse aggregate columns hold blanks, "NA" and spreadsheet division errors
DEFAULT_NA_VALUES = ("NA", "", "#DIV/0!")

# pandas name for the CSV's blank-header row-number column
_UNNAMED_INDEX = "Unnamed: 0"
ROW_INDEX_COL = "X"


def load_table(
    path: Union[str, Path],
    categorical_cols: Iterable[str] = (),
    na_values: Sequence[str] = DEFAULT_NA_VALUES,
) -> pd.DataFrame:
    """
    Load one WLE CSV.

    Args:
        path: CSV path
        categorical_cols: Columns cast to 'category' (each must exist)
        na_values: Extra strings treated as missing

    Returns:
        DataFrame with the row-number column named 'X'
    """
    df = pd.read_csv(path, na_values=list(na_values), low_memory=False)

    if _UNNAMED_INDEX in df.columns:
        df = df.rename(columns={_UNNAMED_INDEX: ROW_INDEX_COL})

    missing = [c for c in categorical_cols if c not in df.columns]
    if missing:
        raise KeyError(f"Missing columns in {path}: {missing}")

    for col in categorical_cols:
        df[col] = df[col].astype("category")

    logger.info(f"Loaded {path}: {df.shape[0]} rows x {df.shape[1]} columns")
    return df


def align_categories(
    reference: pd.DataFrame,
    other: pd.DataFrame,
    columns: Iterable[str],
) -> pd.DataFrame:
    """
    Re-encode categorical columns of `other` with the categories of `reference`.

    Values of `other` unseen in `reference` become NaN (logged as a warning).
    """
    out = other.copy()
    for col in columns:
        categories = reference[col].cat.categories
        values = out[col].astype(object)

        unseen = sorted({v for v in values.dropna().unique() if v not in categories}, key=str)
        if unseen:
            logger.warning(f"{col}: values not in reference categories -> NaN: {unseen}")

        # unseen values must be missing before the categorical is built
        values = values.where(values.isin(categories))
        out[col] = pd.Categorical(values, categories=categories)
    return out


def load_datasets(
    paths: Dict[str, Union[str, Path]],
    subject_col: str = SUBJECT_COL,
    label_col: str = LABEL_COL,
    class_labels: Sequence[str] = CLASS_LABELS,
    na_values: Sequence[str] = DEFAULT_NA_VALUES,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Load the training and evaluation tables.

    Training: subject and label categorical, label categories fixed to
    class_labels (in that order). Evaluation: subject categorical, encoded with
    the training categories.

    Returns:
        (training, evaluation)
    """
    training = load_table(paths["training"], [subject_col, label_col], na_values=na_values)

    labels = training[label_col]
    if labels.isna().any():
        raise ValueError(f"{int(labels.isna().sum())} rows have no '{label_col}' value")

    unknown = sorted(set(labels.cat.categories) - set(class_labels), key=str)
    if unknown:
        raise ValueError(f"Unexpected '{label_col}' values {unknown}; expected {list(class_labels)}")

    training[label_col] = labels.cat.set_categories(list(class_labels))

    evaluation = load_table(paths["evaluation"], [subject_col], na_values=na_values)
    evaluation = align_categories(training, evaluation, [subject_col])

    subjects: List[str] = list(training[subject_col].cat.categories)
    logger.info(f"Subjects: {subjects}")
    logger.info(f"Class distribution: {training[label_col].value_counts(sort=False).to_dict()}")

    return training, evaluation
