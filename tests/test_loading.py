import warnings

import pandas as pd
import pytest

from wle_pipeline.phase2_loading import load_table, load_datasets, align_categories

from conftest import CLASSES, write_wle_csv


def test_training_label_and_subject_are_categorical(loaded):
    training, _ = loaded

    assert isinstance(training["classe"].dtype, pd.CategoricalDtype)
    assert isinstance(training["user_name"].dtype, pd.CategoricalDtype)
    assert list(training["classe"].cat.categories) == list(CLASSES)
    assert training["classe"].isin(CLASSES).all()


def test_evaluation_subject_uses_training_categories(loaded):
    training, evaluation = loaded

    assert "classe" not in evaluation.columns
    assert isinstance(evaluation["user_name"].dtype, pd.CategoricalDtype)
    assert list(evaluation["user_name"].cat.categories) == list(training["user_name"].cat.categories)


def test_blank_index_header_renamed_and_div0_is_missing(wle_csvs):
    df = load_table(wle_csvs["training"])

    assert df.columns[0] == "X"
    assert "Unnamed: 0" not in df.columns
    assert df.shape[1] == 160
    assert df["kurtosis_roll_belt"].isna().all()
    assert pd.api.types.is_float_dtype(df["kurtosis_roll_belt"])


def test_missing_categorical_column_raises(wle_csvs):
    with pytest.raises(KeyError, match="classe"):
        load_table(wle_csvs["evaluation"], ["user_name", "classe"])


def test_unknown_label_raises(tmp_path, raw_training, wle_csvs):
    bad = raw_training.copy()
    bad.loc[0, "classe"] = "F"
    paths = dict(wle_csvs, training=write_wle_csv(bad, tmp_path / "bad.csv"))

    with pytest.raises(ValueError, match="F"):
        load_datasets(paths)


def test_align_categories_maps_unseen_to_nan():
    reference = pd.DataFrame({"user_name": pd.Categorical(["adelmo", "pedro"])})
    other = pd.DataFrame({"user_name": pd.Categorical(["pedro", "eurico"])})

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        aligned = align_categories(reference, other, ["user_name"])

    assert list(aligned["user_name"].cat.categories) == ["adelmo", "pedro"]
    assert aligned["user_name"].iloc[0] == "pedro"
    assert pd.isna(aligned["user_name"].iloc[1])
    # input untouched
    assert list(other["user_name"].cat.categories) == ["eurico", "pedro"]


def test_align_categories_accepts_object_values_without_warning():
    reference = pd.DataFrame({"user_name": pd.Categorical(["adelmo", "pedro"])})
    other = pd.DataFrame({"user_name": ["eurico", "adelmo", None]})

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        aligned = align_categories(reference, other, ["user_name"])

    assert aligned["user_name"].isna().tolist() == [True, False, True]
