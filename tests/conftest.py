import numpy as np
import pandas as pd
import pytest

from wle_pipeline.phase2_loading import load_datasets

SENSORS = ("belt", "arm", "dumbbell", "forearm")
ANGLES = ("roll", "pitch", "yaw")
SUBJECTS = ("adelmo", "carlitos", "pedro")
CLASSES = ("A", "B", "C", "D", "E")

LEADING = [
    "X", "user_name", "raw_timestamp_part_1", "raw_timestamp_part_2",
    "cvtd_timestamp", "new_window", "num_window",
]


def sensor_columns(sensor):
    raw = [f"{a}_{sensor}" for a in ANGLES] + [f"total_accel_{sensor}"]
    shape = [f"{stat}_{a}_{sensor}" for stat in ("kurtosis", "skewness", "max", "min", "amplitude") for a in ANGLES]
    window = [f"var_total_accel_{sensor}"] + [
        f"{stat}_{a}_{sensor}" for a in ANGLES for stat in ("avg", "stddev", "var")
    ]
    axes = [f"{kind}_{sensor}_{ax}" for kind in ("gyros", "accel", "magnet") for ax in "xyz"]
    return raw, shape + window, axes


def all_columns(label_col="classe"):
    cols = list(LEADING)
    for sensor in SENSORS:
        raw, agg, axes = sensor_columns(sensor)
        cols += raw + agg + axes
    return cols + [label_col]


def make_frame(n_rows, rng, labelled=True):
    data = {
        "X": np.arange(1, n_rows + 1),
        "user_name": [SUBJECTS[i % len(SUBJECTS)] for i in range(n_rows)],
        "raw_timestamp_part_1": 1322489600 + np.arange(n_rows) // 4,
        "raw_timestamp_part_2": rng.integers(0, 999999, n_rows),
        "cvtd_timestamp": "05/12/2011 11:23",
        "new_window": np.where(np.arange(n_rows) % 25 == 24, "yes", "no"),
        "num_window": 1 + np.arange(n_rows) // 25,
    }
    label_idx = rng.integers(0, len(CLASSES), n_rows) if labelled else np.zeros(n_rows, dtype=int)
    window_end = data["new_window"] == "yes"

    for sensor in SENSORS:
        raw, agg, axes = sensor_columns(sensor)
        for col in raw + axes:
            data[col] = label_idx * 10.0 + rng.normal(0, 1.0, n_rows)
        for col in agg:
            values = rng.normal(0, 1.0, n_rows) if labelled else np.full(n_rows, np.nan)
            data[col] = np.where(window_end & labelled, values, np.nan)

    if labelled:
        data["classe"] = np.array(CLASSES)[label_idx]
        return pd.DataFrame(data)[all_columns("classe")]

    data["problem_id"] = np.arange(1, n_rows + 1)
    return pd.DataFrame(data)[all_columns("problem_id")]


@pytest.fixture
def raw_training():
    return make_frame(250, np.random.default_rng(0), labelled=True)


@pytest.fixture
def raw_evaluation():
    return make_frame(20, np.random.default_rng(1), labelled=False)


def write_wle_csv(df, path):
    out = df.copy()
    # Sparse shape statistics carry spreadsheet errors in the real files
    for col in [c for c in out.columns if c.startswith(("kurtosis", "skewness"))]:
        col_values = out[col].astype(object)
        col_values[out["new_window"] == "yes"] = "#DIV/0!"
        out[col] = col_values
    # Row-number column has a blank header
    out = out.rename(columns={"X": ""})
    out.to_csv(path, index=False)
    return path


@pytest.fixture
def wle_csvs(tmp_path, raw_training, raw_evaluation):
    return {
        "training": write_wle_csv(raw_training, tmp_path / "pml-training.csv"),
        "evaluation": write_wle_csv(raw_evaluation, tmp_path / "pml-testing.csv"),
    }


@pytest.fixture
def loaded(wle_csvs):
    return load_datasets(wle_csvs)
