"""
Clean Pipeline Orchestrator
============================

Runs the 6-phase WLE classification pipeline with callable functions.

Phases:
1. Acquisition - Download training + evaluation CSVs
2. Loading - Parse CSVs, subject/label to categorical
3. Filtering - Drop bookkeeping and sparse aggregate columns
4. Exploration - Grouped summary + smoothed trend plot
5. Training - Decision tree and random forest under 5-fold CV
6. Evaluation - Confusion matrices + evaluation-set predictions

Usage:
    python -m wle_pipeline.run_clean_pipeline --config config/pipeline.yaml
"""

import argparse
import logging
from pathlib import Path
from typing import Optional

import pandas as pd
import yaml

from wle_pipeline.phase1_acquisition import download_datasets
from wle_pipeline.phase1_acquisition.download import DEFAULT_URLS
from wle_pipeline.phase2_loading import load_datasets
from wle_pipeline.phase3_filtering import (
    DEFAULT_EXCLUDE, DEFAULT_PREFIXES, filter_features, split_features_target
)
from wle_pipeline.phase4_exploration import (
    describe_by_class, smoothed_trends, plot_smoothed_trends
)
from wle_pipeline.phase5_training import make_cv, fit_decision_tree, fit_random_forest
from wle_pipeline.phase5_training.training import DEFAULT_SEED
from wle_pipeline.phase6_evaluation import (
    evaluate_on_training, predict_evaluation, top_features, format_cv_summary
)

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str] = None) -> dict:
    """Load pipeline configuration (empty dict when no path is given)."""
    if config_path is None:
        return {}
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _banner(title: str) -> None:
    print(f"\n{'='*60}")
    print(title)
    print(f"{'='*60}")


def run_pipeline(
    config: dict,
    force_download: bool = False,
    skip_plots: bool = False,
) -> dict:
    """
    Run all 6 phases once.

    Args:
        config: Pipeline configuration dict (missing keys use module defaults)
        force_download: Re-fetch CSVs even if cached in data_dir
        skip_plots: Do not render the trend plot

    Returns:
        Dictionary with results from each phase
    """
    paths_cfg = config.get("paths", {})
    cols = config.get("columns", {})
    subject_col = cols.get("subject", "user_name")
    label_col = cols.get("label", "classe")
    id_col = cols.get("evaluation_id", "problem_id")
    class_labels = cols.get("class_labels", ["A", "B", "C", "D", "E"])

    results = {}

    # =========================================================================
    # PHASE 1: ACQUISITION
    # =========================================================================
    logger.info("\n[PHASE 1] Acquisition - Download training + evaluation CSVs")

    acq = config.get("acquisition", {})
    paths = download_datasets(
        config.get("urls", DEFAULT_URLS),
        paths_cfg.get("data_dir", "data"),
        overwrite=force_download,
        timeout=acq.get("timeout_sec", 60),
    )
    results["paths"] = paths

    # =========================================================================
    # PHASE 2: LOADING
    # =========================================================================
    logger.info("\n[PHASE 2] Loading - Parse CSVs, coerce categorical columns")

    load_kwargs = {}
    if "na_values" in config.get("loading", {}):
        load_kwargs["na_values"] = config["loading"]["na_values"]

    training, evaluation = load_datasets(
        paths,
        subject_col=subject_col,
        label_col=label_col,
        class_labels=class_labels,
        **load_kwargs,
    )
    results["training"] = training
    results["evaluation"] = evaluation
    logger.info(f"✓ Training {training.shape}, evaluation {evaluation.shape}")

    # =========================================================================
    # PHASE 3: FILTERING
    # =========================================================================
    logger.info("\n[PHASE 3] Filtering - Drop bookkeeping + aggregate columns")

    filt = config.get("filtering", {})
    filtered = filter_features(
        training,
        exact=filt.get("exclude", DEFAULT_EXCLUDE),
        prefixes=filt.get("exclude_prefixes", DEFAULT_PREFIXES),
    )
    results["filtered"] = filtered
    logger.info(f"✓ Filtered training table: {filtered.shape[1]} columns kept")

    # =========================================================================
    # PHASE 4: EXPLORATION
    # =========================================================================
    logger.info("\n[PHASE 4] Exploration - Summary statistics + trend plot")

    expl = config.get("exploration", {})
    value_col = expl.get("value_col", "roll_belt")
    subject = expl.get("subject", "adelmo")

    summary = describe_by_class(training, value_col, subject, subject_col=subject_col, label_col=label_col)
    results["summary"] = summary

    _banner(f"{value_col} by {label_col} for subject {subject}")
    print(summary.round(3).to_string())

    if not skip_plots:
        trends = smoothed_trends(
            training,
            value_col,
            expl.get("time_col", "raw_timestamp_part_1"),
            subject_col=subject_col,
            label_col=label_col,
            cutoff=expl.get("smooth_cutoff", 0.05),
            order=expl.get("smooth_order", 2),
        )
        out_dir = Path(paths_cfg.get("output_dir", "output"))
        if trends.empty:
            logger.warning(f"No {value_col} values to plot")
        else:
            results["trend_plot"] = plot_smoothed_trends(
                trends,
                out_dir / f"{value_col}_trends.png",
                value_label=value_col,
                col_wrap=expl.get("col_wrap", 3),
            )

    # =========================================================================
    # PHASE 5: TRAINING
    # =========================================================================
    logger.info("\n[PHASE 5] Training - Decision tree + random forest (k-fold CV)")

    cv_cfg = config.get("cv", {})
    seed = cv_cfg.get("seed", DEFAULT_SEED)
    cv = make_cv(n_splits=cv_cfg.get("n_splits", 5), seed=seed)

    X, y = split_features_target(filtered, label_col=label_col)

    tree_cfg = config.get("decision_tree", {})
    tree = fit_decision_tree(X, y, cv, param_grid=tree_cfg.get("param_grid"), seed=seed)

    rf_cfg = config.get("random_forest", {})
    forest = fit_random_forest(
        X, y, cv,
        param_grid=rf_cfg.get("param_grid"),
        n_estimators=rf_cfg.get("n_estimators", 100),
        seed=seed,
        n_jobs=rf_cfg.get("n_jobs", -1),
    )
    results["models"] = {"decision_tree": tree, "random_forest": forest}

    for model in (tree, forest):
        _banner(f"Cross-validation: {model.name}")
        print(format_cv_summary(model))

    # =========================================================================
    # PHASE 6: EVALUATION
    # =========================================================================
    logger.info("\n[PHASE 6] Evaluation - Confusion matrices + predictions")

    n_top = config.get("evaluation", {}).get("top_features", 10)
    results["evaluation_results"] = {}
    predictions = {}

    for key, model in results["models"].items():
        train_eval = evaluate_on_training(model, training, label_col=label_col, labels=class_labels)
        preds = predict_evaluation(model, evaluation, id_col=id_col)
        results["evaluation_results"][key] = {
            "training": train_eval,
            "predictions": preds,
        }
        predictions[model.name] = preds

        _banner(f"{model.name} on full training table")
        print(train_eval["confusion"].to_string())
        print(f"\nAccuracy: {train_eval['accuracy']:.4f}   Kappa: {train_eval['kappa']:.4f}")
        print(train_eval["report"])
        print(f"Top {n_top} features:")
        print(top_features(model, n=n_top).to_string(index=False))

    _banner("Evaluation table predictions")
    print(pd.DataFrame(predictions).to_string())

    return results


def main(argv=None):
    parser = argparse.ArgumentParser(description="WLE exercise classification pipeline")
    parser.add_argument("--config", type=str, default=None, help="Config file path (default: built-in defaults)")
    parser.add_argument("--data-dir", type=str, default=None, help="Override paths.data_dir")
    parser.add_argument("--output-dir", type=str, default=None, help="Override paths.output_dir")
    parser.add_argument("--force-download", action="store_true", help="Re-fetch CSVs even if cached")
    parser.add_argument("--skip-plots", action="store_true", help="Do not render the trend plot")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    config = load_config(args.config)
    paths_cfg = config.setdefault("paths", {})
    if args.data_dir:
        paths_cfg["data_dir"] = args.data_dir
    if args.output_dir:
        paths_cfg["output_dir"] = args.output_dir

    run_pipeline(config, force_download=args.force_download, skip_plots=args.skip_plots)

    logger.info("\n" + "="*60)
    logger.info("PIPELINE COMPLETE")
    logger.info("="*60)


if __name__ == "__main__":
    main()
