"""Phase 1: Acquisition - Fetch the training and evaluation CSVs."""

from .download import download_file, download_datasets

__all__ = [
    "download_file",
    "download_datasets",
]
