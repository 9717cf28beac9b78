"""
Acquisition Module
==================
Fetches the WLE training and evaluation CSVs from their fixed URLs.

Any HTTP or filesystem failure propagates and aborts the run; there is no retry.
"""

import logging
from pathlib import Path
from typing import Dict, Union
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)

TRAINING_URL = "https://d396qusza40orc.cloudfront.net/predmachlearn/pml-training.csv"
EVALUATION_URL = "https://d396qusza40orc.cloudfront.net/predmachlearn/pml-testing.csv"

DEFAULT_URLS = {
    "training": TRAINING_URL,
    "evaluation": EVALUATION_URL,
}

CHUNK_SIZE = 1 << 16


def download_file(
    url: str,
    dest: Union[str, Path],
    timeout: float = 60,
    overwrite: bool = False,
) -> Path:
    """
    Download a single file over HTTP(S).

    Args:
        url: Source URL
        dest: Local destination path (parent directories are created)
        timeout: Request timeout in seconds
        overwrite: Re-fetch even if dest already exists

    Returns:
        Path to the downloaded file
    """
    dest = Path(dest)
    if dest.exists() and not overwrite:
        logger.info(f"Using cached {dest} (skip download)")
        return dest

    dest.parent.mkdir(parents=True, exist_ok=True)
    tmp = dest.with_name(dest.name + ".part")

    logger.info(f"Downloading {url} -> {dest}")
    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        with open(tmp, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)

    tmp.replace(dest)
    logger.info(f"Saved {dest.stat().st_size} bytes to {dest}")
    return dest


def download_datasets(
    urls: Dict[str, str],
    data_dir: Union[str, Path],
    overwrite: bool = False,
    timeout: float = 60,
) -> Dict[str, Path]:
    """
    Fetch the training and evaluation tables into data_dir.

    Files are named after the last path segment of each URL.

    Returns:
        {"training": Path, "evaluation": Path}
    """
    data_dir = Path(data_dir)
    missing = [key for key in ("training", "evaluation") if key not in urls]
    if missing:
        raise ValueError(f"No URL configured for {missing}. Found {list(urls)}")

    paths = {}
    for key in ("training", "evaluation"):
        url = urls[key]
        filename = Path(urlparse(url).path).name or f"{key}.csv"
        paths[key] = download_file(url, data_dir / filename, timeout=timeout, overwrite=overwrite)
    return paths
