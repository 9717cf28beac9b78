from unittest import mock

import pytest
import requests

from wle_pipeline.phase1_acquisition import download_file, download_datasets


def _response(chunks=(b"a,b\n", b"1,2\n"), error=None):
    response = mock.MagicMock()
    response.__enter__.return_value = response
    response.iter_content.return_value = list(chunks)
    if error is not None:
        response.raise_for_status.side_effect = error
    return response


@mock.patch("wle_pipeline.phase1_acquisition.download.requests.get")
def test_download_writes_body(mock_get, tmp_path):
    mock_get.return_value = _response()
    dest = download_file("https://example.org/data/train.csv", tmp_path / "sub" / "train.csv")

    assert dest.read_bytes() == b"a,b\n1,2\n"
    assert not (tmp_path / "sub" / "train.csv.part").exists()
    mock_get.assert_called_once()


@mock.patch("wle_pipeline.phase1_acquisition.download.requests.get")
def test_existing_file_is_not_refetched(mock_get, tmp_path):
    dest = tmp_path / "train.csv"
    dest.write_text("cached")

    assert download_file("https://example.org/train.csv", dest) == dest
    assert dest.read_text() == "cached"
    mock_get.assert_not_called()


@mock.patch("wle_pipeline.phase1_acquisition.download.requests.get")
def test_overwrite_refetches(mock_get, tmp_path):
    dest = tmp_path / "train.csv"
    dest.write_text("stale")
    mock_get.return_value = _response(chunks=(b"fresh",))

    download_file("https://example.org/train.csv", dest, overwrite=True)
    assert dest.read_bytes() == b"fresh"


@mock.patch("wle_pipeline.phase1_acquisition.download.requests.get")
def test_http_error_is_fatal(mock_get, tmp_path):
    mock_get.return_value = _response(error=requests.HTTPError("404 Client Error"))
    dest = tmp_path / "train.csv"

    with pytest.raises(requests.HTTPError):
        download_file("https://example.org/missing.csv", dest)
    assert not dest.exists()


@mock.patch("wle_pipeline.phase1_acquisition.download.requests.get")
def test_connection_error_propagates(mock_get, tmp_path):
    mock_get.side_effect = requests.ConnectionError("unreachable")

    with pytest.raises(requests.ConnectionError):
        download_file("https://example.org/train.csv", tmp_path / "train.csv")


@mock.patch("wle_pipeline.phase1_acquisition.download.requests.get")
def test_download_datasets_names_files_after_urls(mock_get, tmp_path):
    mock_get.side_effect = lambda *a, **k: _response()
    urls = {
        "training": "https://example.org/predmachlearn/pml-training.csv",
        "evaluation": "https://example.org/predmachlearn/pml-testing.csv",
    }

    paths = download_datasets(urls, tmp_path)

    assert paths == {
        "training": tmp_path / "pml-training.csv",
        "evaluation": tmp_path / "pml-testing.csv",
    }
    assert mock_get.call_count == 2


@mock.patch("wle_pipeline.phase1_acquisition.download.requests.get")
def test_download_datasets_requires_both_urls_before_fetching(mock_get, tmp_path):
    with pytest.raises(ValueError, match="evaluation"):
        download_datasets({"training": "https://example.org/t.csv"}, tmp_path)

    mock_get.assert_not_called()
    assert list(tmp_path.iterdir()) == []
