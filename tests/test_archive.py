"""Tests for fetching and extracting rule archives."""

import tarfile
from unittest.mock import patch

import pytest
import requests

from rulestore.archive import RulesDownloader, archive_file_name
from rulestore.controller import RulesController
from rulestore.errors import RulesDownloadError

URL = "https://rules.example.com/packs/rules.tar.gz?token=abc"


def serve(mock_get, payload: bytes):
    """Make the patched requests.get answer with payload."""
    response = mock_get.return_value.__enter__.return_value
    response.raise_for_status.return_value = None
    response.iter_content.return_value = [payload[:10], b"", payload[10:]]
    return response


def spy_on_extract(paths: list):
    """Wrap extraction to record the archive paths handed to it."""
    extract = RulesDownloader._extract

    def spy(self, archive_path, target):
        paths.append(archive_path)
        return extract(self, archive_path, target)

    return spy


@pytest.mark.parametrize(
    "url, expected",
    [
        (URL, "rules.tar.gz"),
        ("http://host/rules.tar", "rules.tar"),
        ("http://host/", "rules.tar"),
        ("http://host", "rules.tar"),
    ],
)
def test_archive_file_name(url, expected):
    assert archive_file_name(url) == expected


class TestRulesDownloader:
    """Test the fetch, save, extract, remove pipeline."""

    def test_extracts_into_target(self, tmp_path, rules_tar):
        target = tmp_path / "rules"
        paths = []

        with patch("rulestore.archive.requests.get") as mock_get, patch.object(
            RulesDownloader, "_extract", spy_on_extract(paths)
        ):
            serve(mock_get, rules_tar)
            members = RulesDownloader().download(URL, target)

        assert sorted(members) == ["team/z.yaml", "x.yaml", "y.yaml"]
        assert (target / "x.yaml").read_text() == "name: x\ntype: any\n"
        assert (target / "team" / "z.yaml").exists()

        assert paths[0].name == "rules.tar.gz"
        assert not paths[0].exists()
        assert not paths[0].parent.exists()

    def test_tls_verification_is_configurable(self, tmp_path, rules_tar):
        with patch("rulestore.archive.requests.get") as mock_get:
            serve(mock_get, rules_tar)
            RulesDownloader(verify_tls=False, timeout=5).download(URL, tmp_path)

        mock_get.assert_called_once_with(URL, stream=True, verify=False, timeout=5)

    def test_insecure_fetch_is_logged(self, tmp_path, rules_tar, caplog):
        with patch("rulestore.archive.requests.get") as mock_get:
            serve(mock_get, rules_tar)
            RulesDownloader(verify_tls=False).download(URL, tmp_path)

        assert "TLS certificate verification is disabled" in caplog.text

    def test_http_error_stops_pipeline(self, tmp_path):
        target = tmp_path / "rules"

        with patch("rulestore.archive.requests.get") as mock_get:
            response = mock_get.return_value.__enter__.return_value
            response.raise_for_status.side_effect = requests.HTTPError("404")

            with pytest.raises(requests.HTTPError):
                RulesDownloader().download(URL, target)

        assert not target.exists()

    def test_bad_archive_removes_temp_file(self, tmp_path):
        paths = []

        with patch("rulestore.archive.requests.get") as mock_get, patch.object(
            RulesDownloader, "_extract", spy_on_extract(paths)
        ):
            serve(mock_get, b"this is not a tar archive at all")

            with pytest.raises(tarfile.TarError):
                RulesDownloader().download(URL, tmp_path / "rules")

        assert not paths[0].exists()
        assert not paths[0].parent.exists()

    def test_refuses_members_outside_target(self, tmp_path, make_archive):
        payload = make_archive({"../escaped.yaml": "name: evil\n"})

        with patch("rulestore.archive.requests.get") as mock_get:
            serve(mock_get, payload)

            with pytest.raises(tarfile.TarError):
                RulesDownloader().download(URL, tmp_path / "rules")

        assert not (tmp_path / "escaped.yaml").exists()


class TestDownloadRules:
    """Test bulk import through the controller."""

    @pytest.mark.asyncio
    async def test_downloaded_rules_are_readable(self, rules_folder, rules_tar):
        controller = RulesController(rules_folder)

        with patch("rulestore.archive.requests.get") as mock_get:
            serve(mock_get, rules_tar)
            members = await controller.download_rules(URL)

        assert "x.yaml" in members

        accessor = await controller.rule("x")
        assert await accessor.get() == b"name: x\ntype: any\n"

        index = await controller.get_rules()
        assert index.rules == ["x", "y"]
        assert index.folders == ["team"]

    @pytest.mark.asyncio
    async def test_fetch_failure_is_download_error(self, rules_folder):
        controller = RulesController(rules_folder)

        with patch("rulestore.archive.requests.get") as mock_get:
            mock_get.side_effect = requests.ConnectionError("refused")

            with pytest.raises(RulesDownloadError) as exc_info:
                await controller.download_rules(URL)

        assert exc_info.value.identifier == URL
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    @pytest.mark.asyncio
    async def test_bad_archive_is_download_error(self, rules_folder):
        controller = RulesController(rules_folder)

        with patch("rulestore.archive.requests.get") as mock_get:
            serve(mock_get, b"garbage" * 100)

            with pytest.raises(RulesDownloadError):
                await controller.download_rules(URL)
