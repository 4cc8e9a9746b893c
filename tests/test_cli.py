"""
Tests for CLI module.
"""

from __future__ import annotations

import hashlib
import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from edgedb_portable.cli import main
from edgedb_portable.exceptions import NotFoundError
from edgedb_portable.models import Channel, PackageHash, PackageInfo, Query
from edgedb_portable.models.version import Build, Specific
from edgedb_portable.services.download import DownloadResult

DATA = b"edgedb-server tarball"
DIGEST = hashlib.blake2b(DATA, digest_size=64).hexdigest()


def make_info(version: str, digest: str = DIGEST, size: int = 1024) -> PackageInfo:
    return PackageInfo(
        version=Build.parse(version),
        url=f"https://packages.test/archive/edgedb-server-{version}.tar.zst",
        size=size,
        hash=PackageHash.blake2b(digest),
    )


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def repository():
    """Patch the sync repository used by the CLI."""
    with patch("edgedb_portable.cli.PackageRepository") as cls:
        yield cls.return_value


class TestCLIMain:
    """Test main CLI group."""

    def test_help(self, runner):
        """--help shows usage."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "EdgeDB server packages" in result.output

    def test_version(self, runner):
        """--version shows version."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "version" in result.output

    def test_invalid_environment(self, runner):
        result = runner.invoke(main, ["list"], env={"EDGEDB_REQUEST_TIMEOUT": "0"})
        assert result.exit_code == 1
        assert "invalid configuration" in result.output

    def test_pkg_root_passed_to_repository(self, runner):
        with patch("edgedb_portable.cli.PackageRepository") as cls:
            cls.return_value.get_server_packages.return_value = []
            runner.invoke(main, ["--pkg-root", "https://mirror.test", "list"])
        cls.assert_called_once_with(pkg_root="https://mirror.test")


class TestCLIList:
    """Test list command."""

    def test_lists_sorted(self, runner, repository):
        repository.get_server_packages.return_value = [
            make_info("2.1", size=2048),
            make_info("1.4"),
        ]
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 0
        assert result.output.index("1.4") < result.output.index("2.1")
        assert "2,048 bytes" in result.output
        repository.get_server_packages.assert_called_once_with(Channel.STABLE)

    def test_nightly_empty(self, runner, repository):
        repository.get_server_packages.return_value = []
        result = runner.invoke(main, ["list", "--nightly"])
        assert result.exit_code == 0
        assert "No nightly packages" in result.output
        repository.get_server_packages.assert_called_once_with(Channel.NIGHTLY)

    def test_markup_in_index_text_is_literal(self, runner, repository):
        info = make_info("2.1").model_copy(
            update={"version": Build("2.1+[red]x[/red]", Specific.parse("2.1"))}
        )
        repository.get_server_packages.return_value = [info]
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 0
        assert "2.1+[red]x[/red]" in result.output

    def test_fetch_error(self, runner, repository):
        repository.get_server_packages.side_effect = NotFoundError("https://packages.test/x")
        result = runner.invoke(main, ["list"])
        assert result.exit_code == 1
        assert "page not found" in result.output


class TestCLIResolve:
    """Test resolve command."""

    def test_text(self, runner, repository):
        repository.get_server_package.return_value = make_info("2.1")
        result = runner.invoke(main, ["resolve", "--version", "2"])
        assert result.exit_code == 0
        assert "edgedb-server@2.1" in result.output
        assert "1,024 bytes" in result.output
        repository.get_server_package.assert_called_once_with(Query.from_options(False, "2"))

    def test_json(self, runner, repository):
        repository.get_server_package.return_value = make_info("2.1")
        result = runner.invoke(main, ["resolve", "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["version"] == "2.1"
        assert payload["hash"] == f"blake2b:{DIGEST}"
        assert payload["kind"] == "tar_zst"

    def test_nightly_flag(self, runner, repository):
        repository.get_server_package.return_value = make_info("3.0-dev.7100")
        result = runner.invoke(main, ["resolve", "--nightly", "--version", "2"])
        assert result.exit_code == 0
        repository.get_server_package.assert_called_once_with(Query.nightly())

    def test_markup_in_url_is_literal(self, runner, repository):
        info = make_info("2.1").model_copy(
            update={"url": "https://packages.test/[bold]edgedb-server.tar.zst"}
        )
        repository.get_server_package.return_value = info
        result = runner.invoke(main, ["resolve"])
        assert result.exit_code == 0
        assert "https://packages.test/[bold]edgedb-server.tar.zst" in result.output

    def test_no_match(self, runner, repository):
        repository.get_server_package.return_value = None
        result = runner.invoke(main, ["resolve", "--version", "9"])
        assert result.exit_code == 1
        assert "no package matches 9.0" in result.output

    def test_bad_version(self, runner, repository):
        result = runner.invoke(main, ["resolve", "--version", "two"])
        assert result.exit_code == 1
        assert "Error" in result.output
        repository.get_server_package.assert_not_called()


class TestCLIDownload:
    """Test download command."""

    @pytest.fixture
    def downloader(self):
        with patch("edgedb_portable.cli.DownloadService") as cls:
            yield cls.return_value

    @staticmethod
    def _fake_download(path, url):
        path.write_bytes(DATA)
        return DownloadResult(local_path=path, url=url, size=len(DATA), blake2b=DIGEST)

    def test_success(self, runner, repository, downloader, tmp_path):
        package = make_info("2.1")
        repository.get_server_package.return_value = package
        downloader.download.side_effect = self._fake_download

        dest = tmp_path / "out"
        result = runner.invoke(main, ["download", "--dest", str(dest), "--no-progress"])
        assert result.exit_code == 0, result.output
        path = dest / package.cache_file_name()
        assert path.read_bytes() == DATA
        assert "Downloaded" in result.output
        downloader.download.assert_called_once_with(path, package.url)

    def test_hash_mismatch(self, runner, repository, downloader, tmp_path):
        package = make_info("2.1", digest="ab" * 64)
        repository.get_server_package.return_value = package
        downloader.download.side_effect = self._fake_download

        result = runner.invoke(main, ["download", "--dest", str(tmp_path)])
        assert result.exit_code == 1
        assert "hash mismatch" in result.output.lower()
        assert not (tmp_path / package.cache_file_name()).exists()

    def test_no_progress_option(self, runner, repository, tmp_path):
        repository.get_server_package.return_value = make_info("2.1")
        with patch("edgedb_portable.cli.DownloadService") as cls:
            cls.return_value.download.side_effect = self._fake_download
            runner.invoke(main, ["download", "--dest", str(tmp_path), "--no-progress"])
        assert cls.call_args.kwargs["show_progress"] is False

    def test_download_error(self, runner, repository, downloader, tmp_path):
        repository.get_server_package.return_value = make_info("2.1")
        downloader.download.side_effect = NotFoundError("https://packages.test/x")

        result = runner.invoke(main, ["download", "--dest", str(tmp_path)])
        assert result.exit_code == 1
        assert "page not found" in result.output

