"""Tests for the depcore command line.

Commands run through Click's CliRunner inside a temporary working directory
so no stray configuration file is picked up.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Generator, List
from unittest.mock import patch

import pytest
from click.testing import CliRunner, Result

from depcore.cli import cli, main
from depcore.exceptions import DepcoreError, NetworkError
from depcore.models.requirement import VersionInfo
from depcore.models.version import Version
from depcore.utils.console import reconfigure_console
from depcore.utils.logger import disable_logging


@pytest.fixture(autouse=True)
def isolated_cli(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Run each test in an empty directory with default settings."""
    # The CLI writes NO_COLOR; set it first so monkeypatch restores it.
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("NO_COLOR")
    monkeypatch.delenv("DEPCORE_CONFIG", raising=False)
    monkeypatch.delenv("DEPCORE_COLOR", raising=False)
    monkeypatch.chdir(tmp_path)
    reconfigure_console()

    yield

    disable_logging()
    reconfigure_console()


def run(*args: str) -> Result:
    return CliRunner().invoke(cli, list(args))


@pytest.mark.unit
class TestGroup:
    """Tests for global options."""

    def test_help(self) -> None:
        result = run("--help")

        assert result.exit_code == 0
        assert "check" in result.output
        assert "req" in result.output

    def test_version(self) -> None:
        result = run("--version")

        assert result.exit_code == 0
        assert result.output.startswith("depcore ")

    def test_missing_explicit_config(self) -> None:
        result = run("--config", "missing.toml", "check", "^1.0")

        assert result.exit_code == 2

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        (tmp_path / "depcore.toml").write_text(
            "[depcore]\ntimeout = -1\n", encoding="utf-8"
        )

        result = run("check", "^1.0")

        assert result.exit_code == 1
        assert "timeout must be a positive integer" in result.output

    def test_no_color_sets_environment(self) -> None:
        run("--no-color", "check", "^1.0")

        assert os.environ.get("NO_COLOR") == "1"


@pytest.mark.unit
class TestCheckCommand:
    """Tests for ``depcore check``."""

    def test_ranges_only(self) -> None:
        result = run("check", ">=2.7, <3.5")

        assert result.exit_code == 0
        assert "Constraints: >=2.7.0, <3.5.0" in result.output
        assert "2.7.0 - 3.4.999999" in result.output

    def test_open_upper_bound_shown_as_star(self) -> None:
        result = run("check", ">=1.0")

        assert "1.0.0 - *" in result.output

    def test_compatible_candidates(self) -> None:
        result = run("check", "^0.3.1", "0.3.1", "0.3.4")

        assert result.exit_code == 0
        assert "Candidates" in result.output
        assert "Best match: 0.3.4" in result.output

    def test_incompatible_candidate_fails(self) -> None:
        result = run("check", "^0.3.1", "0.4.0")

        assert result.exit_code == 1
        assert "No candidate is compatible" in result.output

    def test_unsatisfiable(self) -> None:
        result = run("check", "^1.0, ^2.0")

        assert result.exit_code == 1
        assert "No version satisfies every constraint" in result.output

    def test_parse_error(self) -> None:
        result = run("check", ">=one")

        assert result.exit_code == 1
        assert "[ERROR]" in result.output

    def test_json_output(self) -> None:
        result = run("check", "--format", "json", "^0.3.1", "0.3.4", "0.4.0")

        data = json.loads(result.stdout)
        assert result.exit_code == 1
        assert data == {
            "constraints": ["^0.3.1"],
            "ranges": [["0.3.1", "0.3.999999"]],
            "satisfiable": True,
            "versions": {"0.3.4": True, "0.4.0": False},
            "best_match": "0.3.4",
        }

    def test_not_equal_lenient_by_default(self) -> None:
        result = run("check", "-f", "json", ">=1.0, !=1.5.0")

        assert json.loads(result.stdout)["ranges"] == [["1.0.0", "999999.0.0"]]

    def test_strict_not_equal_flag(self) -> None:
        result = run("check", "-f", "json", "--strict-ne", ">=1.0, !=1.5.0")

        ranges: List[List[str]] = json.loads(result.stdout)["ranges"]
        assert ranges == [["1.0.0", "1.4.999999"], ["1.5.1", "999999.0.0"]]

    def test_strict_not_equal_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            "[tool.depcore]\nstrict_not_equal = true\n", encoding="utf-8"
        )

        result = run("check", "-f", "json", ">=1.0, !=1.5.0")

        assert len(json.loads(result.stdout)["ranges"]) == 2

    def test_flag_overrides_config(self, tmp_path: Path) -> None:
        (tmp_path / "depcore.toml").write_text(
            "[depcore]\nstrict_not_equal = true\n", encoding="utf-8"
        )

        result = run("check", "-f", "json", "--lenient-ne", ">=1.0, !=1.5.0")

        assert len(json.loads(result.stdout)["ranges"]) == 1


@pytest.mark.unit
class TestReqCommand:
    """Tests for ``depcore req``."""

    def test_manifest_table(self) -> None:
        result = run("req", 'saturn = ">=0.3.4, <0.4"')

        assert result.exit_code == 0
        assert "Requirement" in result.output
        assert "saturn" in result.output
        assert ">=0.3.4, <0.4.0" in result.output

    def test_metadata_table(self) -> None:
        result = run(
            "req", "--format", "metadata", 'colorama (>=0.4) ; sys_platform == "win32"'
        )

        assert result.exit_code == 0
        assert "colorama" in result.output
        assert "==windows32" in result.output

    def test_unconstrained_shows_any(self) -> None:
        result = run("req", "-f", "pip", "click")

        assert "any" in result.output

    def test_cfg_with_constraints(self) -> None:
        """Test a constrained requirement is written without an index lookup."""
        with patch("depcore.commands.req.SyncVersionSource") as mock_source:
            result = run("req", "--cfg", "-f", "pip", "django>=3.2,<4")

        assert result.exit_code == 0
        assert result.output.strip() == 'django = ">=3.2.0, <4.0.0"'
        mock_source.return_value.get_version_info.assert_not_called()

    def test_cfg_looks_up_latest(self) -> None:
        with patch("depcore.commands.req.SyncVersionSource") as mock_source:
            mock_source.return_value.get_version_info.return_value = VersionInfo(
                "Requests", Version.new(2, 31, 0), {}
            )
            result = run("req", "--cfg", "-f", "pip", "requests")

        assert result.exit_code == 0
        assert result.output.strip() == 'Requests = "^2.31.0"'

    def test_cfg_lookup_failure(self) -> None:
        with patch("depcore.commands.req.SyncVersionSource") as mock_source:
            mock_source.return_value.get_version_info.side_effect = NetworkError(
                "connection refused"
            )
            result = run("req", "--cfg", "-f", "pip", "requests")

        assert result.exit_code == 1
        assert "Unable to find version info" in result.output

    def test_cfg_uses_configured_index(self, tmp_path: Path) -> None:
        (tmp_path / "depcore.toml").write_text(
            '[depcore]\nindex_url = "https://mirror.local/{package}"\ntimeout = 5\n',
            encoding="utf-8",
        )

        with patch("depcore.commands.req.SyncVersionSource") as mock_source:
            mock_source.return_value.get_version_info.return_value = VersionInfo(
                "saturn", Version.new(0, 3, 4), {}
            )
            run("req", "--cfg", "saturn")

        mock_source.assert_called_once_with("https://mirror.local/{package}", 5)

    def test_invalid_text(self) -> None:
        result = run("req", "-f", "pip", "not valid!")

        assert result.exit_code == 1
        assert "[ERROR]" in result.output


@pytest.mark.unit
class TestMain:
    """Tests for main() exit codes."""

    def test_success(self) -> None:
        with patch("sys.argv", ["depcore", "check", "^1.0", "1.2"]):
            assert main() == 0

    def test_command_failure(self) -> None:
        with patch("sys.argv", ["depcore", "check", "^1.0", "2.0"]):
            assert main() == 1

    def test_usage_error(self) -> None:
        with patch("sys.argv", ["depcore", "check"]):
            assert main() == 2

    def test_version_exits_cleanly(self) -> None:
        with patch("sys.argv", ["depcore", "--version"]):
            assert main() == 0

    def test_depcore_error(self) -> None:
        with patch("depcore.cli.cli", side_effect=DepcoreError("boom")):
            assert main() == 1

    def test_keyboard_interrupt(self) -> None:
        with patch("depcore.cli.cli", side_effect=KeyboardInterrupt):
            assert main() == 130

    def test_unexpected_error(self) -> None:
        with patch("depcore.cli.cli", side_effect=RuntimeError("bug")):
            assert main() == 1
