"""
CLI Integration Tests
=====================

Tests the CLI commands against a registry in a temporary directory, with the
provider lookups patched.
"""

import json
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from fontsdb.cli import cli
from fontsdb.providers.webfonts_helper import WebfontsHelperProvider


class TestCLIIntegration:
    """CLI integration tests."""

    @pytest.fixture
    def runner(self):
        """Click test runner."""
        return CliRunner()

    @pytest.fixture
    def config_file(self, temp_dir):
        """Configuration with TTF files only, so no conversion is needed."""
        config_path = temp_dir / "fontsdb.yaml"
        config_path.write_text(
            yaml.safe_dump(
                {
                    "fonts_path": str(temp_dir / "registry"),
                    "formats": ["ttf"],
                    "providers": ["webfonts-helper"],
                }
            )
        )
        return config_path

    @pytest.fixture
    def invoke(self, runner, config_file):
        def invoke(*args):
            return runner.invoke(cli, ["--config", str(config_file), *args])

        return invoke

    def test_load_creates_registry(self, invoke, temp_dir):
        result = invoke("load")

        assert result.exit_code == 0, result.output
        assert "Known fonts: 0" in result.output
        assert "Installed fonts: 0" in result.output
        assert (temp_dir / "registry" / "fonts.yml").is_file()

    def test_fonts_path_option_wins(self, runner, config_file, temp_dir):
        result = runner.invoke(
            cli, ["--config", str(config_file), "--fonts-path", str(temp_dir / "other"), "load"]
        )

        assert result.exit_code == 0, result.output
        assert (temp_dir / "other" / "fonts.yml").is_file()

    def test_install_get_list_check(self, invoke, roboto_details, temp_dir):
        with patch.object(WebfontsHelperProvider, "infos", return_value=roboto_details) as infos:
            result = invoke("install", "Roboto", "--weight", "700", "--subset", "latin")

        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        infos.assert_called_once_with("roboto", "Roboto")

        result = invoke("get", "Roboto/700")
        assert result.exit_code == 0, result.output
        face = json.loads(result.stdout)
        assert face["id"] == "roboto"
        assert face["weight"] == "700"
        assert face["files"]["ttf"].endswith("roboto-700.ttf")

        result = invoke("list", "--installed")
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "roboto\tRoboto\tregular, italic, 700*"

        result = invoke("check", "Roboto", "-w", "bold")
        assert result.exit_code == 0, result.output
        assert "OK" in result.output

    def test_check_unknown_font(self, invoke):
        result = invoke("check", "Lobster")

        assert result.exit_code == 1
        assert "Font not available" in result.output
        assert "prefetch" in result.output

    def test_install_unknown_font(self, invoke):
        with patch.object(WebfontsHelperProvider, "infos", return_value=None):
            result = invoke("install", "Lobster")

        assert result.exit_code == 1
        assert "F: Lobster" in result.output

    def test_get_not_installed(self, invoke):
        result = invoke("get", "Roboto")

        assert result.exit_code == 1
        assert "Font not installed" in result.output

    def test_invalid_config(self, runner, temp_dir):
        config_path = temp_dir / "invalid.yaml"
        config_path.write_text(yaml.safe_dump({"formats": ["woff"]}))

        result = runner.invoke(cli, ["--config", str(config_path), "load"])

        assert result.exit_code == 1

    def test_missing_config_file(self, runner, temp_dir):
        result = runner.invoke(cli, ["--config", str(temp_dir / "missing.yaml"), "load"])

        assert result.exit_code != 0
