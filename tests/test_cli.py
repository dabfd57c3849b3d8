"""Tests for the command line interface."""

import pytest
from typer.testing import CliRunner

from ironvault_publisher.cli import app

runner = CliRunner()


@pytest.fixture
def vault(tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    (vault / "Kira Vale.md").write_text("---\ntitle: Kira\n---\nSee [[Bleakhold]].\n")
    (vault / "Bleakhold.md").write_text("# Bleakhold\n")
    return vault


@pytest.fixture
def config_file(vault, tmp_path):
    path = tmp_path / "publish.yaml"
    path.write_text(f"vault_path: {vault}\noutput_dir: site\n")
    return path


class TestRenderCommand:
    """Tests for the render command."""

    def test_render_note(self, vault):
        result = runner.invoke(app, ["render", str(vault), "Kira"])

        assert result.exit_code == 0
        assert '<a href="/bleakhold">Bleakhold</a>' in result.stdout

    def test_render_with_base_url(self, vault):
        result = runner.invoke(app, ["render", str(vault), "Kira Vale", "--base-url", "/campaign"])

        assert result.exit_code == 0
        assert 'href="/campaign/bleakhold"' in result.stdout

    def test_note_not_found(self, vault):
        result = runner.invoke(app, ["render", str(vault), "Ghost Ship"])
        assert result.exit_code == 1

    def test_missing_vault(self, tmp_path):
        result = runner.invoke(app, ["render", str(tmp_path / "nowhere"), "Kira"])
        assert result.exit_code == 1


class TestBuildCommand:
    """Tests for the build command."""

    def test_build(self, config_file, tmp_path):
        result = runner.invoke(app, ["build", str(config_file)])

        assert result.exit_code == 0
        assert "Published 2 notes" in result.stdout
        assert (tmp_path / "site" / "kira-vale.html").exists()

    def test_build_dry_run(self, config_file, tmp_path):
        result = runner.invoke(app, ["build", str(config_file), "--dry-run"])

        assert result.exit_code == 0
        assert not (tmp_path / "site").exists()

    def test_build_bad_config(self, tmp_path):
        path = tmp_path / "publish.yaml"
        path.write_text("output_dir: site\n")

        result = runner.invoke(app, ["build", str(path)])

        assert result.exit_code == 1
