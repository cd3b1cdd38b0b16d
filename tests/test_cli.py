"""Tests for the typer CLI."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from barrelroll.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep a stray barrelroll.toml in the working directory out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BARRELROLL_LOG_LEVEL", raising=False)


class TestGenerate:
    def test_writes_barrel(self, ts_project):
        result = runner.invoke(app, ["generate", str(ts_project)])
        assert result.exit_code == 0, result.output
        assert "Wrote 1 files" in result.output
        assert (ts_project / "index.ts").read_text().startswith(
            "export { Alpha } from './alpha';\n"
        )

    def test_file_argument_selects_parent(self, ts_project):
        result = runner.invoke(app, ["generate", str(ts_project / "alpha.ts")])
        assert result.exit_code == 0, result.output
        assert (ts_project / "index.ts").exists()

    def test_recursive(self, ts_project):
        result = runner.invoke(app, ["generate", str(ts_project), "-r"])
        assert result.exit_code == 0, result.output
        assert (ts_project / "nested" / "index.ts").exists()
        assert "export * from './nested';" in (ts_project / "index.ts").read_text()

    def test_dry_run_prints_content(self, ts_project):
        result = runner.invoke(app, ["generate", str(ts_project), "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "export { Gamma, type GammaProps } from './gamma';" in result.output
        assert "Dry run" in result.output
        assert not (ts_project / "index.ts").exists()

    def test_empty_directory_fails(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(app, ["generate", str(empty)])
        assert result.exit_code == 1
        assert "No TypeScript files found" in result.output

    def test_invalid_config_fails(self, ts_project, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text('[generation]\nmode = "sometimes"\n')
        result = runner.invoke(app, ["generate", str(ts_project), "--config", str(config)])
        assert result.exit_code == 1
        assert "invalid config" in result.output
        assert not (ts_project / "index.ts").exists()

    def test_unknown_log_level_in_config_fails(self, ts_project, tmp_path):
        (tmp_path / "barrelroll.toml").write_text('[logging]\nlevel = "chatty"\n')
        result = runner.invoke(app, ["generate", str(ts_project)])
        assert result.exit_code == 1
        assert "invalid config" in result.output
        assert not (ts_project / "index.ts").exists()

    def test_unknown_log_level_in_env_fails(self, ts_project, monkeypatch):
        monkeypatch.setenv("BARRELROLL_LOG_LEVEL", "foo")
        result = runner.invoke(app, ["generate", str(ts_project)])
        assert result.exit_code == 1
        assert "invalid config" in result.output

    def test_config_enables_recursion(self, ts_project, tmp_path):
        (tmp_path / "barrelroll.toml").write_text("[generation]\nrecursive = true\n")
        result = runner.invoke(app, ["generate", str(ts_project)])
        assert result.exit_code == 0, result.output
        assert (ts_project / "nested" / "index.ts").exists()

    def test_cache_flag(self, ts_project):
        result = runner.invoke(app, ["generate", str(ts_project), "--cache"])
        assert result.exit_code == 0, result.output
        assert (ts_project / ".barrelroll" / "cache.db").exists()


class TestUpdate:
    def test_only_existing_barrels(self, ts_project):
        (ts_project / "index.ts").write_text("export const VERSION = 1;\n")
        result = runner.invoke(app, ["update", str(ts_project)])
        assert result.exit_code == 0, result.output
        assert not (ts_project / "nested" / "index.ts").exists()
        content = (ts_project / "index.ts").read_text()
        assert content.startswith("export const VERSION = 1;\n\nexport { Alpha }")

    def test_nothing_to_update(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(app, ["update", str(empty)])
        assert result.exit_code == 0, result.output
        assert "No barrel files written" in result.output


class TestExports:
    def test_lists_exports(self, ts_project):
        result = runner.invoke(app, ["exports", str(ts_project / "beta.ts")])
        assert result.exit_code == 0, result.output
        assert "Bravo" in result.output
        assert "type" in result.output
        assert "default" in result.output

    def test_no_exports(self, ts_project):
        result = runner.invoke(app, ["exports", str(ts_project / "internal.ts")])
        assert result.exit_code == 0, result.output
        assert "No exports found" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["exports", str(tmp_path / "missing.ts")])
        assert result.exit_code == 1
        assert "Failed to read file" in result.output


class TestInit:
    def test_creates_config(self, tmp_path):
        result = runner.invoke(app, ["init", "--path", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "[generation]" in (tmp_path / "barrelroll.toml").read_text()

    def test_refuses_to_overwrite(self, tmp_path):
        (tmp_path / "barrelroll.toml").write_text("# mine\n")
        result = runner.invoke(app, ["init", "--path", str(tmp_path)])
        assert result.exit_code == 1
        assert (tmp_path / "barrelroll.toml").read_text() == "# mine\n"
