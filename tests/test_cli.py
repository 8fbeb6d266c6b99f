"""Tests for the peercheck CLI: real trees, click's CliRunner."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from peercheck.cli import main


@pytest.fixture
def mismatch_tree(store: Path, make_package) -> Path:
    make_package(store / "react", "react", "17.0.2")
    make_package(store / "ui", "ui", "1.0.0", {"react": "^18"})
    return store


@pytest.fixture
def workspace_tree(store: Path, make_package) -> Path:
    make_package(store / "c", "c", "1.0.0", {"b": "workspace:*"})
    return store


class TestExitStatus:
    def test_mismatch_non_strict_exits_zero(self, mismatch_tree: Path):
        result = CliRunner().invoke(main, ["--root", str(mismatch_tree)])
        assert result.exit_code == 0
        assert "react installed 17.0.2, requires ^18" in result.output

    def test_mismatch_strict_exits_one(self, mismatch_tree: Path):
        result = CliRunner().invoke(main, ["--root", str(mismatch_tree), "--strict"])
        assert result.exit_code == 1

    def test_ci_env_forces_strict(self, mismatch_tree: Path):
        result = CliRunner().invoke(main, ["--root", str(mismatch_tree)], env={"CI": "true"})
        assert result.exit_code == 1

    def test_ci_env_falsy(self, mismatch_tree: Path):
        result = CliRunner().invoke(main, ["--root", str(mismatch_tree)], env={"CI": "false"})
        assert result.exit_code == 0

    def test_missing_root_exits_two_without_summary(self, tmp_path: Path):
        result = CliRunner().invoke(main, ["--root", str(tmp_path / "nope")])
        assert result.exit_code == 2
        assert "not found" in result.output
        assert "Global:" not in result.output

    def test_workspace_range_never_blocks(self, workspace_tree: Path):
        result = CliRunner().invoke(main, ["--root", str(workspace_tree), "--strict"])
        assert result.exit_code == 0
        assert "workspace:*" in result.output

    def test_all_satisfied(self, store: Path, make_package):
        make_package(store / "react", "react", "18.2.0")
        make_package(store / "ui", "ui", "1.0.0", {"react": "^18"})
        result = CliRunner().invoke(main, ["--root", str(store), "--strict"])
        assert result.exit_code == 0
        assert "All peer dependencies are satisfied." in result.output

    def test_root_from_env(self, mismatch_tree: Path):
        result = CliRunner().invoke(main, ["--strict"], env={"PEERCHECK_ROOT": str(mismatch_tree)})
        assert result.exit_code == 1

    def test_unexpected_error_exits_three(self, mismatch_tree: Path):
        with patch("peercheck.cli.check_peers", side_effect=RuntimeError("boom")):
            result = CliRunner().invoke(main, ["--root", str(mismatch_tree)])
        assert result.exit_code == 3


class TestOutput:
    def test_json_output(self, mismatch_tree: Path):
        result = CliRunner().invoke(main, ["--root", str(mismatch_tree), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["summary"]["mismatched"] == 1
        assert data["issues"][0]["suggestion"] == 'pnpm add react@"^18"'

    def test_json_strict_still_exits_one(self, mismatch_tree: Path):
        result = CliRunner().invoke(main, ["--root", str(mismatch_tree), "--json", "--strict"])
        assert result.exit_code == 1
        assert json.loads(result.output)["ok"] is False

    def test_verbose_shows_satisfied(self, store: Path, make_package):
        make_package(store / "react", "react", "18.2.0")
        make_package(store / "ui", "ui", "1.0.0", {"react": "^18"})
        quiet = CliRunner().invoke(main, ["--root", str(store), "--quiet"])
        verbose = CliRunner().invoke(main, ["--root", str(store), "--verbose"])
        assert "react@18.2.0 satisfies ^18" not in quiet.output
        assert "react@18.2.0 satisfies ^18" in verbose.output

    def test_package_manager_flag(self, mismatch_tree: Path):
        result = CliRunner().invoke(main, ["--root", str(mismatch_tree), "--package-manager", "npm"])
        assert 'npm install react@"^18"' in result.output

    def test_package_filter(self, mismatch_tree: Path, make_package):
        make_package(mismatch_tree / "other", "other", "1.0.0", {"react": "^16"})
        result = CliRunner().invoke(main, ["--root", str(mismatch_tree), "--package", "oth*", "--json"])
        data = json.loads(result.output)
        assert list(data["perPackage"]) == ["other"]

    def test_invalid_package_manager_rejected(self, mismatch_tree: Path):
        result = CliRunner().invoke(main, ["--root", str(mismatch_tree), "--package-manager", "bun"])
        assert result.exit_code == 2


class TestFailureModes:
    def test_render_error_exits_three(self, mismatch_tree: Path):
        with patch("peercheck.cli.render_text", side_effect=RuntimeError("boom")):
            result = CliRunner().invoke(main, ["--root", str(mismatch_tree)])
        assert result.exit_code == 3
        assert "failed unexpectedly" in result.output

    def test_json_render_error_exits_three(self, mismatch_tree: Path):
        with patch("peercheck.cli.render_json", side_effect=RuntimeError("boom")):
            result = CliRunner().invoke(main, ["--root", str(mismatch_tree), "--json", "--strict"])
        assert result.exit_code == 3

    def test_unknown_package_manager_env_warns(self, mismatch_tree: Path):
        result = CliRunner().invoke(
            main, ["--root", str(mismatch_tree)], env={"PEERCHECK_PACKAGE_MANAGER": "bun"}
        )
        assert result.exit_code == 0
        assert "config.unknown_package_manager" in result.output
        assert 'pnpm add react@"^18"' in result.output
