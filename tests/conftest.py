"""Shared fixtures for peercheck tests: build package trees on disk."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import structlog


def write_package(
    directory: Path,
    name: str,
    version: str = "1.0.0",
    peers: dict[str, str] | None = None,
) -> Path:
    """Create ``directory/package.json`` and return *directory*."""
    directory.mkdir(parents=True, exist_ok=True)
    data: dict = {"name": name, "version": version}
    if peers is not None:
        data["peerDependencies"] = peers
    (directory / "package.json").write_text(json.dumps(data))
    return directory


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty project root with a ``node_modules`` store."""
    root = tmp_path / "project"
    (root / "node_modules").mkdir(parents=True)
    return root.resolve()


@pytest.fixture
def store(project: Path) -> Path:
    return project / "node_modules"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("CI", "PEERCHECK_ROOT", "PEERCHECK_PACKAGE_MANAGER", "PEERCHECK_LOG_LEVEL", "PEERCHECK_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_package():
    return write_package
