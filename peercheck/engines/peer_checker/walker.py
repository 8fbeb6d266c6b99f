"""Package tree walker: enumerate every installed package under a store root."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import structlog

from peercheck.engines.peer_checker.context import MANIFEST_FILE, NODE_MODULES, RunContext
from peercheck.engines.peer_checker.manifest import read_manifest
from peercheck.engines.peer_checker.models import PackageRecord

log = structlog.get_logger("peercheck.walker")

EntryKind = Literal["ignored", "scope", "package"]


def classify_entry(name: str) -> EntryKind:
    """Decide how a store directory entry is treated before recursing into it."""
    if name.startswith("."):
        return "ignored"
    if name.startswith("@"):
        return "scope"
    return "package"


def _real_dir(path: Path) -> Path | None:
    """Canonical path of *path* if it is an existing directory, else None."""
    try:
        real = path.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        log.debug("walker.unresolvable", path=str(path), error=str(exc))
        return None
    if not real.is_dir():
        return None
    return real


def _list_entries(directory: Path) -> list[str]:
    try:
        return sorted(entry.name for entry in directory.iterdir())
    except OSError as exc:
        log.debug("walker.unreadable_dir", path=str(directory), error=str(exc))
        return []


class PackageWalker:
    """Walk a ``node_modules`` tree, including scopes and nested stores.

    Every directory is canonicalised before it is marked visited, so a
    physical directory reached through several symlinks is walked once and
    symlink cycles terminate.
    """

    def __init__(self, ctx: RunContext | None = None) -> None:
        self.ctx = ctx or RunContext()
        self.records: list[PackageRecord] = []

    def walk(self, root_dir: str | Path) -> list[PackageRecord]:
        self._walk_store(Path(root_dir))
        return self.records

    def _walk_store(self, store_dir: Path) -> None:
        real = _real_dir(store_dir)
        if real is None or not self.ctx.mark_visited(real):
            return

        for name in _list_entries(real):
            kind = classify_entry(name)
            if kind == "ignored":
                continue
            if kind == "scope":
                self._walk_scope(real / name)
            else:
                self._visit_package(real / name)

    def _walk_scope(self, scope_dir: Path) -> None:
        real = _real_dir(scope_dir)
        if real is None or not self.ctx.mark_visited(real):
            return

        for name in _list_entries(real):
            if classify_entry(name) == "package":
                self._visit_package(real / name)

    def _visit_package(self, candidate: Path) -> None:
        real = _real_dir(candidate)
        if real is None or not self.ctx.mark_visited(real):
            return

        manifest = read_manifest(real / MANIFEST_FILE, self.ctx)
        if manifest is None:
            return

        self.records.append(PackageRecord(manifest=manifest, directory=real))

        nested = real / NODE_MODULES
        if nested.is_dir():
            self._walk_store(nested)


def collect_packages(root_dir: str | Path, ctx: RunContext | None = None) -> list[PackageRecord]:
    """Return every installed package under *root_dir* (empty if it does not exist)."""
    records = PackageWalker(ctx).walk(root_dir)
    log.debug("walker.done", root=str(root_dir), packages=len(records))
    return records
