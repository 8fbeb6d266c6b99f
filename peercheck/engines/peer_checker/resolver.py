"""Peer resolver: find the copy of a package Node would load for a consumer."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import structlog

from peercheck.engines.peer_checker.context import MANIFEST_FILE, NODE_MODULES, RunContext
from peercheck.engines.peer_checker.manifest import read_manifest
from peercheck.engines.peer_checker.models import ResolvedPeer

log = structlog.get_logger("peercheck.resolver")


def search_paths(consumer_dir: Path, stop_dir: Path) -> Iterator[Path]:
    """Yield lookup levels from *consumer_dir* up to *stop_dir* inclusive.

    Levels named ``node_modules`` are skipped, as in Node's own lookup. A
    consumer living outside *stop_dir* (a linked workspace package) is
    searched until its path meets an ancestor of *stop_dir*, which is not
    checked.
    """
    above_stop = set(stop_dir.parents)
    for level in (consumer_dir, *consumer_dir.parents):
        if level in above_stop:
            return
        if level.name != NODE_MODULES:
            yield level
        if level == stop_dir:
            return


def peer_manifest_path(level: Path, peer_name: str) -> Path:
    # "@scope/name" becomes two path segments
    return level.joinpath(NODE_MODULES, *peer_name.split("/"), MANIFEST_FILE)


def resolve_peer_from(
    consumer_dir: str | Path,
    peer_name: str,
    stop_dir: str | Path,
    ctx: RunContext | None = None,
) -> ResolvedPeer | None:
    """Return the nearest installed *peer_name* visible from *consumer_dir*."""
    ctx = ctx or RunContext()
    for level in search_paths(Path(consumer_dir), Path(stop_dir)):
        manifest_path = peer_manifest_path(level, peer_name)
        manifest = read_manifest(manifest_path, ctx)
        if manifest is not None:
            return ResolvedPeer(manifest=manifest, found_dir=level)

    log.debug("resolver.not_found", peer=peer_name, consumer=str(consumer_dir))
    return None
