"""Checker pipeline: walk the store, validate every declared peer, aggregate."""

from __future__ import annotations

from collections.abc import Iterator
from fnmatch import fnmatchcase
from pathlib import Path

import structlog

from peercheck.engines.peer_checker.context import RunContext
from peercheck.engines.peer_checker.models import CheckReport, PackageRecord, PeerCheck
from peercheck.engines.peer_checker.reporter import aggregate
from peercheck.engines.peer_checker.validator import validate_peer
from peercheck.engines.peer_checker.walker import collect_packages
from peercheck.exceptions import StoreRootNotFoundError

log = structlog.get_logger("peercheck.engine")


def _matches(name: str, patterns: list[str] | None) -> bool:
    if not patterns:
        return True
    return any(fnmatchcase(name, pattern) for pattern in patterns)


def iter_peer_checks(
    packages: list[PackageRecord],
    stop_dir: Path,
    ctx: RunContext,
    package_filter: list[str] | None = None,
) -> Iterator[PeerCheck]:
    """Yield one classified check per (consumer, declared peer) pair."""
    for record in packages:
        peers = record.manifest.peer_dependencies
        if not peers or not _matches(record.name, package_filter):
            continue
        log.debug("checker.package", package=record.name, peers=len(peers))
        for peer, declared_range in peers.items():
            result = validate_peer(record, peer, declared_range, stop_dir, ctx)
            yield PeerCheck(consumer=record, peer=peer, range=declared_range, result=result)


def check_peers(
    store_root: str | Path,
    *,
    project_root: str | Path | None = None,
    package_filter: list[str] | None = None,
    package_manager: str = "pnpm",
    ctx: RunContext | None = None,
) -> CheckReport:
    """Check every installed package under *store_root* for peer dependency issues.

    *project_root* bounds the upward peer search and defaults to the
    parent of *store_root*.

    Raises :class:`StoreRootNotFoundError` if *store_root* is not a directory.
    """
    store = Path(store_root)
    if not store.is_dir():
        raise StoreRootNotFoundError(str(store))

    store = store.resolve()
    stop_dir = Path(project_root).resolve() if project_root else store.parent
    ctx = ctx or RunContext()

    packages = collect_packages(store, ctx)
    report = aggregate(
        iter_peer_checks(packages, stop_dir, ctx, package_filter),
        store_root=store,
        project_root=stop_dir,
        packages_scanned=len(packages),
        package_manager=package_manager,
    )
    log.info(
        "checker.done",
        packages=len(packages),
        checks=report.summary.total,
        issues=len(report.issues),
    )
    return report
