"""Range validator: classify a declared peer range against what is installed."""

from __future__ import annotations

import re
from pathlib import Path

import nodesemver
import structlog

from peercheck.engines.peer_checker.context import RunContext
from peercheck.engines.peer_checker.models import (
    InvalidRange,
    InvalidVersion,
    Mismatched,
    Missing,
    PackageRecord,
    PeerCheckResult,
    Satisfied,
)
from peercheck.engines.peer_checker.resolver import resolve_peer_from

log = structlog.get_logger("peercheck.validator")

# workspace:*, link:../x, file:..., npm:alias@1, git+ssh://..., https://...
_PROTOCOL_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*):")


def check_range(declared_range: str) -> str | None:
    """Return None if *declared_range* is a usable semver range, else a reason."""
    m = _PROTOCOL_RE.match(declared_range.strip())
    if m:
        return f"non-registry specifier '{m.group(1)}:' cannot be checked against a version"
    try:
        nodesemver.make_range(declared_range, False)
    except (ValueError, TypeError) as exc:
        return f"not a valid semver range ({exc})"
    return None


def validate_peer(
    consumer: PackageRecord,
    peer_name: str,
    declared_range: str,
    stop_dir: str | Path,
    ctx: RunContext | None = None,
) -> PeerCheckResult:
    """Classify one declared peer of *consumer*.

    The range is checked before any filesystem lookup, so unverifiable
    specifiers never touch the tree.
    """
    reason = check_range(declared_range)
    if reason is not None:
        log.debug("validator.invalid_range", package=consumer.name, peer=peer_name, range=declared_range)
        return InvalidRange(peer=peer_name, range=declared_range, reason=reason)

    resolved = resolve_peer_from(consumer.directory, peer_name, stop_dir, ctx)
    if resolved is None:
        return Missing(peer=peer_name, range=declared_range, searched_from=consumer.directory)

    version = resolved.manifest.version
    if nodesemver.valid(version, False) is None:
        return InvalidVersion(
            peer=peer_name,
            range=declared_range,
            version=version,
            resolved_from=resolved.found_dir,
            reason=f"installed version '{version}' is not valid semver",
        )

    if not nodesemver.satisfies(version, declared_range, loose=False, include_prerelease=True):
        return Mismatched(
            peer=peer_name,
            range=declared_range,
            version=version,
            resolved_from=resolved.found_dir,
        )

    return Satisfied(
        peer=peer_name,
        range=declared_range,
        version=version,
        resolved_from=resolved.found_dir,
    )
