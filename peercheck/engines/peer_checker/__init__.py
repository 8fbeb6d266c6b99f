"""Peer dependency checker engine: validate installed peers in a node_modules tree."""

from peercheck.engines.peer_checker.checker import check_peers
from peercheck.engines.peer_checker.context import RunContext
from peercheck.engines.peer_checker.manifest import read_manifest
from peercheck.engines.peer_checker.models import (
    CheckReport,
    InvalidRange,
    InvalidVersion,
    Issue,
    Mismatched,
    Missing,
    PackageManifest,
    PackageRecord,
    PeerCheckResult,
    Satisfied,
    Summary,
)
from peercheck.engines.peer_checker.resolver import resolve_peer_from
from peercheck.engines.peer_checker.validator import validate_peer
from peercheck.engines.peer_checker.walker import collect_packages

__all__ = [
    "CheckReport",
    "InvalidRange",
    "InvalidVersion",
    "Issue",
    "Mismatched",
    "Missing",
    "PackageManifest",
    "PackageRecord",
    "PeerCheckResult",
    "RunContext",
    "Satisfied",
    "Summary",
    "check_peers",
    "collect_packages",
    "read_manifest",
    "resolve_peer_from",
    "validate_peer",
]
