"""Data models for the peer dependency checker engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Literal, Union

PeerStatus = Literal["satisfied", "missing", "mismatched", "invalid-range", "invalid-version"]

# Statuses that make a strict run fail.
BLOCKING_STATUSES: frozenset[str] = frozenset({"missing", "mismatched"})


@dataclass(frozen=True)
class PackageManifest:
    """The parts of a ``package.json`` the checker cares about."""

    name: str
    version: str
    peer_dependencies: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PackageRecord:
    """An installed package and the canonical directory it lives in."""

    manifest: PackageManifest
    directory: Path

    @property
    def name(self) -> str:
        return self.manifest.name


@dataclass(frozen=True)
class ResolvedPeer:
    """A located peer; *found_dir* is the level whose node_modules held it."""

    manifest: PackageManifest
    found_dir: Path


# ── PeerCheckResult variants ─────────────────────────────────────────────


@dataclass(frozen=True)
class Satisfied:
    status: ClassVar[PeerStatus] = "satisfied"

    peer: str
    range: str
    version: str
    resolved_from: Path


@dataclass(frozen=True)
class Missing:
    status: ClassVar[PeerStatus] = "missing"

    peer: str
    range: str
    searched_from: Path


@dataclass(frozen=True)
class Mismatched:
    status: ClassVar[PeerStatus] = "mismatched"

    peer: str
    range: str
    version: str
    resolved_from: Path


@dataclass(frozen=True)
class InvalidRange:
    status: ClassVar[PeerStatus] = "invalid-range"

    peer: str
    range: str
    reason: str


@dataclass(frozen=True)
class InvalidVersion:
    status: ClassVar[PeerStatus] = "invalid-version"

    peer: str
    range: str
    version: str
    resolved_from: Path
    reason: str


PeerCheckResult = Union[Satisfied, Missing, Mismatched, InvalidRange, InvalidVersion]


@dataclass(frozen=True)
class PeerCheck:
    """One (consumer, declared peer) pair and how it was classified."""

    consumer: PackageRecord
    peer: str
    range: str
    result: PeerCheckResult


# ── Aggregation ──────────────────────────────────────────────────────────


_STATUS_FIELDS: dict[str, str] = {
    "satisfied": "satisfied",
    "mismatched": "mismatched",
    "missing": "missing",
    "invalid-range": "invalid_range",
    "invalid-version": "invalid_version",
}


@dataclass
class Summary:
    satisfied: int = 0
    mismatched: int = 0
    missing: int = 0
    invalid_range: int = 0
    invalid_version: int = 0

    def add(self, status: str) -> None:
        """Bump the counter for *status*. Unknown statuses raise KeyError."""
        attr = _STATUS_FIELDS[status]
        setattr(self, attr, getattr(self, attr) + 1)

    @property
    def total(self) -> int:
        return (
            self.satisfied
            + self.mismatched
            + self.missing
            + self.invalid_range
            + self.invalid_version
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "satisfied": self.satisfied,
            "mismatched": self.mismatched,
            "missing": self.missing,
            "invalidRange": self.invalid_range,
            "invalidVersion": self.invalid_version,
        }


@dataclass
class Issue:
    """A non-satisfied check, flattened so it can be printed or serialized alone."""

    package: str
    package_version: str
    package_dir: str
    peer: str
    range: str
    status: PeerStatus
    installed_version: str | None
    location: str | None  # resolved dir, or the dir the search started from
    reason: str
    suggestion: str | None = None

    @property
    def blocking(self) -> bool:
        return self.status in BLOCKING_STATUSES

    def to_dict(self) -> dict[str, str | bool | None]:
        return {
            "package": self.package,
            "packageVersion": self.package_version,
            "packageDir": self.package_dir,
            "peer": self.peer,
            "range": self.range,
            "status": self.status,
            "installedVersion": self.installed_version,
            "location": self.location,
            "reason": self.reason,
            "suggestion": self.suggestion,
            "blocking": self.blocking,
        }


@dataclass
class CheckReport:
    """Everything one run found, ready for rendering."""

    store_root: Path
    project_root: Path
    packages_scanned: int
    summary: Summary = field(default_factory=Summary)
    per_package: dict[str, Summary] = field(default_factory=dict)
    issues: list[Issue] = field(default_factory=list)
    checks: list[PeerCheck] = field(default_factory=list)

    @property
    def has_blocking_issues(self) -> bool:
        return any(issue.blocking for issue in self.issues)
