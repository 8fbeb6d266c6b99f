"""Per-run state shared by the walker and the resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from peercheck.engines.peer_checker.models import PackageManifest

NODE_MODULES = "node_modules"
MANIFEST_FILE = "package.json"


@dataclass
class RunContext:
    """Manifest cache and visited set for a single checker run.

    Nothing here outlives the run; create a fresh context per invocation.
    """

    manifest_cache: dict[Path, PackageManifest | None] = field(default_factory=dict)
    visited: set[Path] = field(default_factory=set)

    def mark_visited(self, real_path: Path) -> bool:
        """Record *real_path* and return False if it was already seen."""
        if real_path in self.visited:
            return False
        self.visited.add(real_path)
        return True
