"""Manifest reader: load ``package.json`` files, tolerating junk."""

from __future__ import annotations

import json
import os
from pathlib import Path

import structlog

from peercheck.engines.peer_checker.context import RunContext
from peercheck.engines.peer_checker.models import PackageManifest

log = structlog.get_logger("peercheck.manifest")


def _parse_manifest(data: object) -> PackageManifest | None:
    if not isinstance(data, dict):
        return None

    name = data.get("name")
    version = data.get("version")
    if not isinstance(name, str) or not name or not isinstance(version, str):
        return None

    raw_peers = data.get("peerDependencies")
    peers: dict[str, str] = {}
    if isinstance(raw_peers, dict):
        peers = {k: v for k, v in raw_peers.items() if isinstance(k, str) and isinstance(v, str)}

    return PackageManifest(name=name, version=version, peer_dependencies=peers)


def read_manifest(path: str | Path, ctx: RunContext | None = None) -> PackageManifest | None:
    """Read the manifest at *path*, or return None if it is missing or invalid.

    Results, including misses, are cached on *ctx* by absolute path.
    """
    key = Path(os.path.abspath(path))
    if ctx is not None and key in ctx.manifest_cache:
        return ctx.manifest_cache[key]

    manifest: PackageManifest | None = None
    try:
        data = json.loads(key.read_text(encoding="utf-8"))
    except FileNotFoundError:
        pass
    except (OSError, ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and oversized int literals
        log.debug("manifest.unreadable", path=str(key), error=str(exc))
    else:
        manifest = _parse_manifest(data)
        if manifest is None:
            log.debug("manifest.invalid", path=str(key))

    if ctx is not None:
        ctx.manifest_cache[key] = manifest
    return manifest
