"""Run configuration: CLI flags layered over environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

PACKAGE_MANAGERS = ("pnpm", "npm", "yarn")

_TRUTHY = {"1", "true", "yes", "on"}


def is_ci(environ: dict[str, str] | None = None) -> bool:
    """Return True when the CI indicator variable is set to a truthy value."""
    env = os.environ if environ is None else environ
    return env.get("CI", "").strip().lower() in _TRUTHY


@dataclass
class CheckerConfig:
    store_root: Path
    project_root: Path | None = None
    strict: bool = False
    as_json: bool = False
    quiet: bool = False
    verbose: bool = False
    package_filter: list[str] = field(default_factory=list)
    package_manager: str = "pnpm"
    # set when PEERCHECK_PACKAGE_MANAGER named something unsupported
    ignored_package_manager: str | None = None
    log_level: str = "WARNING"
    log_format: str = "console"


def load_config(
    *,
    root: str | None = None,
    project_root: str | None = None,
    strict: bool = False,
    as_json: bool = False,
    quiet: bool = False,
    verbose: bool = False,
    package_filter: tuple[str, ...] | list[str] = (),
    package_manager: str | None = None,
    environ: dict[str, str] | None = None,
) -> CheckerConfig:
    """Build a :class:`CheckerConfig` from explicit flags and the environment.

    Explicit flags win. Environment variables:
        PEERCHECK_ROOT:             store root (default: ./node_modules)
        PEERCHECK_PACKAGE_MANAGER:  pnpm | npm | yarn (default: pnpm)
        CI:                         truthy value forces strict mode
        PEERCHECK_LOG_LEVEL:        log level (default: WARNING, DEBUG when verbose)
        PEERCHECK_LOG_FORMAT:       console | json (default: console)
    """
    env = os.environ if environ is None else environ

    store_root = Path(root or env.get("PEERCHECK_ROOT") or "node_modules").absolute()

    manager = (package_manager or env.get("PEERCHECK_PACKAGE_MANAGER") or "pnpm").lower()
    ignored_manager = None
    if manager not in PACKAGE_MANAGERS:
        ignored_manager, manager = manager, "pnpm"

    verbose = verbose and not quiet
    log_level = env.get("PEERCHECK_LOG_LEVEL") or ("DEBUG" if verbose else "WARNING")

    return CheckerConfig(
        store_root=store_root,
        project_root=Path(project_root).absolute() if project_root else None,
        strict=strict or is_ci(env),
        as_json=as_json,
        quiet=quiet,
        verbose=verbose,
        package_filter=list(package_filter),
        package_manager=manager,
        ignored_package_manager=ignored_manager,
        log_level=log_level.upper(),
        log_format=(env.get("PEERCHECK_LOG_FORMAT") or "console").lower(),
    )
