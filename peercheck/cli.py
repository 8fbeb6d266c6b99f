"""CLI entry point: peercheck.

Usage:
    peercheck                          # check ./node_modules
    peercheck --root path/to/node_modules --json
    peercheck --strict --package '@radix-ui/*'
"""

from __future__ import annotations

import sys

import click
import structlog

from peercheck.config import PACKAGE_MANAGERS, load_config
from peercheck.core.logging import setup_logging
from peercheck.engines.peer_checker.checker import check_peers
from peercheck.engines.peer_checker.reporter import (
    EXIT_INTERNAL_ERROR,
    EXIT_STORE_NOT_FOUND,
    exit_code,
    render_json,
    render_text,
)
from peercheck.exceptions import StoreRootNotFoundError

log = structlog.get_logger("peercheck.cli")


@click.command()
@click.option("--root", default=None, help="Package store root (default: $PEERCHECK_ROOT or ./node_modules)")
@click.option("--project-root", default=None, help="Stop the upward peer search here (default: parent of root)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("-q", "--quiet", is_flag=True, help="Hide satisfied peers and the per-package table")
@click.option("-v", "--verbose", is_flag=True, help="Show satisfied peers and debug logging")
@click.option("--strict", is_flag=True, help="Exit 1 on missing or mismatched peers (implied when CI is set)")
@click.option("--package", "packages", multiple=True, help="Only check consumers matching this glob (repeatable)")
@click.option(
    "--package-manager",
    type=click.Choice(PACKAGE_MANAGERS),
    default=None,
    help="Style of suggested fix commands (default: pnpm)",
)
def main(
    root: str | None,
    project_root: str | None,
    as_json: bool,
    quiet: bool,
    verbose: bool,
    strict: bool,
    packages: tuple[str, ...],
    package_manager: str | None,
) -> None:
    """Check installed packages for missing or mismatched peer dependencies."""
    config = load_config(
        root=root,
        project_root=project_root,
        strict=strict,
        as_json=as_json,
        quiet=quiet,
        verbose=verbose,
        package_filter=packages,
        package_manager=package_manager,
    )
    setup_logging(config.log_level, config.log_format)
    if config.ignored_package_manager:
        log.warning(
            "config.unknown_package_manager",
            value=config.ignored_package_manager,
            fallback=config.package_manager,
        )

    try:
        report = check_peers(
            config.store_root,
            project_root=config.project_root,
            package_filter=config.package_filter,
            package_manager=config.package_manager,
        )
        if config.as_json:
            output = render_json(report)
        else:
            output = render_text(report, verbose=config.verbose, quiet=config.quiet)
        code = exit_code(report, config.strict)
    except StoreRootNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_STORE_NOT_FOUND)
    except Exception:
        log.exception("cli.internal_error")
        click.echo("Error: peer check failed unexpectedly (see log above).", err=True)
        sys.exit(EXIT_INTERNAL_ERROR)

    click.echo(output)
    if code and not config.as_json:
        click.echo("Strict mode: failing due to peer dependency issues.", err=True)
    sys.exit(code)


if __name__ == "__main__":
    main()
