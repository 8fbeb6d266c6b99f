"""Reporter: aggregate peer checks, render them, and pick an exit status."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from peercheck.engines.peer_checker.models import (
    CheckReport,
    InvalidRange,
    InvalidVersion,
    Issue,
    Mismatched,
    Missing,
    PeerCheck,
    PeerCheckResult,
    Satisfied,
    Summary,
)
from peercheck.exceptions import UnknownPackageManagerError

EXIT_OK = 0
EXIT_STRICT_FAILURE = 1
EXIT_STORE_NOT_FOUND = 2
EXIT_INTERNAL_ERROR = 3

_INSTALL_COMMANDS: dict[str, str] = {
    "pnpm": "pnpm add",
    "npm": "npm install",
    "yarn": "yarn add",
}

_STATUS_ICONS: dict[str, str] = {
    "satisfied": "+",
    "missing": "x",
    "mismatched": "!",
    "invalid-range": "?",
    "invalid-version": "?",
}


def suggest_fix(peer: str, declared_range: str, package_manager: str = "pnpm") -> str:
    """Command that installs a copy of *peer* matching *declared_range*."""
    try:
        command = _INSTALL_COMMANDS[package_manager]
    except KeyError:
        raise UnknownPackageManagerError(f"unsupported package manager: {package_manager}") from None
    return f'{command} {peer}@"{declared_range}"'


def _describe(check: PeerCheck) -> tuple[str | None, str | None, str]:
    """(installed_version, location, reason) for a non-satisfied result."""
    result = check.result
    consumer = check.consumer.name
    if isinstance(result, Missing):
        return None, str(result.searched_from), (
            f"{result.peer} is not installed where {consumer} can resolve it "
            f"(requires {result.range})"
        )
    if isinstance(result, Mismatched):
        return result.version, str(result.resolved_from), (
            f"{result.peer} installed {result.version}, but {consumer} requires {result.range}"
        )
    if isinstance(result, InvalidRange):
        return None, None, result.reason
    if isinstance(result, InvalidVersion):
        return result.version, str(result.resolved_from), result.reason
    raise TypeError(f"no issue description for {type(result).__name__}")


def to_issue(check: PeerCheck, package_manager: str = "pnpm") -> Issue:
    installed, location, reason = _describe(check)
    suggestion = None
    if isinstance(check.result, (Missing, Mismatched)):
        suggestion = suggest_fix(check.peer, check.range, package_manager)
    return Issue(
        package=check.consumer.name,
        package_version=check.consumer.manifest.version,
        package_dir=str(check.consumer.directory),
        peer=check.peer,
        range=check.range,
        status=check.result.status,
        installed_version=installed,
        location=location,
        reason=reason,
        suggestion=suggestion,
    )


def aggregate(
    checks: Iterable[PeerCheck],
    *,
    store_root: Path,
    project_root: Path,
    packages_scanned: int,
    package_manager: str = "pnpm",
) -> CheckReport:
    """Fold individual checks into global and per-package summaries plus issues."""
    report = CheckReport(
        store_root=store_root,
        project_root=project_root,
        packages_scanned=packages_scanned,
    )
    for check in checks:
        status = check.result.status
        report.checks.append(check)
        report.summary.add(status)
        report.per_package.setdefault(check.consumer.name, Summary()).add(status)
        if not isinstance(check.result, Satisfied):
            report.issues.append(to_issue(check, package_manager))
    return report


def exit_code(report: CheckReport, strict: bool) -> int:
    """0 unless *strict* and a peer is missing or mismatched."""
    if strict and report.has_blocking_issues:
        return EXIT_STRICT_FAILURE
    return EXIT_OK


# ── Rendering ────────────────────────────────────────────────────────────


def render_json(report: CheckReport) -> str:
    payload = {
        "storeRoot": str(report.store_root),
        "projectRoot": str(report.project_root),
        "packagesScanned": report.packages_scanned,
        "summary": report.summary.to_dict(),
        "perPackage": {name: s.to_dict() for name, s in sorted(report.per_package.items())},
        "issues": [issue.to_dict() for issue in report.issues],
        "ok": not report.has_blocking_issues,
    }
    return json.dumps(payload, indent=2)


def _result_line(result: PeerCheckResult) -> str:
    icon = _STATUS_ICONS[result.status]
    if isinstance(result, Satisfied):
        return f"  [{icon}] {result.peer}@{result.version} satisfies {result.range}"
    if isinstance(result, Missing):
        return f"  [{icon}] missing {result.peer} (requires {result.range})"
    if isinstance(result, Mismatched):
        return f"  [{icon}] {result.peer} installed {result.version}, requires {result.range}"
    if isinstance(result, (InvalidRange, InvalidVersion)):
        return f"  [{icon}] {result.peer} {result.range}: {result.reason}"
    raise TypeError(f"no renderer for {type(result).__name__}")


def _summary_row(summary: Summary) -> str:
    return (
        f"satisfied={summary.satisfied} mismatched={summary.mismatched} "
        f"missing={summary.missing} invalid-range={summary.invalid_range} "
        f"invalid-version={summary.invalid_version}"
    )


def render_text(report: CheckReport, verbose: bool = False, quiet: bool = False) -> str:
    """Human-readable report: issues grouped by consumer, then summaries.

    Satisfied peers are listed only when *verbose*; *quiet* drops the
    per-package table.
    """
    lines: list[str] = []

    # one group per installed copy, so duplicate names stay apart
    by_consumer: dict[Path, list[PeerCheck]] = {}
    for check in report.checks:
        if verbose or not isinstance(check.result, Satisfied):
            by_consumer.setdefault(check.consumer.directory, []).append(check)

    suggestions = {(i.package, i.peer, i.range): i.suggestion for i in report.issues}
    for checks in by_consumer.values():
        consumer = checks[0].consumer
        name = consumer.name
        lines.append(f"{name}@{consumer.manifest.version}")
        for check in checks:
            lines.append(_result_line(check.result))
            suggestion = suggestions.get((name, check.peer, check.range))
            if suggestion:
                lines.append(f"      run: {suggestion}")
        lines.append("")

    lines.append(f"Scanned {report.packages_scanned} packages under {report.store_root}")
    lines.append(f"Global: {_summary_row(report.summary)}")

    if not quiet and report.per_package:
        lines.append("")
        lines.append("Per package:")
        width = max(len(name) for name in report.per_package)
        for name, summary in sorted(report.per_package.items()):
            lines.append(f"  {name:<{width}}  {_summary_row(summary)}")

    lines.append("")
    if report.has_blocking_issues:
        lines.append("Some peer dependencies need fixing (see suggestions above).")
    elif report.issues:
        lines.append("No missing or mismatched peers; some ranges or versions could not be verified.")
    else:
        lines.append("All peer dependencies are satisfied.")
    return "\n".join(lines)
