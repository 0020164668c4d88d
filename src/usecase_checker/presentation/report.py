"""Report Formatter: deterministic text and JSON renderings of a CheckReport.

Output depends only on the report contents, so running the checker twice on
unchanged input produces byte-identical reports.
"""

from __future__ import annotations

import json

from usecase_checker.domain.models.violation import CheckReport, Violation

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_MALFORMED = 2


def exit_code(report: CheckReport) -> int:
    """2 on any parse failure, else 1 on any error violation, else 0.

    Warnings never affect the exit code.
    """
    if report.failures:
        return EXIT_MALFORMED
    if report.errors:
        return EXIT_VIOLATIONS
    return EXIT_OK


def _violation_line(v: Violation) -> str:
    return f"  {v.location}  {v.rule_id}  {v.message}"


def summary_line(report: CheckReport) -> str:
    status = "PASSED" if exit_code(report) == EXIT_OK else "FAILED"
    parts = [f"{len(report.errors)} error(s)", f"{len(report.warnings)} warning(s)"]
    if report.failures:
        parts.append(f"{len(report.failures)} parse failure(s)")
    return f"Result: {status}, {', '.join(parts)} in {len(report.files_checked)} file(s)"


def render_text(report: CheckReport) -> str:
    """Render the report grouped by severity (errors, then warnings)."""
    lines = [f"Use-case check (rule set {report.rule_set_version})", ""]

    if not report.violations and not report.failures:
        lines.append("No violations found.")

    for title, group in (("ERRORS", report.errors), ("WARNINGS", report.warnings)):
        if group:
            lines.append(f"{title} ({len(group)})")
            lines.extend(_violation_line(v) for v in group)

    if report.failures:
        lines.append(f"PARSE FAILURES ({len(report.failures)})")
        lines.extend(f"  {f.location}  {f.kind}: {f.message}" for f in report.failures)

    lines += ["", summary_line(report)]
    return "\n".join(lines) + "\n"


def render_json(report: CheckReport) -> str:
    """Render the report as indented JSON, with the summary and exit code."""
    payload = report.model_dump(mode="json")
    payload["summary"] = {
        "errors": len(report.errors),
        "warnings": len(report.warnings),
        "failures": len(report.failures),
        "exit_code": exit_code(report),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
