"""Report rendering: human-readable text and JSON"""

from mdcheck.core.models import LintReport, Severity


def format_issue_line(issue) -> str:
    loc = f"{issue.path}:{issue.line}" if issue.line else issue.path
    return f"{loc}: {issue.severity.value} [{issue.rule}] {issue.message}"


def format_summary(report: LintReport) -> str:
    return (
        f"Checked {report.files} file(s) - "
        f"{report.count(Severity.error)} error(s), "
        f"{report.count(Severity.warning)} warning(s)"
    )


def format_text(report: LintReport) -> str:
    lines = [format_issue_line(i) for i in report.issues]
    lines.append(format_summary(report))
    return "\n".join(lines)


def format_json(report: LintReport) -> str:
    return report.model_dump_json(indent=2)
