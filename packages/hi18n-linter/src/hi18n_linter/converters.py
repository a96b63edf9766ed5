from .models import InternalIssue, LintIssue


def internal_issue_to_lint_issue(issue: InternalIssue) -> LintIssue:
    """Convert an internal dataclass issue to an external Pydantic issue"""
    return LintIssue(
        severity=issue.severity.value.upper(),  # dataclass uses 'error', Pydantic uses 'ERROR'
        file_path=str(issue.file_path),
        line_number=issue.line,
        column=issue.column,
        rule_id=issue.rule_id,
        message=issue.message,
        suggestion=issue.context,
        auto_fixable=issue.auto_fixable,
    )
