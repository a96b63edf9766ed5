from .autofix import AutoFixEngine
from .config import LintConfig, LintSettings
from .converters import internal_issue_to_lint_issue
from .engine import LinterEngine
from .errors import LinterError, RuleOptionsError
from .models import Fix, FixResult, InternalIssue, LintIssue, Severity
from .registry import RuleRegistry
from .rules.base import BaseRule, RuleContext

__all__ = [
    "AutoFixEngine",
    "BaseRule",
    "Fix",
    "FixResult",
    "InternalIssue",
    "LintConfig",
    "LintIssue",
    "LintSettings",
    "LinterEngine",
    "LinterError",
    "RuleContext",
    "RuleOptionsError",
    "RuleRegistry",
    "Severity",
    "internal_issue_to_lint_issue",
]
