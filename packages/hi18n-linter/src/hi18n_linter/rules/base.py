from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

from hi18n_tracker import TextEdit, Tracker
from js_tree_sitter import ParseResult, ScopeManager
from pydantic import BaseModel, ValidationError
from tree_sitter import Node

from ..errors import RuleOptionsError
from ..models import Fix, InternalIssue, Severity


@dataclass
class RuleContext:
    """What a rule sees of the file being linted"""

    rule: "BaseRule"
    file_path: Path
    parse_result: ParseResult
    scope: ScopeManager
    options: Optional[BaseModel] = None
    issues: list[InternalIssue] = field(default_factory=list)

    @property
    def root(self) -> Node:
        return self.parse_result.root

    def text(self, node: Node) -> str:
        return self.parse_result.text(node)

    def report(
        self,
        node: Node,
        message: str,
        edits: Optional[Sequence[TextEdit]] = None,
        context: str | None = None,
    ) -> InternalIssue:
        row, column = node.start_point
        issue = self.rule._create_issue(
            file_path=self.file_path,
            line=row + 1,
            message=message,
            context=context,
            column=column + 1,
            fix=Fix(tuple(edits)) if edits else None,
        )
        self.issues.append(issue)
        return issue


class BaseRule(ABC):
    """Abstract base class for all linting rules."""

    options_model: Optional[type[BaseModel]] = None

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier (e.g., 'E001', 'M001')."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable rule name (e.g., 'migrate-from-lingui')."""
        pass

    @property
    @abstractmethod
    def severity(self) -> Severity:
        """Default severity for this rule."""
        pass

    @property
    def auto_fixable(self) -> bool:
        """Can this rule automatically fix violations?"""
        return False

    @property
    def description(self) -> str:
        """Detailed description of what this rule checks."""
        return ""

    def parse_options(self, raw: Optional[dict[str, Any]]) -> Optional[BaseModel]:
        """Validate the rule's options table"""
        if self.options_model is None:
            return None
        try:
            return self.options_model.model_validate(raw or {})
        except ValidationError as e:
            raise RuleOptionsError(f"Invalid options for rule '{self.name}': {e}") from e

    @abstractmethod
    def create(self, context: RuleContext) -> Tracker:
        """Return a tracker whose listeners report into `context`."""
        pass

    # Helper method for consistent issue creation
    def _create_issue(
        self,
        file_path: Path,
        line: int,
        message: str,
        context: str | None = None,
        column: int = 0,
        fix: Optional[Fix] = None,
    ) -> InternalIssue:
        """Helper to create an issue with rule defaults."""
        return InternalIssue(
            file_path=file_path,
            line=line,
            rule_id=self.rule_id,
            message=message,
            severity=self.severity,
            auto_fixable=self.auto_fixable and fix is not None,
            context=context,
            column=column,
            fix=fix,
        )
