import logging
from pathlib import Path
from typing import List, Optional, Sequence

from hi18n_tracker import Tracker
from js_tree_sitter import ASTWalker, JSParser, NodeKind, ParseResult, ScopeManager

from .autofix import AutoFixEngine
from .config import LintConfig
from .models import FixResult, InternalIssue
from .registry import RuleRegistry
from .rules.base import BaseRule, RuleContext

logger = logging.getLogger(__name__)


class LinterEngine:
    """Core engine for hi18n linting"""

    def __init__(
        self,
        config: Optional[LintConfig] = None,
        registry: Optional[RuleRegistry] = None,
        dialect: str = "tsx",
    ):
        self.config = config or LintConfig()
        self.registry = registry or RuleRegistry()
        self.parser = JSParser(dialect)
        self.autofix = AutoFixEngine()

    def enabled_rules(self) -> List[BaseRule]:
        return self.config.apply_to_registry(self.registry)

    def analyze_source(
        self, source: str, file_path: Path, rules: Optional[Sequence[BaseRule]] = None
    ) -> List[InternalIssue]:
        """Run lint checks on source text; `file_path` locates it for path-relative options"""
        result = self.parser.parse_string(source)
        for error in result.errors:
            logger.debug("%s: %s", file_path, error)
        return self._run_rules(result, file_path, self.enabled_rules() if rules is None else rules)

    def analyze_file(self, file_path: Path, rules: Optional[Sequence[BaseRule]] = None) -> List[InternalIssue]:
        """Run all lint checks on a file"""
        file_path = file_path.resolve()
        return self.analyze_source(file_path.read_text(encoding="utf-8"), file_path, rules)

    def fix_source(
        self,
        source: str,
        file_path: Path,
        rules: Optional[Sequence[BaseRule]] = None,
        max_passes: int = 10,
    ) -> FixResult:
        """Apply fixes until none remain or `max_passes` analyses have run"""
        rules = self.enabled_rules() if rules is None else rules
        original = source
        passes = 0
        current_issues: List[InternalIssue] = []

        while passes < max_passes:
            passes += 1
            current_issues = self.analyze_source(source, file_path, rules)

            fixable = [i for i in current_issues if i.fix is not None]
            if not fixable:
                break

            logger.info("Applying fixes for %d issues in %s (pass %d)", len(fixable), file_path, passes)
            new_source = self.autofix.apply_fixes(source, fixable)
            if new_source == source:
                break
            source = new_source

            if passes == max_passes:
                logger.warning("Reached max fix passes for %s", file_path)
                current_issues = self.analyze_source(source, file_path, rules)

        return FixResult(source=source, modified=source != original, passes=passes, issues=current_issues)

    def fix_file(self, file_path: Path, rules: Optional[Sequence[BaseRule]] = None) -> FixResult:
        file_path = file_path.resolve()
        result = self.fix_source(file_path.read_text(encoding="utf-8"), file_path, rules)
        if result.modified:
            file_path.write_text(result.source, encoding="utf-8")
        return result

    def _run_rules(self, result: ParseResult, file_path: Path, rules: Sequence[BaseRule]) -> List[InternalIssue]:
        scope = ScopeManager(result.root)
        contexts: list[RuleContext] = []
        trackers: list[Tracker] = []
        for rule in rules:
            context = RuleContext(
                rule=rule,
                file_path=file_path,
                parse_result=result,
                scope=scope,
                options=rule.parse_options(self.config.rule_options(rule)),
            )
            contexts.append(context)
            trackers.append(rule.create(context))

        # Imports are hoisted: every binding is known before any use is matched
        for statement in result.root.children:
            if statement.type == NodeKind.IMPORT_STATEMENT:
                for tracker in trackers:
                    tracker.track_import(scope, statement)

        for node in ASTWalker.iter_preorder(result.root):
            for tracker in trackers:
                tracker.feed(node, scope)

        issues = [issue for context in contexts for issue in context.issues]
        return sorted(issues, key=lambda x: (x.line, x.column, x.rule_id))
