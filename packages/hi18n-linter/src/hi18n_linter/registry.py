from typing import Sequence

from .rules.base import BaseRule


class RuleRegistry:
    """Registry for managing and loading linting rules"""

    def __init__(self):
        self._rules: list[BaseRule] = []
        self._load_builtin_rules()

    def register(self, rule: BaseRule):
        self._rules.append(rule)

    def get_all_rules(self) -> list[BaseRule]:
        return self._rules

    def get_rule(self, key: str) -> BaseRule | None:
        for rule in self._rules:
            if key in (rule.rule_id, rule.name):
                return rule
        return None

    def get_enabled_rules(self, select: Sequence[str], ignore: Sequence[str] = ()) -> list[BaseRule]:
        """Rules whose id starts with a selected prefix (or whose name is selected), minus ignored ones"""
        return [
            rule
            for rule in self._rules
            if _matches(rule, select) and not _matches(rule, ignore)
        ]

    def _load_builtin_rules(self):
        from .rules.migrate_from_lingui import MigrateFromLinguiRule
        from .rules.no_dynamic_keys import NoDynamicKeysRule

        self.register(NoDynamicKeysRule())
        self.register(MigrateFromLinguiRule())


def _matches(rule: BaseRule, selectors: Sequence[str]) -> bool:
    return any(rule.rule_id.startswith(s) or rule.name == s for s in selectors)
