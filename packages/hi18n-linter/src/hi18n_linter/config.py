import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .rules.base import BaseRule

logger = logging.getLogger(__name__)


class LintSettings(BaseModel):
    """Contents of the [tool.hi18n-lint] table"""

    model_config = ConfigDict(extra="ignore")

    select: list[str] = Field(default_factory=lambda: ["E", "W"])
    ignore: list[str] = Field(default_factory=list)
    rules: dict[str, dict[str, Any]] = Field(default_factory=dict)


class LintConfig:
    """Handles loading and validation of [tool.hi18n-lint] configuration"""

    def __init__(self, config_path: Path | None = None, settings: LintSettings | None = None):
        self.settings = settings or LintSettings()

        if config_path and config_path.exists():
            self._load_from_file(config_path)

    @property
    def select(self) -> list[str]:
        return self.settings.select

    @property
    def ignore(self) -> list[str]:
        return self.settings.ignore

    def _load_from_file(self, path: Path):
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Could not read %s, using default settings: %s", path, e)
            return

        lint_data = data.get("tool", {}).get("hi18n-lint", {})
        try:
            self.settings = LintSettings.model_validate(lint_data)
        except ValidationError as e:
            logger.warning("Invalid [tool.hi18n-lint] table in %s, using default settings: %s", path, e)

    def rule_options(self, rule: BaseRule) -> dict[str, Any] | None:
        """Options table of a rule, keyed by its name or its id"""
        rules = self.settings.rules
        if rule.name in rules:
            return rules[rule.name]
        return rules.get(rule.rule_id)

    def apply_to_registry(self, registry: Any) -> list[Any]:
        """Return list of enabled rules based on this config"""
        return registry.get_enabled_rules(select=self.select, ignore=self.ignore)
