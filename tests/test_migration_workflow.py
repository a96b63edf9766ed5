"""Migrating a small lingui project end to end, configured from pyproject.toml."""

from hi18n_linter import LintConfig, LinterEngine, internal_issue_to_lint_issue

PYPROJECT = """
[tool.hi18n-lint]
select = ["E", "M"]

[tool.hi18n-lint.rules.migrate-from-lingui]
bookPath = "{book}"
"""

HEADER_TSX = """import { Trans } from "@lingui/macro";
import { i18n } from "@lingui/core";

export const Header = ({ user }) => (
  <header>
    <Trans id="header.title" />
    <Trans id="header.welcome" values={{ name: user.name }} component={Title} />
    <Trans id={user.key} />
  </header>
);

export const tooltip = i18n._("header.tooltip");
"""


def _project(tmp_path):
    src = tmp_path / "src"
    (src / "components").mkdir(parents=True)
    config_path = tmp_path / "pyproject.toml"
    config_path.write_text(PYPROJECT.format(book=(src / "locale").as_posix()), encoding="utf-8")
    header = src / "components" / "Header.tsx"
    header.write_text(HEADER_TSX, encoding="utf-8")
    return config_path, header


def test_lint_reports_every_trans(tmp_path):
    config_path, header = _project(tmp_path)
    engine = LinterEngine(LintConfig(config_path))

    issues = [internal_issue_to_lint_issue(i) for i in engine.analyze_file(header)]

    assert [(i.line_number, i.rule_id, i.auto_fixable) for i in issues] == [
        (6, "M001", True),
        (7, "M001", True),
        (8, "M001", False),
    ]
    assert issues[2].suggestion == "needs manual migration"


def test_fix_migrates_file(tmp_path):
    config_path, header = _project(tmp_path)
    engine = LinterEngine(LintConfig(config_path))

    result = engine.fix_file(header)

    assert header.read_text(encoding="utf-8") == result.source
    assert result.source == """import { Translate } from "@hi18n/react";
import { Trans } from "@lingui/macro";
import { i18n } from "@lingui/core";
import { book } from "../locale";

export const Header = ({ user }) => (
  <header>
    <Translate book={book} id="header.title" />
    <Translate book={book} id="header.welcome" renderInElement={<Title />} name={user.name} />
    <Trans id={user.key} />
  </header>
);

export const tooltip = i18n._("header.tooltip");
"""
    # The dynamic id is left for a human
    assert [(i.line, i.rule_id, i.fix) for i in result.issues] == [(10, "M001", None)]


def test_fixing_twice_changes_nothing(tmp_path):
    config_path, header = _project(tmp_path)
    engine = LinterEngine(LintConfig(config_path))

    engine.fix_file(header)
    second = engine.fix_file(header)

    assert not second.modified
    assert second.passes == 1
