from pathlib import Path

import pytest
from hi18n_linter import LintConfig, LinterEngine, LintSettings, RuleOptionsError
from hi18n_linter.rules.migrate_from_lingui import (
    MigrateFromLinguiRule,
    eligible_for_jsx_tag_name,
    jsx_attribute_string,
    param_attribute,
    relative_book_path,
)
from js_tree_sitter import ASTWalker, JSParser


def _engine(tmp_path: Path) -> LinterEngine:
    settings = LintSettings(
        select=["M"],
        rules={"migrate-from-lingui": {"bookPath": str(tmp_path / "src" / "locale")}},
    )
    return LinterEngine(LintConfig(settings=settings))


def _fix(tmp_path: Path, code: str):
    return _engine(tmp_path).fix_source(code, tmp_path / "src" / "App.tsx")


def _lint(tmp_path: Path, code: str):
    return _engine(tmp_path).analyze_source(code, tmp_path / "src" / "App.tsx")


HEADER = 'import { Trans } from "@lingui/react";\n'


def test_migrates_trans_with_values(tmp_path):
    code = HEADER + "\nexport function Greeting({ name }) {\n  return <Trans id=\"greeting\" values={{ name }} />;\n}\n"
    result = _fix(tmp_path, code)

    assert result.modified
    assert result.passes == 2
    assert result.issues == []
    assert result.source == (
        'import { Translate } from "@hi18n/react";\n'
        'import { Trans } from "@lingui/react";\n'
        'import { book } from "./locale";\n'
        "\n"
        "export function Greeting({ name }) {\n"
        '  return <Translate book={book} id="greeting" name={name} />;\n'
        "}\n"
    )


def test_reports_location_and_fixability(tmp_path):
    code = HEADER + '<Trans id="x">Hello</Trans>;\n'
    issues = _lint(tmp_path, code)

    assert len(issues) == 1
    issue = issues[0]
    assert (issue.line, issue.column) == (2, 1)
    assert issue.rule_id == "M001"
    assert issue.message == "Migrate <Trans> to hi18n"
    assert issue.auto_fixable
    assert issue.fix is not None


def test_element_with_children_becomes_self_closing(tmp_path):
    code = HEADER + 'const el = <Trans id="x">Hello <b>world</b></Trans>;\n'
    result = _fix(tmp_path, code)

    assert 'const el = <Translate book={book} id="x" />;\n' in result.source


def test_reuses_existing_imports(tmp_path):
    code = (
        'import { Translate as T } from "@hi18n/react";\n'
        'import { book as myBook } from "./locale";\n'
        + HEADER
        + '<Trans id="x" />;\n'
    )
    result = _fix(tmp_path, code)

    assert result.source.endswith('<T book={myBook} id="x" />;\n')
    assert result.source.count("import") == 3


def test_several_elements_converge(tmp_path):
    code = HEADER + '<Trans id="a" />;\n<Trans id="b" />;\n'
    result = _fix(tmp_path, code)

    assert result.passes == 3
    assert result.source == (
        'import { Translate } from "@hi18n/react";\n'
        'import { Trans } from "@lingui/react";\n'
        'import { book } from "./locale";\n'
        '<Translate book={book} id="a" />;\n'
        '<Translate book={book} id="b" />;\n'
    )


def test_macro_import_and_name_collision(tmp_path):
    code = 'import { Trans } from "@lingui/macro";\nconst book = 1;\n<Trans id="a" />;\n'
    result = _fix(tmp_path, code)

    assert 'import { book as book0 } from "./locale";' in result.source
    assert '<Translate book={book0} id="a" />;' in result.source


def test_render_and_component(tmp_path):
    code = HEADER + '<Trans id="a" render={<p />} />;\n<Trans id="b" component={Foo.Bar} />;\n'
    result = _fix(tmp_path, code)

    assert '<Translate book={book} id="a" renderInElement={<p />} />;' in result.source
    assert '<Translate book={book} id="b" renderInElement={<Foo.Bar />} />;' in result.source


def test_components_array_and_odd_keys(tmp_path):
    code = HEADER + '<Trans id="a" values={{ "user-name": n, " x": m, 3: k }} components={[<b />, <i />]} />;\n'
    result = _fix(tmp_path, code)

    assert (
        '<Translate book={book} id="a" user-name={n} {...{ " x": m }} {...{ 3: k }}'
        " {...{ 0: <b /> }} {...{ 1: <i /> }} />;"
    ) in result.source


@pytest.mark.parametrize(
    "element",
    [
        "<Trans id={dynamicId} />",
        "<Trans />",
        '<Trans id="a" message="Hello" />',
        '<Trans id="a" foo={bar} />',
        '<Trans id="a" {...props} />',
        '<Trans id="a" render={renderFn} />',
        '<Trans id="a" component={foo} />',
        '<Trans id="a" values={{ ...rest }} />',
        '<Trans id="a" values={{ [key]: v }} />',
        '<Trans id="a" values={{ a: 1 }} components={{ a: <b /> }} />',
        '<Trans id="a" components={[<b />, , <i />]} />',
        '<Trans id="a" values={list} />',
        "<Trans id={`a`} />",
    ],
)
def test_unsupported_shapes_are_reported_without_fix(tmp_path, element):
    issues = _lint(tmp_path, HEADER + element + ";\n")

    assert len(issues) == 1
    assert issues[0].fix is None
    assert not issues[0].auto_fixable
    assert issues[0].context == "needs manual migration"


def test_shadowed_trans_is_ignored(tmp_path):
    code = HEADER + 'function f(Trans) { return <Trans id="a" />; }\n'
    assert _lint(tmp_path, code) == []


def test_book_path_is_required(tmp_path):
    engine = LinterEngine(LintConfig(settings=LintSettings(select=["M"])))

    with pytest.raises(RuleOptionsError):
        engine.analyze_source(HEADER, tmp_path / "App.tsx")


def test_unknown_option_is_rejected():
    with pytest.raises(RuleOptionsError):
        MigrateFromLinguiRule().parse_options({"bookPath": "x", "extra": 1})


def test_relative_book_path(tmp_path):
    file_path = tmp_path / "src" / "pages" / "Home.tsx"

    assert relative_book_path(str(tmp_path / "src" / "locale"), file_path) == "../locale"
    assert relative_book_path(str(tmp_path / "src" / "pages" / "book"), file_path) == "./book"
    assert relative_book_path(str(tmp_path / "src" / "pages"), file_path) == "."


@pytest.mark.parametrize(
    "value, expected",
    [
        ("hello", '"hello"'),
        ('say "hi"', "'say \"hi\"'"),
        ("both \" and '", "{\"both \\\" and '\"}"),
        ("line\nbreak", '{"line\\nbreak"}'),
    ],
)
def test_jsx_attribute_string(value, expected):
    assert jsx_attribute_string(value) == expected


@pytest.mark.parametrize(
    "key, expected",
    [
        ("name", "name={v}"),
        ("$el", "$el={v}"),
        ("data-x", "data-x={v}"),
        ("0", "{...{ 0: v }}"),
        ("10", "{...{ 10: v }}"),
        ("01", '{...{ "01": v }}'),
        ("-x", '{...{ "-x": v }}'),
    ],
)
def test_param_attribute(key, expected):
    assert param_attribute(key, "v") == expected


@pytest.mark.parametrize(
    "expression, eligible",
    [("Foo", True), ("foo", False), ("foo.Bar", True), ("Foo.bar.baz", True), ("foo[0]", False), ("foo?.Bar", False)],
)
def test_eligible_for_jsx_tag_name(expression, eligible):
    result = JSParser().parse_string(f"x = {expression};")
    assignment = ASTWalker.find_all_by_type(result.root, "assignment_expression")[0]

    assert eligible_for_jsx_tag_name(assignment.child_by_field_name("right")) is eligible


@pytest.mark.parametrize(
    "body",
    [
        'function Page({ book }) {\n  return <Trans id="a" />;\n}\n',
        'function Page() {\n  const Translate = 1;\n  return <Trans id="a" />;\n}\n',
    ],
)
def test_locally_shadowed_names_need_manual_migration(tmp_path, body):
    issues = _lint(tmp_path, HEADER + body)

    assert len(issues) == 1
    assert issues[0].fix is None
    assert issues[0].context == "needs manual migration"


def test_shadowing_elsewhere_does_not_block_fix(tmp_path):
    code = HEADER + 'function other(book) {\n  return book;\n}\nconst el = <Trans id="a" />;\n'
    issues = _lint(tmp_path, code)

    assert len(issues) == 1
    assert issues[0].fix is not None
