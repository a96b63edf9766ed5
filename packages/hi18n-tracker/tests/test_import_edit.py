import pytest
from hi18n_tracker import (
    ImportEditSession,
    InsertedImport,
    OverlappingEditsError,
    ReusedImport,
    TextEdit,
    apply_text_edits,
    plan_import,
)
from js_tree_sitter import JSParser, ScopeManager


def _parse(code: str):
    result = JSParser().parse_string(code)
    return result.root, ScopeManager(result.root)


def _plan(code: str, module: str, export: str, hints=(), insert_after_last=False, **kwargs):
    program, scope = _parse(code)
    plan = plan_import(program, scope, module, export, hints, insert_after_last, **kwargs)
    return plan, apply_text_edits(code, plan.edits)


def test_reuse_existing_specifier():
    plan, fixed = _plan('import { Translate as Tr } from "@hi18n/react";\n', "@hi18n/react", "Translate")

    assert plan == ReusedImport("Tr")
    assert plan.edits == ()
    assert fixed == 'import { Translate as Tr } from "@hi18n/react";\n'


def test_reuse_default_import():
    plan, _ = _plan('import Foo from "m";\n', "m", "default", local_name="Bar")
    assert plan.name == "Foo"


def test_append_to_named_imports():
    plan, fixed = _plan('import { Foo } from "@hi18n/react";\n', "@hi18n/react", "Translate")

    assert isinstance(plan, InsertedImport)
    assert plan.name == "Translate"
    assert fixed == 'import { Foo, Translate } from "@hi18n/react";\n'


def test_fill_empty_braces():
    plan, fixed = _plan('import Foo, {} from "m";\n', "m", "Bar")

    assert plan.bound_name == "Bar"
    assert [e.text for e in plan.edits] == [" Bar "]
    assert fixed == 'import Foo, { Bar } from "m";\n'


def test_extend_default_only_import():
    _, fixed = _plan('import Foo from "m";\n', "m", "Bar")
    assert fixed == 'import Foo, { Bar } from "m";\n'


def test_extend_side_effect_import():
    _, fixed = _plan('import "m";\n', "m", "Bar")
    assert fixed == 'import { Bar } from "m";\n'


def test_namespace_import_is_not_extended():
    _, fixed = _plan('import * as ns from "m";\n', "m", "Bar")
    assert fixed == 'import { Bar } from "m";\nimport * as ns from "m";\n'


def test_insert_before_position_hint():
    code = '// header\nimport React from "react";\nimport { Trans } from "@lingui/react";\n'
    plan, fixed = _plan(code, "@hi18n/react", "Translate", ["@lingui/react", "@lingui/macro"])

    assert plan.name == "Translate"
    assert fixed == (
        "// header\n"
        'import React from "react";\n'
        'import { Translate } from "@hi18n/react";\n'
        'import { Trans } from "@lingui/react";\n'
    )


def test_insert_keeps_anchor_indentation():
    code = '  import { Trans } from "@lingui/react";\n'
    _, fixed = _plan(code, "@hi18n/react", "Translate", ["@lingui/react"])

    assert fixed == '  import { Translate } from "@hi18n/react";\n  import { Trans } from "@lingui/react";\n'


def test_insert_after_last_import():
    code = 'import a from "a";\nimport b from "b";\n\nfoo();\n'
    _, fixed = _plan(code, "./book", "book", insert_after_last=True)

    assert fixed == 'import a from "a";\nimport b from "b";\nimport { book } from "./book";\n\nfoo();\n'


def test_insert_after_last_without_imports():
    _, fixed = _plan("foo();\n", "./book", "book", insert_after_last=True)
    assert fixed == 'import { book } from "./book";\nfoo();\n'


def test_insert_after_hashbang_and_comments():
    code = "#!/usr/bin/env node\n// comment\nfoo();\n"
    _, fixed = _plan(code, "m", "X")
    assert fixed == '#!/usr/bin/env node\n// comment\nimport { X } from "m";\nfoo();\n'


def test_insert_into_empty_program():
    _, fixed = _plan("", "m", "X")
    assert fixed == 'import { X } from "m";\n'


def test_name_collision_gets_suffix():
    code = 'import { Translate } from "other";\nconst Translate0 = 1;\n'
    plan, fixed = _plan(code, "@hi18n/react", "Translate")

    assert plan.name == "Translate1"
    assert fixed.startswith('import { Translate as Translate1 } from "@hi18n/react";\n')


def test_type_only_import_is_not_reused():
    code = 'import type { Translate } from "@hi18n/react";\n'
    plan, fixed = _plan(code, "@hi18n/react", "Translate")

    assert plan.name == "Translate0"
    assert fixed == 'import { Translate as Translate0 } from "@hi18n/react";\n' + code


def test_default_export_needs_local_name():
    with pytest.raises(ValueError):
        _plan("", "m", "default")

    _, fixed = _plan("", "m", "default", local_name="Foo")
    assert fixed == 'import { default as Foo } from "m";\n'


def test_module_specifier_is_quoted():
    _, fixed = _plan("", 'we"ird', "X")
    assert fixed == 'import { X } from "we\\"ird";\n'


def test_session_reuses_planned_import():
    code = 'import { Trans } from "@lingui/react";\n'
    program, scope = _parse(code)
    session = ImportEditSession(program, scope)

    first = session.plan_import("@hi18n/react", "Translate", ["@lingui/react"])
    second = session.plan_import("@hi18n/react", "Translate", ["@lingui/react"])

    assert isinstance(first, InsertedImport)
    assert second == ReusedImport("Translate")
    assert len(session.edits) == 1


def test_session_avoids_synthesized_names():
    program, scope = _parse("foo();\n")
    session = ImportEditSession(program, scope)

    a = session.plan_import("./a", "book")
    b = session.plan_import("./b", "book")

    assert (a.name, b.name) == ("book", "book0")
    assert session.synthesized_names == frozenset({"book", "book0"})


def test_session_appends_specifiers_in_order():
    code = 'import { a } from "m";\n'
    program, scope = _parse(code)
    session = ImportEditSession(program, scope)
    session.plan_import("m", "X")
    session.plan_import("m", "Y")

    assert apply_text_edits(code, session.edits) == 'import { a, X, Y } from "m";\n'


def test_session_does_not_reuse_a_sealed_join_point():
    code = 'import {} from "m";\n'
    program, scope = _parse(code)
    session = ImportEditSession(program, scope)
    session.plan_import("m", "X")
    session.plan_import("m", "Y")

    assert apply_text_edits(code, session.edits) == 'import { Y } from "m";\nimport { X } from "m";\n'


def test_apply_text_edits_uses_byte_offsets():
    source = 'const s = "日本";\nx;\n'
    offset = len('const s = "日本";\n'.encode("utf-8"))

    assert apply_text_edits(source, [TextEdit.replace(offset, offset + 1, "y")]) == 'const s = "日本";\ny;\n'


def test_apply_text_edits_on_bytes():
    assert apply_text_edits(b"abc", [TextEdit.insert(1, "-")]) == b"a-bc"


def test_apply_text_edits_rejects_overlap():
    with pytest.raises(OverlappingEditsError):
        apply_text_edits("abcdef", [TextEdit.replace(0, 3, "x"), TextEdit.replace(2, 4, "y")])


def test_apply_text_edits_rejects_out_of_range():
    with pytest.raises(ValueError):
        apply_text_edits("abc", [TextEdit.insert(10, "x")])


def test_text_edit_validates_span():
    with pytest.raises(ValueError):
        TextEdit(3, 1, "x")
    assert TextEdit.insert(2, "x").is_insertion


def test_session_names_never_collide():
    code = 'import { Trans } from "@lingui/react";\nconst book = 1;\nfunction Translate() {}\n'
    program, scope = _parse(code)
    existing = scope.declared_names(scope.module_scope)
    session = ImportEditSession(program, scope)

    names = [
        session.plan_import("@hi18n/react", "Translate", ["@lingui/react"]).name,
        session.plan_import("./book", "book", insert_after_last=True).name,
        session.plan_import("@hi18n/core", "Book").name,
        session.plan_import("@hi18n/other", "Translate").name,
        session.plan_import("@lingui/react", "Trans").name,
    ]

    assert names == ["Translate0", "book0", "Book", "Translate1", "Trans"]
    # Only the reused import may carry an existing name
    assert len(set(names)) == len(names)
    assert not set(names[:4]) & existing
