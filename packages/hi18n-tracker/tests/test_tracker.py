from hi18n_tracker import (
    CAPTURE_FAILURE,
    Capture,
    PatternError,
    Tracker,
    captured_node,
    hi18n_tracker,
    lingui_tracker,
    node,
)
from js_tree_sitter import ASTWalker, JSParser, NodeKind, ScopeManager
import pytest


def _run(tracker: Tracker, code: str, *events: str):
    result = JSParser().parse_string(code)
    scope = ScopeManager(result.root)
    fired = []
    for event in events:
        tracker.listen(event, lambda n, captured, event=event: fired.append((event, n, captured)))
    tracker.run(result.root, scope)
    return fired


def _text(capture):
    return ASTWalker.get_text(captured_node(capture))


def test_trans_jsx_with_alias():
    code = 'import { Trans as T } from "@lingui/react";\nconst el = <T id="greeting" values={{ name }} />;'
    fired = _run(lingui_tracker(), code, "translationJSX")

    assert len(fired) == 1
    _, element, captured = fired[0]
    assert element.type == "jsx_self_closing_element"
    assert _text(captured["id"]) == '"greeting"'
    assert _text(captured["values"]) == "{ name }"
    assert captured["render"] is CAPTURE_FAILURE
    assert set(captured) == {"props", "id", "values", "render", "component", "components"}


def test_trans_jsx_with_children_and_namespace():
    code = 'import * as lingui from "@lingui/macro";\nconst el = <lingui.Trans id="x">Hello</lingui.Trans>;'
    fired = _run(lingui_tracker(), code, "translationJSX")

    assert len(fired) == 1
    assert fired[0][1].type == "jsx_element"


def test_trans_from_other_module_is_ignored():
    code = 'import { Trans } from "other";\nconst el = <Trans id="x" />;'
    assert _run(lingui_tracker(), code, "translationJSX") == []


def test_translation_call():
    code = 'import { i18n } from "@lingui/core";\ni18n._("a");\ni18n.t();\ni18n.other("b");'
    fired = _run(lingui_tracker(), code, "translationCall")

    assert len(fired) == 2
    assert _text(fired[0][2]["id"]) == '"a"'
    assert fired[1][2]["id"] is CAPTURE_FAILURE


def test_imports_after_use_are_hoisted():
    code = 'const el = <Trans id="x" />;\nimport { Trans } from "@lingui/react";'
    assert len(_run(lingui_tracker(), code, "translationJSX")) == 1


def test_hi18n_definitions():
    code = (
        'import { Book, Catalog, msg } from "@hi18n/core";\n'
        'export default new Catalog("en", { "example/greeting": msg("Hello") });\n'
        "const catalogJa = new Catalog({});\n"
        "export const book = new Book({ en: catalogEn });\n"
    )
    fired = _run(hi18n_tracker(), code, "catalogDefinition", "messageDefinition", "bookDefinition")

    events = [event for event, _, _ in fired]
    assert events == ["catalogDefinition", "messageDefinition", "catalogDefinition", "bookDefinition"]
    assert _text(fired[0][2]["locale"]) == '"en"'
    assert fired[2][2]["locale"] is CAPTURE_FAILURE
    assert _text(fired[2][2]["catalogData"]) == "{}"


def test_outer_match_fires_before_nested():
    code = 'import { Trans } from "@lingui/react";\n<Trans id="a" render={<Trans id="b" />} />;'
    fired = _run(lingui_tracker(), code, "translationJSX")

    ids = [_text(captured["id"]) for _, _, captured in fired]
    assert ids == ['"a"', '"b"']


def test_runs_are_deterministic():
    code = 'import { Trans } from "@lingui/react";\n<Trans id="a" />;\n<Trans id="b" />;'

    def ids():
        return [_text(c["id"]) for _, _, c in _run(lingui_tracker(), code, "translationJSX")]

    assert ids() == ids() == ['"a"', '"b"']


def test_listeners_get_their_own_captures():
    code = 'import { Trans } from "@lingui/react";\n<Trans id="a" />;'
    tracker = lingui_tracker()
    seen = []

    def mutate(n, captured):
        seen.append(dict(captured))
        captured.clear()

    tracker.listen("translationJSX", mutate)
    fired = _run(tracker, code, "translationJSX")

    assert seen and "id" in seen[0]
    assert "id" in fired[0][2]


def test_identical_pattern_registered_once():
    tracker = Tracker()
    pattern = Capture("s", node(NodeKind.STRING))
    tracker.watch("string", pattern)
    tracker.watch("string", Capture("s", node(NodeKind.STRING)))

    assert len(_run(tracker, 'f("a");', "string")) == 1


def test_events_without_listeners_do_not_fire():
    tracker = lingui_tracker()
    result = JSParser().parse_string('import { Trans } from "@lingui/react";\n<Trans id="a" />;')

    assert tracker.run(result.root, ScopeManager(result.root)) == 0
    assert tracker.events() == ["translationJSX", "translationCall"]


def test_watch_requires_pattern():
    with pytest.raises(PatternError):
        Tracker().watch("bad", "string")


def test_parenthesized_call_fires_once():
    code = 'import { i18n } from "@lingui/core";\nconst x = (i18n._(key));'
    fired = _run(lingui_tracker(), code, "translationCall")

    assert [n.type for _, n, _ in fired] == ["call_expression"]


def test_parenthesized_message_fires_once():
    code = 'import { msg } from "@hi18n/core";\nconst m = ((msg("hi")));'
    fired = _run(hi18n_tracker(), code, "messageDefinition")

    assert len(fired) == 1
    assert fired[0][1].type == "call_expression"


def test_lowercase_jsx_tag_is_intrinsic():
    code = 'import { Trans as trans } from "@lingui/react";\nconst el = <trans id="a" />;\nconst other = <trans>x</trans>;'
    assert _run(lingui_tracker(), code, "translationJSX") == []
