import json
import os
import re
from pathlib import Path
from typing import Optional

from hi18n_tracker import (
    CaptureMap,
    ImportEditSession,
    TextEdit,
    Tracker,
    captured_node,
    captured_root,
    lingui_tracker,
)
from hi18n_tracker.patterns import jsx_attribute_name, jsx_attributes
from js_tree_sitter import BigInt, NodeKind, literal_value, string_value
from pydantic import BaseModel, ConfigDict, Field
from tree_sitter import Node

from ..models import Severity
from .base import BaseRule, RuleContext

MESSAGE = "Migrate <Trans> to hi18n"

MIGRATABLE_PROP_NAMES = (
    "id",
    # value interpolation parameters
    "values",
    # render props
    "render",
    # like render but takes a component
    "component",
    # component interpolation parameters
    "components",
)

_LINE_BREAKS = ("\r", "\n", "\u2028", "\u2029")
_NUMERIC_KEY = re.compile(r"^(?:0|[1-9][0-9]*)$")
_LOWERCASE_START = re.compile(r"^[a-z]")


class MigrateFromLinguiOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    book_path: str = Field(alias="bookPath")


class _Unsupported(Exception):
    """The element uses a shape the fix cannot rewrite"""


class MigrateFromLinguiRule(BaseRule):
    """Rewrites lingui `<Trans>` elements into hi18n `<Translate>` elements."""

    options_model = MigrateFromLinguiOptions

    @property
    def rule_id(self) -> str:
        return "M001"

    @property
    def name(self) -> str:
        return "migrate-from-lingui"

    @property
    def severity(self) -> Severity:
        return Severity.ERROR

    @property
    def auto_fixable(self) -> bool:
        return True

    @property
    def description(self) -> str:
        return "Lingui <Trans> elements should be migrated to hi18n <Translate>."

    def create(self, context: RuleContext) -> Tracker:
        book_path = relative_book_path(context.options.book_path, context.file_path)
        tracker = lingui_tracker()

        def on_translation_jsx(node: Node, captured: CaptureMap):
            report_node = captured_root(captured["props"]) or node
            try:
                edits = self._migrate(context, book_path, node, captured)
            except _Unsupported:
                context.report(report_node, MESSAGE, context="needs manual migration")
                return
            context.report(report_node, MESSAGE, edits=edits)

        tracker.listen("translationJSX", on_translation_jsx)
        return tracker

    def _migrate(self, context: RuleContext, book_path: str, node: Node, captured: CaptureMap) -> list[TextEdit]:
        element = captured_node(captured["props"])
        if element is None:
            raise _Unsupported()
        for attr in jsx_attributes(element):
            if jsx_attribute_name(attr) not in MIGRATABLE_PROP_NAMES:
                raise _Unsupported()

        id_node = captured_node(captured["id"])
        if id_node is None or id_node.type != NodeKind.STRING:
            raise _Unsupported()
        message_id = string_value(id_node)
        if message_id is None:
            raise _Unsupported()

        render_in_element: Optional[str] = None
        render = captured_node(captured["render"])
        if render is not None:
            if render.type not in (NodeKind.JSX_ELEMENT, NodeKind.JSX_SELF_CLOSING_ELEMENT):
                raise _Unsupported()
            render_in_element = context.text(render)
        component = captured_node(captured["component"])
        if component is not None:
            if not eligible_for_jsx_tag_name(component):
                raise _Unsupported()
            render_in_element = f"<{context.text(component)} />"

        params: dict[str, str] = {}
        for key in ("values", "components"):
            values = captured_node(captured[key])
            if values is None:
                continue
            if values.type == NodeKind.OBJECT:
                entries = _object_params(context, values)
            elif values.type == NodeKind.ARRAY:
                entries = _array_params(context, values)
            else:
                raise _Unsupported()
            for param_key, param_value in entries:
                if param_key in params:
                    raise _Unsupported()
                params[param_key] = param_value

        session = ImportEditSession(context.root, context.scope)
        translate = session.plan_import("@hi18n/react", "Translate", ["@lingui/react", "@lingui/macro"])
        book = session.plan_import(book_path, "book", [], insert_after_last=True)
        for local_name in (translate.name, book.name):
            # The module-level import would not be visible from the element
            if context.scope.is_shadowed(node, local_name):
                raise _Unsupported()

        attrs = [f"book={{{book.name}}}", f"id={jsx_attribute_string(message_id)}"]
        if render_in_element is not None:
            attrs.append(f"renderInElement={{{render_in_element}}}")
        for param_key, param_value in params.items():
            attrs.append(param_attribute(param_key, param_value))
        replacement = f"<{translate.name}{''.join(' ' + a for a in attrs)} />"
        return session.edits + [TextEdit.replace(node.start_byte, node.end_byte, replacement)]


def relative_book_path(book_path: str, file_path: Path) -> str:
    """Module specifier of the book as seen from the linted file"""
    relative = os.path.relpath(book_path, os.path.dirname(os.path.abspath(file_path)))
    relative = relative.replace(os.sep, "/")
    if not re.match(r"^\.\.?(?:/|$)", relative):
        relative = f"./{relative}"
    return relative


def jsx_attribute_string(value: str) -> str:
    """Render `value` as a JSX attribute value, quoted where JSX allows it"""
    if not any(c in value for c in _LINE_BREAKS):
        if '"' not in value:
            return f'"{value}"'
        if "'" not in value:
            return f"'{value}'"
    return "{" + json.dumps(value, ensure_ascii=False) + "}"


def param_attribute(key: str, value: str) -> str:
    if _is_jsx_attribute_name(key):
        return f"{key}={{{value}}}"
    if _NUMERIC_KEY.match(key):
        return f"{{...{{ {key}: {value} }}}}"
    return f"{{...{{ {json.dumps(key, ensure_ascii=False)}: {value} }}}}"


def _is_jsx_attribute_name(key: str) -> bool:
    if not key:
        return False
    head, tail = key[0], key[1:]
    if not (head.isidentifier() or head == "$"):
        return False
    return all(("_" + c).isidentifier() or c in "-$\u200c\u200d" for c in tail)


def eligible_for_jsx_tag_name(node: Node) -> bool:
    """Whether `<{text of node} />` denotes the same component"""
    if node.type == NodeKind.IDENTIFIER:
        # <foo /> would be an intrinsic element
        return not _LOWERCASE_START.match(node.text.decode("utf-8"))
    if node.type == NodeKind.MEMBER_EXPRESSION:
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        if obj is None or prop is None or prop.type != NodeKind.PROPERTY_IDENTIFIER:
            return False
        if any(c.type in ("?.", "optional_chain") for c in node.children):
            return False
        return obj.type == NodeKind.IDENTIFIER or eligible_for_jsx_tag_name(obj)
    return False


def static_key(pair: Node) -> Optional[str]:
    """Property name of an object pair when it is known without evaluation"""
    key = pair.child_by_field_name("key")
    if key is None:
        return None
    if key.type == NodeKind.PROPERTY_IDENTIFIER:
        return key.text.decode("utf-8")
    if key.type == NodeKind.COMPUTED_PROPERTY_NAME:
        inner = [c for c in key.named_children if c.type != NodeKind.COMMENT]
        if len(inner) != 1:
            return None
        key = inner[0]
    value = literal_value(key)
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, BigInt):
        return str(value.value)
    return None


def _object_params(context: RuleContext, obj: Node) -> list[tuple[str, str]]:
    entries = []
    for prop in obj.named_children:
        if prop.type == NodeKind.COMMENT:
            continue
        if prop.type == NodeKind.SHORTHAND_PROPERTY_IDENTIFIER:
            name = context.text(prop)
            entries.append((name, name))
        elif prop.type == NodeKind.PAIR:
            key = static_key(prop)
            value = prop.child_by_field_name("value")
            if key is None or value is None:
                raise _Unsupported()
            entries.append((key, context.text(value)))
        else:
            raise _Unsupported()
    return entries


def _array_params(context: RuleContext, array: Node) -> list[tuple[str, str]]:
    entries = []
    expecting_element = True
    for child in array.children:
        if child.type == NodeKind.COMMENT or child.type == "[" or child.type == "]":
            continue
        if child.type == ",":
            if expecting_element:
                # hole: [a, , b]
                raise _Unsupported()
            expecting_element = True
            continue
        if child.type == NodeKind.SPREAD_ELEMENT:
            raise _Unsupported()
        entries.append((str(len(entries)), context.text(child)))
        expecting_element = False
    return entries
