"""Per-file index of import bindings.

The table answers "which import, if any, does this identifier denote here".
Only direct imports of the scanned file are known: re-exports are not
followed, so `export { Trans } from "@lingui/react"` in another module is
invisible to a file importing it from there.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from js_tree_sitter import ASTWalker, NodeKind, string_value
from js_tree_sitter.scope import has_type_keyword
from tree_sitter import Node

from .scope import ScopeId, ScopeResolver

logger = logging.getLogger(__name__)

DEFAULT_EXPORT = "default"
NAMESPACE_EXPORT = "*"
_JSX_TAG_KINDS = (NodeKind.JSX_OPENING_ELEMENT, NodeKind.JSX_SELF_CLOSING_ELEMENT, NodeKind.JSX_CLOSING_ELEMENT)
_LOWERCASE_START = re.compile(r"^[a-z]")


class ImportKind(str, Enum):
    VALUE = "value"
    TYPE = "type"


@dataclass(frozen=True)
class BindingEntry:
    local_name: str
    module: str
    export_name: str
    import_kind: ImportKind = ImportKind.VALUE

    @property
    def is_namespace(self) -> bool:
        return self.export_name == NAMESPACE_EXPORT


class BindingTable:
    """Maps (scope, local name) to the module export it was imported as"""

    def __init__(self):
        self._entries: dict[tuple[ScopeId, str], BindingEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> Iterator[BindingEntry]:
        return iter(self._entries.values())

    def lookup(self, scope_id: ScopeId, local_name: str) -> Optional[BindingEntry]:
        return self._entries.get((scope_id, local_name))

    def record_import(self, node: Node, scope: ScopeResolver) -> list[BindingEntry]:
        """Record every binding an import declaration introduces.

        Anything that is not an import declaration (a dynamic `import()`,
        a TS `import x = require()`) is skipped.
        """
        recorded: list[BindingEntry] = []
        if node.type != NodeKind.IMPORT_STATEMENT:
            return recorded
        source = node.child_by_field_name("source")
        clause = ASTWalker.get_child_of_type(node, NodeKind.IMPORT_CLAUSE)
        if source is None or clause is None:
            return recorded
        module = string_value(source)
        if module is None:
            return recorded

        statement_kind = ImportKind.TYPE if has_type_keyword(node) else ImportKind.VALUE
        for part in clause.named_children:
            if part.type == NodeKind.IDENTIFIER:
                recorded.append(self._record(scope, ASTWalker.get_text(part), module, DEFAULT_EXPORT, statement_kind))
            elif part.type == NodeKind.NAMESPACE_IMPORT:
                local = ASTWalker.get_child_of_type(part, NodeKind.IDENTIFIER)
                if local is not None:
                    recorded.append(
                        self._record(scope, ASTWalker.get_text(local), module, NAMESPACE_EXPORT, statement_kind)
                    )
            elif part.type == NodeKind.NAMED_IMPORTS:
                for specifier in part.named_children:
                    if specifier.type != NodeKind.IMPORT_SPECIFIER:
                        continue
                    imported = specifier_imported_name(specifier)
                    local = specifier_local_name(specifier)
                    if imported is None or local is None:
                        continue
                    kind = ImportKind.TYPE if has_type_keyword(specifier) else statement_kind
                    recorded.append(self._record(scope, local, module, imported, kind))
        return recorded

    def _record(self, scope: ScopeResolver, local: str, module: str, export_name: str, kind: ImportKind):
        entry = BindingEntry(local_name=local, module=module, export_name=export_name, import_kind=kind)
        self._entries[(scope.module_scope, local)] = entry
        logger.debug("Recorded %s import %s -> %s from %r", kind.value, local, export_name, module)
        return entry

    def resolve(self, node: Node, scope: ScopeResolver, kind: ImportKind = ImportKind.VALUE) -> Optional[BindingEntry]:
        """The import entry a name or namespace member access denotes, or None.

        A value lookup never matches a type-only entry and vice versa.
        """
        node = ASTWalker.unwrap_parentheses(node)
        if node is None:
            return None
        node_kind = NodeKind.of(node)

        if kind == ImportKind.VALUE:
            if node_kind == NodeKind.IDENTIFIER:
                if is_intrinsic_jsx_name(node):
                    return None
                return self._resolve_name(node, scope, kind)
            if node_kind == NodeKind.MEMBER_EXPRESSION:
                obj, prop = node.child_by_field_name("object"), node.child_by_field_name("property")
                return self._resolve_member(obj, prop, scope, kind)
            if node_kind == NodeKind.NESTED_IDENTIFIER:
                parts = node.named_children
                if len(parts) == 2:
                    return self._resolve_member(parts[0], parts[1], scope, kind)
            return None

        if node_kind == NodeKind.TYPE_IDENTIFIER:
            return self._resolve_name(node, scope, kind)
        if node_kind == NodeKind.NESTED_TYPE_IDENTIFIER:
            obj, prop = node.child_by_field_name("module"), node.child_by_field_name("name")
            return self._resolve_member(obj, prop, scope, kind)
        return None

    def _resolve_name(self, identifier: Node, scope: ScopeResolver, kind: ImportKind) -> Optional[BindingEntry]:
        namespace = "type" if kind == ImportKind.TYPE else "value"
        declaring = scope.resolve_declaring_scope(identifier, namespace)
        if declaring is None or declaring != scope.module_scope:
            # Undeclared, or shadowed by an inner declaration
            return None
        entry = self._entries.get((declaring, ASTWalker.get_text(identifier)))
        if entry is None or entry.import_kind != kind:
            return None
        return entry

    def _resolve_member(
        self, obj: Optional[Node], prop: Optional[Node], scope: ScopeResolver, kind: ImportKind
    ) -> Optional[BindingEntry]:
        if obj is None or prop is None:
            return None
        obj = ASTWalker.unwrap_parentheses(obj)
        if obj.type != NodeKind.IDENTIFIER:
            return None
        if prop.type not in (NodeKind.PROPERTY_IDENTIFIER, NodeKind.IDENTIFIER, NodeKind.TYPE_IDENTIFIER):
            # Computed or private access
            return None
        # The namespace object itself is looked up as a value for member
        # expressions and as a type for qualified type names
        namespace_entry = self._resolve_name(obj, scope, kind)
        if namespace_entry is None or not namespace_entry.is_namespace:
            return None
        return BindingEntry(
            local_name=f"{namespace_entry.local_name}.{ASTWalker.get_text(prop)}",
            module=namespace_entry.module,
            export_name=ASTWalker.get_text(prop),
            import_kind=namespace_entry.import_kind,
        )


def specifier_imported_name(specifier: Node) -> Optional[str]:
    name = specifier.child_by_field_name("name")
    if name is None:
        return None
    if name.type == NodeKind.STRING:
        return string_value(name)
    return ASTWalker.get_text(name)


def specifier_local_name(specifier: Node) -> Optional[str]:
    local = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
    if local is None or local.type == NodeKind.STRING:
        return None
    return ASTWalker.get_text(local)


def is_intrinsic_jsx_name(identifier: Node) -> bool:
    """`trans` in `<trans />` names a host element, not a variable"""
    parent = identifier.parent
    if parent is None or parent.type not in _JSX_TAG_KINDS:
        return False
    return parent.child_by_field_name("name") == identifier and bool(
        _LOWERCASE_START.match(ASTWalker.get_text(identifier))
    )
