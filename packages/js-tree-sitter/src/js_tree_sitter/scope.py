"""Lexical scope analysis over a tree-sitter JS/TS tree.

Builds the scope chain of a file once and answers where an identifier
occurrence is declared. Value and type names live in separate namespaces:
an ``identifier`` node is a value reference, a ``type_identifier`` node is a
type reference.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional

from tree_sitter import Node

from .ast_walker import ASTWalker
from .node_types import BLOCK_KINDS, CLASS_KINDS, FUNCTION_KINDS, NodeKind

logger = logging.getLogger(__name__)

ScopeId = int

VALUE = "value"
TYPE = "type"
BOTH = (VALUE, TYPE)


class ScopeKind(str, Enum):
    MODULE = "module"
    FUNCTION = "function"
    CLASS = "class"
    BLOCK = "block"


@dataclass
class Scope:
    scope_id: ScopeId
    kind: ScopeKind
    node: Node
    parent: Optional["Scope"] = None
    values: set[str] = field(default_factory=set)
    types: set[str] = field(default_factory=set)

    def declares(self, name: str, namespace: str = VALUE) -> bool:
        return name in (self.types if namespace == TYPE else self.values)

    def declare(self, name: str, namespaces: Iterable[str] = BOTH):
        for namespace in namespaces:
            (self.types if namespace == TYPE else self.values).add(name)

    def chain(self) -> Iterator["Scope"]:
        scope: Optional[Scope] = self
        while scope is not None:
            yield scope
            scope = scope.parent


class ScopeManager:
    """Scope chain of one parsed file"""

    def __init__(self, root: Node):
        self.root = root
        self._scopes: dict[ScopeId, Scope] = {}
        self.module = self._new_scope(root, ScopeKind.MODULE, None)
        self._build()

    @property
    def module_scope(self) -> ScopeId:
        return self.module.scope_id

    def get_scope(self, scope_id: ScopeId) -> Scope:
        return self._scopes[scope_id]

    def scope_of(self, node: Node) -> Scope:
        """Innermost scope enclosing a node occurrence"""
        current = node.parent
        while current is not None:
            scope = self._scopes.get(current.id)
            if scope is not None:
                return scope
            current = current.parent
        return self.module

    def resolve_declaring_scope(self, identifier: Node, namespace: Optional[str] = None) -> Optional[ScopeId]:
        """Innermost scope declaring the identifier's name, or None for an implicit global"""
        if namespace is None:
            namespace = TYPE if identifier.type == NodeKind.TYPE_IDENTIFIER else VALUE
        name = ASTWalker.get_text(identifier)
        for scope in self.scope_of(identifier).chain():
            if scope.declares(name, namespace):
                return scope.scope_id
        return None

    def is_shadowed(self, node: Node, name: str, namespace: str = VALUE) -> bool:
        """Whether a scope below the module declares `name` at the position of `node`"""
        for scope in self.scope_of(node).chain():
            if scope is self.module:
                return False
            if scope.declares(name, namespace):
                return True
        return False

    def scope_declares(self, scope_id: ScopeId, name: str, namespace: str = VALUE) -> bool:
        scope = self._scopes.get(scope_id)
        return scope is not None and scope.declares(name, namespace)

    def declared_names(self, scope_id: ScopeId) -> frozenset[str]:
        scope = self._scopes[scope_id]
        return frozenset(scope.values | scope.types)

    # Construction

    def _new_scope(self, node: Node, kind: ScopeKind, parent: Optional[Scope]) -> Scope:
        scope = Scope(scope_id=node.id, kind=kind, node=node, parent=parent)
        self._scopes[scope.scope_id] = scope
        return scope

    def _build(self):
        stack: list[tuple[Node, Scope]] = [(child, self.module) for child in reversed(self.root.children)]
        while stack:
            node, scope = stack.pop()
            inner = self._enter(node, scope)
            for child in reversed(node.children):
                stack.append((child, inner))
        logger.debug("Built %d scopes", len(self._scopes))

    def _enter(self, node: Node, scope: Scope) -> Scope:
        """Record the declarations a node makes; return the scope for its children"""
        kind = NodeKind.of(node)
        if kind is None:
            return scope

        if kind == NodeKind.IMPORT_STATEMENT:
            self._declare_import(node)
            return scope

        if kind == NodeKind.VARIABLE_DECLARATION:
            target = self._function_scope(scope)
            for declarator in node.named_children:
                if declarator.type == NodeKind.VARIABLE_DECLARATOR:
                    for name in binding_names(declarator.child_by_field_name("name")):
                        target.declare(name, (VALUE,))
            return scope

        if kind == NodeKind.LEXICAL_DECLARATION:
            for declarator in node.named_children:
                if declarator.type == NodeKind.VARIABLE_DECLARATOR:
                    for name in binding_names(declarator.child_by_field_name("name")):
                        scope.declare(name, (VALUE,))
            return scope

        if kind in FUNCTION_KINDS:
            return self._enter_function(node, kind, scope)

        if kind in CLASS_KINDS:
            name_node = node.child_by_field_name("name")
            inner = self._new_scope(node, ScopeKind.CLASS, scope)
            if name_node is not None:
                # A class declaration binds in the enclosing scope; a named class
                # expression only binds inside itself
                target = inner if kind == NodeKind.CLASS else scope
                target.declare(ASTWalker.get_text(name_node))
            return inner

        if kind in BLOCK_KINDS:
            if kind == NodeKind.STATEMENT_BLOCK and NodeKind.of(node.parent) in FUNCTION_KINDS:
                # A function body shares the scope of its parameters
                return scope
            inner = self._new_scope(node, ScopeKind.BLOCK, scope)
            if kind == NodeKind.CATCH_CLAUSE:
                for name in binding_names(node.child_by_field_name("parameter")):
                    inner.declare(name, (VALUE,))
            elif kind == NodeKind.FOR_IN_STATEMENT:
                # for (const x of xs): the binding sits directly in the header
                declaration_kind = node.child_by_field_name("kind")
                if declaration_kind is not None:
                    target = self._function_scope(scope) if declaration_kind.type == "var" else inner
                    for name in binding_names(node.child_by_field_name("left")):
                        target.declare(name, (VALUE,))
            return inner

        if kind in (NodeKind.TYPE_ALIAS_DECLARATION, NodeKind.INTERFACE_DECLARATION, NodeKind.TYPE_PARAMETER):
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                scope.declare(ASTWalker.get_text(name_node), (TYPE,))
            return scope

        if kind == NodeKind.ENUM_DECLARATION:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                scope.declare(ASTWalker.get_text(name_node))
            return scope

        return scope

    def _enter_function(self, node: Node, kind: NodeKind, scope: Scope) -> Scope:
        inner = self._new_scope(node, ScopeKind.FUNCTION, scope)
        name_node = node.child_by_field_name("name")
        if name_node is not None and kind != NodeKind.METHOD_DEFINITION:
            if kind in (NodeKind.FUNCTION_DECLARATION, NodeKind.GENERATOR_FUNCTION_DECLARATION):
                scope.declare(ASTWalker.get_text(name_node), (VALUE,))
            else:
                inner.declare(ASTWalker.get_text(name_node), (VALUE,))

        single = node.child_by_field_name("parameter")
        if single is not None:
            for name in binding_names(single):
                inner.declare(name, (VALUE,))
        params = node.child_by_field_name("parameters")
        if params is not None:
            for param in params.named_children:
                for name in binding_names(param):
                    inner.declare(name, (VALUE,))
        return inner

    def _function_scope(self, scope: Scope) -> Scope:
        for candidate in scope.chain():
            if candidate.kind in (ScopeKind.FUNCTION, ScopeKind.MODULE):
                return candidate
        return self.module

    def _declare_import(self, node: Node):
        statement_is_type = has_type_keyword(node)
        clause = ASTWalker.get_child_of_type(node, NodeKind.IMPORT_CLAUSE)
        if clause is None:
            return
        for part in clause.named_children:
            if part.type == NodeKind.IDENTIFIER:
                self.module.declare(ASTWalker.get_text(part), (TYPE,) if statement_is_type else BOTH)
            elif part.type == NodeKind.NAMESPACE_IMPORT:
                local = ASTWalker.get_child_of_type(part, NodeKind.IDENTIFIER)
                if local is not None:
                    self.module.declare(ASTWalker.get_text(local), (TYPE,) if statement_is_type else BOTH)
            elif part.type == NodeKind.NAMED_IMPORTS:
                for specifier in part.named_children:
                    if specifier.type != NodeKind.IMPORT_SPECIFIER:
                        continue
                    local = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                    if local is None:
                        continue
                    specifier_is_type = statement_is_type or has_type_keyword(specifier)
                    self.module.declare(ASTWalker.get_text(local), (TYPE,) if specifier_is_type else BOTH)


def has_type_keyword(node: Node) -> bool:
    """`import type ...` or `import { type X }`: an anonymous type keyword before any named child"""
    for child in node.children:
        if child.is_named:
            return False
        if child.type in ("type", "typeof"):
            return True
    return False


def binding_names(pattern: Optional[Node]) -> list[str]:
    """Names bound by a declaration target or parameter pattern"""
    if pattern is None:
        return []
    kind = NodeKind.of(pattern)
    if kind in (NodeKind.IDENTIFIER, NodeKind.SHORTHAND_PROPERTY_IDENTIFIER_PATTERN):
        return [ASTWalker.get_text(pattern)]
    if kind in (NodeKind.REQUIRED_PARAMETER, NodeKind.OPTIONAL_PARAMETER):
        return binding_names(pattern.child_by_field_name("pattern"))
    if kind == NodeKind.PAIR_PATTERN:
        return binding_names(pattern.child_by_field_name("value"))
    if kind in (NodeKind.ASSIGNMENT_PATTERN, NodeKind.OBJECT_ASSIGNMENT_PATTERN):
        return binding_names(pattern.child_by_field_name("left"))
    if kind in (NodeKind.OBJECT_PATTERN, NodeKind.ARRAY_PATTERN, NodeKind.REST_PATTERN):
        names = []
        for child in pattern.named_children:
            names.extend(binding_names(child))
        return names
    return []
