from typing import Optional, Protocol

from tree_sitter import Node

ScopeId = int


class ScopeResolver(Protocol):
    """Scope capability the tracking core needs from a scope-analysis library.

    `js_tree_sitter.ScopeManager` satisfies it; any analyzer exposing the
    same four members can be plugged in.
    """

    @property
    def module_scope(self) -> ScopeId: ...

    def resolve_declaring_scope(self, identifier: Node, namespace: Optional[str] = None) -> Optional[ScopeId]: ...

    def scope_declares(self, scope_id: ScopeId, name: str, namespace: str = "value") -> bool: ...

    def declared_names(self, scope_id: ScopeId) -> frozenset[str]: ...
