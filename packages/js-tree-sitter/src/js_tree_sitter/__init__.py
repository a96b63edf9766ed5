from .ast_walker import ASTWalker
from .literals import NOT_LITERAL, BigInt, literal_value, string_value
from .models import ParseResult
from .node_types import NodeKind
from .parser import JSParser
from .scope import TYPE, VALUE, Scope, ScopeId, ScopeKind, ScopeManager

__all__ = [
    "ASTWalker",
    "BigInt",
    "JSParser",
    "NOT_LITERAL",
    "NodeKind",
    "ParseResult",
    "Scope",
    "ScopeId",
    "ScopeKind",
    "ScopeManager",
    "TYPE",
    "VALUE",
    "literal_value",
    "string_value",
]
