from dataclasses import dataclass, field
from typing import List

from tree_sitter import Node, Tree


@dataclass
class ParseResult:
    """Result of a tree-sitter parse operation"""

    tree: Tree
    source: str
    source_bytes: bytes
    errors: List[str] = field(default_factory=list)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source_bytes[node.start_byte : node.end_byte].decode("utf-8")

