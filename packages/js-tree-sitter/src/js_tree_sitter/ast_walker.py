from typing import Callable, Iterator, List, Optional

from tree_sitter import Node


class ASTWalker:
    """Utilities for traversing and searching the JS/TS AST"""

    @staticmethod
    def walk(node: Node, callback: Callable[[Node], None]):
        """Perform a pre-order, depth-first traversal of the AST"""
        for current in ASTWalker.iter_preorder(node):
            callback(current)

    @staticmethod
    def iter_preorder(node: Node) -> Iterator[Node]:
        stack = [node]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    @staticmethod
    def find_parent_of_type(node: Node, type_name: str) -> Optional[Node]:
        """Find the first parent node of a specific type"""
        current = node.parent
        while current:
            if current.type == type_name:
                return current
            current = current.parent
        return None

    @staticmethod
    def get_child_of_type(node: Node, type_name: str) -> Optional[Node]:
        """Find the first direct child of a specific type"""
        for child in node.children:
            if child.type == type_name:
                return child
        return None

    @staticmethod
    def find_all_by_type(node: Node, type_name: str) -> List[Node]:
        """Find all descendant nodes of a specific type"""
        results = []

        def check(n):
            if n.type == type_name:
                results.append(n)

        ASTWalker.walk(node, check)
        return results

    @staticmethod
    def get_text(node: Node, source: bytes | str | None = None) -> str:
        """Source text of a node; falls back to the tree's own copy of the source"""
        if source is None:
            return node.text.decode("utf-8")
        if isinstance(source, str):
            source = source.encode("utf-8")
        return source[node.start_byte : node.end_byte].decode("utf-8")

    @staticmethod
    def unwrap_parentheses(node: Optional[Node]) -> Optional[Node]:
        """Strip any number of enclosing parenthesized_expression wrappers"""
        while node is not None and node.type == "parenthesized_expression":
            inner = [c for c in node.named_children if c.type != "comment"]
            if len(inner) != 1:
                return node
            node = inner[0]
        return node
