import logging
from typing import Callable, Optional

from js_tree_sitter import ASTWalker, NodeKind
from tree_sitter import Node

from .bindings import BindingEntry, BindingTable
from .captures import CaptureMap
from .errors import PatternError
from .patterns import Pattern, match
from .scope import ScopeResolver

logger = logging.getLogger(__name__)

Listener = Callable[[Node, CaptureMap], None]


class Tracker:
    """Evaluates registered patterns against a traversal and fires listeners on matches.

    A tracker belongs to one file visit: it owns that file's binding table.
    Patterns registered on it are shared, immutable values.
    """

    def __init__(self, bindings: Optional[BindingTable] = None):
        self.bindings = bindings if bindings is not None else BindingTable()
        self._patterns: dict[str, list[Pattern]] = {}
        self._listeners: dict[str, list[Listener]] = {}

    def watch(self, event: str, pattern: Pattern):
        """Fire `event` wherever `pattern` matches; an identical pattern is registered once"""
        if not isinstance(pattern, Pattern):
            raise PatternError(f"Event '{event}' needs a pattern, got {pattern!r}")
        patterns = self._patterns.setdefault(event, [])
        if pattern not in patterns:
            patterns.append(pattern)

    def listen(self, event: str, callback: Listener):
        self._listeners.setdefault(event, []).append(callback)

    def events(self) -> list[str]:
        return list(self._patterns)

    def track_import(self, scope: ScopeResolver, node: Node) -> list[BindingEntry]:
        """Feed an import declaration to the binding table.

        Imports are hoisted, so the driver must track every import of the
        file before feeding nodes that use them.
        """
        return self.bindings.record_import(node, scope)

    def feed(self, node: Node, scope: ScopeResolver) -> int:
        """Attempt every watched pattern rooted at `node`; return how many events fired"""
        fired = 0
        for event, patterns in self._patterns.items():
            listeners = self._listeners.get(event)
            if not listeners:
                continue
            for pattern in patterns:
                captures: CaptureMap = {}
                if not match(pattern, node, scope, self.bindings, captures):
                    continue
                fired += 1
                logger.debug("Event '%s' fired at %s:%d", event, node.type, node.start_point[0] + 1)
                for callback in list(listeners):
                    callback(node, dict(captures))
        return fired

    def run(self, root: Node, scope: ScopeResolver) -> int:
        """Track all imports of a program, then feed every node in pre-order"""
        for statement in root.children:
            if statement.type == NodeKind.IMPORT_STATEMENT:
                self.track_import(scope, statement)
        fired = 0
        for current in ASTWalker.iter_preorder(root):
            fired += self.feed(current, scope)
        return fired
