"""Immutable syntax patterns with named capture points.

A pattern is a closed set of variants evaluated by `match`. Patterns carry no
mutable state; build them once at import time and share them between files.

Matching never raises for unexpected input: a missing child, a spread
element or a computed key where a static shape is expected is simply a
failed match.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from js_tree_sitter import NOT_LITERAL, ASTWalker, NodeKind, literal_value
from js_tree_sitter.node_types import JSX_ELEMENT_KINDS
from tree_sitter import Node

from .bindings import BindingTable, ImportKind
from .captures import CAPTURE_FAILURE, CaptureMap, CapturedNode
from .errors import PatternError
from .scope import ScopeResolver

Selector = Union[str, int]


class Pattern:
    """Base of the pattern variants"""

    def capture_names(self) -> tuple[str, ...]:
        """Capture names declared anywhere in this pattern, in declaration order"""
        return tuple(_collect_names(self))


@dataclass(frozen=True)
class Wildcard(Pattern):
    """Matches any present node"""


@dataclass(frozen=True)
class NodeOfType(Pattern):
    """Matches a node of one of `kinds` whose selected children match recursively.

    A selector is a tree-sitter field name or an index into the named
    children (comments excluded).
    """

    kinds: tuple[str, ...]
    children: tuple[tuple[Selector, Pattern], ...] = ()

    def __post_init__(self):
        kinds = (self.kinds,) if isinstance(self.kinds, str) else tuple(self.kinds)
        if not kinds:
            raise PatternError("NodeOfType needs at least one node kind")
        object.__setattr__(self, "kinds", tuple(str(k.value if isinstance(k, NodeKind) else k) for k in kinds))
        children = self.children
        if isinstance(children, Mapping):
            children = tuple(children.items())
        for selector, pattern in children:
            if isinstance(selector, bool) or not isinstance(selector, (str, int)):
                raise PatternError(f"Invalid child selector {selector!r}")
            if isinstance(selector, int) and selector < 0:
                raise PatternError(f"Negative child index {selector}")
            if not isinstance(pattern, Pattern):
                raise PatternError(f"Child {selector!r} is not a pattern: {pattern!r}")
        object.__setattr__(self, "children", tuple(children))
        self.capture_names()


@dataclass(frozen=True)
class Capture(Pattern):
    """Records the matched node under `name`.

    An optional capture whose sub-pattern fails records CAPTURE_FAILURE
    (for itself and every capture nested in it) and lets the match go on;
    a required one fails the enclosing match.
    """

    name: str
    pattern: Pattern = field(default_factory=Wildcard)
    optional: bool = False

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.isidentifier():
            raise PatternError(f"Invalid capture name {self.name!r}")
        if not isinstance(self.pattern, Pattern):
            raise PatternError(f"Capture '{self.name}' wraps a non-pattern: {self.pattern!r}")
        self.capture_names()


@dataclass(frozen=True, init=False)
class Alternation(Pattern):
    """Tries each alternative in declaration order; the first success wins"""

    alternatives: tuple[Pattern, ...]

    def __init__(self, *alternatives: Pattern):
        if not alternatives:
            raise PatternError("Alternation needs at least one alternative")
        for alternative in alternatives:
            if not isinstance(alternative, Pattern):
                raise PatternError(f"Alternative is not a pattern: {alternative!r}")
        object.__setattr__(self, "alternatives", tuple(alternatives))
        self.capture_names()


@dataclass(frozen=True, init=False)
class AllOf(Pattern):
    """Every part must match the same node"""

    parts: tuple[Pattern, ...]

    def __init__(self, *parts: Pattern):
        if not parts:
            raise PatternError("AllOf needs at least one part")
        for part in parts:
            if not isinstance(part, Pattern):
                raise PatternError(f"Part is not a pattern: {part!r}")
        object.__setattr__(self, "parts", tuple(parts))
        self.capture_names()


@dataclass(frozen=True)
class ImportedBinding(Pattern):
    """A name (or namespace member access) bound by importing one of `exports` from one of `modules`"""

    modules: tuple[str, ...]
    exports: tuple[str, ...]
    kind: ImportKind = ImportKind.VALUE

    def __post_init__(self):
        modules = (self.modules,) if isinstance(self.modules, str) else tuple(self.modules)
        exports = (self.exports,) if isinstance(self.exports, str) else tuple(self.exports)
        if not modules or not exports:
            raise PatternError("ImportedBinding needs at least one module and one export")
        object.__setattr__(self, "modules", modules)
        object.__setattr__(self, "exports", exports)


@dataclass(frozen=True)
class LiteralValue(Pattern):
    """A literal evaluating to `value` (`0x10` matches 16)"""

    value: Any


@dataclass(frozen=True)
class Text(Pattern):
    """A node whose source text is exactly `text`, for static names"""

    text: str


@dataclass(frozen=True)
class JSXAttribute(Pattern):
    """A JSX element carrying the static attribute `name` whose value matches `pattern`.

    `{expr}` containers are unwrapped; the attribute itself becomes the
    capture root of whatever the value pattern captures. An absent
    attribute (or one without a value) matches `pattern` against nothing,
    which only an optional capture accepts.
    """

    name: str
    pattern: Pattern = field(default_factory=Wildcard)

    def __post_init__(self):
        if not isinstance(self.pattern, Pattern):
            raise PatternError(f"JSXAttribute '{self.name}' wraps a non-pattern: {self.pattern!r}")
        self.capture_names()


@dataclass(frozen=True, init=False)
class Arguments(Pattern):
    """Positional call arguments; any spread argument fails the match"""

    patterns: tuple[Pattern, ...]
    exact: bool = False

    def __init__(self, *patterns: Pattern, exact: bool = False):
        for pattern in patterns:
            if not isinstance(pattern, Pattern):
                raise PatternError(f"Argument is not a pattern: {pattern!r}")
        object.__setattr__(self, "patterns", tuple(patterns))
        object.__setattr__(self, "exact", exact)
        self.capture_names()


def node(kind: str | Sequence[str], **children: Pattern) -> NodeOfType:
    """Shorthand for NodeOfType with field-name selectors"""
    return NodeOfType(kind, children)


def _collect_names(pattern: Pattern) -> list[str]:
    if isinstance(pattern, Capture):
        inner = _collect_names(pattern.pattern)
        if pattern.name in inner:
            raise PatternError(f"Capture '{pattern.name}' is declared inside itself")
        return [pattern.name] + inner
    if isinstance(pattern, Alternation):
        # Branches are exclusive, so they may reuse names
        names: list[str] = []
        for alternative in pattern.alternatives:
            for name in _collect_names(alternative):
                if name not in names:
                    names.append(name)
        return names
    if isinstance(pattern, NodeOfType):
        return _disjoint([p for _, p in pattern.children])
    if isinstance(pattern, Arguments):
        return _disjoint(list(pattern.patterns))
    if isinstance(pattern, AllOf):
        return _disjoint(list(pattern.parts))
    if isinstance(pattern, JSXAttribute):
        return _collect_names(pattern.pattern)
    return []


def _disjoint(patterns: list[Pattern]) -> list[str]:
    names: list[str] = []
    for sub in patterns:
        for name in _collect_names(sub):
            if name in names:
                raise PatternError(f"Capture '{name}' is declared more than once")
            names.append(name)
    return names


@dataclass
class MatchContext:
    scope: ScopeResolver
    bindings: BindingTable


def match(
    pattern: Pattern,
    target: Optional[Node],
    scope: ScopeResolver,
    bindings: BindingTable,
    captures: Optional[CaptureMap] = None,
) -> bool:
    """Match `pattern` rooted at `target`.

    On success the captures are written into `captures`, completed so every
    declared name is present; on failure `captures` is left untouched.

    Parentheses are transparent below the root only: a traversal also
    visits the inner expression, so `(f(x))` matches once, at `f(x)`.
    """
    if target is not None and target.type == NodeKind.PARENTHESIZED_EXPRESSION and not _wants_parentheses(pattern):
        return False
    trial: CaptureMap = dict(captures) if captures is not None else {}
    if not _match(pattern, target, MatchContext(scope, bindings), trial, None):
        return False
    for name in pattern.capture_names():
        trial.setdefault(name, CAPTURE_FAILURE)
    if captures is not None:
        captures.update(trial)
    return True


def _wants_parentheses(pattern: Pattern) -> bool:
    if isinstance(pattern, NodeOfType):
        return NodeKind.PARENTHESIZED_EXPRESSION.value in pattern.kinds
    if isinstance(pattern, Capture):
        return _wants_parentheses(pattern.pattern)
    if isinstance(pattern, Alternation):
        return any(_wants_parentheses(alternative) for alternative in pattern.alternatives)
    if isinstance(pattern, AllOf):
        return any(_wants_parentheses(part) for part in pattern.parts)
    return False


def _match(pattern: Pattern, target: Optional[Node], ctx: MatchContext, captures: CaptureMap, root: Optional[Node]):
    if isinstance(pattern, Capture):
        return _match_capture(pattern, target, ctx, captures, root)
    if isinstance(pattern, Alternation):
        for alternative in pattern.alternatives:
            trial = dict(captures)
            if _match(alternative, target, ctx, trial, root):
                captures.update(trial)
                return True
        return False
    if isinstance(pattern, Wildcard):
        return target is not None
    if isinstance(pattern, AllOf):
        return all(_match(part, target, ctx, captures, root) for part in pattern.parts)
    if isinstance(pattern, NodeOfType):
        return _match_node(pattern, target, ctx, captures)
    if isinstance(pattern, ImportedBinding):
        return _match_binding(pattern, target, ctx)
    if isinstance(pattern, LiteralValue):
        return target is not None and _same_literal(literal_value(target), pattern.value)
    if isinstance(pattern, Text):
        return target is not None and ASTWalker.get_text(target) == pattern.text
    if isinstance(pattern, JSXAttribute):
        return _match_jsx_attribute(pattern, target, ctx, captures)
    if isinstance(pattern, Arguments):
        return _match_arguments(pattern, target, ctx, captures)
    raise PatternError(f"Unsupported pattern variant {type(pattern).__name__}")


def _match_capture(pattern: Capture, target, ctx: MatchContext, captures: CaptureMap, root) -> bool:
    trial = dict(captures)
    if target is not None and _match(pattern.pattern, target, ctx, trial, root):
        captures.update(trial)
        captured = ASTWalker.unwrap_parentheses(target)
        captures[pattern.name] = CapturedNode(node=captured, root=root if root is not None else captured)
        return True
    if not pattern.optional:
        return False
    for name in pattern.capture_names():
        captures[name] = CAPTURE_FAILURE
    return True


def _match_node(pattern: NodeOfType, target, ctx: MatchContext, captures: CaptureMap) -> bool:
    if target is None:
        return False
    if NodeKind.PARENTHESIZED_EXPRESSION.value not in pattern.kinds:
        target = ASTWalker.unwrap_parentheses(target)
    if target.type not in pattern.kinds:
        return False
    for selector, sub in pattern.children:
        if not _match(sub, select_child(target, selector), ctx, captures, None):
            return False
    return True


def select_child(target: Node, selector: Selector) -> Optional[Node]:
    if isinstance(selector, int):
        named = [c for c in target.named_children if c.type != NodeKind.COMMENT]
        return named[selector] if selector < len(named) else None
    return target.child_by_field_name(selector)


def _match_binding(pattern: ImportedBinding, target, ctx: MatchContext) -> bool:
    if target is None:
        return False
    entry = ctx.bindings.resolve(target, ctx.scope, pattern.kind)
    return entry is not None and entry.module in pattern.modules and entry.export_name in pattern.exports


def _same_literal(actual: Any, expected: Any) -> bool:
    if actual is NOT_LITERAL:
        return False
    # True == 1 in Python but not between JS booleans and numbers
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual == expected
    if (actual is None) != (expected is None):
        return False
    if isinstance(actual, str) != isinstance(expected, str):
        return False
    return actual == expected


def jsx_attributes(element: Node) -> list[Node]:
    """Attribute nodes of a JSX element (spread attributes included, in source order)"""
    if element.type == NodeKind.JSX_ELEMENT:
        opening = element.child_by_field_name("open_tag")
        if opening is None:
            return []
        element = opening
    if element.type not in (NodeKind.JSX_SELF_CLOSING_ELEMENT, NodeKind.JSX_OPENING_ELEMENT):
        return []
    return element.children_by_field_name("attribute")


def jsx_attribute_name(attribute: Node) -> Optional[str]:
    if attribute.type != NodeKind.JSX_ATTRIBUTE or not attribute.named_children:
        return None
    name = attribute.named_children[0]
    if name.type != NodeKind.PROPERTY_IDENTIFIER and name.type != NodeKind.IDENTIFIER:
        return None
    return ASTWalker.get_text(name)


def jsx_attribute_value(attribute: Node) -> Optional[Node]:
    """Attribute value with any `{...}` container unwrapped; None for `<X flag />` or `{}`"""
    named = [c for c in attribute.named_children if c.type != NodeKind.COMMENT]
    if len(named) < 2:
        return None
    value = named[-1]
    if value.type == NodeKind.JSX_EXPRESSION:
        inner = [c for c in value.named_children if c.type != NodeKind.COMMENT]
        if len(inner) != 1:
            return None
        return inner[0]
    return value


def _match_jsx_attribute(pattern: JSXAttribute, target, ctx: MatchContext, captures: CaptureMap) -> bool:
    kind = NodeKind.of(target)
    if kind not in JSX_ELEMENT_KINDS and kind != NodeKind.JSX_OPENING_ELEMENT:
        return False
    found = None
    for attribute in jsx_attributes(target):
        if jsx_attribute_name(attribute) == pattern.name:
            # Later attributes win, as they do when props are built
            found = attribute
    if found is None:
        return _match(pattern.pattern, None, ctx, captures, None)
    value = jsx_attribute_value(found)
    if value is not None and value.type == NodeKind.SPREAD_ELEMENT:
        return False
    return _match(pattern.pattern, value, ctx, captures, found)


def _match_arguments(pattern: Arguments, target, ctx: MatchContext, captures: CaptureMap) -> bool:
    if target is None or target.type != NodeKind.ARGUMENTS:
        return False
    args = [c for c in target.named_children if c.type != NodeKind.COMMENT]
    if any(arg.type == NodeKind.SPREAD_ELEMENT for arg in args):
        return False
    if pattern.exact and len(args) > len(pattern.patterns):
        return False
    for index, sub in enumerate(pattern.patterns):
        arg = args[index] if index < len(args) else None
        if not _match(sub, arg, ctx, captures, None):
            return False
    return True
