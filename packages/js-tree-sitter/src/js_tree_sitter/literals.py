"""Runtime values of literal nodes.

Literal patterns compare on the value a literal evaluates to, not on its
spelling, so ``0x10`` and ``16`` or ``'a'`` and ``"a"`` compare equal.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

from tree_sitter import Node

from .ast_walker import ASTWalker


class _NotLiteral:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "NOT_LITERAL"

    def __bool__(self):
        return False


NOT_LITERAL: Any = _NotLiteral()


@dataclass(frozen=True)
class BigInt:
    """Value of a `16n` literal; never equal to the number 16"""

    value: int

    def __neg__(self):
        return BigInt(-self.value)

    def __pos__(self):
        # Unary plus throws on a BigInt at runtime
        return NOT_LITERAL


_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_BIGINT_DIGITS = re.compile(r"0x[0-9a-f]+|0o[0-7]+|0b[01]+|0|[1-9][0-9]*")

_ESCAPE_RE = re.compile(
    r"\\(?:u\{([0-9a-fA-F]+)\}|u([0-9a-fA-F]{4})|x([0-9a-fA-F]{2})|(\r\n|[\r\n\u2028\u2029])|(.))",
    re.DOTALL,
)


def unescape_js(raw: str) -> str:
    """Cook the escape sequences of a string/template literal body"""

    def replace(m: re.Match) -> str:
        code_point, unit, hex_byte, line_continuation, simple = m.groups()
        if code_point is not None:
            return chr(int(code_point, 16))
        if unit is not None:
            return chr(int(unit, 16))
        if hex_byte is not None:
            return chr(int(hex_byte, 16))
        if line_continuation is not None:
            return ""
        return _SIMPLE_ESCAPES.get(simple, simple)

    cooked = _ESCAPE_RE.sub(replace, raw)
    # Rejoin surrogate pairs produced by consecutive \uXXXX escapes
    return cooked.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def parse_number(text: str) -> Optional[int | float | BigInt]:
    text = text.replace("_", "")
    lowered = text.lower()
    if lowered.endswith("n"):
        digits = lowered[:-1]
        if not _BIGINT_DIGITS.fullmatch(digits):
            return None
        value = parse_number(digits)
        return None if value is None else BigInt(value)
    try:
        if lowered.startswith("0x"):
            return int(lowered[2:], 16)
        if lowered.startswith("0o"):
            return int(lowered[2:], 8)
        if lowered.startswith("0b"):
            return int(lowered[2:], 2)
        if len(lowered) > 1 and lowered[0] == "0" and lowered.isdigit() and not set(lowered) & {"8", "9"}:
            # Legacy octal literal (sloppy mode)
            return int(lowered, 8)
        if lowered.isdigit():
            return int(lowered)
        value = float(lowered)
    except ValueError:
        return None
    if value.is_integer() and abs(value) < 2**53:
        return int(value)
    return value


def string_value(node: Node) -> Optional[str]:
    """Value of a string node, or None when the node is not a string"""
    if node.type != "string":
        return None
    raw = ASTWalker.get_text(node)[1:-1]
    if node.parent is not None and node.parent.type == "jsx_attribute":
        # JSX attribute strings have no escape sequences
        return raw
    return unescape_js(raw)


def literal_value(node: Optional[Node]) -> Any:
    """Runtime value of a literal node, or NOT_LITERAL"""
    node = ASTWalker.unwrap_parentheses(node)
    if node is None:
        return NOT_LITERAL
    kind = node.type
    if kind == "string":
        return string_value(node)
    if kind == "number":
        value = parse_number(ASTWalker.get_text(node))
        return NOT_LITERAL if value is None else value
    if kind == "true":
        return True
    if kind == "false":
        return False
    if kind == "null":
        return None
    if kind == "template_string":
        if any(child.type == "template_substitution" for child in node.named_children):
            return NOT_LITERAL
        return unescape_js(ASTWalker.get_text(node)[1:-1])
    if kind == "unary_expression":
        operator = node.child_by_field_name("operator")
        argument = node.child_by_field_name("argument")
        if operator is None or argument is None or argument.type != "number":
            return NOT_LITERAL
        value = literal_value(argument)
        if value is NOT_LITERAL:
            return NOT_LITERAL
        if operator.type == "-":
            return -value
        if operator.type == "+":
            return value
    return NOT_LITERAL
