"""Closed set of tree-sitter node kinds understood by the analysis layers."""

from enum import Enum
from typing import Optional

from tree_sitter import Node


class NodeKind(str, Enum):
    PROGRAM = "program"
    HASH_BANG_LINE = "hash_bang_line"
    COMMENT = "comment"

    # Imports
    IMPORT_STATEMENT = "import_statement"
    IMPORT_CLAUSE = "import_clause"
    NAMED_IMPORTS = "named_imports"
    IMPORT_SPECIFIER = "import_specifier"
    NAMESPACE_IMPORT = "namespace_import"
    IMPORT = "import"

    # Names
    IDENTIFIER = "identifier"
    TYPE_IDENTIFIER = "type_identifier"
    NESTED_TYPE_IDENTIFIER = "nested_type_identifier"
    NESTED_IDENTIFIER = "nested_identifier"
    PROPERTY_IDENTIFIER = "property_identifier"
    SHORTHAND_PROPERTY_IDENTIFIER = "shorthand_property_identifier"
    SHORTHAND_PROPERTY_IDENTIFIER_PATTERN = "shorthand_property_identifier_pattern"
    PRIVATE_PROPERTY_IDENTIFIER = "private_property_identifier"

    # Expressions
    MEMBER_EXPRESSION = "member_expression"
    SUBSCRIPT_EXPRESSION = "subscript_expression"
    CALL_EXPRESSION = "call_expression"
    NEW_EXPRESSION = "new_expression"
    ARGUMENTS = "arguments"
    PARENTHESIZED_EXPRESSION = "parenthesized_expression"
    UNARY_EXPRESSION = "unary_expression"
    SPREAD_ELEMENT = "spread_element"
    OBJECT = "object"
    PAIR = "pair"
    COMPUTED_PROPERTY_NAME = "computed_property_name"
    METHOD_DEFINITION = "method_definition"
    ARRAY = "array"

    # Literals
    STRING = "string"
    STRING_FRAGMENT = "string_fragment"
    ESCAPE_SEQUENCE = "escape_sequence"
    TEMPLATE_STRING = "template_string"
    TEMPLATE_SUBSTITUTION = "template_substitution"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    UNDEFINED = "undefined"

    # JSX
    JSX_ELEMENT = "jsx_element"
    JSX_SELF_CLOSING_ELEMENT = "jsx_self_closing_element"
    JSX_OPENING_ELEMENT = "jsx_opening_element"
    JSX_CLOSING_ELEMENT = "jsx_closing_element"
    JSX_ATTRIBUTE = "jsx_attribute"
    JSX_EXPRESSION = "jsx_expression"
    JSX_NAMESPACE_NAME = "jsx_namespace_name"
    JSX_FRAGMENT = "jsx_fragment"

    # Declarations
    VARIABLE_DECLARATION = "variable_declaration"
    LEXICAL_DECLARATION = "lexical_declaration"
    VARIABLE_DECLARATOR = "variable_declarator"
    FUNCTION_DECLARATION = "function_declaration"
    GENERATOR_FUNCTION_DECLARATION = "generator_function_declaration"
    FUNCTION_EXPRESSION = "function_expression"
    FUNCTION = "function"
    GENERATOR_FUNCTION = "generator_function"
    ARROW_FUNCTION = "arrow_function"
    CLASS_DECLARATION = "class_declaration"
    ABSTRACT_CLASS_DECLARATION = "abstract_class_declaration"
    CLASS = "class"
    FORMAL_PARAMETERS = "formal_parameters"
    REQUIRED_PARAMETER = "required_parameter"
    OPTIONAL_PARAMETER = "optional_parameter"
    TYPE_ALIAS_DECLARATION = "type_alias_declaration"
    INTERFACE_DECLARATION = "interface_declaration"
    ENUM_DECLARATION = "enum_declaration"
    TYPE_PARAMETER = "type_parameter"

    # Destructuring
    OBJECT_PATTERN = "object_pattern"
    ARRAY_PATTERN = "array_pattern"
    PAIR_PATTERN = "pair_pattern"
    ASSIGNMENT_PATTERN = "assignment_pattern"
    OBJECT_ASSIGNMENT_PATTERN = "object_assignment_pattern"
    REST_PATTERN = "rest_pattern"

    # Blocks
    STATEMENT_BLOCK = "statement_block"
    FOR_STATEMENT = "for_statement"
    FOR_IN_STATEMENT = "for_in_statement"
    CATCH_CLAUSE = "catch_clause"
    SWITCH_BODY = "switch_body"

    ERROR = "ERROR"

    @classmethod
    def of(cls, node: Optional[Node]) -> Optional["NodeKind"]:
        """Map a named node to its kind; anonymous tokens and unknown tags map to None."""
        if node is None or not node.is_named:
            return None
        return _BY_TAG.get(node.type)


_BY_TAG = {kind.value: kind for kind in NodeKind}


FUNCTION_KINDS = frozenset(
    {
        NodeKind.FUNCTION_DECLARATION,
        NodeKind.GENERATOR_FUNCTION_DECLARATION,
        NodeKind.FUNCTION_EXPRESSION,
        NodeKind.FUNCTION,
        NodeKind.GENERATOR_FUNCTION,
        NodeKind.ARROW_FUNCTION,
        NodeKind.METHOD_DEFINITION,
    }
)

CLASS_KINDS = frozenset({NodeKind.CLASS_DECLARATION, NodeKind.ABSTRACT_CLASS_DECLARATION, NodeKind.CLASS})

BLOCK_KINDS = frozenset(
    {
        NodeKind.STATEMENT_BLOCK,
        NodeKind.FOR_STATEMENT,
        NodeKind.FOR_IN_STATEMENT,
        NodeKind.CATCH_CLAUSE,
        NodeKind.SWITCH_BODY,
    }
)

JSX_ELEMENT_KINDS = frozenset({NodeKind.JSX_ELEMENT, NodeKind.JSX_SELF_CLOSING_ELEMENT})
