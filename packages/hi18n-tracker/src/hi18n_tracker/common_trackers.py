"""Prebuilt trackers for the translation idioms of lingui and hi18n.

The patterns are module-level constants shared by every file visit; each
factory call returns a fresh tracker with its own binding table.
"""

from js_tree_sitter import NodeKind

from .patterns import (
    AllOf,
    Alternation,
    Arguments,
    Capture,
    ImportedBinding,
    JSXAttribute,
    Pattern,
    Text,
    node,
)
from .tracker import Tracker

LINGUI_TRANS_MODULES = ("@lingui/react", "@lingui/macro")
LINGUI_CORE = "@lingui/core"
HI18N_CORE = "@hi18n/core"
HI18N_REACT = "@hi18n/react"

LINGUI_PROP_NAMES = ("id", "values", "render", "component", "components")


def jsx_element_named(tag: Pattern) -> Pattern:
    """A JSX element, with or without children, whose tag matches `tag`"""
    return Alternation(
        node(NodeKind.JSX_ELEMENT, open_tag=node(NodeKind.JSX_OPENING_ELEMENT, name=tag)),
        node(NodeKind.JSX_SELF_CLOSING_ELEMENT, name=tag),
    )


def optional_prop(name: str) -> Pattern:
    return JSXAttribute(name, Capture(name, optional=True))


LINGUI_TRANSLATION_JSX = Capture(
    "props",
    AllOf(
        jsx_element_named(ImportedBinding(LINGUI_TRANS_MODULES, "Trans")),
        *(optional_prop(name) for name in LINGUI_PROP_NAMES),
    ),
)

LINGUI_TRANSLATION_CALL = node(
    NodeKind.CALL_EXPRESSION,
    function=node(
        NodeKind.MEMBER_EXPRESSION,
        object=ImportedBinding(LINGUI_CORE, "i18n"),
        property=Alternation(Text("_"), Text("t")),
    ),
    arguments=Arguments(Capture("id", optional=True)),
)

HI18N_CATALOG_DEFINITION = node(
    NodeKind.NEW_EXPRESSION,
    constructor=ImportedBinding(HI18N_CORE, "Catalog"),
    arguments=Alternation(
        Arguments(Capture("locale", node(NodeKind.STRING)), Capture("catalogData", node(NodeKind.OBJECT))),
        Arguments(Capture("catalogData", node(NodeKind.OBJECT))),
    ),
)

HI18N_MESSAGE_DEFINITION = node(
    NodeKind.CALL_EXPRESSION,
    function=ImportedBinding(HI18N_CORE, "msg"),
    arguments=Arguments(Capture("message", optional=True)),
)

HI18N_BOOK_DEFINITION = node(
    NodeKind.NEW_EXPRESSION,
    constructor=ImportedBinding(HI18N_CORE, "Book"),
    arguments=Arguments(Capture("catalogs", node(NodeKind.OBJECT), optional=True)),
)

HI18N_TRANSLATE_JSX = Capture(
    "props",
    AllOf(
        jsx_element_named(ImportedBinding(HI18N_REACT, "Translate")),
        optional_prop("book"),
        optional_prop("id"),
    ),
)


def lingui_tracker() -> Tracker:
    tracker = Tracker()
    tracker.watch("translationJSX", LINGUI_TRANSLATION_JSX)
    tracker.watch("translationCall", LINGUI_TRANSLATION_CALL)
    return tracker


def hi18n_tracker() -> Tracker:
    tracker = Tracker()
    tracker.watch("catalogDefinition", HI18N_CATALOG_DEFINITION)
    tracker.watch("messageDefinition", HI18N_MESSAGE_DEFINITION)
    tracker.watch("bookDefinition", HI18N_BOOK_DEFINITION)
    tracker.watch("translateJSX", HI18N_TRANSLATE_JSX)
    return tracker
