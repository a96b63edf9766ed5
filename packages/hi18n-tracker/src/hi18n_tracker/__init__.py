from .bindings import BindingEntry, BindingTable, ImportKind
from .captures import CAPTURE_FAILURE, CaptureFailure, CaptureMap, CapturedNode, captured_node, captured_root
from .common_trackers import hi18n_tracker, lingui_tracker
from .errors import Hi18nTrackerError, OverlappingEditsError, PatternError
from .import_edit import (
    ImportEditPlan,
    ImportEditSession,
    InsertedImport,
    ReusedImport,
    TextEdit,
    apply_text_edits,
    plan_import,
)
from .patterns import (
    AllOf,
    Alternation,
    Arguments,
    Capture,
    ImportedBinding,
    JSXAttribute,
    LiteralValue,
    NodeOfType,
    Pattern,
    Text,
    Wildcard,
    match,
    node,
)
from .scope import ScopeResolver
from .tracker import Tracker

__all__ = [
    "AllOf",
    "Alternation",
    "Arguments",
    "BindingEntry",
    "BindingTable",
    "CAPTURE_FAILURE",
    "Capture",
    "CaptureFailure",
    "CaptureMap",
    "CapturedNode",
    "Hi18nTrackerError",
    "ImportEditPlan",
    "ImportEditSession",
    "ImportKind",
    "ImportedBinding",
    "InsertedImport",
    "JSXAttribute",
    "LiteralValue",
    "NodeOfType",
    "OverlappingEditsError",
    "Pattern",
    "PatternError",
    "ReusedImport",
    "ScopeResolver",
    "Text",
    "TextEdit",
    "Tracker",
    "Wildcard",
    "apply_text_edits",
    "captured_node",
    "captured_root",
    "hi18n_tracker",
    "lingui_tracker",
    "match",
    "node",
    "plan_import",
]
