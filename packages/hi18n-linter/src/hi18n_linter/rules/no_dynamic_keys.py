from hi18n_tracker import CAPTURE_FAILURE, CaptureMap, Tracker, captured_node, captured_root, hi18n_tracker
from hi18n_tracker.common_trackers import LINGUI_TRANSLATION_CALL
from js_tree_sitter import literal_value
from tree_sitter import Node

from ..models import Severity
from .base import BaseRule, RuleContext


class NoDynamicKeysRule(BaseRule):
    """Flags translation ids that cannot be read without running the code.

    Catalog extraction only sees ids spelled as string literals, so
    `<Translate id={key} />` or `i18n._(key)` hide the keys in use.
    """

    @property
    def rule_id(self) -> str:
        return "E001"

    @property
    def name(self) -> str:
        return "no-dynamic-keys"

    @property
    def severity(self) -> Severity:
        return Severity.ERROR

    @property
    def description(self) -> str:
        return "Translation ids must be string literals."

    def create(self, context: RuleContext) -> Tracker:
        tracker = hi18n_tracker()
        tracker.watch("translationCall", LINGUI_TRANSLATION_CALL)

        def check_id(node: Node, captured: CaptureMap):
            id_capture = captured["id"]
            if id_capture is CAPTURE_FAILURE:
                report_node = captured_root(captured.get("props", CAPTURE_FAILURE)) or node
                context.report(report_node, "Missing translation id")
                return
            if not isinstance(literal_value(captured_node(id_capture)), str):
                context.report(captured_root(id_capture), "Don't use dynamic translation keys")

        tracker.listen("translateJSX", check_id)
        tracker.listen("translationCall", check_id)
        return tracker
