import logging
from typing import List

from hi18n_tracker import TextEdit, apply_text_edits

from .models import InternalIssue

logger = logging.getLogger(__name__)


class AutoFixEngine:
    """Applies the edits attached to issues.

    Fixes are taken in source order. A fix whose span touches or overlaps
    the span of one already taken waits for the next pass, where the rules
    re-run against the updated text.
    """

    def select_fixes(self, issues: List[InternalIssue]) -> List[InternalIssue]:
        fixable = [i for i in issues if i.fix is not None]
        selected = []
        last_end = -1
        for issue in sorted(fixable, key=lambda i: (i.fix.start_byte, i.fix.end_byte)):
            if issue.fix.start_byte <= last_end:
                logger.debug("Deferring overlapping fix for %s at line %d", issue.rule_id, issue.line)
                continue
            selected.append(issue)
            last_end = issue.fix.end_byte
        return selected

    def apply_fixes(self, content: str, issues: List[InternalIssue]) -> str:
        selected = self.select_fixes(issues)
        if not selected:
            return content
        edits: list[TextEdit] = []
        for issue in selected:
            edits.extend(issue.fix.edits)
        return apply_text_edits(content, edits)
