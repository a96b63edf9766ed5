from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Literal, Optional

from hi18n_tracker import TextEdit
from pydantic import BaseModel


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    STYLE = "style"
    INFO = "info"


@dataclass(frozen=True)
class Fix:
    """Text edits that together resolve one issue"""

    edits: tuple[TextEdit, ...]

    @property
    def start_byte(self) -> int:
        return min(e.start_byte for e in self.edits)

    @property
    def end_byte(self) -> int:
        return max(e.end_byte for e in self.edits)


@dataclass
class InternalIssue:
    """Internal representation of a linting issue"""

    file_path: Path
    line: int
    rule_id: str
    message: str
    severity: Severity
    auto_fixable: bool
    context: str | None = None
    column: int = 0
    fix: Optional[Fix] = None


@dataclass
class FixResult:
    source: str
    modified: bool
    passes: int
    issues: List[InternalIssue] = field(default_factory=list)


class LintIssue(BaseModel):
    """Issue as reported to callers outside the engine"""

    severity: Literal["ERROR", "WARNING", "STYLE", "INFO"]
    file_path: str
    line_number: int
    column: int = 0
    rule_id: str
    message: str
    suggestion: Optional[str] = None
    auto_fixable: bool = False
