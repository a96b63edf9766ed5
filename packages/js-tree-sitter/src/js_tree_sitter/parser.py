import logging
from pathlib import Path

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from .ast_walker import ASTWalker
from .models import ParseResult

logger = logging.getLogger(__name__)

DIALECTS = ("tsx", "typescript")


class JSParser:
    """Parses JavaScript/TypeScript (with JSX) source using tree-sitter.

    The TSX grammar is a superset of what the analysis needs: plain JS,
    JSX and TypeScript all parse with it.
    """

    def __init__(self, dialect: str = "tsx"):
        if dialect not in DIALECTS:
            raise ValueError(f"Unknown dialect '{dialect}', expected one of {DIALECTS}")
        self.dialect = dialect
        if dialect == "tsx":
            self.language = Language(tsts.language_tsx())
        else:
            self.language = Language(tsts.language_typescript())
        self.parser = Parser(self.language)

    def parse_string(self, source: str) -> ParseResult:
        source_bytes = source.encode("utf-8")
        tree = self.parser.parse(source_bytes)
        errors = self._collect_errors(tree.root_node)
        if errors:
            logger.debug("Parsed with %d syntax error(s)", len(errors))
        return ParseResult(tree=tree, source=source, source_bytes=source_bytes, errors=errors)

    def parse_file(self, file_path: Path) -> ParseResult:
        return self.parse_string(Path(file_path).read_text(encoding="utf-8"))

    @staticmethod
    def _collect_errors(root: Node) -> list[str]:
        if not root.has_error:
            return []
        errors = []
        for node in ASTWalker.iter_preorder(root):
            if node.type == "ERROR" or node.is_missing:
                row, column = node.start_point
                kind = f"missing '{node.type}'" if node.is_missing else "syntax error"
                errors.append(f"{row + 1}:{column + 1}: {kind}")
        return errors
