"""Synthesis of import edits.

`plan_import` decides, for one desired binding, whether an existing import
already provides it or which minimal text edit introduces it. Existing
statements are extended in place where the syntax allows; otherwise a new
statement is inserted with the indentation of its neighbour.
"""

import json
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from js_tree_sitter import ASTWalker, NodeKind, string_value
from js_tree_sitter.scope import has_type_keyword
from tree_sitter import Node

from .bindings import DEFAULT_EXPORT, specifier_imported_name, specifier_local_name
from .errors import OverlappingEditsError
from .scope import ScopeResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextEdit:
    """Replace bytes [start_byte, end_byte) of the source with `text`; an insertion when the span is empty"""

    start_byte: int
    end_byte: int
    text: str

    def __post_init__(self):
        if self.start_byte < 0 or self.end_byte < self.start_byte:
            raise ValueError(f"Invalid edit span [{self.start_byte}, {self.end_byte})")

    @classmethod
    def insert(cls, offset: int, text: str) -> "TextEdit":
        return cls(offset, offset, text)

    @classmethod
    def replace(cls, start: int, end: int, text: str) -> "TextEdit":
        return cls(start, end, text)

    @property
    def is_insertion(self) -> bool:
        return self.start_byte == self.end_byte


@dataclass(frozen=True)
class ReusedImport:
    """An existing import already binds the export: use `reused_name`, no edits"""

    reused_name: str

    @property
    def name(self) -> str:
        return self.reused_name

    @property
    def edits(self) -> tuple[TextEdit, ...]:
        return ()


@dataclass(frozen=True)
class InsertedImport:
    """Applying `edits` binds the export to `bound_name`"""

    edits: tuple[TextEdit, ...]
    bound_name: str

    @property
    def name(self) -> str:
        return self.bound_name


ImportEditPlan = Union[ReusedImport, InsertedImport]


@dataclass(frozen=True)
class _Extension:
    """Which statement a plan extended and whether a further specifier can follow at the same point"""

    statement_id: int
    appendable: bool


def plan_import(
    program: Node,
    scope: ScopeResolver,
    target_module: str,
    export_name: str,
    position_hint_modules: Sequence[str] = (),
    insert_after_last: bool = False,
    declared_names: Iterable[str] = (),
    local_name: Optional[str] = None,
) -> ImportEditPlan:
    """Reuse or introduce a binding of `export_name` from `target_module`.

    `declared_names` are names to treat as taken on top of the module
    scope's own declarations; pass the names earlier calls synthesized for
    the same fix. `local_name` is the preferred local name when it differs
    from the export name (required for a default export).
    """
    plan, _ = _plan(
        program,
        scope,
        target_module,
        export_name,
        position_hint_modules,
        insert_after_last,
        frozenset(declared_names),
        local_name,
        frozenset(),
    )
    return plan


def _plan(
    program: Node,
    scope: ScopeResolver,
    target_module: str,
    export_name: str,
    position_hint_modules: Sequence[str],
    insert_after_last: bool,
    declared_names: frozenset[str],
    local_name: Optional[str],
    sealed: frozenset[int],
) -> tuple[ImportEditPlan, Optional[_Extension]]:
    base_name = local_name or export_name
    if not base_name.isidentifier() or base_name == DEFAULT_EXPORT:
        raise ValueError(f"'{export_name}' needs a valid local name to be imported")

    position_hint: Optional[Node] = None
    import_node: Optional[Node] = None
    last_import: Optional[Node] = None
    for statement in program.children:
        if statement.type != NodeKind.IMPORT_STATEMENT:
            continue
        last_import = statement
        module = _module_of(statement)
        if module == target_module:
            if has_type_keyword(statement):
                continue
            eligible = True
            for kind, specifier in _specifiers(statement):
                if kind == NodeKind.IMPORT_SPECIFIER:
                    if has_type_keyword(specifier):
                        continue
                    if specifier_imported_name(specifier) == export_name:
                        local = specifier_local_name(specifier)
                        if local is not None:
                            return ReusedImport(local), None
                elif kind == NodeKind.IDENTIFIER:
                    if export_name == DEFAULT_EXPORT:
                        return ReusedImport(ASTWalker.get_text(specifier)), None
                elif kind == NodeKind.NAMESPACE_IMPORT:
                    eligible = False
            if import_node is None and eligible and statement.id not in sealed:
                import_node = statement
        elif position_hint is None and module in position_hint_modules:
            position_hint = statement

    taken = scope.declared_names(scope.module_scope) | declared_names
    new_name = base_name
    if new_name in taken:
        suffix = 0
        while f"{base_name}{suffix}" in taken:
            suffix += 1
        new_name = f"{base_name}{suffix}"
    spec_text = new_name if new_name == export_name else f"{export_name} as {new_name}"

    if import_node is not None:
        extended = _extend_statement(import_node, spec_text)
        if extended is not None:
            edit, appendable = extended
            logger.debug("Extending import of %r with %s", target_module, spec_text)
            return InsertedImport((edit,), new_name), _Extension(import_node.id, appendable)

    statement_text = f"import {{ {spec_text} }} from {json.dumps(target_module, ensure_ascii=False)};"
    if insert_after_last and last_import is not None:
        indent = " " * last_import.start_point[1]
        edit = TextEdit.insert(last_import.end_byte, f"\n{indent}{statement_text}")
        return InsertedImport((edit,), new_name), None

    anchor = position_hint if position_hint is not None else _first_statement(program)
    if anchor is None:
        if program.end_byte > program.start_byte:
            # Nothing but comments: append after them
            return InsertedImport((TextEdit.insert(program.end_byte, f"\n{statement_text}"),), new_name), None
        return InsertedImport((TextEdit.insert(program.start_byte, f"{statement_text}\n"),), new_name), None
    indent = " " * anchor.start_point[1]
    edit = TextEdit.insert(anchor.start_byte, f"{statement_text}\n{indent}")
    return InsertedImport((edit,), new_name), None


def _module_of(statement: Node) -> Optional[str]:
    source = statement.child_by_field_name("source")
    if source is None:
        return None
    return string_value(source)


def _specifiers(statement: Node) -> list[tuple[str, Node]]:
    clause = ASTWalker.get_child_of_type(statement, NodeKind.IMPORT_CLAUSE)
    if clause is None:
        return []
    found: list[tuple[str, Node]] = []
    for part in clause.named_children:
        if part.type == NodeKind.NAMED_IMPORTS:
            for specifier in part.named_children:
                if specifier.type == NodeKind.IMPORT_SPECIFIER:
                    found.append((NodeKind.IMPORT_SPECIFIER, specifier))
        elif part.type in (NodeKind.IDENTIFIER, NodeKind.NAMESPACE_IMPORT):
            found.append((part.type, part))
    return found


def _extend_statement(statement: Node, spec_text: str) -> Optional[tuple[TextEdit, bool]]:
    clause = ASTWalker.get_child_of_type(statement, NodeKind.IMPORT_CLAUSE)
    if clause is None:
        # import "m";  =>  import { NEW } from "m";
        keyword = statement.children[0] if statement.children else None
        if keyword is None or keyword.type != "import":
            return None
        return TextEdit.insert(keyword.end_byte, f" {{ {spec_text} }} from"), False

    named = ASTWalker.get_child_of_type(clause, NodeKind.NAMED_IMPORTS)
    default = ASTWalker.get_child_of_type(clause, NodeKind.IDENTIFIER)
    specs = [] if named is None else [c for c in named.named_children if c.type == NodeKind.IMPORT_SPECIFIER]
    if specs:
        # import { a, b } from "m";  =>  import { a, b, NEW } from "m";
        return TextEdit.insert(specs[-1].end_byte, f", {spec_text}"), True
    if named is not None:
        # import {} from "m";  /  import foo, {} from "m";  =>  { NEW }
        open_brace = ASTWalker.get_child_of_type(named, "{")
        if open_brace is None:
            return None
        return TextEdit.insert(open_brace.end_byte, f" {spec_text} "), False
    if default is not None:
        # import foo from "m";  =>  import foo, { NEW } from "m";
        return TextEdit.insert(default.end_byte, f", {{ {spec_text} }}"), False
    return None


def _first_statement(program: Node) -> Optional[Node]:
    for child in program.children:
        if child.type not in (NodeKind.COMMENT, NodeKind.HASH_BANG_LINE):
            return child
    return None


class ImportEditSession:
    """Composes several import plans for a single fix.

    Names synthesized by earlier plans count as declared for later ones,
    and asking twice for the same export returns the first answer as a
    reuse with no edits.
    """

    def __init__(self, program: Node, scope: ScopeResolver):
        self.program = program
        self.scope = scope
        self._planned: dict[tuple[str, str], str] = {}
        self._synthesized: set[str] = set()
        self._sealed: set[int] = set()
        self._edits: list[TextEdit] = []

    @property
    def edits(self) -> list[TextEdit]:
        return list(self._edits)

    @property
    def synthesized_names(self) -> frozenset[str]:
        return frozenset(self._synthesized)

    def plan_import(
        self,
        target_module: str,
        export_name: str,
        position_hint_modules: Sequence[str] = (),
        insert_after_last: bool = False,
        local_name: Optional[str] = None,
    ) -> ImportEditPlan:
        key = (target_module, export_name)
        if key in self._planned:
            return ReusedImport(self._planned[key])
        plan, extension = _plan(
            self.program,
            self.scope,
            target_module,
            export_name,
            position_hint_modules,
            insert_after_last,
            frozenset(self._synthesized),
            local_name,
            frozenset(self._sealed),
        )
        if extension is not None and not extension.appendable:
            # A second specifier cannot share this join point
            self._sealed.add(extension.statement_id)
        self._planned[key] = plan.name
        if isinstance(plan, InsertedImport):
            self._synthesized.add(plan.bound_name)
            self._edits.extend(plan.edits)
        return plan


def apply_text_edits(source: bytes | str, edits: Iterable[TextEdit]) -> bytes | str:
    """Apply non-overlapping edits; edits at the same offset keep their given order"""
    as_text = isinstance(source, str)
    data = source.encode("utf-8") if as_text else source
    ordered = sorted(edits, key=lambda e: (e.start_byte, e.end_byte > e.start_byte))
    out = []
    last_offset = 0
    for edit in ordered:
        if edit.end_byte > len(data):
            raise ValueError(f"Edit [{edit.start_byte}, {edit.end_byte}) is out of range")
        if edit.start_byte < last_offset:
            raise OverlappingEditsError(f"Edit [{edit.start_byte}, {edit.end_byte}) overlaps a previous edit")
        out.append(data[last_offset : edit.start_byte])
        out.append(edit.text.encode("utf-8"))
        last_offset = edit.end_byte
    out.append(data[last_offset:])
    result = b"".join(out)
    return result.decode("utf-8") if as_text else result
