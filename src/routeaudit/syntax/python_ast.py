from __future__ import annotations

import ast
import io
import logging
import re
import tokenize
from pathlib import Path
from typing import Iterable, Optional

from routeaudit.domain.models import Location
from routeaudit.syntax.model import (
    Annotation,
    Binding,
    Expression,
    Invocation,
    LocalDeclaration,
    MemberAccess,
    MethodUnit,
    OtherExpression,
    OtherStatement,
    Statement,
    StringLiteral,
)

log = logging.getLogger(__name__)


class _SourceText:
    """
    Source split the way the tokenizer counts lines (only \\n, \\r\\n, \\r),
    for exact segments and column lookups. ast column offsets are UTF-8 byte
    offsets, so slicing happens on encoded lines.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.lines = source.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    def _line_bytes(self, line_no: int) -> Optional[bytes]:
        if 0 < line_no <= len(self.lines):
            return self.lines[line_no - 1].encode("utf-8")
        return None

    def segment(self, node: ast.AST) -> Optional[str]:
        start, end = getattr(node, "lineno", None), getattr(node, "end_lineno", None)
        col, end_col = getattr(node, "col_offset", None), getattr(node, "end_col_offset", None)
        if start is None or end is None or col is None or end_col is None:
            return None

        first, last = self._line_bytes(start), self._line_bytes(end)
        if first is None or last is None:
            return None
        if start == end:
            return first[col:end_col].decode("utf-8")

        middle = [self._line_bytes(n) for n in range(start + 1, end)]
        return b"\n".join([first[col:], *middle, last[:end_col]]).decode("utf-8")

    def identifier_column(self, node: ast.AST, name: str) -> int:
        # lineno/col_offset point at `def` / `async def`, not at the name
        line_no = getattr(node, "lineno", 1) or 1
        col_bytes = getattr(node, "col_offset", 0) or 0
        raw = self._line_bytes(line_no)
        if raw is None:
            return col_bytes + 1

        line = raw.decode("utf-8")
        col = len(raw[:col_bytes].decode("utf-8", errors="ignore"))
        m = re.compile(r"def\s+" + re.escape(name) + r"\b").search(line, col)
        if m:
            return m.end() - len(name) + 1
        return col + 1


def extract_methods_from_source(source: str, path: str = "<string>") -> list[MethodUnit]:
    """
    Parse Python source and lift every function definition (module level,
    class level or nested) into a MethodUnit.
    Uses ast only; does not import/execute code.
    """
    tree = _parse(source, path)
    if tree is None:
        return []
    return _methods_from_tree(tree, source, path)


def extract_methods_from_file(
    path: Path,
    display_path: Optional[str] = None,
    max_bytes: int = 2_000_000,
) -> Optional[list[MethodUnit]]:
    """
    Returns None when the file can't be read or parsed, or is larger than
    max_bytes, so callers can count it as skipped. An empty list means
    "parsed, no functions".
    `display_path` is what ends up in diagnostic locations (default: path).
    """
    shown = display_path or str(path)
    try:
        size = path.stat().st_size
        if size > max_bytes:
            log.warning("skipping %s: too large (%d bytes > %d)", shown, size, max_bytes)
            return None
        # honours a BOM and PEP 263 coding cookies
        with tokenize.open(path) as f:
            source = f.read()
    except (OSError, SyntaxError, UnicodeDecodeError) as exc:
        log.warning("cannot read %s: %s", shown, exc)
        return None

    tree = _parse(source, shown)
    if tree is None:
        return None
    return _methods_from_tree(tree, source, shown)


def _parse(source: str, path: str) -> Optional[ast.AST]:
    try:
        return ast.parse(source, filename=path)
    except (SyntaxError, ValueError) as exc:
        log.warning("skipping %s: %s", path, exc)
        return None


def _methods_from_tree(tree: ast.AST, source: str, path: str) -> list[MethodUnit]:
    text = _SourceText(source)
    methods = [_method_unit(node, text, path) for node in _iter_function_defs(tree)]

    # stable ordering: by identifier position
    methods.sort(key=lambda m: (m.locations[0].line, m.locations[0].column))
    return methods


def _iter_function_defs(tree: ast.AST) -> Iterable[ast.AST]:
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            yield node


def _method_unit(node: ast.AST, text: _SourceText, path: str) -> MethodUnit:
    name = node.name
    location = Location(
        path=path,
        line=getattr(node, "lineno", 1) or 1,
        column=text.identifier_column(node, name),
    )
    return MethodUnit(
        name=name,
        annotations=tuple(_annotation(dec, text) for dec in node.decorator_list),
        body=tuple(_statement(stmt, text) for stmt in node.body),
        locations=(location,),
        source_path=path,
    )


def _annotation(dec: ast.AST, text: _SourceText) -> Annotation:
    # @endpoint("x") carries arguments; a bare @endpoint does not
    if isinstance(dec, ast.Call):
        return Annotation(
            name=_dotted_name(dec.func),
            arguments=tuple(_expression(arg, text) for arg in dec.args),
        )
    return Annotation(name=_dotted_name(dec))


def _dotted_name(node: ast.AST) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return f"{_dotted_name(node.value)}.{node.attr}"
    return ast.unparse(node)


def _statement(stmt: ast.AST, text: _SourceText) -> Statement:
    if isinstance(stmt, ast.Assign):
        initializer = _expression(stmt.value, text)
        bindings = tuple(
            Binding(name=target.id, initializer=initializer)
            for target in stmt.targets
            if isinstance(target, ast.Name)
        )
        if bindings:
            return LocalDeclaration(bindings=bindings)

    if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
        initializer = _expression(stmt.value, text) if stmt.value is not None else None
        return LocalDeclaration(bindings=(Binding(name=stmt.target.id, initializer=initializer),))

    return OtherStatement(kind=stmt.__class__.__name__)


def _expression(node: ast.AST, text: _SourceText) -> Expression:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        segment = text.segment(node)
        if segment is None:
            # node without position info
            return OtherExpression(kind="Constant")
        if not _is_single_string_token(segment):
            # "repos/" "{0}" is one Constant but not one literal
            return OtherExpression(kind="ImplicitConcat")
        return StringLiteral(text=segment, value=node.value)

    if isinstance(node, ast.Call):
        return Invocation(
            target=_expression(node.func, text),
            arguments=tuple(_expression(arg, text) for arg in node.args),
        )

    if isinstance(node, ast.Attribute):
        return MemberAccess(receiver=_expression(node.value, text), member=node.attr)

    return OtherExpression(kind=node.__class__.__name__)


def _is_single_string_token(segment: str) -> bool:
    try:
        tokens = list(tokenize.generate_tokens(io.StringIO(segment).readline))
    except (tokenize.TokenError, SyntaxError):
        return False
    return sum(1 for tok in tokens if tok.type == tokenize.STRING) == 1
