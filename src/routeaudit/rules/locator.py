from __future__ import annotations

from typing import Optional

from routeaudit.syntax.model import (
    Invocation,
    LocalDeclaration,
    MemberAccess,
    MethodUnit,
    StringLiteral,
)

MARKER_NAME = "endpoint"
SENTINEL_NAME = "uri"


def extract_declared_template(method: MethodUnit) -> Optional[str]:
    """
    Source text of the first positional argument of the first @endpoint
    decorator, quotes included. None when there is no marker, or when the
    first marker's first argument is missing or not a string literal.
    """
    marker = next((a for a in method.annotations if a.name == MARKER_NAME), None)
    if marker is None or not marker.arguments:
        return None

    first = marker.arguments[0]
    if not isinstance(first, StringLiteral):
        return None
    return first.text


def extract_actual_url_literal(method: MethodUnit) -> Optional[str]:
    """
    Find `uri = "<literal>".<fmt>(...)` among the top-level statements and
    return the literal's source text, quotes included.

    Only the first `uri` binding of each declaration is considered. The first
    declaration whose binding has that shape wins; later ones are never read.
    A path passed inline to a call (no `uri` local) is not looked for.
    """
    for stmt in method.body:
        if not isinstance(stmt, LocalDeclaration):
            continue

        binding = next((b for b in stmt.bindings if b.name == SENTINEL_NAME), None)
        if binding is None:
            continue

        literal = _format_receiver(binding.initializer)
        if literal is None:
            continue
        return literal

    return None


def _format_receiver(expr) -> Optional[str]:
    # "<literal>".format(...): an invocation of a member of a string literal
    if not isinstance(expr, Invocation):
        return None
    if not isinstance(expr.target, MemberAccess):
        return None
    receiver = expr.target.receiver
    if not isinstance(receiver, StringLiteral):
        return None
    return receiver.text
