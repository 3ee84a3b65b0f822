from __future__ import annotations

import re
import threading
from typing import Protocol, Sequence

from routeaudit.domain.models import Diagnostic, Location
from routeaudit.rules.descriptors import ENDPOINT_MISMATCH, ENDPOINT_UNVERIFIABLE, DiagnosticDescriptor
from routeaudit.rules.outcomes import Mismatch, Outcome, Unverifiable
from routeaudit.syntax.model import MethodUnit

_STRING_PREFIX = re.compile(r"^[rRbBuUfF]{0,2}")


class DiagnosticSink(Protocol):
    def report(self, descriptor: DiagnosticDescriptor, location: Location, args: Sequence[str]) -> None:
        ...


class CollectingSink:
    """Thread-safe sink; many producers may report at once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: list[Diagnostic] = []

    def report(self, descriptor: DiagnosticDescriptor, location: Location, args: Sequence[str]) -> None:
        diagnostic = descriptor.create(location, args)
        with self._lock:
            self._items.append(diagnostic)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        with self._lock:
            return list(self._items)


def strip_quotes(text: str) -> str:
    """'"repos/:owner"' -> 'repos/:owner' (also r'...', '''...''', etc.)."""
    body = _STRING_PREFIX.sub("", text, count=1)
    for quote in ('"""', "'''", '"', "'"):
        if len(body) >= 2 * len(quote) and body.startswith(quote) and body.endswith(quote):
            return body[len(quote): -len(quote)]
    return text


def resolve_location(method: MethodUnit) -> Location:
    """
    Pick the identifier location that lives in the same tree as the body.
    Falls back to the first declared location, then to the bare path.
    """
    for loc in method.locations:
        if loc.path == method.source_path:
            return loc
    if method.locations:
        return method.locations[0]
    return Location(path=method.source_path)


def report_outcome(outcome: Outcome, sink: DiagnosticSink) -> bool:
    """Send a reportable outcome to the sink. Returns True if something was reported."""
    if isinstance(outcome, Unverifiable):
        sink.report(ENDPOINT_UNVERIFIABLE, outcome.location, (outcome.method_name,))
        return True

    if isinstance(outcome, Mismatch):
        sink.report(
            ENDPOINT_MISMATCH,
            outcome.location,
            (
                outcome.method_name,
                strip_quotes(outcome.declared_template),
                strip_quotes(outcome.actual_literal),
            ),
        )
        return True

    return False
