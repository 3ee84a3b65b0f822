from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

from routeaudit.domain.models import Diagnostic, Location, Severity


@dataclass(frozen=True)
class DiagnosticDescriptor:
    rule_id: str
    name: str
    title: str
    message_format: str   # str.format template, positional args
    category: str
    severity: Severity = "warning"
    enabled_by_default: bool = True
    description: str = ""

    def format_message(self, args: Sequence[str]) -> str:
        return self.message_format.format(*args)

    def create(self, location: Location, args: Sequence[str]) -> Diagnostic:
        # args[0] is always the method name
        return Diagnostic(
            rule_id=self.rule_id,
            name=self.name,
            severity=self.severity,
            category=self.category,
            message=self.format_message(args),
            method_name=args[0] if args else "",
            args=tuple(args),
            location=location,
        )


ENDPOINT_UNVERIFIABLE = DiagnosticDescriptor(
    rule_id="RA001",
    name="endpoint-unverifiable",
    title="Endpoint cannot be verified",
    message_format="Method '{0}' does not assign a local `uri` to audit.",
    category="Naming",
    description=(
        "The method declares an endpoint but builds its request path without "
        "binding a formatted string literal to a local named `uri`."
    ),
)

ENDPOINT_MISMATCH = DiagnosticDescriptor(
    rule_id="RA002",
    name="endpoint-mismatch",
    title="Endpoint does not match request path",
    message_format="Method '{0}' declares it consumes '{1}' but actually uses '{2}'",
    category="Naming",
    description=(
        "The declared endpoint template, with its named placeholders made "
        "positional, differs from the literal path the method formats."
    ),
)

REGISTRY: Mapping[str, DiagnosticDescriptor] = MappingProxyType(
    {d.rule_id: d for d in (ENDPOINT_UNVERIFIABLE, ENDPOINT_MISMATCH)}
)


def get_descriptor(rule_id: str) -> DiagnosticDescriptor:
    return REGISTRY[rule_id]
