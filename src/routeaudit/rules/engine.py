from __future__ import annotations

from typing import Optional

from routeaudit.domain.models import Diagnostic
from routeaudit.rules.locator import extract_actual_url_literal, extract_declared_template
from routeaudit.rules.outcomes import Mismatch, NotApplicable, Outcome, Unverifiable, Verified
from routeaudit.rules.reporter import CollectingSink, report_outcome, resolve_location
from routeaudit.rules.template import normalize_template
from routeaudit.syntax.model import MethodUnit


def evaluate(method: MethodUnit) -> Outcome:
    """
    Check one method:

      no @endpoint template     -> NotApplicable
      no `uri` literal          -> Unverifiable
      normalized != literal     -> Mismatch
      otherwise                 -> Verified

    Pure and stateless; safe to call from several threads at once.
    """
    declared = extract_declared_template(method)
    if declared is None:
        return NotApplicable()

    actual = extract_actual_url_literal(method)
    if actual is None:
        return Unverifiable(method_name=method.name, location=resolve_location(method))

    # exact text comparison, quotes included
    if normalize_template(declared) == actual:
        return Verified()

    return Mismatch(
        method_name=method.name,
        declared_template=declared,
        actual_literal=actual,
        location=resolve_location(method),
    )


def analyze(method: MethodUnit) -> Optional[Diagnostic]:
    """Zero or one diagnostic for a method."""
    sink = CollectingSink()
    report_outcome(evaluate(method), sink)
    found = sink.diagnostics
    return found[0] if found else None
