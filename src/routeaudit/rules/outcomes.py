from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from routeaudit.domain.models import Location


@dataclass(frozen=True)
class NotApplicable:
    """No @endpoint declaration; the method is not checked."""


@dataclass(frozen=True)
class Verified:
    """Declared template and request path agree."""


@dataclass(frozen=True)
class Unverifiable:
    method_name: str
    location: Location


@dataclass(frozen=True)
class Mismatch:
    method_name: str
    declared_template: str   # raw source text, quotes included
    actual_literal: str      # raw source text, quotes included
    location: Location


Outcome = Union[NotApplicable, Verified, Unverifiable, Mismatch]
