from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Severity = Literal["warning", "error", "info"]


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    line: int = 0     # 1-based, 0 when unknown
    column: int = 0   # 1-based, 0 when unknown


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_id: str
    name: str
    severity: Severity
    category: str
    message: str
    method_name: str
    args: tuple[str, ...] = ()
    location: Location
