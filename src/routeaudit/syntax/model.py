from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from routeaudit.domain.models import Location


@dataclass(frozen=True)
class StringLiteral:
    text: str     # exact source text, prefix and quotes included
    value: str


@dataclass(frozen=True)
class MemberAccess:
    receiver: "Expression"
    member: str


@dataclass(frozen=True)
class Invocation:
    target: "Expression"
    arguments: tuple["Expression", ...] = ()


@dataclass(frozen=True)
class OtherExpression:
    kind: str


Expression = Union[StringLiteral, MemberAccess, Invocation, OtherExpression]


@dataclass(frozen=True)
class Binding:
    name: str
    initializer: Optional[Expression] = None


@dataclass(frozen=True)
class LocalDeclaration:
    bindings: tuple[Binding, ...]


@dataclass(frozen=True)
class OtherStatement:
    kind: str


Statement = Union[LocalDeclaration, OtherStatement]


@dataclass(frozen=True)
class Annotation:
    name: str
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class MethodUnit:
    """
    One analyzable method, already lifted out of the host syntax tree.

    `source_path` identifies the tree the body was read from. `locations`
    lists every declared location of the method's identifier; a method split
    across several trees can carry more than one.
    """

    name: str
    annotations: tuple[Annotation, ...] = ()
    body: tuple[Statement, ...] = ()
    locations: tuple[Location, ...] = ()
    source_path: str = ""
