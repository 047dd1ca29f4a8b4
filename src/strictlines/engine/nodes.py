"""
Read-only ESTree-shaped views over a parsed JavaScript source.

Only the node categories the rules dispatch on are modelled as distinct
variants; every other statement or expression is carried as
`OtherStatement` / `OtherExpression` with its ESTree-style type name.

Nodes compare by identity (`eq=False`) so they can be used as keys in the
comment index and compared with `is` when checking positions inside a body.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal as TypingLiteral

FunctionKind = TypingLiteral["FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression"]
CommentKind = TypingLiteral["Line", "Block", "Shebang"]


@dataclass(frozen=True, slots=True)
class Span:
    start_line: int  # 1-based
    start_col: int  # 1-based
    end_line: int  # 1-based
    end_col: int  # 1-based, exclusive
    start_offset: int = 0  # byte offset
    end_offset: int = 0  # byte offset, exclusive


@dataclass(frozen=True, slots=True, eq=False)
class Literal:
    value: object
    raw: str
    span: Span
    type: ClassVar[str] = "Literal"


@dataclass(frozen=True, slots=True, eq=False)
class OtherExpression:
    kind: str
    span: Span

    @property
    def type(self) -> str:
        return self.kind


Expression = Literal | OtherExpression


@dataclass(frozen=True, slots=True, eq=False)
class ExpressionStatement:
    expression: Expression
    span: Span
    type: ClassVar[str] = "ExpressionStatement"


@dataclass(frozen=True, slots=True, eq=False)
class OtherStatement:
    kind: str
    span: Span

    @property
    def type(self) -> str:
        return self.kind


Statement = ExpressionStatement | OtherStatement


@dataclass(frozen=True, slots=True, eq=False)
class BlockStatement:
    body: tuple[Statement, ...]
    span: Span
    type: ClassVar[str] = "BlockStatement"


@dataclass(frozen=True, slots=True, eq=False)
class Program:
    body: tuple[Statement, ...]
    span: Span
    type: ClassVar[str] = "Program"


@dataclass(frozen=True, slots=True, eq=False)
class FunctionLike:
    kind: FunctionKind
    body: BlockStatement | Expression
    span: Span
    name: str | None = None

    @property
    def type(self) -> str:
        return self.kind


Scope = Program | FunctionLike


@dataclass(frozen=True, slots=True, eq=False)
class Comment:
    kind: CommentKind
    value: str
    span: Span


@dataclass(frozen=True, slots=True, eq=False)
class Token:
    type: str
    value: str
    span: Span


def scope_body(scope: Scope) -> tuple[Statement, ...] | None:
    """
    Return the statement list of a scope, or None when the scope has no block.

    Arrow functions with an expression body (`() => "use strict"`) cannot hold
    statements and therefore have no body to inspect.
    """

    if isinstance(scope, Program):
        return scope.body
    if isinstance(scope.body, BlockStatement):
        return scope.body.body
    return None
