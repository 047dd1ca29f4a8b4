"""
Blank-line policy around a leading `"use strict"` directive.

For every program and function body whose first statement is the directive:

- "before" is measured against the nearest leading comment and only when the
  directive has leading comments (otherwise it sits at the top of its body and
  there is nothing to space against);
- "after" is measured against the nearest trailing comment, or the next token
  when there is none, and only when the directive is not the last statement.

A blank line exists when the line distance is two or more.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Literal as TypingLiteral

from strictlines.engine.nodes import Comment, ExpressionStatement, Literal, Scope, Statement, scope_body
from strictlines.engine.source import SourceCode
from strictlines.engine.types import Violation
from strictlines.policy import ResolvedPolicy, RuleOption, parse_option, resolve_policy
from strictlines.rules.base import BaseRule, RuleMeta

USE_STRICT = "use strict"
MESSAGE_TEMPLATE = "{expected} newline {side} 'use strict' directive."

Side = TypingLiteral["before", "after"]


@dataclass(frozen=True, slots=True)
class SpacingProblem:
    directive: ExpressionStatement
    side: Side
    expected: bool

    @property
    def message(self) -> str:
        return MESSAGE_TEMPLATE.format(expected="Expected" if self.expected else "Unexpected", side=self.side)


def is_use_strict_directive(node: Statement) -> bool:
    return (
        isinstance(node, ExpressionStatement)
        and isinstance(node.expression, Literal)
        and node.expression.value == USE_STRICT
    )


def get_use_strict_directive(body: Sequence[Statement]) -> ExpressionStatement | None:
    if not body:
        return None
    first = body[0]
    if is_use_strict_directive(first):
        assert isinstance(first, ExpressionStatement)
        return first
    return None


def has_newline_before(directive: Statement, leading_comments: Sequence[Comment]) -> bool:
    comment = leading_comments[-1]
    return directive.span.start_line - comment.span.end_line >= 2


def has_newline_after(directive: Statement, source_code: SourceCode) -> bool | None:
    """
    Return whether a blank line follows `directive`, or None if nothing follows it.
    """

    trailing = source_code.trailing_comments(directive)
    following = trailing[0] if trailing else source_code.token_after(directive)
    if following is None:
        return None
    return following.span.start_line - directive.span.end_line >= 2


def check_directive_spacing(scope: Scope, source_code: SourceCode, policy: ResolvedPolicy) -> list[SpacingProblem]:
    body = scope_body(scope)
    if body is None:
        # `() => "use strict"` returns the string; it is not a directive.
        return []

    directive = get_use_strict_directive(body)
    if directive is None:
        return []

    problems: list[SpacingProblem] = []

    leading = source_code.leading_comments(directive)
    if leading:
        problems.extend(_compare(directive, "before", policy.before, has_newline_before(directive, leading)))

    if directive is body[-1]:
        return problems

    newline_after = has_newline_after(directive, source_code)
    if newline_after is not None:
        problems.extend(_compare(directive, "after", policy.after, newline_after))
    return problems


def _compare(directive: ExpressionStatement, side: Side, mode: str, has_newline: bool) -> list[SpacingProblem]:
    if mode == "always" and not has_newline:
        return [SpacingProblem(directive=directive, side=side, expected=True)]
    if mode == "never" and has_newline:
        return [SpacingProblem(directive=directive, side=side, expected=False)]
    return []


@dataclass(frozen=True, slots=True)
class LinesAroundDirective(BaseRule):
    meta = RuleMeta(
        rule_id="lines-around-directive",
        title="Lines around directive",
        description="Enforce or disallow blank lines around a leading 'use strict' directive.",
        default_severity="error",
    )
    scope_types: ClassVar[tuple[str, ...]] = (
        "Program",
        "FunctionDeclaration",
        "FunctionExpression",
        "ArrowFunctionExpression",
    )

    policy: ResolvedPolicy = ResolvedPolicy()

    def configure(self, option: object | None) -> LinesAroundDirective:
        if option is not None and not isinstance(option, RuleOption):
            option = parse_option(option)
        return LinesAroundDirective(policy=resolve_policy(option))

    def check_scope(self, scope: Scope, source_code: SourceCode) -> list[Violation]:
        return [
            self._violation(message=problem.message, span=problem.directive.span)
            for problem in check_directive_spacing(scope, source_code, self.policy)
        ]
