from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from typing import ClassVar

from strictlines.engine.nodes import Scope, Span
from strictlines.engine.source import SourceCode
from strictlines.engine.types import Severity, Violation


@dataclass(frozen=True, slots=True)
class RuleMeta:
    rule_id: str
    title: str
    description: str
    default_severity: Severity


class BaseRule(ABC):
    meta: RuleMeta
    # Scope node types (ESTree names) the detection driver dispatches to `check_scope`.
    scope_types: ClassVar[tuple[str, ...]] = ()

    def configure(self, option: object | None) -> BaseRule:
        """Return a copy of the rule bound to its configured option."""

        return self

    def check_scope(self, scope: Scope, source_code: SourceCode) -> list[Violation]:
        return []

    def _violation(self, *, message: str, span: Span) -> Violation:
        return Violation(
            rule_id=self.meta.rule_id,
            severity=self.meta.default_severity,
            message=message,
            span=span,
        )
