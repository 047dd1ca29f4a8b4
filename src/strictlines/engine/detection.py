from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import replace

from strictlines.config import StrictLinesConfig
from strictlines.engine.source_file import SourceFile
from strictlines.engine.types import FileReport, Violation
from strictlines.rules.base import BaseRule
from strictlines.rules.registry import builtin_rules

logger = logging.getLogger(__name__)

DispatchTable = Mapping[str, tuple[BaseRule, ...]]


def configured_rules(config: StrictLinesConfig, rules: Iterable[BaseRule] | None = None) -> list[BaseRule]:
    """Return the enabled rules, each bound to its configured option."""

    configured: list[BaseRule] = []
    for rule in rules if rules is not None else builtin_rules():
        settings = config.settings_for(rule.meta.rule_id)
        if not settings.enabled:
            logger.debug("rule disabled by config: %s", rule.meta.rule_id)
            continue
        configured.append(rule.configure(settings.option))
    return configured


def build_dispatch_table(rules: Iterable[BaseRule]) -> DispatchTable:
    """Map each scope node type to the rules that check it."""

    table: dict[str, list[BaseRule]] = defaultdict(list)
    for rule in rules:
        for scope_type in rule.scope_types:
            table[scope_type].append(rule)
    return {scope_type: tuple(handlers) for scope_type, handlers in table.items()}


def check_source(source: SourceFile, table: DispatchTable, config: StrictLinesConfig) -> FileReport:
    """
    Run the dispatched rules over every scope of `source`, in source order.

    Suppressed violations are dropped, configured severities applied, and the
    rest sorted by position.
    """

    violations: list[Violation] = []
    for scope in source.parsed.scopes:
        for rule in table.get(scope.type, ()):
            for violation in rule.check_scope(scope, source.parsed.source_code):
                if source.suppressions.is_suppressed(violation.rule_id, line=violation.line):
                    logger.debug("%s:%d: suppressed %s", source.relative_path, violation.line, violation.rule_id)
                    continue
                severity = config.settings_for(violation.rule_id).severity
                violations.append(violation if severity is None else replace(violation, severity=severity))

    violations.sort(key=lambda v: (v.span.start_line, v.span.start_col, v.rule_id))
    return FileReport(
        relative_path=source.relative_path,
        violations=tuple(violations),
        syntax_errors=source.parsed.has_syntax_errors,
        lines=source.lines,
    )
