"""
In-file suppression comments.

A comment whose text starts with one of these directives silences rules:

    // strictlines: disable=lines-around-directive        (the comment's own line)
    // strictlines: disable-next-line=lines-around-directive
    /* strictlines: disable-file=all */                   (the whole file)

Rule ids are comma or space separated and case-insensitive; `all` (or no ids
at all) matches every rule. Only real comments count, so the same text inside
a string literal has no effect.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from strictlines.engine.nodes import Comment

ALL_RULES = "all"

_DIRECTIVE_RE = re.compile(
    r"^strictlines:\s*(?P<kind>disable-file|disable-next-line|disable)\b\s*(?:=\s*(?P<ids>.*))?$",
    re.IGNORECASE | re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class Suppressions:
    file_wide: frozenset[str] = frozenset()
    by_line: Mapping[int, frozenset[str]] = field(default_factory=lambda: MappingProxyType({}))

    def is_suppressed(self, rule_id: str, *, line: int) -> bool:
        rule_id = rule_id.lower()
        for ids in (self.file_wide, self.by_line.get(line, frozenset())):
            if ALL_RULES in ids or rule_id in ids:
                return True
        return False


def suppressions_from_comments(comments: Iterable[Comment]) -> Suppressions:
    file_wide: set[str] = set()
    by_line: dict[int, set[str]] = {}

    for comment in comments:
        match = _DIRECTIVE_RE.match(comment.value.strip())
        if match is None:
            continue
        ids = _rule_ids(match["ids"])
        kind = match["kind"].lower()
        if kind == "disable-file":
            file_wide |= ids
        elif kind == "disable-next-line":
            by_line.setdefault(comment.span.end_line + 1, set()).update(ids)
        else:
            by_line.setdefault(comment.span.start_line, set()).update(ids)

    return Suppressions(
        file_wide=frozenset(file_wide),
        by_line=MappingProxyType({line: frozenset(ids) for line, ids in by_line.items()}),
    )


def _rule_ids(raw: str | None) -> set[str]:
    ids = {token.lower() for token in re.split(r"[\s,]+", raw or "") if token}
    return ids or {ALL_RULES}
