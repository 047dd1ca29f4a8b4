from __future__ import annotations

from bisect import bisect_left
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from strictlines.engine.nodes import Comment, Token

_EMPTY: tuple[Comment, ...] = ()


@dataclass(frozen=True, slots=True)
class SourceCode:
    """
    Comment and token lookups for the statements of one parsed file.

    - `leading_comments(node)`: comments directly before `node`, in source order
      (the nearest comment is last).
    - `trailing_comments(node)`: comments directly after `node`, in source order
      (the nearest comment is first).
    - `token_after(node)`: the first non-comment token that starts at or after
      the end of `node`.
    - `comments`: every comment of the file in source order.
    """

    tokens: tuple[Token, ...] = ()
    leading: Mapping[object, tuple[Comment, ...]] = field(default_factory=lambda: MappingProxyType({}))
    trailing: Mapping[object, tuple[Comment, ...]] = field(default_factory=lambda: MappingProxyType({}))
    comments: tuple[Comment, ...] = ()
    _token_starts: tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_token_starts", tuple(t.span.start_offset for t in self.tokens))

    def leading_comments(self, node: object) -> Sequence[Comment]:
        return self.leading.get(node, _EMPTY)

    def trailing_comments(self, node: object) -> Sequence[Comment]:
        return self.trailing.get(node, _EMPTY)

    def token_after(self, node: object) -> Token | None:
        end_offset = node.span.end_offset  # type: ignore[attr-defined]
        idx = bisect_left(self._token_starts, end_offset)
        if idx >= len(self.tokens):
            return None
        return self.tokens[idx]
