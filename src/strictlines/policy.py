from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, cast

Mode = Literal["always", "never"]
MODES: tuple[Mode, ...] = ("always", "never")
DEFAULT_MODE: Mode = "always"


class OptionError(ValueError):
    """Raised when a rule option does not match the accepted shapes."""


@dataclass(frozen=True, slots=True)
class UniformOption:
    """A single mode applied to both sides of the directive."""

    mode: Mode


@dataclass(frozen=True, slots=True)
class SplitOption:
    before: Mode
    after: Mode


RuleOption = UniformOption | SplitOption


@dataclass(frozen=True, slots=True)
class ResolvedPolicy:
    before: Mode = DEFAULT_MODE
    after: Mode = DEFAULT_MODE


def parse_option(raw: Any) -> RuleOption:
    """
    Validate a raw configuration value and return its typed shape.

    Accepted values:
    - `"always"` or `"never"`
    - a mapping with exactly the keys `before` and `after`, each `"always"` or `"never"`
    """

    if isinstance(raw, str):
        return UniformOption(mode=_validate_mode(raw, field_name="option"))

    if isinstance(raw, Mapping):
        keys = set(raw)
        unknown = keys - {"before", "after"}
        if unknown:
            raise OptionError(f"unknown key(s): {', '.join(sorted(map(str, unknown)))}; expected `before` and `after`.")
        missing = {"before", "after"} - keys
        if missing:
            raise OptionError(f"missing key(s): {', '.join(sorted(missing))}; `before` and `after` must be given together.")
        return SplitOption(
            before=_validate_mode(raw["before"], field_name="before"),
            after=_validate_mode(raw["after"], field_name="after"),
        )

    raise OptionError(f"expected \"always\", \"never\" or a table with `before`/`after`, got {type(raw).__name__}.")


def resolve_policy(option: RuleOption | None) -> ResolvedPolicy:
    if option is None:
        return ResolvedPolicy()
    if isinstance(option, UniformOption):
        return ResolvedPolicy(before=option.mode, after=option.mode)
    return ResolvedPolicy(before=option.before, after=option.after)


def _validate_mode(value: Any, *, field_name: str) -> Mode:
    if not isinstance(value, str) or value not in MODES:
        raise OptionError(f"`{field_name}` must be one of: always, never (got {value!r}).")
    return cast(Mode, value)
