from __future__ import annotations

import pytest

from strictlines.policy import (
    OptionError,
    ResolvedPolicy,
    SplitOption,
    UniformOption,
    parse_option,
    resolve_policy,
)


def test_default_policy_is_always_on_both_sides() -> None:
    assert resolve_policy(None) == ResolvedPolicy(before="always", after="always")


@pytest.mark.parametrize("mode", ["always", "never"])
def test_uniform_mode_fills_both_sides(mode: str) -> None:
    option = parse_option(mode)
    assert option == UniformOption(mode=mode)  # type: ignore[arg-type]
    assert resolve_policy(option) == ResolvedPolicy(before=mode, after=mode)  # type: ignore[arg-type]


def test_split_option_maps_each_side() -> None:
    option = parse_option({"before": "never", "after": "always"})
    assert option == SplitOption(before="never", after="always")
    assert resolve_policy(option) == ResolvedPolicy(before="never", after="always")


@pytest.mark.parametrize(
    "raw",
    [
        "sometimes",
        "Always",
        "",
        1,
        None,
        ["always"],
        {"before": "always"},
        {"after": "never"},
        {},
        {"before": "always", "after": "never", "around": "always"},
        {"before": "always", "after": True},
    ],
)
def test_invalid_shapes_are_rejected(raw: object) -> None:
    with pytest.raises(OptionError):
        parse_option(raw)


def test_error_message_names_the_missing_key() -> None:
    with pytest.raises(OptionError, match="after"):
        parse_option({"before": "never"})
