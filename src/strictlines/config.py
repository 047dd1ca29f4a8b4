from __future__ import annotations

import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

from strictlines.engine.types import Severity
from strictlines.policy import OptionError, RuleOption, parse_option


class ConfigError(ValueError):
    """Raised when a strictlines configuration file is invalid."""


RuleId = str

DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".mjs", ".cjs", ".jsx")

# Keep the option schemas in config (not in rules) so configuration can be
# validated without importing the detection engine.
RULE_OPTION_PARSERS: dict[RuleId, Callable[[Any], RuleOption]] = {
    "lines-around-directive": parse_option,
}
KNOWN_RULE_IDS: tuple[RuleId, ...] = tuple(sorted(RULE_OPTION_PARSERS))


def _validate_str_list(value: Any, *, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise ConfigError(f"`{field_name}` must be a list of strings.")
    return tuple(v.strip() for v in value)


def _normalize_rule_id(value: str) -> str:
    # Rule ids are case-insensitive in UX, but canonicalized internally.
    return value.strip().lower().replace("_", "-")


def _validate_severity(value: Any, *, field_name: str) -> Severity:
    if not isinstance(value, str):
        raise ConfigError(f"`{field_name}` must be a string.")
    normalized = value.strip().lower()
    if normalized == "warning":
        normalized = "warn"
    if normalized not in {"info", "warn", "error"}:
        raise ConfigError(f"`{field_name}` must be one of: info, warn, error.")
    return cast(Severity, normalized)


@dataclass(frozen=True, slots=True)
class RuleSettings:
    enabled: bool = True
    severity: Severity | None = None
    option: RuleOption | None = None


@dataclass(frozen=True, slots=True)
class IgnoreConfig:
    paths: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StrictLinesConfig:
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    rules: Mapping[RuleId, RuleSettings] = field(default_factory=lambda: MappingProxyType({}))
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)

    def settings_for(self, rule_id: RuleId) -> RuleSettings:
        return self.rules.get(rule_id, RuleSettings())

    def with_rule_option(self, rule_id: RuleId, option: RuleOption) -> StrictLinesConfig:
        """Return a copy with `option` replacing the configured option of `rule_id`."""

        rules = dict(self.rules)
        rules[rule_id] = replace(self.settings_for(rule_id), option=option)
        return replace(self, rules=MappingProxyType(rules))


def load_config(project_dir: Path | str = ".") -> StrictLinesConfig:
    """
    Load strictlines configuration from `pyproject.toml` within `project_dir`.

    If no file / no `[tool.strictlines]` table exists, returns defaults.
    """

    pyproject_path = Path(project_dir) / "pyproject.toml"
    if not pyproject_path.exists():
        return StrictLinesConfig()

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {exc}") from exc

    tool_table = data.get("tool", {})
    if not isinstance(tool_table, dict):
        return StrictLinesConfig()

    table = tool_table.get("strictlines", {})
    if not isinstance(table, dict) or not table:
        return StrictLinesConfig()

    return parse_config_table(table)


def parse_config_table(table: Mapping[str, Any]) -> StrictLinesConfig:
    unknown = set(table) - {"extensions", "rules", "ignore"}
    if unknown:
        raise ConfigError(f"Unknown key(s) in `tool.strictlines`: {', '.join(sorted(unknown))}.")

    extensions = DEFAULT_EXTENSIONS
    if "extensions" in table:
        extensions = _parse_extensions(table["extensions"])

    return StrictLinesConfig(
        extensions=extensions,
        rules=_parse_rules_table(table.get("rules", {})),
        ignore=_parse_ignore_config(table.get("ignore", {})),
    )


def _parse_extensions(value: Any) -> tuple[str, ...]:
    raw = _validate_str_list(value, field_name="tool.strictlines.extensions")
    normalized: list[str] = []
    for ext in raw:
        if not ext:
            raise ConfigError("`tool.strictlines.extensions` must not contain empty strings.")
        ext = ext.lower()
        normalized.append(ext if ext.startswith(".") else f".{ext}")
    return tuple(normalized)


def _parse_rules_table(value: Any) -> Mapping[RuleId, RuleSettings]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, dict):
        raise ConfigError("`tool.strictlines.rules` must be a table.")

    rules: dict[RuleId, RuleSettings] = {}
    for raw_rule_id, raw_settings in value.items():
        rule_id = _normalize_rule_id(str(raw_rule_id))
        if rule_id not in RULE_OPTION_PARSERS:
            raise ConfigError(
                f"`tool.strictlines.rules.{raw_rule_id}` is not a known rule. Known rules: {', '.join(KNOWN_RULE_IDS)}."
            )
        rules[rule_id] = _parse_rule_settings(rule_id, raw_settings, field_name=f"tool.strictlines.rules.{raw_rule_id}")
    return MappingProxyType(rules)


def _parse_rule_settings(rule_id: RuleId, value: Any, *, field_name: str) -> RuleSettings:
    # `lines-around-directive = "never"` is shorthand for `{ option = "never" }`.
    if isinstance(value, str):
        return RuleSettings(option=_parse_rule_option(rule_id, value, field_name=field_name))
    if not isinstance(value, dict):
        raise ConfigError(f"`{field_name}` must be a string or a table.")

    unknown = set(value) - {"enabled", "severity", "option"}
    if unknown:
        raise ConfigError(f"Unknown key(s) in `{field_name}`: {', '.join(sorted(unknown))}.")

    enabled = value.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigError(f"`{field_name}.enabled` must be a boolean.")

    severity = None
    if "severity" in value:
        severity = _validate_severity(value["severity"], field_name=f"{field_name}.severity")

    option = None
    if "option" in value:
        option = _parse_rule_option(rule_id, value["option"], field_name=f"{field_name}.option")

    return RuleSettings(enabled=enabled, severity=severity, option=option)


def _parse_rule_option(rule_id: RuleId, value: Any, *, field_name: str) -> RuleOption:
    try:
        return RULE_OPTION_PARSERS[rule_id](value)
    except OptionError as exc:
        raise ConfigError(f"`{field_name}` is invalid: {exc}") from exc


def _parse_ignore_config(value: Any) -> IgnoreConfig:
    if value is None:
        return IgnoreConfig()
    if not isinstance(value, dict):
        raise ConfigError("`tool.strictlines.ignore` must be a table.")
    return IgnoreConfig(paths=_validate_str_list(value.get("paths", []), field_name="tool.strictlines.ignore.paths"))

