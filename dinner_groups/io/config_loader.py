"""Load and validate the matching configuration from YAML files."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

import yaml

from ..errors import ConfigError
from ..rules import RULE_REGISTRY, Rule, build_rules, default_rules


@dataclass
class RuleDefinition:
    """Data representation of a rule definition."""

    name: str
    kind: Literal["hard", "soft"]
    priority: int
    params: Dict[str, Any] = field(default_factory=dict)
    weight: Optional[float] = None
    explain_exclude: Optional[str] = None
    explain_score: Optional[str] = None


@dataclass
class MatchingConfig:
    """Settings of one matching run."""

    target_group_size: int = 6
    random_seed: Optional[int] = None
    lenient_attempts: int = 20
    rules: List[RuleDefinition] = field(default_factory=list)

    def build_rules(self) -> List[Rule]:
        """Rule objects for this configuration, defaults when none are listed."""
        if not self.rules:
            return default_rules()
        return build_rules(self.rules)


def _validate_rule(index: int, data: Dict[str, Any]) -> RuleDefinition:
    required = {"name", "kind", "priority"}
    missing = required - data.keys()
    if missing:
        raise ConfigError(
            f"Rule {index}: missing required fields: {', '.join(sorted(missing))}"
        )

    name = data["name"]
    if name not in RULE_REGISTRY:
        raise ConfigError(f"Rule {index}: unknown rule '{name}'")

    kind = data["kind"]
    if kind not in {"hard", "soft"}:
        raise ConfigError(f"Rule {index}: kind must be 'hard' or 'soft'")

    priority = data["priority"]
    if not isinstance(priority, int) or isinstance(priority, bool):
        raise ConfigError(f"Rule {index}: priority must be an integer")

    params = data.get("params") or {}
    if not isinstance(params, dict):
        raise ConfigError(f"Rule {index}: params must be a mapping")

    weight = data.get("weight")
    if kind == "soft" and weight is None:
        raise ConfigError(f"Rule {index}: soft rules require a weight")
    if weight is not None and (
        not isinstance(weight, (int, float)) or isinstance(weight, bool)
    ):
        raise ConfigError(f"Rule {index}: weight must be a number if provided")

    return RuleDefinition(
        name=name,
        kind=kind,
        priority=priority,
        params=params,
        weight=float(weight) if weight is not None else None,
        explain_exclude=data.get("explain_exclude"),
        explain_score=data.get("explain_score"),
    )


def parse_rules(data: Any) -> List[RuleDefinition]:
    if not isinstance(data, list):
        raise ConfigError("Rules must be a list of rule definitions")

    rules: List[RuleDefinition] = []
    for idx, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise ConfigError(
                f"Rule {idx}: expected mapping but found {type(item).__name__}"
            )
        rules.append(_validate_rule(idx, item))
    return rules


def load_rules(path: str) -> List[RuleDefinition]:
    """Parse a YAML file holding a bare list of rule definitions."""
    with open(path, "r", encoding="utf8") as handle:
        data = yaml.safe_load(handle)
    return parse_rules(data)


def _int_setting(section: Dict[str, Any], key: str, default: Optional[int]) -> Optional[int]:
    value = section.get(key, default)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"matching.{key} must be an integer")
    return value


def parse_config(data: Any) -> MatchingConfig:
    """Validate an already parsed configuration mapping."""
    if data is None:
        return MatchingConfig()
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    unknown = set(data) - {"matching", "rules"}
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    section = data.get("matching") or {}
    if not isinstance(section, dict):
        raise ConfigError("'matching' must be a mapping")

    target = _int_setting(section, "target_group_size", 6)
    if target not in (5, 6):
        raise ConfigError("matching.target_group_size must be 5 or 6")
    attempts = _int_setting(section, "lenient_attempts", 20)
    if attempts < 1:
        raise ConfigError("matching.lenient_attempts must be at least 1")

    rules = parse_rules(data["rules"]) if data.get("rules") is not None else []
    return MatchingConfig(
        target_group_size=target,
        random_seed=_int_setting(section, "random_seed", None),
        lenient_attempts=attempts,
        rules=rules,
    )


def load_config(path: str | None) -> MatchingConfig:
    """Load a matching configuration; a missing path yields the defaults."""
    if not path or not os.path.exists(path):
        return MatchingConfig()
    with open(path, "r", encoding="utf8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    return parse_config(data)
