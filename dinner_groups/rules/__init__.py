"""Compatibility rules for dinner_groups."""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Type

from .base import HardRule, Rule, SoftRule
from .library import (
    AgeAffinityRule,
    AgeWindowRule,
    BudgetAffinityRule,
    BudgetMatchRule,
    CategoryAffinityRule,
    RelationshipParityRule,
)

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from dinner_groups.io.config_loader import RuleDefinition


RULE_REGISTRY: Dict[str, Type[Rule]] = {
    AgeWindowRule.slug: AgeWindowRule,
    BudgetMatchRule.slug: BudgetMatchRule,
    RelationshipParityRule.slug: RelationshipParityRule,
    CategoryAffinityRule.slug: CategoryAffinityRule,
    AgeAffinityRule.slug: AgeAffinityRule,
    BudgetAffinityRule.slug: BudgetAffinityRule,
}


def create_rule(defn: "RuleDefinition") -> Rule:
    """Instantiate a concrete :class:`Rule` from a :class:`RuleDefinition`."""
    cls = RULE_REGISTRY.get(defn.name)
    if cls is None:
        raise KeyError(f"Unknown rule: {defn.name}")
    if issubclass(cls, SoftRule) != (defn.kind == "soft"):
        raise ValueError(f"Rule {defn.name} cannot be used as a {defn.kind} rule")

    kwargs = {
        "name": defn.name,
        "priority": defn.priority,
        "params": defn.params,
        "explain_exclude": defn.explain_exclude,
        "explain_score": defn.explain_score,
    }
    if issubclass(cls, SoftRule):
        kwargs["weight"] = defn.weight if defn.weight is not None else 1.0
    return cls(**kwargs)  # type: ignore[arg-type]


def build_rules(definitions: List["RuleDefinition"]) -> List[Rule]:
    """Build and sort rule objects from definitions."""
    rules = [create_rule(d) for d in definitions]
    return sorted(rules, key=lambda r: r.priority)


def default_rules() -> List[Rule]:
    """The rule set used when no configuration overrides it."""
    return [
        AgeWindowRule(
            name="age_window",
            priority=1,
            explain_exclude="{participant.id} is outside the age window",
        ),
        BudgetMatchRule(
            name="budget_match",
            priority=2,
            explain_exclude="{participant.id} has a different budget band",
        ),
        RelationshipParityRule(name="relationship_parity", priority=3),
        CategoryAffinityRule(name="category_affinity", priority=4, weight=10.0),
        AgeAffinityRule(name="age_affinity", priority=5, weight=5.0),
        BudgetAffinityRule(name="budget_affinity", priority=6, weight=5.0),
    ]


__all__ = [
    "Rule",
    "HardRule",
    "SoftRule",
    "AgeWindowRule",
    "BudgetMatchRule",
    "RelationshipParityRule",
    "CategoryAffinityRule",
    "AgeAffinityRule",
    "BudgetAffinityRule",
    "RULE_REGISTRY",
    "create_rule",
    "build_rules",
    "default_rules",
]
