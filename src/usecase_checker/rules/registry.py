"""Versioned rule sets.

A rule set is an immutable, ordered tuple of rule instances built once at
startup and handed to the ``RuleChecker``. Versions map to the rule classes
they contain; adding a version never changes an existing one.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from usecase_checker.config.models import CheckerConfig
from usecase_checker.domain.errors import ConfigurationError
from usecase_checker.rules.base import BaseRule, DocumentRule, FeatureRule, ScenarioRule
from usecase_checker.rules.document_rules import (
    AlternativeFlowTriggerRule,
    BasicFlowLinearityRule,
    ExceptionFlowScopeRule,
    PreconditionsRule,
    StructureRule,
)
from usecase_checker.rules.scenario_rules import BlackBoxRule, DryRule

RULE_SETS: Mapping[str, tuple[type[BaseRule], ...]] = MappingProxyType(
    {
        "1": (
            StructureRule,
            PreconditionsRule,
            BasicFlowLinearityRule,
            AlternativeFlowTriggerRule,
            ExceptionFlowScopeRule,
            BlackBoxRule,
            DryRule,
        ),
    }
)


@dataclass(frozen=True)
class RuleSet:
    """An immutable collection of configured rules for one version."""

    version: str
    rules: tuple[BaseRule, ...]

    @property
    def rule_ids(self) -> list[str]:
        return [r.rule_id for r in self.rules]

    @property
    def document_rules(self) -> tuple[DocumentRule, ...]:
        return tuple(r for r in self.rules if isinstance(r, DocumentRule))

    @property
    def scenario_rules(self) -> tuple[ScenarioRule, ...]:
        return tuple(r for r in self.rules if isinstance(r, ScenarioRule))

    @property
    def feature_rules(self) -> tuple[FeatureRule, ...]:
        return tuple(r for r in self.rules if isinstance(r, FeatureRule))


def available_versions() -> list[str]:
    return sorted(RULE_SETS)


def rule_classes(version: str) -> tuple[type[BaseRule], ...]:
    """Return the rule classes of *version*, or raise ``ConfigurationError``."""
    try:
        return RULE_SETS[version]
    except KeyError:
        raise ConfigurationError(
            f"Unknown rule set version '{version}'. "
            f"Available: {', '.join(available_versions())}"
        ) from None


def build_rule_set(version: str, config: CheckerConfig) -> RuleSet:
    """Instantiate the enabled rules of *version* against *config*."""
    classes = rule_classes(version)
    known = {cls.rule_id for cls in classes}
    unknown = sorted(r for r in config.disabled_rules if r not in known)
    if unknown:
        raise ConfigurationError(
            f"Cannot disable unknown rule(s) {', '.join(unknown)} in rule set '{version}'"
        )
    rules = tuple(cls(config) for cls in classes if config.is_enabled(cls.rule_id))
    return RuleSet(version=version, rules=rules)
