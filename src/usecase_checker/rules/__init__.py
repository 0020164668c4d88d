"""Checker rules: one class per rule, grouped into versioned rule sets."""

from usecase_checker.rules.checker import RuleChecker
from usecase_checker.rules.registry import RuleSet, available_versions, build_rule_set

__all__ = ["RuleChecker", "RuleSet", "available_versions", "build_rule_set"]
