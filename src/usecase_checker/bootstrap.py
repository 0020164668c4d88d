"""Composition Root: Dependency Injection Container.

This module is the ONLY place where configuration, parsers and the rule set
are built and wired together. The rule set is created once here and passed
explicitly to the checker.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from usecase_checker.application.use_cases.check_documents import CheckDocumentsUseCase
from usecase_checker.config.loader import load_config
from usecase_checker.config.models import CheckerConfig
from usecase_checker.parsers.feature_parser import FeatureParser
from usecase_checker.parsers.use_case_parser import UseCaseParser
from usecase_checker.rules.checker import RuleChecker
from usecase_checker.rules.registry import RuleSet, build_rule_set


class Container:
    """Simple dependency injection container.

    Usage::

        container = Container(rule_set_version="1")
        report = container.check_documents().execute(use_case, features)

    Raises ``ConfigurationError`` (or ``pydantic.ValidationError``) at
    construction time when the configuration or rule-set version is invalid.
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        rule_set_version: Optional[str] = None,
        disabled_rules: Optional[Sequence[str]] = None,
    ) -> None:
        config = load_config(Path(config_path) if config_path else None)
        self._config: CheckerConfig = config.with_disabled(list(disabled_rules or []))
        version = rule_set_version or self._config.metadata.rule_set_version
        self._rule_set = build_rule_set(version, self._config)

        self._use_case_parser = UseCaseParser(self._config)
        self._feature_parser = FeatureParser()
        self._checker = RuleChecker(self._rule_set)

    # -- Accessors -----------------------------------------------------------

    @property
    def config(self) -> CheckerConfig:
        return self._config

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    @property
    def checker(self) -> RuleChecker:
        return self._checker

    # -- Use Case factories --------------------------------------------------

    def check_documents(self) -> CheckDocumentsUseCase:
        """Create a use case for checking one use case and its feature files."""
        return CheckDocumentsUseCase(
            use_case_parser=self._use_case_parser,
            feature_parser=self._feature_parser,
            checker=self._checker,
            feature_extensions=self._config.feature_extensions,
        )
