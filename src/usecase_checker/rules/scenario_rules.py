"""BDD feature-file rules (R6–R7)."""

from __future__ import annotations

import difflib
import re
from typing import Optional

from usecase_checker.config.models import CheckerConfig
from usecase_checker.domain.models.enums import Severity
from usecase_checker.domain.models.scenario import BddScenario, FeatureFile
from usecase_checker.domain.models.use_case import UseCaseDocument
from usecase_checker.domain.models.violation import Violation
from usecase_checker.rules.base import FeatureRule, PatternSet, ScenarioRule, quote_tokens


class BlackBoxRule(ScenarioRule):
    """R6: steps describe observable behaviour, never the mechanism."""

    rule_id = "R6"
    name = "BDD-Black-Box"
    description = "Scenario steps must not mention implementation details or internal state"

    def __init__(self, config: CheckerConfig) -> None:
        super().__init__(config)
        settings = config.rules.black_box
        self._patterns = PatternSet([*settings.technical_tokens, *settings.internal_state])

    def check(self, scenario: BddScenario, feature: FeatureFile) -> list[Violation]:
        violations = []
        for step in scenario.steps:
            tokens = self._patterns.find(step.text)
            if tokens:
                violations.append(
                    self._violation(
                        feature.path,
                        step.line,
                        f"Step uses implementation language ({quote_tokens(tokens)}): {step}",
                        tokens,
                    )
                )
        return violations


_SPACES = re.compile(r"\s+")


def normalize_rule(text: str) -> str:
    """Lower-case, collapse whitespace and drop trailing punctuation."""
    return _SPACES.sub(" ", text).strip().rstrip(".;,").strip().lower()


class DryRule(FeatureRule):
    """R7: feature files reference business rules instead of restating them."""

    rule_id = "R7"
    name = "BDD-DRY"
    default_severity = Severity.WARNING
    description = "Feature files must not duplicate the use case's business rules"

    def __init__(self, config: CheckerConfig) -> None:
        super().__init__(config)
        self._threshold = config.rules.dry.similarity_threshold

    def _duplicates(self, candidate: str, original: str) -> bool:
        a, b = normalize_rule(candidate), normalize_rule(original)
        if not a or not b:
            return False
        if a in b or b in a:
            return True
        if self._threshold >= 1.0:
            return False
        return difflib.SequenceMatcher(None, a, b).ratio() >= self._threshold

    def check(
        self, feature: FeatureFile, document: Optional[UseCaseDocument]
    ) -> list[Violation]:
        if document is None or not feature.has_business_rules_block:
            return []
        violations = []
        for item in feature.business_rules:
            for rule in document.business_rules:
                if self._duplicates(item.text, rule.text):
                    violations.append(
                        self._violation(
                            feature.path,
                            item.line,
                            f"Business rule duplicated from {document.path}:{rule.line}; "
                            f"reference the use case instead: {item.text}",
                        )
                    )
                    break
        return violations
