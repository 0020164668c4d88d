"""Rule Checker: runs a rule set over parsed inputs.

Each rule runs independently of the others; the combined list is sorted by
``(path, line, rule_id)`` so the output never depends on rule order.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from usecase_checker.domain.models.scenario import FeatureFile
from usecase_checker.domain.models.use_case import UseCaseDocument
from usecase_checker.domain.models.violation import Violation
from usecase_checker.rules.registry import RuleSet

logger = logging.getLogger(__name__)


class RuleChecker:
    """Apply a ``RuleSet`` to one use-case document and its feature files.

    Usage::

        checker = RuleChecker(build_rule_set("1", config))
        violations = checker.run(document, features)
    """

    def __init__(self, rule_set: RuleSet) -> None:
        self._rule_set = rule_set

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def run(
        self,
        document: Optional[UseCaseDocument],
        features: Sequence[FeatureFile] = (),
    ) -> list[Violation]:
        """Return every violation, sorted deterministically.

        *document* may be ``None`` when it failed to parse; document and
        cross-file rules are then skipped and only scenario rules run.
        """
        violations: list[Violation] = []

        if document is not None:
            for rule in self._rule_set.document_rules:
                found = rule.check(document)
                logger.debug("%s on %s: %d violation(s)", rule.rule_id, document.path, len(found))
                violations.extend(found)

        for feature in features:
            for rule in self._rule_set.scenario_rules:
                for scenario in feature.scenarios:
                    violations.extend(rule.check(scenario, feature))
            if document is not None:
                for rule in self._rule_set.feature_rules:
                    violations.extend(rule.check(feature, document))

        return sorted(violations, key=lambda v: v.sort_key)
