"""Base interface for checker rules and shared helpers.

Every rule follows the same contract:
  1. Receives parsed, immutable input (a document, a scenario or a feature)
  2. Returns a list of ``Violation`` values, never mutating its input

Rules are built once per run from the configuration. Their denylists are
compiled at construction time so ``check`` does no configuration work.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from usecase_checker.config.models import CheckerConfig
from usecase_checker.domain.models.enums import Severity
from usecase_checker.domain.models.scenario import BddScenario, FeatureFile
from usecase_checker.domain.models.use_case import UseCaseDocument
from usecase_checker.domain.models.violation import SourceLocation, Violation


class PatternSet:
    """Case-insensitive denylist built from configured regular expressions."""

    def __init__(self, patterns: Iterable[str]) -> None:
        self._compiled = tuple(re.compile(p, re.IGNORECASE) for p in patterns)

    def __len__(self) -> int:
        return len(self._compiled)

    def find(self, text: str) -> tuple[str, ...]:
        """Return matched tokens in order of appearance, without duplicates."""
        hits = sorted(
            (m.start(), m.group(0)) for rx in self._compiled for m in rx.finditer(text)
        )
        tokens: list[str] = []
        for _start, token in hits:
            if token not in tokens:
                tokens.append(token)
        return tuple(tokens)


def quote_tokens(tokens: Iterable[str]) -> str:
    return ", ".join(f"'{t}'" for t in tokens)


# ---------------------------------------------------------------------------
# Abstract bases
# ---------------------------------------------------------------------------


class BaseRule(ABC):
    """Abstract base for every rule in a rule set."""

    rule_id: str
    name: str
    default_severity: Severity = Severity.ERROR
    description: str = ""

    def __init__(self, config: CheckerConfig) -> None:
        self.severity = config.severity_for(self.rule_id, self.default_severity)

    # Convenience helper used by concrete rules
    def _violation(
        self,
        path: str,
        line: int,
        message: str,
        tokens: Iterable[str] = (),
    ) -> Violation:
        return Violation(
            location=SourceLocation(path=path, line=line),
            rule_id=self.rule_id,
            severity=self.severity,
            message=message,
            tokens=tuple(tokens),
        )


class DocumentRule(BaseRule):
    """A rule evaluated against one use-case document."""

    @abstractmethod
    def check(self, document: UseCaseDocument) -> list[Violation]:
        """Return the violations found in *document*."""


class ScenarioRule(BaseRule):
    """A rule evaluated against one scenario of a feature file."""

    @abstractmethod
    def check(self, scenario: BddScenario, feature: FeatureFile) -> list[Violation]:
        """Return the violations found in *scenario*."""


class FeatureRule(BaseRule):
    """A rule comparing a whole feature file with the use-case document."""

    @abstractmethod
    def check(
        self, feature: FeatureFile, document: Optional[UseCaseDocument]
    ) -> list[Violation]:
        """Return the violations found in *feature*."""
