"""Use-case document rules (R1–R5).

R1  Structure: Description first; no Stakeholders or Notes sections
R2  Preconditions: no feature-flag or runtime checks
R3  Basic-Flow-Linearity: no branching connectives in basic-flow steps
R4  Alternative-Flow-Trigger: each trigger references a basic-flow step
R5  Exception-Flow-Scope: no infrastructure-unavailability exceptions
"""

from __future__ import annotations

import re

from usecase_checker.config.models import CheckerConfig
from usecase_checker.domain.models.enums import Severity
from usecase_checker.domain.models.use_case import SECTION_TITLES, UseCaseDocument
from usecase_checker.domain.models.violation import Violation
from usecase_checker.rules.base import DocumentRule, PatternSet, quote_tokens


class StructureRule(DocumentRule):
    """R1: Description present and first; forbidden sections absent."""

    rule_id = "R1"
    name = "Structure"
    description = "Description must be the first section; no Stakeholders or Notes sections"

    def __init__(self, config: CheckerConfig) -> None:
        super().__init__(config)
        self._forbidden = frozenset(config.rules.structure.forbidden_sections)

    def check(self, document: UseCaseDocument) -> list[Violation]:
        violations = []

        sections = [(line, SECTION_TITLES[key]) for key, line in document.section_lines.items()]
        sections += [(s.line, s.title) for s in document.unknown_sections]
        sections.sort()
        if sections and sections[0][1] != SECTION_TITLES["description"]:
            violations.append(
                self._violation(
                    document.path,
                    document.section_lines.get("description", sections[0][0]),
                    f"'Description' must be the first section (found '{sections[0][1]}' first)",
                )
            )

        for section in document.unknown_sections:
            if " ".join(section.title.lower().split()) in self._forbidden:
                violations.append(
                    self._violation(
                        document.path,
                        section.line,
                        f"Section '{section.title}' is not allowed in a use-case document",
                        tokens=[section.title],
                    )
                )
        return violations


class PreconditionsRule(DocumentRule):
    """R2: preconditions state business facts, not runtime or flag checks."""

    rule_id = "R2"
    name = "Preconditions"
    default_severity = Severity.WARNING
    description = "Preconditions must not be feature-flag or runtime checks"

    def __init__(self, config: CheckerConfig) -> None:
        super().__init__(config)
        self._patterns = PatternSet(config.rules.preconditions.patterns)

    def check(self, document: UseCaseDocument) -> list[Violation]:
        violations = []
        for item in document.preconditions:
            tokens = self._patterns.find(item.text)
            if tokens:
                violations.append(
                    self._violation(
                        document.path,
                        item.line,
                        f"Precondition describes a runtime or configuration check "
                        f"({quote_tokens(tokens)}): {item.text}",
                        tokens,
                    )
                )
        return violations


class BasicFlowLinearityRule(DocumentRule):
    """R3: the basic flow is a straight line; branches go to alternative flows."""

    rule_id = "R3"
    name = "Basic-Flow-Linearity"
    description = "Basic flow steps must not contain branching connectives"

    def __init__(self, config: CheckerConfig) -> None:
        super().__init__(config)
        self._patterns = PatternSet(config.rules.basic_flow_connectives.patterns)

    def check(self, document: UseCaseDocument) -> list[Violation]:
        violations = []
        for step in document.basic_flow:
            tokens = self._patterns.find(step.text)
            if tokens:
                violations.append(
                    self._violation(
                        document.path,
                        step.line,
                        f"Basic flow step {step.number} contains branching language "
                        f"({quote_tokens(tokens)}); move the branch to an alternative flow",
                        tokens,
                    )
                )
        return violations


class AlternativeFlowTriggerRule(DocumentRule):
    """R4: every alternative flow names the basic-flow step it branches from."""

    rule_id = "R4"
    name = "Alternative-Flow-Trigger"
    description = "Alternative flow triggers must reference a basic flow step number"

    _LEADING_NUMBER = re.compile(r"\d+")

    def __init__(self, config: CheckerConfig) -> None:
        super().__init__(config)
        settings = config.rules.alternative_flow_trigger
        self._references = tuple(
            re.compile(p, re.IGNORECASE) for p in settings.step_reference_patterns
        )
        self._require_existing = settings.require_existing_step

    def _referenced_steps(self, trigger: str) -> list[str]:
        refs: list[str] = []
        for rx in self._references:
            for m in rx.finditer(trigger):
                ref = (m.group(1) if rx.groups else m.group(0)).lower()
                if ref not in refs:
                    refs.append(ref)
        return refs

    def _exists(self, ref: str, numbers: set[str]) -> bool:
        if ref in numbers:
            return True
        lead = self._LEADING_NUMBER.match(ref)
        return bool(lead and lead.group(0) in numbers)

    def check(self, document: UseCaseDocument) -> list[Violation]:
        violations = []
        numbers = document.step_numbers
        for flow in document.alternative_flows:
            refs = self._referenced_steps(flow.trigger)
            if not refs:
                violations.append(
                    self._violation(
                        document.path,
                        flow.line,
                        f"Alternative flow {flow.id} trigger does not reference a basic "
                        f"flow step: '{flow.trigger}'",
                    )
                )
                continue
            missing = [r for r in refs if not self._exists(r, numbers)]
            if self._require_existing and missing:
                violations.append(
                    self._violation(
                        document.path,
                        flow.line,
                        f"Alternative flow {flow.id} references step(s) not in the basic "
                        f"flow: {', '.join(missing)}",
                        missing,
                    )
                )
        return violations


class ExceptionFlowScopeRule(DocumentRule):
    """R5: exception flows document real exceptions, not outages."""

    rule_id = "R5"
    name = "Exception-Flow-Scope"
    description = "Exception flows must not describe infrastructure unavailability"

    def __init__(self, config: CheckerConfig) -> None:
        super().__init__(config)
        self._patterns = PatternSet(config.rules.exception_flow_scope.patterns)

    def check(self, document: UseCaseDocument) -> list[Violation]:
        violations = []
        for flow in document.exception_flows:
            tokens = self._patterns.find(f"{flow.name} {flow.description}")
            if tokens:
                violations.append(
                    self._violation(
                        document.path,
                        flow.line,
                        f"Exception flow '{flow.name}' describes infrastructure "
                        f"unavailability ({quote_tokens(tokens)})",
                        tokens,
                    )
                )
        return violations
