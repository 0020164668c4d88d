"""Pydantic models for the checker configuration.

These models validate and type the JSON configuration file that drives the
section vocabulary and every rule denylist. Patterns are regular expressions
matched case-insensitively; they are validated here so a bad pattern fails
at load time instead of in the middle of a run.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from usecase_checker.domain.models.enums import Severity


def _check_patterns(patterns: list[str]) -> list[str]:
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc
    return patterns


# ---------------------------------------------------------------------------
# Meta
# ---------------------------------------------------------------------------


class MetaData(BaseModel):
    """Metadata about the rule set being applied."""

    name: str = "usecase-checker"
    rule_set_version: str = "1"
    description: str = "Rules derived from the BDD/TDD and use-case practices guide"


# ---------------------------------------------------------------------------
# Use-case document vocabulary
# ---------------------------------------------------------------------------


class SectionVocabulary(BaseModel):
    """Header names (lower case) recognised for each use-case section."""

    description: list[str] = Field(default_factory=lambda: ["description"])
    primary_actor: list[str] = Field(default_factory=lambda: ["primary actor", "actor"])
    preconditions: list[str] = Field(
        default_factory=lambda: ["preconditions", "pre-conditions", "precondition"]
    )
    basic_flow: list[str] = Field(
        default_factory=lambda: ["basic flow", "main flow", "main success scenario"]
    )
    alternative_flows: list[str] = Field(
        default_factory=lambda: ["alternative flows", "alternate flows", "alternative flow"]
    )
    exception_flows: list[str] = Field(
        default_factory=lambda: ["exception flows", "exceptions", "exception flow"]
    )
    business_rules: list[str] = Field(default_factory=lambda: ["business rules"])

    @field_validator("*")
    @classmethod
    def lowercase_names(cls, names: list[str]) -> list[str]:
        return [n.strip().lower() for n in names]

    def lookup(self) -> dict[str, str]:
        """Map every header name to its canonical section key."""
        table: dict[str, str] = {}
        for key, names in self.model_dump().items():
            for name in names:
                table[name] = key
        return table


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


class StructureRuleConfig(BaseModel):
    """R1: sections that must not appear in a use-case document."""

    forbidden_sections: list[str] = Field(
        default_factory=lambda: ["stakeholders and interests", "stakeholders", "notes"]
    )

    @field_validator("forbidden_sections")
    @classmethod
    def lowercase_names(cls, names: list[str]) -> list[str]:
        return [n.strip().lower() for n in names]


class PatternRuleConfig(BaseModel):
    """A rule driven by a denylist of regular expressions."""

    patterns: list[str] = Field(default_factory=list)

    @field_validator("patterns")
    @classmethod
    def compile_patterns(cls, patterns: list[str]) -> list[str]:
        return _check_patterns(patterns)


class TriggerRuleConfig(BaseModel):
    """R4: how a trigger references a basic-flow step.

    The first capturing group of each pattern is the step number.
    """

    step_reference_patterns: list[str] = Field(
        default_factory=lambda: [r"\bsteps?\s+(\d+[a-z]?)\b", r"^(\d+[a-z])\b"]
    )
    require_existing_step: bool = True

    @field_validator("step_reference_patterns")
    @classmethod
    def compile_patterns(cls, patterns: list[str]) -> list[str]:
        return _check_patterns(patterns)


class BlackBoxRuleConfig(BaseModel):
    """R6: vocabulary forbidden in scenario steps."""

    technical_tokens: list[str] = Field(default_factory=list)
    internal_state: list[str] = Field(default_factory=list)

    @field_validator("technical_tokens", "internal_state")
    @classmethod
    def compile_patterns(cls, patterns: list[str]) -> list[str]:
        return _check_patterns(patterns)


class DryRuleConfig(BaseModel):
    """R7: duplicated business rules in feature files.

    A threshold of 1.0 means normalised exact-substring matching; lower
    values compare with a ``difflib`` similarity ratio.
    """

    similarity_threshold: float = Field(1.0, gt=0.0, le=1.0)


class RulesConfig(BaseModel):
    """Per-rule settings, keyed by rule purpose."""

    structure: StructureRuleConfig = Field(default_factory=StructureRuleConfig)
    preconditions: PatternRuleConfig = Field(default_factory=PatternRuleConfig)
    basic_flow_connectives: PatternRuleConfig = Field(default_factory=PatternRuleConfig)
    alternative_flow_trigger: TriggerRuleConfig = Field(default_factory=TriggerRuleConfig)
    exception_flow_scope: PatternRuleConfig = Field(default_factory=PatternRuleConfig)
    black_box: BlackBoxRuleConfig = Field(default_factory=BlackBoxRuleConfig)
    dry: DryRuleConfig = Field(default_factory=DryRuleConfig)


# ---------------------------------------------------------------------------
# Root Config Model
# ---------------------------------------------------------------------------

_RULE_ID = re.compile(r"^R\d+$")


class CheckerConfig(BaseModel):
    """Root configuration model for the checker.

    Usage::

        from usecase_checker.config import get_config
        cfg = get_config()
        print(cfg.metadata.rule_set_version)
    """

    metadata: MetaData = Field(default_factory=MetaData)
    sections: SectionVocabulary = Field(default_factory=SectionVocabulary)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    disabled_rules: list[str] = Field(default_factory=list)
    severity_overrides: dict[str, Severity] = Field(default_factory=dict)
    feature_extensions: list[str] = Field(default_factory=lambda: [".feature"])

    @model_validator(mode="after")
    def check_rule_ids(self) -> CheckerConfig:
        for rule_id in [*self.disabled_rules, *self.severity_overrides]:
            if not _RULE_ID.match(rule_id):
                raise ValueError(f"invalid rule id {rule_id!r} (expected e.g. 'R3')")
        return self

    # -- Convenience helpers -----------------------------------------------

    def is_enabled(self, rule_id: str) -> bool:
        return rule_id not in self.disabled_rules

    def severity_for(self, rule_id: str, default: Severity) -> Severity:
        return self.severity_overrides.get(rule_id, default)

    def with_disabled(self, rule_ids: Optional[list[str]]) -> CheckerConfig:
        """Return a copy with additional rules disabled."""
        if not rule_ids:
            return self
        merged = sorted({*self.disabled_rules, *(r.upper() for r in rule_ids)})
        return self.model_validate({**self.model_dump(), "disabled_rules": merged})
