"""Violation and report models produced by a checking run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from usecase_checker.domain.models.enums import Severity


class SourceLocation(BaseModel):
    """A position in an input file. Ordered by ``(path, line)``."""

    model_config = ConfigDict(frozen=True)

    path: str
    line: int = 0

    def __str__(self) -> str:
        return f"{self.path}:{self.line}" if self.line else self.path

    @property
    def sort_key(self) -> tuple[str, int]:
        return (self.path, self.line)


class Violation(BaseModel):
    """A single rule finding. Produced once, never mutated."""

    model_config = ConfigDict(frozen=True)

    location: SourceLocation
    rule_id: str
    severity: Severity
    message: str
    tokens: tuple[str, ...] = ()

    @property
    def sort_key(self) -> tuple[str, int, str]:
        return (*self.location.sort_key, self.rule_id)


class ParseFailure(BaseModel):
    """Fatal diagnostic for one input file."""

    model_config = ConfigDict(frozen=True)

    location: SourceLocation
    kind: str
    message: str


class CheckReport(BaseModel):
    """Aggregated results of one checking run."""

    rule_set_version: str
    files_checked: list[str] = Field(default_factory=list)
    violations: list[Violation] = Field(default_factory=list)
    failures: list[ParseFailure] = Field(default_factory=list)

    @property
    def errors(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == Severity.WARNING]

    @property
    def passed(self) -> bool:
        """True if no parse failures and no error-severity violations."""
        return not self.failures and not self.errors
