"""Enumerations shared by the parsers, rules and report."""

from enum import Enum


class Severity(str, Enum):
    """Violation severity. Only errors affect the exit code."""

    ERROR = "error"
    WARNING = "warning"


class StepKeyword(str, Enum):
    """Canonical Gherkin step type (And/But/* resolve to one of these)."""

    GIVEN = "Given"
    WHEN = "When"
    THEN = "Then"


class OutputFormat(str, Enum):
    """Report output formats."""

    TEXT = "text"
    JSON = "json"
