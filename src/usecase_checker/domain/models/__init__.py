"""Domain models: pure data, no I/O.

Re-exports the public models so callers can write::

    from usecase_checker.domain.models import UseCaseDocument, Violation
"""

from usecase_checker.domain.models.enums import OutputFormat, Severity, StepKeyword
from usecase_checker.domain.models.scenario import BddScenario, FeatureFile, Step
from usecase_checker.domain.models.use_case import (
    AlternativeFlow,
    ExceptionFlow,
    FlowStep,
    ListItem,
    UnknownSection,
    UseCaseDocument,
)
from usecase_checker.domain.models.violation import (
    CheckReport,
    ParseFailure,
    SourceLocation,
    Violation,
)

__all__ = [
    "AlternativeFlow",
    "BddScenario",
    "CheckReport",
    "ExceptionFlow",
    "FeatureFile",
    "FlowStep",
    "ListItem",
    "OutputFormat",
    "ParseFailure",
    "Severity",
    "SourceLocation",
    "Step",
    "StepKeyword",
    "UnknownSection",
    "UseCaseDocument",
    "Violation",
]
