"""Use-case document models.

A ``UseCaseDocument`` is the parsed, immutable form of one markdown use-case
file. Line numbers are kept on every element so rule violations can point
back at the source.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


SECTION_TITLES = {
    "description": "Description",
    "primary_actor": "Primary Actor",
    "preconditions": "Preconditions",
    "basic_flow": "Basic Flow",
    "alternative_flows": "Alternative Flows",
    "exception_flows": "Exception Flows",
    "business_rules": "Business Rules",
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ListItem(_Frozen):
    """A single bullet or numbered entry with its source line."""

    text: str
    line: int


class FlowStep(_Frozen):
    """One numbered step of a flow."""

    number: str = Field(..., description="Step number as written (e.g. '3' or '3a')")
    text: str
    line: int


class AlternativeFlow(_Frozen):
    """A deviation from the basic flow, triggered at a referenced step."""

    id: str
    trigger: str = ""
    steps: tuple[FlowStep, ...] = ()
    line: int


class ExceptionFlow(_Frozen):
    """Documentation of an actual runtime exception."""

    name: str
    description: str = ""
    line: int


class UnknownSection(_Frozen):
    """A top-level header outside the section vocabulary."""

    title: str
    line: int


class UseCaseDocument(_Frozen):
    """Parsed use-case document (aggregate root)."""

    path: str
    title: str = ""
    description: str
    primary_actor: str
    preconditions: tuple[ListItem, ...] = ()
    basic_flow: tuple[FlowStep, ...]
    alternative_flows: tuple[AlternativeFlow, ...] = ()
    exception_flows: tuple[ExceptionFlow, ...] = ()
    business_rules: tuple[ListItem, ...] = ()
    unknown_sections: tuple[UnknownSection, ...] = ()
    section_order: tuple[str, ...] = Field(
        default=(),
        description="Canonical section keys (or 'unknown:<title>') in document order",
    )
    section_lines: dict[str, int] = Field(default_factory=dict)

    @property
    def step_numbers(self) -> set[str]:
        return {step.number.lower() for step in self.basic_flow}
