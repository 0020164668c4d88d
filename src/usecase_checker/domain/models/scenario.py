"""BDD feature-file models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from usecase_checker.domain.models.enums import StepKeyword
from usecase_checker.domain.models.use_case import ListItem


class Step(BaseModel):
    """One Given/When/Then step with its literal text."""

    model_config = ConfigDict(frozen=True)

    keyword: StepKeyword
    keyword_text: str
    text: str
    line: int

    def __str__(self) -> str:
        return f"{self.keyword_text} {self.text}"


class BddScenario(BaseModel):
    """A scenario, scenario outline or background block."""

    model_config = ConfigDict(frozen=True)

    title: str
    kind: str = "Scenario"
    tags: tuple[str, ...] = ()
    steps: tuple[Step, ...] = ()
    line: int


class FeatureFile(BaseModel):
    """A parsed ``.feature`` file."""

    model_config = ConfigDict(frozen=True)

    path: str
    title: str
    tags: tuple[str, ...] = ()
    scenarios: tuple[BddScenario, ...] = ()
    business_rules: tuple[ListItem, ...] = ()
    business_rules_line: int | None = None

    @property
    def has_business_rules_block(self) -> bool:
        return self.business_rules_line is not None
