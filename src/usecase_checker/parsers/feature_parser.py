"""Gherkin feature-file parser.

Produces a ``FeatureFile`` with its ordered ``BddScenario`` blocks. Step
text is kept verbatim so vocabulary rules see exactly what was written.

Free text is accepted where Gherkin allows a description (under
``Feature:``, ``Rule:`` and ``Examples:``). Inside a scenario every line
must be a step, a table row, a doc string, a tag or a comment; anything
else is reported as ``MalformedScenario``.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from usecase_checker.domain.errors import MalformedScenario
from usecase_checker.domain.models.enums import StepKeyword
from usecase_checker.domain.models.scenario import BddScenario, FeatureFile, Step
from usecase_checker.domain.models.use_case import ListItem

logger = logging.getLogger(__name__)

_FEATURE = re.compile(r"^Feature:\s*(.*)$")
_RULE = re.compile(r"^Rule:\s*(.*)$")
_BACKGROUND = re.compile(r"^Background:\s*(.*)$")
_SCENARIO = re.compile(r"^(Scenario Outline|Scenario Template|Scenario|Example):\s*(.*)$")
_EXAMPLES = re.compile(r"^(Examples|Scenarios):\s*(.*)$")
_STEP = re.compile(r"^(Given|When|Then|And|But|\*)\s+(.*?)\s*$")
_DOC_STRING = ('"""', "```")

_BUSINESS_RULES = re.compile(r"^business rules\s*:?\s*$", re.IGNORECASE)
_BULLET = re.compile(r"^(?:[-*+]|\d+[.)])\s+(.*)$")

_KEYWORDS = {
    "Given": StepKeyword.GIVEN,
    "When": StepKeyword.WHEN,
    "Then": StepKeyword.THEN,
}

# Parser states
_START = "start"
_DESCRIPTION = "description"
_SCENARIO_BODY = "scenario"
_EXAMPLES_BODY = "examples"


class _ScenarioDraft:
    """Mutable accumulator for the scenario being parsed."""

    def __init__(self, title: str, kind: str, tags: list[str], line: int) -> None:
        self.title = title
        self.kind = kind
        self.tags = tags
        self.line = line
        self.steps: list[Step] = []

    def build(self) -> BddScenario:
        return BddScenario(
            title=self.title,
            kind=self.kind,
            tags=tuple(self.tags),
            steps=tuple(self.steps),
            line=self.line,
        )


def _uncomment(line: str) -> str:
    text = line.strip()
    return text[1:].strip() if text.startswith("#") else text


def find_business_rules(lines: list[str]) -> tuple[list[ListItem], Optional[int], set[int]]:
    """Locate ``Business Rules:`` blocks (plain or commented).

    Returns the listed items, the line of the first block header and the
    set of line numbers the blocks occupy.
    """
    items: list[ListItem] = []
    first: Optional[int] = None
    occupied: set[int] = set()
    in_block = False

    for number, raw in enumerate(lines, start=1):
        text = _uncomment(raw)
        if _BUSINESS_RULES.match(text):
            in_block = True
            first = first or number
            occupied.add(number)
            continue
        if not in_block:
            continue
        bullet = _BULLET.match(text)
        if bullet:
            items.append(ListItem(text=bullet.group(1).strip(), line=number))
            occupied.add(number)
        else:
            in_block = False
    return items, first, occupied


class FeatureParser:
    """Parse Gherkin ``.feature`` text into a ``FeatureFile``."""

    def parse(self, text: str, path: str) -> FeatureFile:
        """Parse *text*; raise ``MalformedScenario`` on the first invalid line."""
        lines = text.lstrip("\ufeff").splitlines()
        rules, rules_line, skip = find_business_rules(lines)

        title: Optional[str] = None
        feature_tags: list[str] = []
        pending_tags: list[str] = []
        scenarios: list[BddScenario] = []
        current: Optional[_ScenarioDraft] = None
        state = _START
        doc_string: Optional[str] = None

        def close() -> None:
            nonlocal current
            if current is not None:
                scenarios.append(current.build())
                current = None

        for number, raw in enumerate(lines, start=1):
            line = raw.strip()

            if doc_string is not None:
                if line.startswith(doc_string):
                    doc_string = None
                continue
            if not line or line.startswith("#") or number in skip:
                continue

            if line.startswith("@"):
                pending_tags.extend(t for t in line.split() if t.startswith("@"))
                continue

            m = _FEATURE.match(line)
            if m:
                if title is not None:
                    raise MalformedScenario(path, number, "more than one 'Feature:' in file")
                title, feature_tags, pending_tags = m.group(1).strip(), pending_tags, []
                state = _DESCRIPTION
                continue

            if title is None:
                raise MalformedScenario(path, number, f"expected 'Feature:' but found {line!r}")

            if _RULE.match(line):
                close()
                pending_tags = []
                state = _DESCRIPTION
                continue

            m = _BACKGROUND.match(line)
            if m:
                close()
                current = _ScenarioDraft(m.group(1).strip(), "Background", [], number)
                pending_tags = []
                state = _SCENARIO_BODY
                continue

            m = _SCENARIO.match(line)
            if m:
                close()
                kind = "Scenario Outline" if m.group(1).startswith("Scenario ") else "Scenario"
                current = _ScenarioDraft(m.group(2).strip(), kind, pending_tags, number)
                pending_tags = []
                state = _SCENARIO_BODY
                continue

            m = _EXAMPLES.match(line)
            if m:
                if current is None:
                    raise MalformedScenario(path, number, "'Examples:' outside of a scenario")
                pending_tags = []
                state = _EXAMPLES_BODY
                continue

            if line.startswith(_DOC_STRING):
                if state != _SCENARIO_BODY or current is None or not current.steps:
                    raise MalformedScenario(path, number, "doc string without a preceding step")
                doc_string = line[:3]
                continue

            if line.startswith("|"):
                if state == _SCENARIO_BODY and current is not None and not current.steps:
                    raise MalformedScenario(path, number, "data table without a preceding step")
                continue

            m = _STEP.match(line)
            if m:
                if state != _SCENARIO_BODY or current is None:
                    raise MalformedScenario(
                        path, number, f"step outside of a scenario: {line!r}"
                    )
                current.steps.append(self._step(m.group(1), m.group(2), current, path, number))
                continue

            # Free text is a description everywhere except inside a scenario
            if state == _SCENARIO_BODY:
                raise MalformedScenario(
                    path,
                    number,
                    f"step lacks a Given/When/Then/And/But keyword: {line!r}",
                )

        if doc_string is not None:
            raise MalformedScenario(path, len(lines), "unterminated doc string")
        if title is None:
            raise MalformedScenario(path, 1, "missing 'Feature:' line")
        close()

        logger.debug("%s: %d scenario(s)", path, len(scenarios))
        return FeatureFile(
            path=path,
            title=title,
            tags=tuple(feature_tags),
            scenarios=tuple(scenarios),
            business_rules=tuple(rules),
            business_rules_line=rules_line,
        )

    @staticmethod
    def _step(
        keyword_text: str,
        text: str,
        scenario: _ScenarioDraft,
        path: str,
        number: int,
    ) -> Step:
        keyword = _KEYWORDS.get(keyword_text)
        if keyword is None:
            if scenario.steps:
                keyword = scenario.steps[-1].keyword
            elif keyword_text == "*":
                keyword = StepKeyword.GIVEN
            else:
                raise MalformedScenario(
                    path,
                    number,
                    f"'{keyword_text}' step must follow a Given, When or Then step",
                )
        return Step(keyword=keyword, keyword_text=keyword_text, text=text, line=number)
