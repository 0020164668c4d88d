"""Markdown use-case document parser.

Turns a use-case document into a ``UseCaseDocument``. The parser works in
two passes:

  1. **Split**: find section headers (markdown headings or ``Name:``
     labels from the vocabulary) and cut the text into blocks.
  2. **Interpret**: read each block according to its section type
     (free text, list, numbered flow, or flow entries).

Headers are matched case-insensitively against the configured vocabulary.
Headings at the section level that are not in the vocabulary are kept as
unknown sections so structure rules can flag them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from usecase_checker.config.models import CheckerConfig
from usecase_checker.domain.errors import MalformedDocument
from usecase_checker.domain.models.use_case import (
    SECTION_TITLES,
    AlternativeFlow,
    ExceptionFlow,
    FlowStep,
    ListItem,
    UnknownSection,
    UseCaseDocument,
)

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("description", "primary_actor", "basic_flow")

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_LABEL = re.compile(r"^[*_]{0,2}([A-Za-z][A-Za-z \-]*?)[*_]{0,2}\s*:[*_]{0,2}\s*(.*)$")
_LIST_ITEM = re.compile(r"^(\s*)(?:([-*+])|(\d+[a-z]?)[.)])\s+(.*)$")
_ENTRY_ID = re.compile(
    r"^[*_]{0,2}([A-Z]{1,2}\d+(?:\.\d+)?|\d+[a-z])[*_]{0,2}\s*(?:[:.)]|\s-)\s*(.*)$"
)
_TRIGGER = re.compile(r"^[*_]{0,2}trigger[*_]{0,2}\s*:[*_]{0,2}\s*(.*)$", re.IGNORECASE)
_LETTERED_ID = re.compile(r"^\d+[a-z]$")


class _Line(NamedTuple):
    number: int
    text: str
    heading: bool = False


@dataclass
class _Block:
    key: Optional[str]
    title: str
    line: int
    lines: list[_Line] = field(default_factory=list)


@dataclass
class _Entry:
    id: str
    header: str
    line: int
    from_bullet: bool = False
    body: list[_Line] = field(default_factory=list)


def normalize_header(text: str) -> str:
    """Lower-case a header and strip emphasis markers and trailing colons."""
    text = text.strip().strip("*_").strip()
    return re.sub(r"\s+", " ", text.rstrip(":").strip()).lower()


def _strip_bullet(text: str) -> tuple[str, Optional[str], bool]:
    """Return ``(text, number, is_list_item)`` for a line."""
    m = _LIST_ITEM.match(text)
    if not m:
        return text.strip(), None, False
    return m.group(4).strip(), m.group(3), True


class UseCaseParser:
    """Parse markdown use-case documents.

    Usage::

        parser = UseCaseParser(get_config())
        doc = parser.parse(path.read_text(), str(path))
    """

    def __init__(self, config: CheckerConfig) -> None:
        self._vocabulary = config.sections.lookup()
        self._forbidden = frozenset(config.rules.structure.forbidden_sections)

    # -- Public API ------------------------------------------------------

    def parse(self, text: str, path: str) -> UseCaseDocument:
        """Parse *text* and return a ``UseCaseDocument``.

        Raises ``MalformedDocument`` when a required section is missing,
        empty, or declared twice.
        """
        if not text.strip():
            raise MalformedDocument(path, 1, "document is empty")

        title, blocks = self._split(text, path)
        known = {b.key: b for b in blocks if b.key}
        logger.debug("%s: sections %s", path, [b.key or b.title for b in blocks])

        for key in REQUIRED_SECTIONS:
            if key not in known:
                raise MalformedDocument(
                    path, 1, f"required section '{SECTION_TITLES[key]}' not found"
                )

        description = self._text(known["description"], path)
        primary_actor = self._text(known["primary_actor"], path)
        basic_flow = self._flow_steps(known["basic_flow"].lines)
        if not basic_flow:
            block = known["basic_flow"]
            raise MalformedDocument(path, block.line, "section 'Basic Flow' has no steps")

        return UseCaseDocument(
            path=path,
            title=title,
            description=description,
            primary_actor=primary_actor,
            preconditions=self._items(known["preconditions"]) if "preconditions" in known else (),
            basic_flow=basic_flow,
            alternative_flows=(
                self._alternative_flows(known["alternative_flows"])
                if "alternative_flows" in known
                else ()
            ),
            exception_flows=(
                self._exception_flows(known["exception_flows"])
                if "exception_flows" in known
                else ()
            ),
            business_rules=(
                self._items(known["business_rules"]) if "business_rules" in known else ()
            ),
            unknown_sections=tuple(
                UnknownSection(title=b.title, line=b.line) for b in blocks if b.key is None
            ),
            section_order=tuple(b.key or f"unknown:{normalize_header(b.title)}" for b in blocks),
            section_lines={b.key: b.line for b in blocks if b.key},
        )

    # -- Pass 1: split into blocks -----------------------------------------

    def _section_level(self, lines: list[str]) -> int:
        for raw in lines:
            m = _HEADING.match(raw)
            if m and normalize_header(m.group(2)) in self._vocabulary:
                return len(m.group(1))
        return 2

    def _split(self, text: str, path: str) -> tuple[str, list[_Block]]:
        raw_lines = text.splitlines()
        level = self._section_level(raw_lines)
        title = ""
        blocks: list[_Block] = []
        seen: set[str] = set()
        current: Optional[_Block] = None
        in_code = False

        for number, raw in enumerate(raw_lines, start=1):
            if raw.lstrip().startswith("```"):
                in_code = not in_code
                continue
            if in_code:
                continue

            heading = _HEADING.match(raw)
            if heading:
                depth, name = len(heading.group(1)), heading.group(2)
                if depth > level:
                    if current is not None:
                        current.lines.append(_Line(number, name, heading=True))
                    continue
                key = self._vocabulary.get(normalize_header(name))
                if key is None and depth < level and not title and not blocks:
                    title = name.strip()
                    continue
                current = self._open(blocks, seen, key, name, number, path)
                continue

            label = _LABEL.match(raw.strip())
            name = normalize_header(label.group(1)) if label else ""
            # Unindented forbidden labels open an unknown section so R1 can see them
            forbidden = name in self._forbidden and not raw[:1].isspace()
            if label and (name in self._vocabulary or forbidden):
                key = self._vocabulary.get(name)
                current = self._open(blocks, seen, key, label.group(1), number, path)
                if label.group(2).strip():
                    current.lines.append(_Line(number, label.group(2)))
                continue

            if current is not None:
                current.lines.append(_Line(number, raw))

        return title, blocks

    @staticmethod
    def _open(
        blocks: list[_Block],
        seen: set[str],
        key: Optional[str],
        name: str,
        number: int,
        path: str,
    ) -> _Block:
        if key is not None:
            if key in seen:
                raise MalformedDocument(
                    path, number, f"section '{SECTION_TITLES[key]}' is declared more than once"
                )
            seen.add(key)
        block = _Block(key=key, title=name.strip().strip("*_").rstrip(":").strip(), line=number)
        blocks.append(block)
        return block

    # -- Pass 2: interpret blocks ------------------------------------------

    @staticmethod
    def _text(block: _Block, path: str) -> str:
        parts = [_strip_bullet(ln.text)[0] for ln in block.lines if ln.text.strip()]
        text = " ".join(p for p in parts if p)
        if not text:
            raise MalformedDocument(
                path, block.line, f"section '{SECTION_TITLES[block.key]}' is empty"
            )
        return text

    @staticmethod
    def _items(block: _Block) -> tuple[ListItem, ...]:
        items: list[ListItem] = []
        for ln in block.lines:
            if not ln.text.strip():
                continue
            text, _number, is_item = _strip_bullet(ln.text)
            continuation = not is_item and ln.text[:1].isspace() and items
            if continuation:
                prev = items[-1]
                items[-1] = ListItem(text=f"{prev.text} {text}", line=prev.line)
            else:
                items.append(ListItem(text=text, line=ln.number))
        return tuple(items)

    @staticmethod
    def _flow_steps(lines: list[_Line]) -> tuple[FlowStep, ...]:
        steps: list[FlowStep] = []
        for ln in lines:
            if not ln.text.strip() or ln.heading:
                continue
            text, number, is_item = _strip_bullet(ln.text)
            if not is_item and steps and ln.text[:1].isspace():
                prev = steps[-1]
                steps[-1] = FlowStep(number=prev.number, text=f"{prev.text} {text}", line=prev.line)
                continue
            steps.append(FlowStep(number=number or str(len(steps) + 1), text=text, line=ln.number))
        return tuple(steps)

    @staticmethod
    def _entries(lines: list[_Line], prefix: str) -> list[_Entry]:
        """Group a flows section into entries.

        When the section uses sub-headings, only sub-headings open entries.
        Otherwise an entry opens at a leading id (``A1:``, ``3a.``) or at a
        top-level bullet that follows another bullet entry.
        """
        entries: list[_Entry] = []
        current: Optional[_Entry] = None
        heading_style = any(ln.heading for ln in lines)

        for ln in lines:
            if not ln.text.strip():
                continue
            m = _LIST_ITEM.match(ln.text)
            indent = len(m.group(1)) if m else len(ln.text) - len(ln.text.lstrip())
            top = indent < 2
            bullet = bool(m and m.group(2))
            lettered = bool(m and m.group(3) and not m.group(3).isdigit())
            text = m.group(4).strip() if (bullet or lettered) else ln.text.strip()
            entry_id = None if lettered else _ENTRY_ID.match(text)
            auto_id = f"{prefix}{len(entries) + 1}"

            if heading_style:
                if ln.heading:
                    if entry_id:
                        current = _Entry(entry_id.group(1), entry_id.group(2).strip(), ln.number)
                    else:
                        current = _Entry(auto_id, text, ln.number)
                    entries.append(current)
                elif current is not None:
                    current.body.append(ln)
                continue

            if top and lettered:
                current = _Entry(m.group(3), text, ln.number)
            elif top and entry_id and (bullet or not m):
                current = _Entry(entry_id.group(1), entry_id.group(2).strip(), ln.number)
            elif current is None or (top and bullet and current.from_bullet):
                current = _Entry(auto_id, text, ln.number, from_bullet=True)
            else:
                current.body.append(ln)
                continue
            entries.append(current)
        return entries

    def _alternative_flows(self, block: _Block) -> tuple[AlternativeFlow, ...]:
        flows: list[AlternativeFlow] = []
        for entry in self._entries(block.lines, "A"):
            label_trigger = ""
            intro: list[str] = [entry.header] if entry.header else []
            if _LETTERED_ID.match(entry.id):
                # "3a." style ids name the basic-flow step they branch from
                intro.insert(0, entry.id)
            step_lines: list[_Line] = []
            for ln in entry.body:
                text, _number, is_item = _strip_bullet(ln.text)
                label = _TRIGGER.match(text)
                if label and not label_trigger:
                    label_trigger = label.group(1).strip()
                elif is_item:
                    step_lines.append(ln)
                elif not step_lines:
                    intro.append(text)
            if label_trigger and _LETTERED_ID.match(entry.id):
                label_trigger = f"{entry.id} {label_trigger}"
            flows.append(
                AlternativeFlow(
                    id=entry.id,
                    trigger=label_trigger or " ".join(intro),
                    steps=self._flow_steps(step_lines),
                    line=entry.line,
                )
            )
        return tuple(flows)

    def _exception_flows(self, block: _Block) -> tuple[ExceptionFlow, ...]:
        flows: list[ExceptionFlow] = []
        for entry in self._entries(block.lines, "E"):
            name, _sep, inline = entry.header.partition(":")
            body = [_strip_bullet(ln.text)[0] for ln in entry.body]
            description = " ".join(p for p in [inline.strip(), *body] if p)
            flows.append(
                ExceptionFlow(
                    name=name.strip() or entry.id,
                    description=description,
                    line=entry.line,
                )
            )
        return tuple(flows)
