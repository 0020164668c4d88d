"""Tests for the markdown use-case document parser."""

from __future__ import annotations

import textwrap

import pytest

from usecase_checker.domain.errors import MalformedDocument
from usecase_checker.domain.models.use_case import UseCaseDocument
from usecase_checker.parsers.use_case_parser import UseCaseParser, normalize_header


def _doc(text: str) -> str:
    return textwrap.dedent(text)


# ---------------------------------------------------------------------------
# Well-formed documents
# ---------------------------------------------------------------------------


class TestCleanDocument:
    @pytest.fixture(autouse=True)
    def _parse(self, config, clean_use_case):
        self.doc = UseCaseParser(config).parse(clean_use_case, "withdraw.md")

    def test_returns_document(self):
        assert isinstance(self.doc, UseCaseDocument)
        assert self.doc.path == "withdraw.md"

    def test_title_from_level_one_heading(self):
        assert self.doc.title == "Use Case: Withdraw Cash"

    def test_description_and_actor(self):
        assert self.doc.description == "The customer withdraws cash from their account at an ATM."
        assert self.doc.primary_actor == "Customer"

    def test_preconditions(self):
        assert [p.text for p in self.doc.preconditions] == [
            "The customer holds an active debit card.",
            "The account has a positive balance.",
        ]
        assert self.doc.preconditions[0].line == 10

    def test_basic_flow_numbers_and_lines(self):
        assert [s.number for s in self.doc.basic_flow] == ["1", "2", "3", "4", "5", "6"]
        assert self.doc.basic_flow[0].text == "The customer inserts the debit card."
        assert self.doc.basic_flow[0].line == 14

    def test_alternative_flows(self):
        a1, a2 = self.doc.alternative_flows
        assert a1.id == "A1"
        assert a1.trigger == "At step 3, the customer enters a wrong PIN."
        assert len(a1.steps) == 2
        assert a1.line == 22
        assert a2.id == "A2"
        assert "step 5" in a2.trigger

    def test_exception_flows(self):
        (flow,) = self.doc.exception_flows
        assert flow.name == "Card retained"
        assert flow.description == "The card is reported stolen and the ATM keeps it."

    def test_business_rules(self):
        assert [r.text for r in self.doc.business_rules] == [
            "Daily withdrawal limit is 500 EUR.",
            "A card is blocked after three wrong PIN entries.",
        ]

    def test_section_order(self):
        assert self.doc.section_order[0] == "description"
        assert self.doc.section_lines["basic_flow"] == 13
        assert self.doc.unknown_sections == ()

    def test_document_is_frozen(self):
        with pytest.raises(Exception):
            self.doc.description = "changed"


class TestHeaderVariants:
    def setup_method(self) -> None:
        from usecase_checker.config import get_config

        self.parser = UseCaseParser(get_config())

    def test_label_style_headers(self):
        doc = self.parser.parse(
            _doc(
                """\
                Description: Customer withdraws cash.
                Primary Actor: Customer
                Basic Flow:
                1. The customer inserts the card.
                2. The system dispenses cash.
                """
            ),
            "uc.md",
        )
        assert doc.description == "Customer withdraws cash."
        assert doc.primary_actor == "Customer"
        assert len(doc.basic_flow) == 2

    def test_headers_are_case_insensitive_with_aliases(self):
        doc = self.parser.parse(
            _doc(
                """\
                ## DESCRIPTION
                Pay an invoice.
                ## actor
                Accountant
                ## **Main Success Scenario**
                1. The accountant opens the invoice.
                """
            ),
            "uc.md",
        )
        assert doc.primary_actor == "Accountant"
        assert doc.basic_flow[0].text == "The accountant opens the invoice."

    def test_unknown_sections_are_retained(self):
        doc = self.parser.parse(
            _doc(
                """\
                ## Description
                Pay an invoice.
                ## Primary Actor
                Accountant
                ## Basic Flow
                1. The accountant pays.
                ## Notes
                Remember the audit.
                """
            ),
            "uc.md",
        )
        (section,) = doc.unknown_sections
        assert section.title == "Notes"
        assert section.line == 7
        assert doc.section_order[-1] == "unknown:notes"

    def test_unnumbered_basic_flow_gets_positions(self):
        doc = self.parser.parse(
            _doc(
                """\
                ## Description
                d
                ## Primary Actor
                a
                ## Basic Flow
                - First step
                - Second step
                  continues here
                """
            ),
            "uc.md",
        )
        assert [s.number for s in doc.basic_flow] == ["1", "2"]
        assert doc.basic_flow[1].text == "Second step continues here"

    def test_bullet_alternative_flows_with_ids(self):
        doc = self.parser.parse(
            _doc(
                """\
                ## Description
                d
                ## Primary Actor
                a
                ## Basic Flow
                1. one
                2. two
                3. three
                ## Alternative Flows
                - A1: At step 2, the customer cancels.
                  1. The system returns the card.
                3a. The customer asks for a receipt.
                """
            ),
            "uc.md",
        )
        a1, a2 = doc.alternative_flows
        assert (a1.id, a1.trigger) == ("A1", "At step 2, the customer cancels.")
        assert len(a1.steps) == 1
        assert a2.id == "3a"
        assert a2.trigger.startswith("3a")

    def test_top_level_bullets_are_separate_alternative_flows(self):
        doc = self.parser.parse(
            _doc(
                """\
                ## Description
                d
                ## Primary Actor
                a
                ## Basic Flow
                1. one
                2. two
                ## Alternative Flows
                - At step 1, the card is unreadable.
                - At step 2, the customer cancels.
                """
            ),
            "uc.md",
        )
        assert [(f.id, f.trigger) for f in doc.alternative_flows] == [
            ("A1", "At step 1, the card is unreadable."),
            ("A2", "At step 2, the customer cancels."),
        ]

    def test_heading_exception_flow_with_body(self):
        doc = self.parser.parse(
            _doc(
                """\
                ## Description
                d
                ## Primary Actor
                a
                ## Basic Flow
                1. one
                ## Exception Flows
                ### E1: Payment rejected
                The bank rejects the payment.
                """
            ),
            "uc.md",
        )
        (flow,) = doc.exception_flows
        assert flow.name == "Payment rejected"
        assert flow.description == "The bank rejects the payment."

    def test_label_style_forbidden_sections_end_the_flow(self):
        doc = self.parser.parse(
            _doc(
                """\
                Description: Customer withdraws cash.
                Primary Actor: Customer
                Basic Flow:
                1. The customer inserts the card.
                2. The system dispenses cash.
                Notes:
                Remember the audit.
                Stakeholders and Interests:
                - Bank wants fees.
                """
            ),
            "uc.md",
        )
        assert [s.text for s in doc.basic_flow] == [
            "The customer inserts the card.",
            "The system dispenses cash.",
        ]
        assert [(s.title, s.line) for s in doc.unknown_sections] == [
            ("Notes", 6),
            ("Stakeholders and Interests", 8),
        ]

    def test_indented_forbidden_label_stays_in_section(self):
        doc = self.parser.parse(
            _doc(
                """\
                Description: Customer withdraws cash.
                Primary Actor: Customer
                Basic Flow:
                1. The customer inserts the card.
                  Notes: the card may be contactless.
                """
            ),
            "uc.md",
        )
        assert doc.unknown_sections == ()
        assert doc.basic_flow[0].text == (
            "The customer inserts the card. Notes: the card may be contactless."
        )

    def test_lettered_heading_keeps_step_reference_with_trigger_line(self):
        doc = self.parser.parse(
            _doc(
                """\
                ## Description
                d
                ## Primary Actor
                a
                ## Basic Flow
                1. one
                2. two
                ## Alternative Flows
                ### 2a: Wrong PIN
                Trigger: the customer enters a wrong PIN.
                1. The system asks again.
                """
            ),
            "uc.md",
        )
        (flow,) = doc.alternative_flows
        assert flow.id == "2a"
        assert flow.trigger == "2a the customer enters a wrong PIN."
        assert len(flow.steps) == 1


def test_normalize_header():
    assert normalize_header("  **Primary   Actor:** ") == "primary actor"


# ---------------------------------------------------------------------------
# Malformed documents
# ---------------------------------------------------------------------------


class TestMalformedDocuments:
    def setup_method(self) -> None:
        from usecase_checker.config import get_config

        self.parser = UseCaseParser(get_config())

    def test_missing_description(self):
        text = "## Primary Actor\nCustomer\n## Basic Flow\n1. Step one\n"
        with pytest.raises(MalformedDocument, match="Description"):
            self.parser.parse(text, "uc.md")

    def test_missing_primary_actor_names_section(self):
        text = "## Description\nSomething\n## Basic Flow\n1. Step one\n"
        with pytest.raises(MalformedDocument) as exc_info:
            self.parser.parse(text, "uc.md")
        assert "Primary Actor" in exc_info.value.message
        assert exc_info.value.path == "uc.md"

    def test_missing_basic_flow(self):
        text = "## Description\nSomething\n## Primary Actor\nCustomer\n"
        with pytest.raises(MalformedDocument, match="Basic Flow"):
            self.parser.parse(text, "uc.md")

    def test_empty_description_points_at_header(self):
        text = "## Description\n\n## Primary Actor\nCustomer\n## Basic Flow\n1. Step\n"
        with pytest.raises(MalformedDocument) as exc_info:
            self.parser.parse(text, "uc.md")
        assert exc_info.value.line == 1
        assert "empty" in exc_info.value.message

    def test_basic_flow_without_steps(self):
        text = "## Description\nd\n## Primary Actor\na\n## Basic Flow\n### Steps\n"
        with pytest.raises(MalformedDocument, match="no steps"):
            self.parser.parse(text, "uc.md")

    def test_duplicate_section(self):
        text = "## Description\nd\n## Description\ne\n## Primary Actor\na\n## Basic Flow\n1. x\n"
        with pytest.raises(MalformedDocument) as exc_info:
            self.parser.parse(text, "uc.md")
        assert exc_info.value.line == 3

    def test_empty_document(self):
        with pytest.raises(MalformedDocument, match="empty"):
            self.parser.parse("   \n", "uc.md")
