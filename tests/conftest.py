"""Shared fixtures: a well-formed use case and feature file."""

from __future__ import annotations

import textwrap

import pytest

from usecase_checker.config.loader import clear_cache, get_config

CLEAN_USE_CASE = textwrap.dedent(
    """\
    # Use Case: Withdraw Cash

    ## Description
    The customer withdraws cash from their account at an ATM.

    ## Primary Actor
    Customer

    ## Preconditions
    - The customer holds an active debit card.
    - The account has a positive balance.

    ## Basic Flow
    1. The customer inserts the debit card.
    2. The system asks for the PIN.
    3. The customer enters the PIN.
    4. The system shows the withdrawal options.
    5. The customer selects an amount.
    6. The system dispenses the cash and returns the card.

    ## Alternative Flows
    ### A1: Wrong PIN
    Trigger: At step 3, the customer enters a wrong PIN.
    1. The system shows a wrong PIN message.
    2. The flow returns to step 2.

    ### A2: Amount above balance
    Trigger: At step 5, the customer selects an amount above the balance.
    1. The system shows the available balance.

    ## Exception Flows
    - Card retained: The card is reported stolen and the ATM keeps it.

    ## Business Rules
    - Daily withdrawal limit is 500 EUR.
    - A card is blocked after three wrong PIN entries.
    """
)

CLEAN_FEATURE = textwrap.dedent(
    """\
    @atm
    Feature: Withdraw cash
      Customers take cash out of their account at an ATM.

      Background:
        Given the customer holds an active debit card

      Scenario: Successful withdrawal
        When the customer withdraws 100 EUR
        Then the customer receives 100 EUR in cash
        And the account balance is reduced by 100 EUR

      @pin
      Scenario Outline: Wrong PIN
        When the customer enters a wrong PIN <times> times
        Then the customer sees "<message>"

        Examples:
          | times | message      |
          | 1     | Wrong PIN    |
          | 3     | Card blocked |
    """
)


@pytest.fixture(autouse=True)
def _fresh_cache():
    """Ensure a clean config cache for every test."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def config():
    return get_config()


@pytest.fixture
def clean_use_case() -> str:
    return CLEAN_USE_CASE


@pytest.fixture
def clean_feature() -> str:
    return CLEAN_FEATURE


@pytest.fixture
def write(tmp_path):
    """Write *text* to ``tmp_path/name`` and return the path."""

    def _write(name: str, text: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
