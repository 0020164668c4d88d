"""Domain errors: custom exceptions for the use-case checker.

Parse errors are fatal for the file they occur in. Rule violations are
never raised; they are collected as ``Violation`` values instead.
"""

from __future__ import annotations


class CheckerError(Exception):
    """Base exception for all checker errors."""


class ParseError(CheckerError):
    """Raised when an input file cannot be parsed into its domain model."""

    kind = "parse error"

    def __init__(self, path: str, line: int, message: str) -> None:
        self.path = path
        self.line = line
        self.message = message
        super().__init__(f"{path}:{line}: {message}")


class MalformedDocument(ParseError):
    """Raised when a use-case document lacks required sections or is unparseable."""

    kind = "malformed document"


class MalformedScenario(ParseError):
    """Raised when a feature file contains a line the Gherkin grammar rejects."""

    kind = "malformed scenario"


class ConfigurationError(CheckerError):
    """Raised when configuration is invalid or references an unknown rule set."""


class InputFileError(CheckerError):
    """Raised when an input file is missing or cannot be read."""

    kind = "input error"

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.line = 0
        self.message = message
        super().__init__(f"{path}: {message}")
