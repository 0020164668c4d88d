"""Rich formatting utilities for the CLI.

Keeps all Rich rendering (panels, tables, syntax) in one module that knows
nothing about parsing or rules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from usecase_checker.rules.registry import RuleSet

console = Console()


# ---------------------------------------------------------------------------
# Success / error panels
# ---------------------------------------------------------------------------


def success_panel(message: str, title: str = "usecase-checker") -> None:
    """Print a green success panel."""
    console.print(Panel(message, title=title, border_style="green"))


def error_message(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]Error:[/] {escape(message)}", soft_wrap=True)


# ---------------------------------------------------------------------------
# Report output
# ---------------------------------------------------------------------------


def plain(text: str) -> None:
    """Print pre-rendered report text exactly as given (no markup, no wrapping)."""
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True, end="")


# ---------------------------------------------------------------------------
# JSON / config rendering
# ---------------------------------------------------------------------------


def json_panel(raw_json: str, title: str = "Active checker configuration") -> None:
    """Render JSON inside a syntax-highlighted panel."""
    console.print(
        Panel(
            Syntax(raw_json, "json", theme="monokai", line_numbers=True),
            title=title,
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# Rule set table
# ---------------------------------------------------------------------------


def rules_table(rule_set: RuleSet) -> None:
    """Print the rules of a rule set."""
    table = Table(
        title=f"Rule set {rule_set.version}",
        show_header=True,
        border_style="blue",
    )
    table.add_column("Id", style="cyan", width=4)
    table.add_column("Name", style="green")
    table.add_column("Severity")
    table.add_column("Checks")

    for rule in rule_set.rules:
        color = "red" if rule.severity.value == "error" else "yellow"
        table.add_row(
            rule.rule_id, rule.name, f"[{color}]{rule.severity.value}[/]", rule.description
        )

    console.print(table)
