"""Thin CLI wrapper: Typer commands that delegate to Use Cases.

All wiring goes through the Container (bootstrap.py).

``checker`` runs the checks::

    checker docs/withdraw-cash.md features/

``checker-config`` manages the JSON configuration and lists rule sets.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError

from usecase_checker.application.error_messages import format_validation_errors
from usecase_checker.domain.errors import ConfigurationError
from usecase_checker.domain.models.enums import OutputFormat
from usecase_checker.presentation.cli.formatters import (
    console,
    error_message,
    json_panel,
    plain,
    rules_table,
    success_panel,
)
from usecase_checker.presentation.report import EXIT_MALFORMED, exit_code, render_json, render_text

app = typer.Typer(
    name="checker",
    help="Check a use-case document and its BDD feature files against the practices guide.",
    rich_markup_mode="rich",
    no_args_is_help=True,
    add_completion=False,
)

config_app = typer.Typer(
    name="checker-config",
    help="Manage the checker configuration and inspect rule sets.",
    rich_markup_mode="rich",
    no_args_is_help=True,
    add_completion=False,
)

ConfigOption = Annotated[
    Optional[str],
    typer.Option("--config", "-c", help="Path to a JSON configuration file"),
]
RuleSetOption = Annotated[
    Optional[str],
    typer.Option(
        "--rule-set",
        "-r",
        envvar="USECASE_CHECKER_RULE_SET",
        help="Rule set version (defaults to the configured version)",
    ),
]


def _build_container(
    config: Optional[str],
    rule_set: Optional[str],
    disable: Optional[list[str]] = None,
):
    """Build the Container or exit with code 2 on configuration problems."""
    from usecase_checker.bootstrap import Container

    try:
        return Container(config_path=config, rule_set_version=rule_set, disabled_rules=disable)
    except FileNotFoundError as e:
        error_message(str(e))
    except ValidationError as e:
        error_message("Invalid configuration:")
        for msg in format_validation_errors(e.errors()):
            console.print(f"  - {msg}", markup=False, soft_wrap=True)
    except ConfigurationError as e:
        error_message(str(e))
    raise typer.Exit(code=EXIT_MALFORMED)


# ---------------------------------------------------------------------------
# checker <usecase-file> <feature-file>...
# ---------------------------------------------------------------------------


@app.command()
def check(
    use_case: Annotated[Path, typer.Argument(help="Use-case document (markdown)")],
    features: Annotated[
        list[Path], typer.Argument(help="Feature files, or directories of .feature files")
    ],
    rule_set: RuleSetOption = None,
    config: ConfigOption = None,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Report format")
    ] = OutputFormat.TEXT,
    disable: Annotated[
        Optional[list[str]],
        typer.Option("--disable", "-d", help="Rule id to skip (repeatable), e.g. R7"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Check a use-case document and its feature files.

    Exit code 0: no errors. 1: error violations. 2: malformed input or configuration.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    container = _build_container(config, rule_set, disable)
    report = container.check_documents().execute(use_case, features)

    if output_format == OutputFormat.JSON:
        plain(render_json(report))
    else:
        plain(render_text(report))

    raise typer.Exit(code=exit_code(report))


# ---------------------------------------------------------------------------
# checker-config show / init / validate / rules
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(config: ConfigOption = None) -> None:
    """Show the active configuration (formatted)."""
    from usecase_checker.config import get_config, load_config

    try:
        cfg = load_config(Path(config)) if config else get_config()
    except (FileNotFoundError, ConfigurationError) as e:
        error_message(str(e))
        raise typer.Exit(code=1)
    except ValidationError as e:
        error_message("Invalid configuration:")
        for msg in format_validation_errors(e.errors()):
            console.print(f"  - {msg}", markup=False, soft_wrap=True)
        raise typer.Exit(code=1)
    json_panel(cfg.model_dump_json(indent=2))


@config_app.command("init")
def config_init(
    output: Annotated[
        str, typer.Option("--output", "-o", help="Destination file name")
    ] = "checker_config.json",
) -> None:
    """Copy the default configuration to the current directory for customisation."""
    from usecase_checker.config.loader import _DEFAULT_CONFIG_PATH

    dest = Path(output)
    if dest.exists():
        console.print(f"[bold yellow]File already exists:[/] {dest}")
        overwrite = typer.confirm("Overwrite it?")
        if not overwrite:
            raise typer.Abort()

    shutil.copy2(_DEFAULT_CONFIG_PATH, dest)
    success_panel(
        f"Configuration copied to: [bold green]{dest}[/]\n\n"
        "Edit this file and use it with [bold]--config[/]:\n"
        f'  checker --config "{dest}" usecase.md features/',
        title="Config Init",
    )


@config_app.command("validate")
def config_validate(
    config_file: Annotated[str, typer.Argument(help="JSON configuration file to validate")],
) -> None:
    """Validate a JSON configuration file."""
    from usecase_checker.config import load_config
    from usecase_checker.rules.registry import build_rule_set

    path = Path(config_file)
    if not path.exists():
        error_message(f"File not found: {path}")
        raise typer.Exit(code=1)

    try:
        cfg = load_config(path)
        rule_set = build_rule_set(cfg.metadata.rule_set_version, cfg)
    except ValidationError as e:
        error_message("Invalid configuration:")
        for msg in format_validation_errors(e.errors()):
            console.print(f"  - {msg}", markup=False, soft_wrap=True)
        raise typer.Exit(code=1)
    except ConfigurationError as e:
        error_message(str(e))
        raise typer.Exit(code=1)

    success_panel(
        f"Valid configuration\n\n"
        f"  Rule set: [cyan]{rule_set.version}[/]\n"
        f"  Enabled rules: [cyan]{', '.join(rule_set.rule_ids)}[/]\n"
        f"  Disabled rules: [cyan]{', '.join(cfg.disabled_rules) or 'none'}[/]",
        title="Validation",
    )


@config_app.command("rules")
def config_rules(rule_set: RuleSetOption = None, config: ConfigOption = None) -> None:
    """List the rules of a rule set."""
    container = _build_container(config, rule_set)
    rules_table(container.rule_set)


if __name__ == "__main__":
    app()
