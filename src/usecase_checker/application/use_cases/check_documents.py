"""Use Case: Check a use-case document and its feature files.

Reads and parses every input before any rule runs. A file that cannot be
read or parsed is recorded as a failure and left out of rule checking;
the remaining files are still checked and reported.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from usecase_checker.domain.errors import InputFileError, ParseError
from usecase_checker.domain.models.scenario import FeatureFile
from usecase_checker.domain.models.use_case import UseCaseDocument
from usecase_checker.domain.models.violation import CheckReport, ParseFailure, SourceLocation
from usecase_checker.parsers.feature_parser import FeatureParser
from usecase_checker.parsers.use_case_parser import UseCaseParser
from usecase_checker.rules.checker import RuleChecker

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Read a UTF-8 input file, raising ``InputFileError`` on failure."""
    if not path.exists():
        raise InputFileError(str(path), "file not found")
    if not path.is_file():
        raise InputFileError(str(path), "not a file")
    try:
        return path.read_text(encoding="utf-8").lstrip("\ufeff")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputFileError(str(path), f"cannot read file: {exc}") from exc


def expand_feature_paths(paths: Sequence[Path], extensions: Sequence[str]) -> list[Path]:
    """Replace directories by the feature files they contain (recursively, sorted)."""
    suffixes = {e.lower() for e in extensions}
    expanded: list[Path] = []
    for path in paths:
        if path.is_dir():
            found = sorted(
                p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in suffixes
            )
            logger.debug("%s: %d feature file(s)", path, len(found))
            expanded.extend(found)
        else:
            expanded.append(path)
    return expanded


class CheckDocumentsUseCase:
    """Orchestrate parsing and rule checking for one run."""

    def __init__(
        self,
        use_case_parser: UseCaseParser,
        feature_parser: FeatureParser,
        checker: RuleChecker,
        feature_extensions: Sequence[str] = (".feature",),
    ) -> None:
        self._use_case_parser = use_case_parser
        self._feature_parser = feature_parser
        self._checker = checker
        self._feature_extensions = tuple(feature_extensions)

    def execute(self, use_case_path: Path, feature_paths: Sequence[Path]) -> CheckReport:
        """Check the given files.

        Args:
            use_case_path: Path to the markdown use-case document.
            feature_paths: Feature files, or directories holding them.

        Returns:
            A CheckReport with sorted violations and any per-file failures.
        """
        failures: list[ParseFailure] = []

        document: Optional[UseCaseDocument] = None
        try:
            document = self._use_case_parser.parse(read_text(use_case_path), str(use_case_path))
        except (ParseError, InputFileError) as exc:
            logger.debug("Use case %s rejected: %s", use_case_path, exc)
            failures.append(self._failure(exc))

        files = expand_feature_paths(feature_paths, self._feature_extensions)
        for path in feature_paths:
            if path.is_dir() and not any(f.is_relative_to(path) for f in files):
                failures.append(self._failure(InputFileError(str(path), "no feature files found")))

        features: list[FeatureFile] = []
        for path in files:
            try:
                features.append(self._feature_parser.parse(read_text(path), str(path)))
            except (ParseError, InputFileError) as exc:
                logger.debug("Feature %s rejected: %s", path, exc)
                failures.append(self._failure(exc))

        violations = self._checker.run(document, features)
        return CheckReport(
            rule_set_version=self._checker.rule_set.version,
            files_checked=[str(use_case_path), *(str(p) for p in files)],
            violations=violations,
            failures=sorted(failures, key=lambda f: f.location.sort_key),
        )

    @staticmethod
    def _failure(exc: ParseError | InputFileError) -> ParseFailure:
        return ParseFailure(
            location=SourceLocation(path=exc.path, line=exc.line),
            kind=exc.kind,
            message=exc.message,
        )
