"""Input parsers: use-case documents and Gherkin feature files."""

from usecase_checker.parsers.feature_parser import FeatureParser
from usecase_checker.parsers.use_case_parser import UseCaseParser

__all__ = ["FeatureParser", "UseCaseParser"]
