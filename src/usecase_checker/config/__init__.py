"""Checker configuration package."""

from usecase_checker.config.loader import get_config, load_config
from usecase_checker.config.models import CheckerConfig

__all__ = ["CheckerConfig", "get_config", "load_config"]
