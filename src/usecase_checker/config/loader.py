"""Reads the checker configuration from JSON.

Each file is validated into a ``CheckerConfig`` the first time it is asked
for and reused afterwards, keyed by its resolved path, so the packaged
defaults and a user's ``--config`` file can coexist in one process. A file
that fails to load is never cached.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from usecase_checker.config.models import CheckerConfig
from usecase_checker.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Resolved path -> validated config
_config_cache: dict[str, CheckerConfig] = {}

# Packaged defaults, shipped as package data
_DEFAULT_CONFIG_PATH = Path(__file__).parent / "checker_default.json"


def load_config(path: Optional[Path] = None) -> CheckerConfig:
    """Return the validated config stored at *path* (packaged defaults if ``None``).

    Raises
    ------
    FileNotFoundError
        *path* does not exist.
    ConfigurationError
        The file is not JSON; the message carries the failing line.
    pydantic.ValidationError
        The JSON does not fit ``CheckerConfig``, including invalid regexes
        and malformed rule ids.
    """
    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH
    cache_key = str(config_path.resolve())

    if cache_key in _config_cache:
        return _config_cache[cache_key]

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Invalid JSON in {config_path} (line {exc.lineno}): {exc.msg}"
        ) from exc

    config = CheckerConfig.model_validate(raw)
    logger.debug("Loaded config %s (rule set %s)", config_path, config.metadata.rule_set_version)
    _config_cache[cache_key] = config
    return config


def get_config() -> CheckerConfig:
    """Return the packaged default configuration."""
    return load_config()


def clear_cache() -> None:
    """Forget every loaded configuration; the next call re-reads from disk."""
    _config_cache.clear()

