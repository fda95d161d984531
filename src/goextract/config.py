"""
Extraction settings.

Provides:
- ExtractConfig dataclass for holding settings
- load_config() to read <package dir>/.goextract.json and apply environment overrides
"""

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Union

from .symbol_index import DUPLICATE_POLICIES, ON_DUPLICATE_WARN

logger = logging.getLogger(__name__)

CONFIG_FILE = ".goextract.json"
DEFAULT_OUTPUT = "output.go"

ENV_INCLUDE_TESTS = "GOEXTRACT_INCLUDE_TESTS"
ENV_ON_DUPLICATE = "GOEXTRACT_ON_DUPLICATE"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ExtractConfig:
    """Settings for one extraction run."""

    include_tests: bool = False
    exclude_patterns: List[str] = field(default_factory=list)
    on_duplicate: str = ON_DUPLICATE_WARN
    include_imports: bool = True
    output: str = DEFAULT_OUTPUT

    def with_overrides(self, **overrides) -> "ExtractConfig":
        """Copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return _validated(replace(self, **values))


def _as_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _as_patterns(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(pattern) for pattern in value]
    logger.warning("Ignoring excludePatterns: expected a list of globs")
    return []


def _validated(config: ExtractConfig) -> ExtractConfig:
    if config.on_duplicate not in DUPLICATE_POLICIES:
        logger.warning(
            "Unknown duplicate policy %r, using %r", config.on_duplicate, ON_DUPLICATE_WARN
        )
        config.on_duplicate = ON_DUPLICATE_WARN
    return config


def _apply_env(config: ExtractConfig) -> ExtractConfig:
    include_tests = os.environ.get(ENV_INCLUDE_TESTS)
    if include_tests is not None:
        config.include_tests = _as_bool(include_tests, False)
    on_duplicate = os.environ.get(ENV_ON_DUPLICATE)
    if on_duplicate:
        config.on_duplicate = on_duplicate.strip().lower()
    return config


def load_config(directory: Union[str, Path]) -> ExtractConfig:
    """
    Load extraction settings for a package directory.

    Args:
        directory: Package directory that may hold a .goextract.json file

    Returns:
        ExtractConfig from the file, or defaults if the file is missing or
        invalid, with environment overrides applied on top.
    """
    config_file = Path(directory) / CONFIG_FILE
    config = ExtractConfig()

    if config_file.exists():
        try:
            with open(config_file, "r") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as exc:
            logger.warning("Ignoring unreadable %s: %s", config_file, exc)
            data = {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", config_file)
            data = {}

        config = ExtractConfig(
            include_tests=_as_bool(data.get("includeTests"), False),
            exclude_patterns=_as_patterns(data.get("excludePatterns")),
            on_duplicate=str(data.get("onDuplicate", ON_DUPLICATE_WARN)),
            include_imports=_as_bool(data.get("includeImports"), True),
            output=str(data.get("output") or DEFAULT_OUTPUT),
        )

    return _validated(_apply_env(config))
