"""
goextract structured error codes.

Error codes a caller can handle programmatically:
- GOX_ERR_NOT_FOUND: requested function not declared in the package
- GOX_ERR_PARSE: a source file failed to parse
- GOX_ERR_NO_SOURCES: directory holds no Go source files
- GOX_ERR_DUPLICATE: a name is declared twice (strict duplicate policy)
- GOX_ERR_INTERNAL: anything else
"""

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


# Error codes
ERR_NOT_FOUND = "GOX_ERR_NOT_FOUND"
ERR_PARSE = "GOX_ERR_PARSE"
ERR_NO_SOURCES = "GOX_ERR_NO_SOURCES"
ERR_DUPLICATE = "GOX_ERR_DUPLICATE"
ERR_INTERNAL = "GOX_ERR_INTERNAL"


class ExtractError(Exception):
    """Base class for failures raised by the parser and index collaborators."""

    code = ERR_INTERNAL


class SourceParseError(ExtractError):
    """A Go source file could not be parsed."""

    code = ERR_PARSE

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(f"Failed to parse {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason


class DuplicateDeclarationError(ExtractError):
    """A top-level name is declared twice with the same kind."""

    code = ERR_DUPLICATE

    def __init__(self, kind: str, name: str, first: str, second: str) -> None:
        super().__init__(f"{kind} '{name}' declared twice ({first} and {second})")
        self.kind = kind
        self.name = name
        self.locations = [first, second]


@dataclass
class GoExtractError:
    """Structured error response for machine parsing."""

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


def make_error(code: str, message: str, **details) -> dict:
    """Create a structured error response dict."""
    return GoExtractError(code=code, message=message, details=details).to_dict()


def is_error(result: Any) -> bool:
    return isinstance(result, dict) and result.get("error") is True


def make_not_found_error(item_type: str, name: str) -> dict:
    """Create a not found error."""
    return make_error(
        ERR_NOT_FOUND,
        f"{item_type} '{name}' not found",
        type=item_type,
        name=name,
    )


def make_parse_error(file_path: str, reason: str) -> dict:
    """Create a parse error."""
    return make_error(
        ERR_PARSE,
        f"Failed to parse {file_path}: {reason}",
        file=file_path,
    )


def make_no_sources_error(directory: str) -> dict:
    return make_error(
        ERR_NO_SOURCES,
        f"No Go files found in {directory}",
        directory=directory,
    )


def make_duplicate_error(exc: DuplicateDeclarationError) -> dict:
    return make_error(
        ERR_DUPLICATE,
        str(exc),
        kind=exc.kind,
        name=exc.name,
        locations=exc.locations,
    )


def error_from_exception(exc: Exception) -> dict:
    """Map a collaborator exception onto its structured error dict."""
    if isinstance(exc, SourceParseError):
        return make_parse_error(exc.file_path, exc.reason)
    if isinstance(exc, DuplicateDeclarationError):
        return make_duplicate_error(exc)
    logger.debug("unexpected extraction failure: %s", exc)
    return make_error(ERR_INTERNAL, str(exc))
