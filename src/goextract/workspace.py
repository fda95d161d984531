"""
Go source file enumeration for one package directory.

Provides:
- iter_go_files() to list the .go files of a directory
- should_include_file() to check a single file name against the filters
"""

import fnmatch
import os
from pathlib import Path
from typing import Iterable, Iterator, Union

GO_EXTENSION = ".go"
TEST_SUFFIX = "_test.go"


def _normalize_path(path: str) -> str:
    """
    Normalize a path for consistent matching.

    - Converts backslashes to forward slashes
    - Removes leading ./
    - Removes trailing /
    """
    path = path.replace("\\", "/")
    if path.startswith("./"):
        path = path[2:]
    return path.rstrip("/")


def _matches_any_pattern(name: str, patterns: Iterable[str]) -> bool:
    """
    Check if a file name matches any of the glob patterns.

    Patterns are matched against the bare file name, so ``zz_*.go`` and
    ``*_generated.go`` work as expected.
    """
    normalized = _normalize_path(name)
    for pattern in patterns:
        if fnmatch.fnmatch(normalized, _normalize_path(pattern)):
            return True
    return False


def should_include_file(
    name: str,
    include_tests: bool = False,
    exclude_patterns: Iterable[str] = (),
) -> bool:
    """
    Determine if a file belongs to the package sources.

    Logic:
    1. Must end in .go and not be hidden
    2. _test.go files only when include_tests is set
    3. Must not match any exclude pattern
    """
    if name.startswith(".") or not name.endswith(GO_EXTENSION):
        return False
    if not include_tests and name.endswith(TEST_SUFFIX):
        return False
    return not _matches_any_pattern(name, exclude_patterns)


def iter_go_files(
    directory: Union[str, Path],
    include_tests: bool = False,
    exclude_patterns: Iterable[str] = (),
) -> Iterator[Path]:
    """Iterate the Go files of one package directory.

    Subdirectories are other packages and are not descended into.

    Args:
        directory: Package directory
        include_tests: If True, also yield _test.go files
        exclude_patterns: Glob patterns of file names to skip

    Yields:
        Absolute Path objects, sorted by file name
    """
    root = Path(directory).resolve()
    patterns = list(exclude_patterns)
    for entry in sorted(os.scandir(root), key=lambda item: item.name):
        if not entry.is_file():
            continue
        if should_include_file(entry.name, include_tests=include_tests, exclude_patterns=patterns):
            yield root / entry.name
