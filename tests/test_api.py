"""Tests for the package-level API: loading, extraction and output files."""

import logging
from pathlib import Path

import pytest

from goextract.api import extract_function, list_symbols, load_package, write_extraction
from goextract.config import ExtractConfig
from goextract.errors import (
    ERR_DUPLICATE,
    ERR_NO_SOURCES,
    ERR_NOT_FOUND,
    ERR_PARSE,
    is_error,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def example_package(tmp_path: Path) -> Path:
    """The DoStuff example split across three files."""
    (tmp_path / "helpers.go").write_text(
        "package example\n"
        "\n"
        'import "fmt"\n'
        "\n"
        "// DoStuff calls helperFunc and reads MyVar.\n"
        "func DoStuff() {\n"
        "\tx := helperFunc()\n"
        '\tfmt.Println("DoStuff called, MyVar =", MyVar)\n'
        '\tprintln("DoStuff: x.Field =", x.Field)\n'
        "}\n"
    )
    (tmp_path / "helpers2.go").write_text(
        "package example\n"
        "\n"
        "// helperFunc builds a MyType from MyConst.\n"
        "func helperFunc() MyType {\n"
        '\treturn MyType{Field: "MyConst = " + string(rune(MyConst))}\n'
        "}\n"
    )
    (tmp_path / "globals.go").write_text(
        "package example\n"
        "\n"
        'var MyVar = "a package variable"\n'
        "\n"
        "type MyType struct {\n"
        "\tField string\n"
        "}\n"
        "\n"
        "const MyConst = 42\n"
        "\n"
        "func Unused() {}\n"
    )
    return tmp_path


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def test_extract_function_resolves_closure(example_package: Path) -> None:
    result = extract_function(example_package, "DoStuff")

    assert not is_error(result)
    assert result.package == "example"
    assert result.target.name == "DoStuff"
    assert result.dependency_names() == ["helperFunc", "MyVar", "MyType", "MyConst"]
    assert [Path(f).name for f in result.files] == ["globals.go", "helpers.go", "helpers2.go"]


def test_extract_function_to_dict(example_package: Path) -> None:
    result = extract_function(example_package, "DoStuff")

    data = result.to_dict()

    assert data["target"]["name"] == "DoStuff"
    assert [(d["name"], d["kind"], d["via"]) for d in data["dependencies"]] == [
        ("helperFunc", "func", "DoStuff"),
        ("MyVar", "var", "DoStuff"),
        ("MyType", "type", "helperFunc"),
        ("MyConst", "const", "helperFunc"),
    ]


def test_missing_function_is_not_found(example_package: Path) -> None:
    result = extract_function(example_package, "Nope")

    assert is_error(result)
    assert result["code"] == ERR_NOT_FOUND
    assert result["details"] == {"type": "Function", "name": "Nope"}


def test_missing_directory_is_not_found(tmp_path: Path) -> None:
    result = extract_function(tmp_path / "absent", "DoStuff")

    assert result["code"] == ERR_NOT_FOUND


def test_directory_without_sources(tmp_path: Path) -> None:
    (tmp_path / "README.md").write_text("nothing here\n")

    result = extract_function(tmp_path, "DoStuff")

    assert result["code"] == ERR_NO_SOURCES


def test_parse_failure_is_reported(tmp_path: Path) -> None:
    (tmp_path / "bad.go").write_text("package bad\n\nfunc Broken( {\n")

    result = extract_function(tmp_path, "Broken")

    assert result["code"] == ERR_PARSE
    assert result["details"]["file"].endswith("bad.go")


def test_strict_duplicate_policy_is_reported(tmp_path: Path) -> None:
    (tmp_path / "a.go").write_text("package p\n\nfunc Twice() {}\n")
    (tmp_path / "b.go").write_text("package p\n\nfunc Twice() {}\n")

    result = extract_function(tmp_path, "Twice", config=ExtractConfig(on_duplicate="error"))

    assert result["code"] == ERR_DUPLICATE
    assert result["details"]["name"] == "Twice"


def test_test_files_are_opt_in(tmp_path: Path) -> None:
    (tmp_path / "a.go").write_text("package p\n\nfunc Run() { setup() }\n")
    (tmp_path / "a_test.go").write_text("package p\n\nfunc setup() {}\n")

    without = extract_function(tmp_path, "Run", config=ExtractConfig())
    with_tests = extract_function(tmp_path, "Run", config=ExtractConfig(include_tests=True))

    assert without.dependency_names() == []
    assert with_tests.dependency_names() == ["setup"]


# ---------------------------------------------------------------------------
# Package selection
# ---------------------------------------------------------------------------


def test_multiple_packages_prefers_the_one_declaring_target(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / "a.go").write_text("package alpha\n\nfunc Shared() {}\n")
    (tmp_path / "b.go").write_text("package beta\n\nfunc Target() { helper() }\n\nfunc helper() {}\n")

    with caplog.at_level(logging.WARNING, logger="goextract.api"):
        result = extract_function(tmp_path, "Target")

    assert result.package == "beta"
    assert result.dependency_names() == ["helper"]
    assert "Multiple packages" in caplog.text


def test_explicit_package_selection(tmp_path: Path) -> None:
    (tmp_path / "a.go").write_text("package alpha\n\nfunc Shared() {}\n")
    (tmp_path / "b.go").write_text("package beta\n\nfunc Shared() {}\n")

    pkg = load_package(tmp_path, package="beta")
    missing = load_package(tmp_path, package="gamma")

    assert pkg.name == "beta"
    assert [Path(f).name for f in pkg.files] == ["b.go"]
    assert missing["code"] == ERR_NOT_FOUND


def test_list_symbols(example_package: Path) -> None:
    data = list_symbols(example_package)

    assert data["package"] == "example"
    assert set(data["symbols"]["func"]) == {"DoStuff", "helperFunc", "Unused"}
    assert set(data["symbols"]["const"]) == {"MyConst"}


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def test_write_extraction(example_package: Path, tmp_path: Path) -> None:
    result = extract_function(example_package, "DoStuff")
    out = tmp_path / "out" / "standalone.go"
    out.parent.mkdir()

    written = write_extraction(result, out)

    text = written.read_text()
    assert text.startswith('package example\n\nimport "fmt"\n')
    assert "// DoStuff calls helperFunc and reads MyVar." in text
    assert "func Unused" not in text
    for name in ("func helperFunc()", "var MyVar", "type MyType struct", "const MyConst = 42"):
        assert name in text


def test_write_extraction_without_imports(example_package: Path, tmp_path: Path) -> None:
    result = extract_function(example_package, "DoStuff")

    written = write_extraction(result, tmp_path / "bare.go", include_imports=False)

    assert "import" not in written.read_text()
