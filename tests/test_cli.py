"""End-to-end tests for the goextract command line."""

import json
import subprocess
import sys
from pathlib import Path

import pytest


def run_goextract(*args: str, cwd: Path, stdin: str | None = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "goextract.cli", *args],
        text=True,
        capture_output=True,
        check=False,
        cwd=cwd,
        input=stdin,
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    pkg = tmp_path / "example"
    pkg.mkdir()
    (pkg / "main.go").write_text(
        "package example\n"
        "\n"
        "func DoStuff() int {\n"
        "\treturn helper() + Limit\n"
        "}\n"
    )
    (pkg / "util.go").write_text(
        "package example\n"
        "\n"
        "const Limit = 3\n"
        "\n"
        "func helper() int { return Limit * 2 }\n"
        "\n"
        "func Standalone() {}\n"
    )
    return tmp_path


def test_extract_writes_output_file(project: Path) -> None:
    result = run_goextract("extract", "DoStuff", "--dir", "example", cwd=project)

    assert result.returncode == 0, result.stderr
    assert "Extraction completed. Code written to 'output.go'" in result.stdout
    text = (project / "output.go").read_text()
    assert text.startswith("package example\n")
    assert "func helper() int" in text
    assert "const Limit = 3" in text
    assert "Standalone" not in text


def test_extract_custom_output(project: Path) -> None:
    result = run_goextract("extract", "DoStuff", "-d", "example", "-o", "standalone.go", cwd=project)

    assert result.returncode == 0, result.stderr
    assert (project / "standalone.go").exists()
    assert not (project / "output.go").exists()


def test_extract_to_stdout(project: Path) -> None:
    result = run_goextract("extract", "Standalone", "--dir", "example", "--stdout", cwd=project)

    assert result.returncode == 0, result.stderr
    assert "func Standalone() {}" in result.stdout
    assert "No additional top-level dependencies found." in result.stdout
    assert "Extraction completed. Code written to stdout" in result.stderr
    assert not (project / "output.go").exists()


def test_extract_missing_function_fails(project: Path) -> None:
    result = run_goextract("extract", "Missing", "--dir", "example", cwd=project)

    assert result.returncode == 1
    assert "Error: Function 'Missing' not found" in result.stderr
    assert not (project / "output.go").exists()


def test_extract_prompts_when_function_omitted(project: Path) -> None:
    result = run_goextract("extract", cwd=project, stdin="example\nDoStuff\nprompted.go\n")

    assert result.returncode == 0, result.stderr
    assert "Directory to analyze" in result.stdout
    assert "func helper() int" in (project / "prompted.go").read_text()


def test_deps_machine_envelope(project: Path) -> None:
    result = run_goextract("--machine", "deps", "DoStuff", "--dir", "example", cwd=project)

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["success"] is True
    deps = data["result"]["dependencies"]
    assert [(d["name"], d["via"]) for d in deps] == [("helper", "DoStuff"), ("Limit", "DoStuff")]


def test_deps_machine_error(project: Path) -> None:
    result = run_goextract("--machine", "deps", "Missing", "--dir", "example", cwd=project)

    assert result.returncode == 1
    data = json.loads(result.stdout)
    assert data["error"] is True
    assert data["code"] == "GOX_ERR_NOT_FOUND"


def test_symbols_lists_table(project: Path) -> None:
    result = run_goextract("symbols", "--dir", "example", cwd=project)

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["package"] == "example"
    assert set(data["symbols"]["func"]) == {"DoStuff", "helper", "Standalone"}
    assert set(data["symbols"]["const"]) == {"Limit"}


def test_missing_directory(project: Path) -> None:
    result = run_goextract("symbols", "--dir", "nowhere", cwd=project)

    assert result.returncode == 1
    assert "Error: Directory not found" in result.stderr
