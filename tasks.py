"""Developer tasks powered by Invoke."""

from __future__ import annotations

import pathlib
import subprocess
from typing import Iterable

from invoke import task

ROOT = pathlib.Path(__file__).parent.resolve()
RESULTS_DIR = ROOT / "results"


def _run(command: Iterable[str] | str) -> None:
    cmd = command if isinstance(command, str) else " ".join(command)
    subprocess.run(cmd, shell=True, check=True, cwd=ROOT)


def _ensure_results_dir() -> None:
    RESULTS_DIR.mkdir(exist_ok=True)


@task
def tests(_context, unit_only=False):
    """Run the test suite without coverage (quick feedback)."""
    target = "tests/unit" if unit_only else "tests/"
    _run(["uv", "run", "pytest", target])


@task
def coverage(_context):
    """Run tests under coverage and write reports to results/."""
    _ensure_results_dir()
    _run(["uv", "run", "coverage", "erase"])
    _run(
        [
            "uv",
            "run",
            "coverage",
            "run",
            "-m",
            "pytest",
            "tests/",
            "--junitxml=results/pytest.xml",
        ]
    )
    _run(["uv", "run", "coverage", "combine"])
    _run(["uv", "run", "coverage", "report"])
    _run(["uv", "run", "coverage", "html", "-d", "results/htmlcov"])
    _run(["uv", "run", "coverage", "xml", "-o", "results/coverage.xml"])


@task
def lint(_context):
    """Check formatting and types."""
    _run(["uv", "run", "black", "--check", "src", "tests"])
    _run(["uv", "run", "mypy", "src"])


@task
def fmt(_context):
    """Format sources in place."""
    _run(["uv", "run", "black", "src", "tests", "tasks.py"])


@task
def serve(_context, transport="stdio", port=8000):
    """Start the flowforge MCP server."""
    args = ["uv", "run", "flowforge", "--transport", transport]
    if transport != "stdio":
        args += ["--port", str(port)]
    _run(args)


@task
def build(_context):
    """Build distribution artifacts."""
    _run(["uv", "build"])
