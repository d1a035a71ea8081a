"""noxfile.py - Quality gate sessions for the prompt store.

Updates:
  v0.2.0 - 2026-10-17 - Route every session through one .venv tool runner.
  v0.1.0 - 2026-09-24 - Initial scaffold of format/lint/typecheck/test sessions.

Sessions use the host interpreter (``venv_backend="none"``) and call tools
installed in the project ``.venv`` with ``pip install -e .[dev]``:

- format: apply ruff formatting
- lint: ruff checks
- typecheck: pyright
- test: pytest with coverage across xdist workers
- all: every gate above, formatting in check mode
"""

from __future__ import annotations

import sys
from pathlib import Path

import nox

SOURCES: tuple[str, ...] = ("main.py", "cli", "config", "core", "models", "tests")

PYTEST_ARGS: tuple[str, ...] = (
    "-n",
    "auto",
    "--cov=core",
    "--cov=models",
    "--cov=cli",
    "--cov-report=term-missing",
    "--cov-fail-under=80",
)

_BIN_DIR = Path(".venv") / ("Scripts" if sys.platform == "win32" else "bin")


def _run_tool(session: nox.Session, tool: str, *args: str) -> None:
    """Run *tool* from ``.venv``, stopping the session when it is not installed."""
    executable = _BIN_DIR / (f"{tool}.exe" if sys.platform == "win32" else tool)
    if not executable.exists():
        session.error(
            f"{executable} not found. Create the environment first: "
            "`python -m venv .venv && .venv/bin/pip install -e .[dev]`."
        )
    session.run(str(executable), *args, external=True)


@nox.session(venv_backend="none")
def format(session: nox.Session) -> None:
    """Usage: `nox -s format`"""
    _run_tool(session, "ruff", "format", *SOURCES)


@nox.session(venv_backend="none")
def lint(session: nox.Session) -> None:
    """Usage: `nox -s lint`"""
    _run_tool(session, "ruff", "check", *SOURCES)


@nox.session(venv_backend="none")
def typecheck(session: nox.Session) -> None:
    """Usage: `nox -s typecheck`"""
    _run_tool(session, "pyright")


@nox.session(venv_backend="none")
def test(session: nox.Session) -> None:
    """Usage: `nox -s test` (extra arguments go to pytest)."""
    _run_tool(session, "pytest", *PYTEST_ARGS, *session.posargs)


@nox.session(venv_backend="none", name="all")
def all_gates(session: nox.Session) -> None:
    """Usage: `nox -s all`"""
    _run_tool(session, "ruff", "check", *SOURCES)
    _run_tool(session, "ruff", "format", "--check", *SOURCES)
    _run_tool(session, "pyright")
    _run_tool(session, "pytest", *PYTEST_ARGS)
