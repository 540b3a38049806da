"""Project automation sessions."""
from __future__ import annotations

import nox

PYTHON_VERSION = "3.11"
PACKAGE_DIR = "interior_estimator"
TESTS_DIR = "tests"

nox.options.sessions = ("lint", "tests")


@nox.session(python=PYTHON_VERSION)
def lint(session: nox.Session) -> None:
    """Run Ruff against the package and tests."""
    session.install("ruff")
    session.run("ruff", "check", PACKAGE_DIR, TESTS_DIR)


@nox.session(python=PYTHON_VERSION)
def tests(session: nox.Session) -> None:
    """Execute the unit tests."""
    session.install("-e", ".[test]")
    session.run("pytest", *session.posargs)
