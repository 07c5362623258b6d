import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "unit", "integration"]

# Project installed with its test extra
COMMON_DEPS = ["-e", ".[test]"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "SECRET_KEY",
    "ADMIN_PASSWORD",
    "DATABASE_URL",
    "ENVIRONMENT",
    "LOG_LEVEL",
]


def _set_env(session):
    """
    Propagate database and test-related environment variables into the session.
    Also ensure the project root is on PYTHONPATH.
    """
    # Ensure imports from the project root work
    session.env["PYTHONPATH"] = str(Path.cwd())
    # Tests run against in-memory SQLite; never pick up a developer's .env database
    session.env["ENVIRONMENT"] = "development"
    for var in PASSED_ENV_VARS:
        if var in os.environ and var != "ENVIRONMENT":
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "--check-only", "app/", "tests/")
    session.run("black", "--check", "app/", "tests/")
    session.run("flake8", "--max-line-length=120", "app/", "tests/")
    session.run("mypy", "--ignore-missing-imports", "app/")


@nox.session(name="unit")
def unit(session):
    """
    Run unit tests (services, composer, scanner, core helpers).
    Pass positional args to target specific tests.
    Usage:
      nox -s unit             # runs all tests under tests/unit
      nox -s unit -- tests/unit/test_services/test_checkin.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/unit"]
    # Reporting paths (relative)
    htmlcov_path = ".nox/htmlcov"
    session.run(
        "pytest",
        *tests,
        "-m",
        "unit",
        "--maxfail=1",
        "-vv",
        "--tb=short",
        "--cov=app",
        "--cov-report=term-missing",
        "--cov-report=html:" + htmlcov_path,
        "--cov-report=xml",
        "--cov-fail-under=80",
    )


@nox.session(name="integration")
def integration(session):
    """
    Run API tests through the FastAPI test client.
    Usage:
      nox -s integration
      nox -s integration -- tests/integration/test_api/test_checkins_api.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/integration"]
    session.run(
        "pytest",
        *tests,
        "--maxfail=1",
        "-vv",
        "--tb=short",
    )
