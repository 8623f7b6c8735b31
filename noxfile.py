"""Nox sessions for multi-environment testing and quality assurance."""

import nox


@nox.session(python=["3.13", "3.14"])
def tests(session: nox.Session) -> None:
    """Run test suite with coverage reporting.

    Args:
        session: The nox session object.
    """
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run(
        "pytest",
        "--cov=channel_kit",
        "--cov-report=term-missing:skip-covered",
        "--cov-report=html",
        "--cov-fail-under=80",
    )


@nox.session(python=["3.14"])
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks."""
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(python=["3.14"])
def typecheck(session: nox.Session) -> None:
    """Run basedpyright type checking."""
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run("uvx", "basedpyright@latest", external=True)


@nox.session(python=["3.14"])
def format(session: nox.Session) -> None:
    """Auto-format code with ruff."""
    session.run("uv", "sync", "--extra", "test", external=True)
    session.run("ruff", "check", ".", "--fix")
    session.run("ruff", "format", ".")
