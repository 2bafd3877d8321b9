# type: ignore
from pathlib import Path

from invoke import task


@task
def venv(ctx):
    """Create .venv with the package, test and dev extras."""
    ctx.run("uv sync --extra test --extra dev")


@task
def lint(ctx):
    """ruff + mypy over the package and tests."""
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def fmt(ctx):
    ctx.run("ruff format src tests", pty=True)
    ctx.run("ruff check --fix src tests", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=hubmesh --cov-report=term-missing", pty=True)


@task
def clean_reports(ctx, path="."):
    """Delete generated hubmesh-*.html / hubmesh-*.csv reports under PATH."""
    for report in sorted(Path(path).glob("hubmesh-*.*")):
        if report.suffix in (".html", ".csv"):
            print(f"removing {report}")
            report.unlink()


@task
def build_package(ctx):
    ctx.run("rm -rf dist")
    ctx.run("uv build")
