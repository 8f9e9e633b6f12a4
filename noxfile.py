"""
Tests for the stage-src package.

 - Stage all example projects
   - Check the contents of the package root after staging
   - Check that a second run leaves the package root unchanged
   - Check that cleaning removes the staged folders again
 - Check that a dry run does not touch the example projects
 - Run the stage-src pytest tests
"""

from __future__ import annotations

import os
import shutil
from difflib import unified_diff
from pathlib import Path

import nox

version = "0.1.0"
project_dir = Path(__file__).resolve().parent

examples = ("curated-package",)


def list_contents(root: Path, exclude=("src", "pyproject.toml")):
    res = []
    for dirpath, dirs, files in os.walk(str(root)):
        rel = Path(dirpath).relative_to(root)
        if rel == Path():
            dirs[:] = [d for d in dirs if d not in exclude]
            files = [f for f in files if f not in exclude]
        dirs.sort()
        res += [(rel / f).as_posix() for f in sorted(files)]
    return res


def check_staged_contents(session: nox.Session, name: str, root: Path):
    d = project_dir / "tests" / "expected_contents" / name
    expect = (d / "staged.txt").read_text("utf-8").split("\n")
    expect = sorted(filter(bool, expect))
    actual = sorted(list_contents(root))
    if expect != actual:
        diff = "\n".join(unified_diff(expect, actual))
        session.error("Staged contents mismatch:\n" + diff)


def stage_example_project(session: nox.Session, name: str, dir: Path):
    tmpdir = Path(session.create_tmp()).resolve() / name
    shutil.rmtree(tmpdir, ignore_errors=True)
    shutil.copytree(dir / name, tmpdir, symlinks=True)
    try:
        session.run("stage-src", "-C", str(tmpdir), "--verbose")
        check_staged_contents(session, name, tmpdir)
        session.run("stage-src", "-C", str(tmpdir))
        check_staged_contents(session, name, tmpdir)
        session.run("stage-src", "-C", str(tmpdir), "clean")
        if list_contents(tmpdir):
            session.error(f"Staged folders left behind: {list_contents(tmpdir)}")
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


@nox.session
def example_projects(session: nox.Session):
    session.install("-U", "pip")
    session.install(".")
    for name in examples:
        stage_example_project(session, name, Path("examples"))


@nox.session
def dry_run(session: nox.Session):
    session.install("-U", "pip")
    session.install(".")
    for name in examples:
        root = Path("examples") / name
        before = list_contents(root)
        session.run("stage-src", "-C", str(root), "--dry")
        if list_contents(root) != before:
            session.error(f"Dry run modified {root}")


@nox.session
def tests(session: nox.Session):
    session.install("-U", "pip")
    session.install(".[test]")
    session.run("pytest")
