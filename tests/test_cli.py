import os
import shutil

import pytest
from click.testing import CliRunner
from stage_src import __version__
from stage_src.cli import cli


@pytest.fixture
def project(tmp_path):
    (tmp_path / "src" / "token").mkdir(parents=True)
    (tmp_path / "src" / "token" / "A.txt").write_text("1", encoding="utf-8")
    (tmp_path / "token").mkdir()
    (tmp_path / "token" / "old.txt").write_text("stale", encoding="utf-8")
    return tmp_path


def invoke(*args):
    return CliRunner().invoke(cli, list(args), catch_exceptions=False)


def test_no_subcommand_stages(project, monkeypatch):
    monkeypatch.delenv("STAGE_SRC_NAMES", raising=False)
    res = invoke("-C", str(project))
    assert res.exit_code == 0, res.output
    assert (project / "token" / "A.txt").read_text("utf-8") == "1"
    assert not (project / "token" / "old.txt").exists()
    assert not (project / "utils").exists()


def test_stage_subcommand(project):
    res = invoke("-C", str(project), "stage")
    assert res.exit_code == 0, res.output
    assert (project / "token" / "A.txt").exists()


def test_stage_names_from_command_line(project):
    (project / "src" / "contracts").mkdir()
    (project / "src" / "contracts" / "c.txt").write_text("c", encoding="utf-8")
    res = invoke("-C", str(project), "--name", "contracts", "stage")
    assert res.exit_code == 0, res.output
    assert (project / "contracts" / "c.txt").exists()
    assert (project / "token" / "old.txt").exists()


def test_dry_run(project):
    res = invoke("-C", str(project), "--dry")
    assert res.exit_code == 0, res.output
    assert "rm -r" in res.output
    assert (project / "token" / "old.txt").exists()
    assert not (project / "token" / "A.txt").exists()


def test_clean(project):
    assert invoke("-C", str(project)).exit_code == 0
    res = invoke("-C", str(project), "clean")
    assert res.exit_code == 0, res.output
    assert not (project / "token").exists()
    assert (project / "src" / "token" / "A.txt").exists()


def test_list(project):
    res = invoke("-C", str(project), "list")
    assert res.exit_code == 0, res.output
    lines = res.output.splitlines()
    assert len(lines) == 4
    assert lines[0].startswith("token\t")
    assert lines[0].endswith("(present)")
    assert lines[1].startswith("metatx\t")
    assert lines[1].endswith("(missing)")
    assert not (project / "token" / "A.txt").exists()


def test_invalid_name_exit_code(project):
    res = invoke("-C", str(project), "--name", "../evil")
    assert res.exit_code != 0
    assert "Error in user configuration" in res.output
    assert (project / "token" / "old.txt").exists()


def test_invalid_loglevel_exit_code(project):
    res = invoke("-C", str(project), "--loglevel", "chatty")
    assert res.exit_code != 0
    assert "Invalid log level: chatty" in res.output


def test_io_failure_exit_code(project, monkeypatch):
    def copytree(*args, **kwargs):
        raise PermissionError(13, "Permission denied", str(args[0]))

    monkeypatch.setattr(shutil, "copytree", copytree)
    res = invoke("-C", str(project))
    assert res.exit_code == 1
    assert "Staging 'token' failed" in res.output
    assert "Permission denied" in res.output


@pytest.mark.skipif(
    os.name != "posix" or os.geteuid() == 0, reason="permissions are not enforced"
)
def test_unreadable_source_exit_code(project):
    src = project / "src" / "token"
    src.chmod(0)
    try:
        res = invoke("-C", str(project))
        assert res.exit_code != 0
    finally:
        src.chmod(0o755)


def test_version():
    res = invoke("--version")
    assert res.exit_code == 0
    assert __version__ in res.output
