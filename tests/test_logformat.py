import logging

from stage_src.common.logformat import GitHubActionsFormatter


def make_record(level, entry=None):
    path = "/x/src/stage_src/stage.py"
    record = logging.LogRecord(
        "stage_src.stage", level, path, 42, "Staged %s", ("token",), None
    )
    if entry is not None:
        record.entry = entry
    return record


def test_github_actions_prefixes():
    fmt = GitHubActionsFormatter()
    assert fmt.format(make_record(logging.INFO)) == "::notice::stage_src.stage:Staged token"
    assert fmt.format(make_record(logging.WARNING)).startswith("::warning::")
    assert fmt.format(make_record(logging.ERROR)).startswith("::error::")
    assert fmt.format(make_record(logging.DEBUG)).startswith("DEBUG:")


def test_github_actions_entry_title():
    fmt = GitHubActionsFormatter()
    s = fmt.format(make_record(logging.ERROR, entry="token"))
    assert s == "::error title=token::stage_src.stage:Staged token"


def test_entry_name_attached_to_records(tmp_path, caplog):
    from stage_src.stage import run

    (tmp_path / "src" / "token").mkdir(parents=True)
    with caplog.at_level(logging.INFO, logger="stage_src"):
        run(tmp_path, ["token", "utils"])
    assert [r.entry for r in caplog.records] == ["token", "utils"]
