from __future__ import annotations

import logging
import os


class GitHubActionsFormatter(logging.Formatter):
    """Formats warnings etc. for GitHub Actions: https://docs.github.com/en/actions/using-workflows/workflow-commands-for-github-actions#setting-a-notice-message

    Records about a single entry (``extra={"entry": name}``) get the entry
    name as the title of the annotation."""

    def __init__(self):
        super().__init__(fmt="%(name)s:%(message)s")

    def format(self, record: logging.LogRecord):
        s = super().format(record)
        entry = getattr(record, "entry", None)
        title = f" title={entry}" if entry else ""
        prefix = {
            logging.INFO: f"::notice{title}::",
            logging.WARNING: f"::warning{title}::",
            logging.ERROR: f"::error{title}::",
        }.get(record.levelno, record.levelname + ":")
        return prefix + s


def configure_logging(level: int):
    """Set up the root logger, using workflow commands on GitHub Actions."""
    if "GITHUB_ACTIONS" in os.environ:
        handler = logging.StreamHandler()
        handler.setFormatter(GitHubActionsFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(level=level)
