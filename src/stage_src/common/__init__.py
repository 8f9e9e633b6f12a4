from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Sequence

logger = logging.getLogger(__name__)

DEFAULT_NAMES = ("token", "metatx", "finance", "utils")
DEFAULT_SOURCE_DIR = "src"
ACTION_NOUNS = {"stage": "Staging", "clean": "Cleaning"}


class FormattedErrorMessage(Exception):
    """Wrapper exception for any error that already has a nicely formatted
    error message."""


class ConfigError(ValueError):
    """Problem processing the stage-src configuration"""


class StagingError(OSError):
    """An I/O operation failed while staging or cleaning a single entry."""

    def __init__(self, entry: StagingEntry, cause: BaseException, action="stage"):
        super().__init__(f"Failed to {action} {entry.name!r}: {cause}")
        self.entry = entry
        self.cause = cause
        self.action = action


class StagingFailed(StagingError):
    """One or more entries failed while processing all of them (keep-going
    mode)."""

    def __init__(self, errors: Sequence[StagingError]):
        if not errors:
            msg = "StagingFailed requires at least one error"
            raise ValueError(msg)
        action = errors[0].action
        OSError.__init__(
            self,
            f"Failed to {action} {len(errors)} "
            f"entr{'y' if len(errors) == 1 else 'ies'}: "
            + ", ".join(repr(e.entry.name) for e in errors),
        )
        self.entry = errors[0].entry
        self.cause = errors[0].cause
        self.action = action
        self.errors = list(errors)


@dataclass(frozen=True)
class StagingEntry:
    """One unit of work: a source subdirectory and the directory at the
    package root it is copied to."""

    name: str
    source: Path
    destination: Path


@dataclass
class StagingResult:
    entry: StagingEntry
    status: str  # "staged", "removed", "skipped" or "failed"


@dataclass
class StagingConfig:
    """Describes the configuration settings for staging a package root."""

    names: tuple[str, ...] = field(default=DEFAULT_NAMES)
    source_dir: str = field(default=DEFAULT_SOURCE_DIR)
    keep_going: bool = field(default=False)

    def check(self):
        """Check that every entry stays a direct child of the package root."""
        if not self.names:
            msg = "At least one name must be configured"
            raise ConfigError(msg)
        src = PurePath(self.source_dir)
        if src.is_absolute() or not src.parts or ".." in src.parts:
            msg = f"source_dir must be a relative path inside the package root, not {self.source_dir!r}"
            raise ConfigError(msg)
        seen: set[str] = set()
        for name in self.names:
            check_name(name, src.parts[0])
            if name in seen:
                msg = f"Duplicate name {name!r}"
                raise ConfigError(msg)
            seen.add(name)


def check_name(name: str, source_root: str):
    if not name or name in (".", ".."):
        msg = f"Invalid name {name!r}"
        raise ConfigError(msg)
    if "/" in name or "\\" in name or PurePath(name).name != name:
        msg = f"Name {name!r} must not contain path separators"
        raise ConfigError(msg)
    if name == source_root:
        msg = f"Name {name!r} would overwrite the source directory"
        raise ConfigError(msg)


def format_and_rethrow_exception(e: BaseException):
    """Raises a FormattedErrorMessage from the given exception"""
    if isinstance(e, FormattedErrorMessage):
        raise e
    if isinstance(e, ConfigError):
        logger.error("Error in user configuration", exc_info=False)
        msg = (
            "\n"
            "\n"
            "\t\u274c Error in user configuration:\n"
            "\n"
            f"\t\t{e}\n"
            "\n"
            "\t   Please check the [tool.stage-src] section of pyproject.toml.\n"
        )
        raise FormattedErrorMessage(msg) from e
    if isinstance(e, StagingFailed):
        logger.error("%s failed", ACTION_NOUNS[e.action], exc_info=False)
        details = "".join(f"\t\t{err.entry.name}: {err.cause}\n" for err in e.errors)
        msg = f"\n\n\t\u274c {e}:\n\n{details}"
        raise FormattedErrorMessage(msg) from e
    if isinstance(e, StagingError):
        logger.error("%s failed", ACTION_NOUNS[e.action], exc_info=False)
        msg = (
            f"\n\n\t\u274c {ACTION_NOUNS[e.action]} {e.entry.name!r} failed:\n\n"
            f"\t\t{e.cause}\n"
            "\n"
            f"\t   Source:      {e.entry.source}\n"
            f"\t   Destination: {e.entry.destination}\n"
        )
        raise FormattedErrorMessage(msg) from e
    elif isinstance(e, Exception):
        logger.error("Uncaught exception:", exc_info=e)
        msg = (
            "\n"
            "\n"
            f"\t\u274c Uncaught exception: {type(e).__name__}\n"
            "\n"
            f"\t\t{e}\n"
        )
        raise FormattedErrorMessage(msg) from e
