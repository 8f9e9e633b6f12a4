"""
Copies source subdirectories (``src/<name>``) to the package root
(``<name>``), replacing whatever was there before, so that the published
package exposes them without the ``src/`` prefix.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .commands.fs_runner import FileRunner, path_exists, source_exists
from .common import (
    DEFAULT_SOURCE_DIR,
    StagingConfig,
    StagingEntry,
    StagingError,
    StagingFailed,
    StagingResult,
)

logger = logging.getLogger(__name__)


def derive_entries(
    root: Path, names: Iterable[str], source_dir: str = DEFAULT_SOURCE_DIR
) -> list[StagingEntry]:
    """Compute the source and destination of every configured name.
    Raises ConfigError if a destination would not be a direct child of the
    package root."""
    names = tuple(names)
    StagingConfig(names=names, source_dir=source_dir).check()
    src = root / source_dir
    return [StagingEntry(name, src / name, root / name) for name in names]


def stage_entry(entry: StagingEntry, runner: FileRunner) -> StagingResult:
    """Replace the destination by a fresh copy of the source. Entries without
    a source are left alone."""
    tag = {"entry": entry.name}
    try:
        if not source_exists(entry.source):
            logger.info(
                "Skipping %s: %s does not exist", entry.name, entry.source, extra=tag
            )
            return StagingResult(entry, "skipped")
        runner.remove(entry.destination)
        runner.copy(entry.source, entry.destination)
    except OSError as e:
        raise StagingError(entry, e) from e
    logger.info("Staged %s -> %s", entry.source, entry.destination, extra=tag)
    return StagingResult(entry, "staged")


def clean_entry(entry: StagingEntry, runner: FileRunner) -> StagingResult:
    """Remove the staged copy of an entry. Destinations that have no source
    counterpart are not ours and are left alone."""
    try:
        if not source_exists(entry.source) or not path_exists(entry.destination):
            return StagingResult(entry, "skipped")
        runner.remove(entry.destination)
    except OSError as e:
        raise StagingError(entry, e, action="clean") from e
    logger.info("Removed %s", entry.destination, extra={"entry": entry.name})
    return StagingResult(entry, "removed")


def _process(entries, action, runner: FileRunner, keep_going: bool):
    results: list[StagingResult] = []
    errors: list[StagingError] = []
    for entry in entries:
        try:
            results.append(action(entry, runner))
        except StagingError as e:
            if not keep_going:
                raise
            logger.error("%s", e, extra={"entry": entry.name})
            errors.append(e)
            results.append(StagingResult(entry, "failed"))
    if errors:
        raise StagingFailed(errors)
    return results


def run(
    root: Path,
    names: Iterable[str],
    *,
    source_dir: str = DEFAULT_SOURCE_DIR,
    keep_going: bool = False,
    runner: FileRunner | None = None,
) -> list[StagingResult]:
    """Stage every name in order.

    By default the first I/O failure is raised immediately: entries that
    were already staged stay staged, and the remaining ones are not
    processed. With ``keep_going``, all entries are processed and a single
    :class:`StagingFailed` listing every failure is raised at the end.
    """
    entries = derive_entries(Path(root), names, source_dir)
    return _process(entries, stage_entry, runner or FileRunner(), keep_going)


def clean(
    root: Path,
    names: Iterable[str],
    *,
    source_dir: str = DEFAULT_SOURCE_DIR,
    keep_going: bool = False,
    runner: FileRunner | None = None,
) -> list[StagingResult]:
    """Remove the staged copies created by :func:`run`."""
    entries = derive_entries(Path(root), names, source_dir)
    return _process(entries, clean_entry, runner or FileRunner(), keep_going)