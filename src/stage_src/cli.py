from __future__ import annotations

from pathlib import Path

import click

from . import __version__


def stage_command(directory, verbose, dry, loglevel, name, source_dir, keep_going):
    def get_stager():
        from .commands.fs_runner import FileRunner
        from .common.logformat import configure_logging
        from .config import load as config_load

        root = Path(directory or ".").resolve()
        configure_logging(config_load.get_log_level(loglevel))
        verbose_ = config_load.is_verbose_enabled(verbose)
        cfg = config_load.read_config(
            root,
            names=name,
            source_dir=source_dir,
            keep_going=True if keep_going else None,
            verbose=verbose_,
        )
        return root, cfg, FileRunner(verbose=verbose_, dry=dry)

    return get_stager


def _run_reporting_errors(func, *args, **kwargs):
    from .common import FormattedErrorMessage, format_and_rethrow_exception

    try:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            format_and_rethrow_exception(e)
    except FormattedErrorMessage as e:
        raise click.ClickException(str(e)) from e


def _do_stage(get_stager):
    from .stage import run

    root, cfg, runner = get_stager()
    return run(
        root,
        cfg.names,
        source_dir=cfg.source_dir,
        keep_going=cfg.keep_going,
        runner=runner,
    )


def _do_clean(get_stager):
    from .stage import clean

    root, cfg, runner = get_stager()
    return clean(
        root,
        cfg.names,
        source_dir=cfg.source_dir,
        keep_going=cfg.keep_going,
        runner=runner,
    )


@click.group(invoke_without_command=True)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    required=False,
    help="The package root (containing pyproject.toml and the source folder).",
)
@click.option(
    "-V",
    "--verbose",
    is_flag=True,
    help="Print the configuration and every filesystem operation.",
)
@click.option(
    "-n",
    "--dry",
    is_flag=True,
    help="Print the filesystem operations without performing them.",
)
@click.option(
    "--loglevel",
    type=str,
    required=False,
    default=None,
    help="Logging level (DEBUG, INFO, WARNING, ERROR).",
)
@click.option(
    "--name",
    type=str,
    required=False,
    multiple=True,
    help="Name of a source subdirectory to stage. Can be given multiple "
    "times, and replaces the names configured in pyproject.toml.",
)
@click.option(
    "--source-dir",
    type=str,
    required=False,
    default=None,
    help="Folder containing the subdirectories to stage, relative to the "
    "package root (default: src).",
)
@click.option(
    "--keep-going",
    is_flag=True,
    help="Process all names even if one of them fails, and report all "
    "failures at the end.",
)
@click.version_option(__version__, "-v", "--version", prog_name="stage-src")
@click.pass_context
def cli(ctx: click.Context, **kwargs):
    ctx.obj = stage_command(**kwargs)
    if ctx.invoked_subcommand is None:
        _run_reporting_errors(_do_stage, ctx.obj)


@cli.command(help="Copy the source subdirectories to the package root.")
@click.pass_obj
def stage(obj):
    _run_reporting_errors(_do_stage, obj)


@cli.command(help="Remove the staged copies from the package root.")
@click.pass_obj
def clean(obj):
    _run_reporting_errors(_do_clean, obj)


@cli.command(name="list", help="List the configured entries.")
@click.pass_obj
def list_(obj):
    from .commands.fs_runner import source_exists
    from .stage import derive_entries

    def entries():
        root, cfg, _ = obj()
        return [
            (e, "present" if source_exists(e.source) else "missing")
            for e in derive_entries(root, cfg.names, cfg.source_dir)
        ]

    for entry, state in _run_reporting_errors(entries):
        click.echo(f"{entry.name}\t{entry.source} -> {entry.destination}\t({state})")


if __name__ == "__main__":
    cli()
