from __future__ import annotations

import logging
import os
import pprint
from pathlib import Path
from typing import Any, Mapping, Sequence

from ..common import ConfigError, StagingConfig

try:
    import tomllib as toml_  # type: ignore[import,unused-ignore]
except ImportError:
    import tomli as toml_  # type: ignore[import,no-redef,unused-ignore]

logger = logging.getLogger(__name__)

TOOL_NAME = "stage-src"
TRUTHY = ("", "1", "true", "yes", "y", "on")


def is_truthy_or_empty_string(x: str) -> bool:
    return x.lower() in TRUTHY


def try_load_toml(path: Path):
    try:
        return toml_.loads(path.read_text("utf-8"))
    except FileNotFoundError as e:
        msg = f"Config file {str(path.absolute())!r} not found"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Config file {str(path.absolute())!r} could not be loaded"
        raise ConfigError(msg) from e
    except toml_.TOMLDecodeError as e:
        msg = f"Config file {str(path.absolute())!r} is invalid"
        raise ConfigError(msg) from e


def read_tool_table(root: Path) -> dict[str, Any]:
    """Return the [tool.stage-src] table of the project's pyproject.toml, or
    an empty table if there is none."""
    pyproject_path = root / "pyproject.toml"
    if not pyproject_path.exists():
        logger.debug("No pyproject.toml in %s, using defaults", root)
        return {}
    pyproject = try_load_toml(pyproject_path)
    table = pyproject.get("tool", {}).get(TOOL_NAME, {})
    if not isinstance(table, dict):
        msg = f"[tool.{TOOL_NAME}] must be a table"
        raise ConfigError(msg)
    return table


def _verify_table(table: Mapping[str, Any]) -> dict[str, Any]:
    known = {"names", "source_dir", "keep_going"}
    unknown = sorted(set(table) - known)
    if unknown:
        msg = f"Unknown option(s) in [tool.{TOOL_NAME}]: " + ", ".join(unknown)
        raise ConfigError(msg)
    res: dict[str, Any] = {}
    if "names" in table:
        names = table["names"]
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            msg = f"tool.{TOOL_NAME}.names: expected a list of strings"
            raise ConfigError(msg)
        res["names"] = tuple(names)
    if "source_dir" in table:
        if not isinstance(table["source_dir"], str):
            msg = f"tool.{TOOL_NAME}.source_dir: expected a string"
            raise ConfigError(msg)
        res["source_dir"] = table["source_dir"]
    if "keep_going" in table:
        if not isinstance(table["keep_going"], bool):
            msg = f"tool.{TOOL_NAME}.keep_going: expected a boolean"
            raise ConfigError(msg)
        res["keep_going"] = table["keep_going"]
    return res


def environment_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    res: dict[str, Any] = {}
    names = env.get("STAGE_SRC_NAMES")
    if names is not None:
        res["names"] = tuple(n.strip() for n in names.split(",") if n.strip())
    source_dir = env.get("STAGE_SRC_SOURCE_DIR")
    if source_dir:
        res["source_dir"] = source_dir
    keep_going = env.get("STAGE_SRC_KEEP_GOING")
    if keep_going is not None:
        res["keep_going"] = is_truthy_or_empty_string(keep_going)
    return res


def read_config(
    root: Path,
    names: Sequence[str] | None = None,
    source_dir: str | None = None,
    keep_going: bool | None = None,
    env: Mapping[str, str] | None = None,
    verbose: bool = False,
) -> StagingConfig:
    """Combine pyproject.toml, the environment and command-line options
    (in increasing order of precedence) into a verified StagingConfig."""
    options = _verify_table(read_tool_table(root))
    options.update(environment_overrides(os.environ if env is None else env))
    if names:
        options["names"] = tuple(names)
    if source_dir is not None:
        options["source_dir"] = source_dir
    if keep_going is not None:
        options["keep_going"] = keep_going
    cfg = StagingConfig(**options)
    cfg.check()
    if verbose:
        print("Staging configuration:")
        pprint.pprint(cfg)
    return cfg


def get_log_level(loglevel: str | None, env: Mapping[str, str] | None = None) -> int:
    def parse_log_level(loglevel: str) -> int:
        numeric_level = getattr(logging, loglevel.upper(), None)
        if isinstance(numeric_level, int):
            return numeric_level
        msg = f"Invalid log level: {loglevel}"
        raise ConfigError(msg)

    if loglevel is not None:
        return parse_log_level(loglevel)
    env_log = (os.environ if env is None else env).get("STAGE_SRC_LOGLEVEL")
    if env_log is not None:
        return parse_log_level(env_log)
    return logging.INFO


def is_verbose_enabled(verbose: bool, env: Mapping[str, str] | None = None) -> bool:
    if verbose:
        return True
    env_verbose = (os.environ if env is None else env).get("STAGE_SRC_VERBOSE")
    if env_verbose is not None:
        return is_truthy_or_empty_string(env_verbose)
    return False
