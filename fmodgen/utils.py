import os
import shutil
import subprocess
import tempfile
from collections import namedtuple
from pathlib import Path
from typing import Callable, Sequence

import tomli as toml

from fmodgen import logging as fmodgen_logging

logger = fmodgen_logging.get_logger(__name__)

ProcessResult = namedtuple("ProcessResult", ["stdout", "stderr", "returncode"])


def _merge_configs(config, default_config):
    config_out = {}

    for key, default_value in default_config.items():
        if key in config:
            if isinstance(config[key], dict) and isinstance(default_value, dict):
                config_out[key] = _merge_configs(config[key], default_value)
            elif isinstance(config[key], dict) or isinstance(default_value, dict):
                raise TypeError(f"Type mismatch for key '{key}': "
                                f"config has {type(config[key])}, default_config has {type(default_value)}")
            # Otherwise, config[key] takes precedence
            else:
                config_out[key] = config[key]
        else:
            config_out[key] = default_value

    # Add keys that are only in config
    for key, value in config.items():
        if key not in default_config:
            config_out[key] = value

    return config_out


def load_default_config():
    """Load the bundled default configuration from packaged resources."""
    resource_dir = Path(__file__).resolve().parent / "_resources"
    candidate = resource_dir / "fmodgen.default.toml"
    if candidate.is_file():
        with open(candidate, "rb") as f:
            return toml.load(f)

    raise FileNotFoundError("Could not load _resources/fmodgen.default.toml")


def try_load_config(config_file=None):
    """Load user configuration merged with defaults.

    Resolution order:
    1. Explicit `config_file` argument.
    2. `FMODGEN_CONFIG` environment variable.
    3. `./fmodgen.toml` relative to current working directory.
    4. `fmodgen.toml` inside the repository checkout (development mode).
    If none are found, return the default config alone.
    """
    default_config = load_default_config()

    def _load_user_config(path: Path) -> dict:
        with open(path, "rb") as f:
            return toml.load(f)

    if config_file:
        candidate = Path(config_file).expanduser()
        if not candidate.is_file():
            raise FileNotFoundError(f"Could not find config file {candidate}")
        user_config = _load_user_config(candidate)
        return _merge_configs(user_config, default_config)

    env_candidate = os.environ.get("FMODGEN_CONFIG")
    if env_candidate:
        env_path = Path(env_candidate).expanduser()
        if not env_path.is_file():
            raise FileNotFoundError(f"FMODGEN_CONFIG={env_candidate} does not point to a readable file")
        user_config = _load_user_config(env_path)
        return _merge_configs(user_config, default_config)

    cwd_candidate = Path.cwd() / "fmodgen.toml"
    if cwd_candidate.is_file():
        user_config = _load_user_config(cwd_candidate)
        return _merge_configs(user_config, default_config)

    # Load from repository root if in development mode
    package_dir = Path(__file__).resolve().parent
    repo_candidate = package_dir.parent / "fmodgen.toml"
    if repo_candidate.is_file():
        user_config = _load_user_config(repo_candidate)
        return _merge_configs(user_config, default_config)

    logger.info("No user config found; falling back to default configuration only")
    return default_config


def read_file(path: str | os.PathLike[str]) -> str:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Could not find file {path}")
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def save_code_atomically(
    files: dict[str, str],
    *,
    formatter: Callable[[str], None] | None = None,
) -> None:
    """Write every file or none of them.

    The texts are staged under their final names in a temporary directory
    beside their destination, so a formatter that follows `mod` declarations
    finds the sibling files there. Nothing is renamed into place until every
    file was written and formatted.
    """
    staging_dirs: dict[str, str] = {}
    staged: list[tuple[str, str]] = []
    try:
        for path, code in files.items():
            path_dir = os.path.dirname(os.path.abspath(path))
            if path_dir not in staging_dirs:
                os.makedirs(path_dir, exist_ok=True)
                staging_dirs[path_dir] = tempfile.mkdtemp(dir=path_dir, prefix=".fmodgen-")
            temp_path = os.path.join(staging_dirs[path_dir], os.path.basename(path))
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(code)
            staged.append((temp_path, path))
        if formatter is not None:
            for temp_path, _ in staged:
                formatter(temp_path)
        for temp_path, path in staged:
            os.replace(temp_path, path)
    finally:
        for staging_dir in staging_dirs.values():
            shutil.rmtree(staging_dir, ignore_errors=True)


def run_command(cmd: Sequence[str | os.PathLike[str]], *, capture_output: bool = True) -> ProcessResult:
    """Run a command through ``subprocess.run`` with consistent return semantics."""
    completed = subprocess.run(
        cmd,
        stdout=subprocess.PIPE if capture_output else None,
        stderr=subprocess.PIPE if capture_output else None,
        text=True,
        check=False,
    )
    stdout = completed.stdout if completed.stdout is not None else ""
    stderr = completed.stderr if completed.stderr is not None else ""
    return ProcessResult(stdout, stderr, completed.returncode)
