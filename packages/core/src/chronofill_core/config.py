import os
from pathlib import Path
from typing import Optional

import yaml

from chronofill_core.dates import parse_day
from chronofill_core.errors import ConfigurationError

MERGE_METHODS = ("merge", "squash", "rebase")

DEFAULT_CONFIG: dict = {
    "start_date": "2025-09-27",
    "end_date": "2025-09-28",
    "base_branch": "main",
    "remote": "origin",
    "marker_file": "data.json",
    "min_commits": 5,
    "max_commits": 10,
    "min_delay_ms": 200,
    "max_delay_ms": 800,
    "merge_method": "merge",
    "note": "Automated commit for per-PR workflow",
    "seed": None,  # None = fresh randomness every run
    "store": "noop",  # noop | json | sqlite
    "store_path": None,  # None = backend default
}


def load_config(config_path: str = ".chronofill.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .chronofill.yml in the current directory
      3. CLI argument overrides
      4. Environment (GITHUB_TOKEN, BASE_BRANCH)
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            try:
                file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping, got {type(file_config).__name__}.")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if os.environ.get("BASE_BRANCH"):
        config["base_branch"] = os.environ["BASE_BRANCH"]
    config["github_token"] = os.environ.get("GITHUB_TOKEN") or config.get("github_token")

    return config


def validate_config(config: dict) -> dict:
    """Check value ranges and normalise dates in place; returns ``config``.

    Raises ConfigurationError on the first problem so the run aborts before
    the working tree is touched.
    """
    config["start_date"] = parse_day(config["start_date"])
    config["end_date"] = parse_day(config["end_date"])

    for low, high in (("min_commits", "max_commits"), ("min_delay_ms", "max_delay_ms")):
        lo, hi = config[low], config[high]
        if not isinstance(lo, int) or not isinstance(hi, int) or isinstance(lo, bool) or isinstance(hi, bool):
            raise ConfigurationError(f"{low} and {high} must be integers.")
        if lo < 0 or hi < lo:
            raise ConfigurationError(f"Need 0 <= {low} <= {high}, got {lo} and {hi}.")
    if config["min_commits"] < 1:
        raise ConfigurationError("min_commits must be at least 1.")

    if config["merge_method"] not in MERGE_METHODS:
        raise ConfigurationError(
            f"Unknown merge_method {config['merge_method']!r}. Choose one of: {', '.join(MERGE_METHODS)}."
        )
    if not config.get("base_branch"):
        raise ConfigurationError("base_branch must not be empty.")

    return config
