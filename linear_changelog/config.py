"""Configuration loading and validation.

Usage:
    config = load()                           # defaults + env, file if present
    config = load("team.yaml", required=True) # raises ConfigError if missing
    generate_template("linear-config.yaml")   # writes example file to disk
"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from linear_changelog.client import DEFAULT_URL
from linear_changelog.query import DONE_STATE, GITHUB_SOURCE_TYPE

DEFAULT_CONFIG_PATH = "linear-config.yaml"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    url: str = DEFAULT_URL
    api_key: str = ""
    source_type: str = GITHUB_SOURCE_TYPE
    state: str | None = DONE_STATE


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str = DEFAULT_CONFIG_PATH, required: bool = False) -> Config:
    """Load configuration from a YAML file, falling back to defaults.

    Environment variables LINEAR_API_URL and LINEAR_API_KEY override file
    values. The file itself is optional unless *required* is set.

    Raises:
        ConfigError: if a required file is missing, the file is malformed,
                     or the resulting URL is empty.
    """
    path = Path(config_path)
    raw: dict = {}

    if path.exists():
        try:
            with path.open(encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")
    elif required:
        raise ConfigError(
            f"Config file not found: '{config_path}'\n"
            "Run `linear-changelog init` to generate a template."
        )

    api = _section(raw, "api")
    flt = _section(raw, "filter")

    url     = os.environ.get("LINEAR_API_URL") or api.get("url", DEFAULT_URL)
    api_key = os.environ.get("LINEAR_API_KEY") or api.get("key", "")

    source_type = flt.get("source_type")
    if source_type is None:
        source_type = GITHUB_SOURCE_TYPE
    # An explicit null drops the state clause from the filter
    state = flt.get("state", DONE_STATE)

    errors: list[str] = []
    if not isinstance(source_type, str):
        errors.append(f"  - 'filter.source_type' must be a string, got {source_type!r}")
    if state is not None and not isinstance(state, str):
        errors.append(f"  - 'filter.state' must be a string or null, got {state!r}")
    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))

    config = Config(
        url=str(url or "").strip(),
        api_key=str(api_key or "").strip(),
        source_type=source_type,
        state=state,
    )
    _validate(config)
    return config


def _section(raw: dict, name: str) -> dict:
    """Return the *name* mapping from the config, or {} when absent."""
    section = raw.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {section!r}")
    return section


def _validate(config: Config) -> None:
    """Raise ConfigError if required fields are missing."""
    errors: list[str] = []

    if not config.url:
        errors.append(
            "  - 'api.url' is empty (or set the LINEAR_API_URL environment variable)"
        )
    if not config.source_type:
        errors.append("  - 'filter.source_type' is empty")

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
api:
  url: "https://api.linear.app/graphql"
  key: "lin_api_xxxxxxxxxxxx"     # Generate at: Linear > Settings > API

filter:
  # Only issues with an attachment of this source type are listed
  source_type: "github"
  # Workflow state name; set to null to accept any completed state
  state: "Done"
"""


def generate_template(output_path: str = DEFAULT_CONFIG_PATH) -> None:
    """Write a template linear-config.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists (to avoid overwriting secrets).
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
