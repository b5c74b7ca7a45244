"""YAML config loading with env var expansion.

String values may reference the environment as ``${VAR}`` or
``${VAR:-default}``; numeric fields accept the expanded text, so a CI job can
set e.g. ``fail_below: "${ROLECHECK_FAIL_BELOW:-70}"`` without editing the file.
"""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import ValidatorConfig

logger = logging.getLogger(__name__)

_ENV_REF = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def load_config(cli_path: str | None = None) -> ValidatorConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    The first candidate file with content wins; files are never merged.
    """
    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in _candidate_paths(cli_path):
        raw = _read_yaml(path)
        if raw is None:
            continue
        try:
            config = ValidatorConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        logger.debug("loaded config from %s", path)
        return config

    return ValidatorConfig()


def _candidate_paths(cli_path: str | None) -> list[Path]:
    candidates = [Path("./rolecheck.yaml"), Path.home() / ".rolecheck" / "config.yaml"]
    if cli_path:
        candidates.insert(0, Path(cli_path))
    return [p for p in candidates if p.is_file()]


def _read_yaml(path: Path) -> dict | None:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: top level must be a mapping")
    return raw


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} and ${VAR:-default} references in strings."""
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `rolecheck config init`
DEFAULT_CONFIG_TEMPLATE = """\
# rolecheck.yaml

# Composite health score weights (normalised by their sum)
weights:
  interconnection_coverage: 0.25
  permission_consistency: 0.25
  workflow_completeness: 0.25
  security_compliance: 0.25

# Health buckets and the --check gate
thresholds:
  healthy: 80
  attention: 60
  fail_below: "${ROLECHECK_FAIL_BELOW:-70}"   # override per CI job via the environment

# Metrics with nothing to measure (no workflows, no delegation edges, ...)
vacuous_policy: "full"         # full | exclude

# Self-edges in the communication/delegation matrices
self_edge_policy: "warn"       # warn | allow | error

# Warn when a workflow hands off between roles without a delegation edge
warn_undelegated_handoffs: false

# Logging
log_level: "info"              # debug | info | warn | error
"""
