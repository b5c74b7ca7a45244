"""YAML loading for RBAC model snapshots."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from .types import RBACModel


def load_model(path: str | Path) -> RBACModel:
    """Read an RBAC model from a YAML file.

    Raises ValueError naming the file if it is missing, unparseable, or does
    not match the model schema.
    """
    path = Path(path)
    if not path.is_file():
        raise ValueError(f"Model file not found: {path}")
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return RBACModel()
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid model in {path}: top level must be a mapping")
    try:
        return RBACModel.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid model in {path}: {e}") from e
