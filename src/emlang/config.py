"""
Runtime configuration.

Settings can be given directly or loaded from a YAML (or JSON) file:

    entry_point: main
    max_call_depth: 200
    disabled_builtins: [type]
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple
import json

import yaml


DEFAULT_ENTRY_POINT = "main"
DEFAULT_MAX_CALL_DEPTH = 200


@dataclass(frozen=True)
class RuntimeConfig:
    """Knobs for one interpreter instance."""
    entry_point: str = DEFAULT_ENTRY_POINT
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH
    disabled_builtins: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.entry_point:
            raise ValueError("entry_point must be a non-empty name")
        if self.max_call_depth < 1:
            raise ValueError(f"max_call_depth must be positive, got {self.max_call_depth}")
        object.__setattr__(self, "disabled_builtins", tuple(self.disabled_builtins))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuntimeConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry_point": self.entry_point,
            "max_call_depth": self.max_call_depth,
            "disabled_builtins": list(self.disabled_builtins),
        }


def load_config(path: Path | str) -> RuntimeConfig:
    """Load a RuntimeConfig from a ``.json`` file or a YAML file."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as fp:
        if path.suffix == ".json":
            data = json.load(fp)
        else:
            data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: configuration must be a mapping")
    return RuntimeConfig.from_dict(data)


def save_config(config: RuntimeConfig, path: Path | str) -> None:
    path = Path(path)
    with path.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(config.to_dict(), fp, sort_keys=False)
