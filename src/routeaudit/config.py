from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from routeaudit.rules.descriptors import REGISTRY

PYPROJECT = "pyproject.toml"
TOOL_TABLE = "routeaudit"


class ConfigError(ValueError):
    pass


class CheckConfig(BaseModel):
    """Settings for `routeaudit check`, read from [tool.routeaudit]."""

    model_config = ConfigDict(extra="forbid")

    exclude: list[str] = Field(default_factory=list)   # extra dir names to skip
    ignore: list[str] = Field(default_factory=list)    # rule ids to drop
    workers: int = Field(default=4, ge=1)
    max_files: Optional[int] = Field(default=None, ge=1)
    fail_on_diagnostic: bool = True

    @field_validator("ignore")
    @classmethod
    def _known_rules(cls, value: list[str]) -> list[str]:
        unknown = sorted(set(value) - set(REGISTRY))
        if unknown:
            raise ValueError(f"unknown rule id(s): {', '.join(unknown)}")
        return value


def load_config(root: Path) -> CheckConfig:
    """
    Read [tool.routeaudit] from <root>/pyproject.toml. `root` may be a file,
    in which case its directory is used. Missing file or table -> defaults.
    """
    root = root if root.is_dir() else root.parent
    pyproject = root / PYPROJECT
    if not pyproject.is_file():
        return CheckConfig()

    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"cannot read {pyproject}: {exc}") from exc

    table = data.get("tool", {}).get(TOOL_TABLE, {})
    return _validate(table, source=str(pyproject))


def merge_overrides(config: CheckConfig, **overrides: Any) -> CheckConfig:
    """Apply CLI values on top of file values; None means "not given"."""
    values = config.model_dump()
    for key, value in overrides.items():
        if value is None:
            continue
        if key == "ignore":
            value = sorted(set(values["ignore"]) | set(value))
        values[key] = value
    return _validate(values, source="command line")


def _validate(values: dict[str, Any], source: str) -> CheckConfig:
    try:
        return CheckConfig.model_validate(values)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigError(f"invalid routeaudit config ({source}): {problems}") from exc
