# === FILE: site_audit/config.py ===
"""
Loading and validation of the SiteAudit configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import json
import os
import errno
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


class AuditConfig(BaseModel):
    """Configuration for one audit run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(2, ge=0, description="Maximum link depth followed from the seed.")
    timeout: float = Field(10.0, gt=0, description="Timeout of a single HTTP request (seconds).")
    navigation_timeout: float = Field(
        60.0, gt=0, description="Ceiling for one browser navigation (seconds)."
    )
    user_agent: str = Field("Mozilla/5.0", min_length=1, description="User-Agent header.")
    extended: bool = Field(
        True,
        description="Analyze every discovered page and run status/load-time checks; "
        "otherwise only the seed page is analyzed.",
    )
    thumbnail_dir: Path = Field(
        Path("public/thumbnails"), description="Directory the thumbnails are written to."
    )
    thumbnail_url_prefix: str = Field(
        "thumbnails", description="Prefix of the thumbnail locator embedded in reports."
    )

    @field_validator("thumbnail_url_prefix", mode="before")
    def _strip_slashes(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip("/")
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> AuditConfig:
    """
    Read YAML or JSON and return a validated AuditConfig.
    Without a path, configs/default.yaml is used when present, otherwise the defaults.
    A missing explicit path raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return AuditConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return AuditConfig(**data)
