from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from .paths import default_config_path, default_data_dir, default_hubs_path, expand_path

CONFIG_ENV_VAR = "HUBMESH_CONFIG"

ReplaceMode = Literal["scanned", "all"]


class DatabaseConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    path: str = Field(default_factory=lambda: str(default_data_dir()))


class ScanningConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    protocol: Literal["http", "https"] = "http"
    # both must accept a connection for an address to count as a live hub
    ports: tuple[int, int] = (80, 8081)
    probe_timeout: float = Field(default=0.75, gt=0)
    request_timeout: float = Field(default=10.0, gt=0)
    mesh_marker: str = "Linked"
    replace_mode: ReplaceMode = "scanned"
    hubs_file: str = Field(default_factory=lambda: str(default_hubs_path()))


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    scanning: ScanningConfig = Field(default_factory=ScanningConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def data_dir_from_settings(settings: Settings) -> Path:
    return expand_path(settings.database.path)


def hubs_file_from_settings(settings: Settings) -> Path:
    return expand_path(settings.scanning.hubs_file)


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    scanning = settings.scanning
    ports = ", ".join(str(port) for port in scanning.ports)
    lines = [
        "# hubmesh configuration",
        "",
        "[database]",
        f"path = {_toml_string(settings.database.path)}",
        "",
        "[scanning]",
        f"protocol = {_toml_string(scanning.protocol)}",
        f"ports = [{ports}]",
        f"probe_timeout = {scanning.probe_timeout}",
        f"request_timeout = {scanning.request_timeout}",
        f"mesh_marker = {_toml_string(scanning.mesh_marker)}",
        f"replace_mode = {_toml_string(scanning.replace_mode)}",
        f"hubs_file = {_toml_string(scanning.hubs_file)}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
