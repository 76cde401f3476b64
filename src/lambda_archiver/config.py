"""Configuration schema for lambda-archiver using Pydantic."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

DEFAULT_CONFIG_PATH = "archiver.yml"

CONTAINER_RUNTIMES = ("docker", "docker-arm")


class EnvironmentConfig(BaseModel):
    """A deployment environment."""

    runtime: str = "php-8.3:al2"
    """Runtime identifier. 'docker' and 'docker-arm' deploy a container image instead of app.zip."""

    @property
    def uses_container_image(self) -> bool:
        return self.runtime in CONTAINER_RUNTIMES


class ArchiveSettings(BaseModel):
    """Knobs for the archive backends."""

    tool_timeout: Optional[float] = None
    """Seconds to wait for the external zip command. No limit when unset."""

    deterministic: bool = False
    """Stamp every zipfile entry with 1980-01-01 instead of its mtime."""


class PackageConfig(BaseModel):
    """Root configuration object for a lambda-archiver project."""

    name: Optional[str] = None

    environments: Dict[str, EnvironmentConfig] = Field(default_factory=dict)

    exclude: List[str] = Field(default_factory=list)
    """Glob patterns, relative to the application root, left out of the archive."""

    permissions: Dict[str, int] = Field(default_factory=dict)
    """Mode overrides keyed by relative path or file name."""

    archive: ArchiveSettings = Field(default_factory=ArchiveSettings)

    @field_validator("permissions", mode="before")
    @classmethod
    def parse_octal_modes(cls, value):
        if not isinstance(value, dict):
            return value
        parsed = {}
        for path, mode in value.items():
            if isinstance(mode, str):
                try:
                    mode = int(mode, 8)
                except ValueError:
                    raise ValueError(f"Invalid octal mode for '{path}': {mode!r}")
            parsed[path] = mode
        return parsed

    @field_validator("permissions")
    @classmethod
    def check_mode_range(cls, value: Dict[str, int]) -> Dict[str, int]:
        for path, mode in value.items():
            if not 0 <= mode <= 0xFFFF:
                raise ValueError(f"Mode for '{path}' does not fit in 16 bits: {mode}")
        return value

    def environment(self, name: str) -> EnvironmentConfig:
        try:
            return self.environments[name]
        except KeyError:
            raise ConfigError(f"Environment '{name}' is not defined in the configuration.")

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> PackageConfig:
        """Loads and validates a PackageConfig from a YAML file."""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML config: {e}")

        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise ConfigError(f"Invalid config {path}:\n{e}")
