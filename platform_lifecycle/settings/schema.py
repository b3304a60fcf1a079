# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Configuration schema using Pydantic.

Configuration Priority
----------------------
Settings are loaded from multiple sources with the following priority (highest to lowest):
1. Explicit arguments (passed to LifecycleConfig constructor)
2. Environment variables (PLM_* prefix, ``__`` for nested fields)
3. Project config file (platform-lifecycle.yaml)
4. Built-in defaults (Field defaults in LifecycleConfig)

Directory defaults
------------------
Chart, third-party chart and override directories default to locations under
``root_dir``. Relative paths resolve against ``root_dir`` as well.
"""

import os
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from platform_lifecycle._internal.io.yaml import deep_merge, expand_env_vars
from platform_lifecycle.constants import (
    CERT_MANAGER_NAMESPACE,
    ENV_PREFIX,
    ENV_PROJECT_DIR,
    INGRESS_NAMESPACE,
    PROJECT_CONFIG_FILE,
    SYSTEM_NAMESPACE,
)

LOG_LEVELS = ('quiet', 'normal', 'verbose', 'debug', 'error', 'warning', 'info')

# Explicit project file for the config currently being constructed
_project_file_var: ContextVar[Path | None] = ContextVar('project_file', default=None)


def _find_project_config() -> Path | None:
    """Find project configuration file with upward directory walk.

    Search order:
    1. If PLM_PROJECT_DIR is set, check that directory only
    2. Otherwise, walk up from CWD to find platform-lifecycle.yaml
    """
    if project_dir_override := os.environ.get(ENV_PROJECT_DIR):
        candidate = Path(project_dir_override).resolve() / PROJECT_CONFIG_FILE
        # Explicit location wins - don't fall through to the upward walk
        return candidate if candidate.exists() else None

    current = Path.cwd().resolve()
    while current != current.parent:
        candidate = current / PROJECT_CONFIG_FILE
        if candidate.exists():
            return candidate
        current = current.parent

    return None


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by the project YAML file."""

    def __init__(self, settings_cls: type[BaseSettings], project_file: Path | None = None):
        super().__init__(settings_cls)
        self.yaml_files: list[Path] = []

        if project_file is not None:
            if project_file.is_file():
                self.yaml_files.append(project_file)
        elif found := _find_project_config():
            self.yaml_files.append(found)

        self._data = self._load_and_merge_yaml_files()

    def _load_and_merge_yaml_files(self) -> dict[str, Any]:
        """Load, expand and merge the YAML files.

        Raises:
            yaml.YAMLError: If any config file has syntax errors
        """
        merged: dict[str, Any] = {}

        for yaml_file in self.yaml_files:
            try:
                with open(yaml_file) as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                if mark := getattr(e, 'problem_mark', None):
                    location = f"line {mark.line + 1}, column {mark.column + 1}"
                else:
                    location = "unknown location"
                raise yaml.YAMLError(
                    f"\n\nInvalid YAML in config file: {yaml_file}\n"
                    f"Error at {location}: {getattr(e, 'problem', None) or e}\n\n"
                    f"Fix the syntax error and try again."
                ) from e
            merged = deep_merge(merged, expand_env_vars(data))

        return merged

    def get_field_value(self, field_name: str, field_info: Any) -> tuple[Any, str, bool]:
        if field_name in self._data:
            return self._data[field_name], field_name, True
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._data.copy()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default='normal', description="Console verbosity level: quiet | normal | verbose | debug"
    )

    model_config = ConfigDict(extra='forbid')

    @field_validator('level')
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_LEVELS:
            raise ValueError(f"Invalid log level '{value}'. Must be one of: {', '.join(LOG_LEVELS)}")
        return value


class LifecycleConfig(BaseSettings):
    """Configuration consumed by the catalog factory and the registry."""

    root_dir: Path = Field(default=Path('/verrazzano'), description="Platform installation root")
    helm_charts_dir: Path | None = Field(
        default=None, description="Platform charts (defaults under root_dir)"
    )
    third_party_dir: Path | None = Field(
        default=None, description="Third-party charts (defaults under root_dir)"
    )
    helm_overrides_dir: Path | None = Field(
        default=None, description="Values override files (defaults under root_dir)"
    )
    injected_system_namespaces: list[str] = Field(
        default_factory=lambda: [
            SYSTEM_NAMESPACE,
            'verrazzano-mc',
            CERT_MANAGER_NAMESPACE,
            INGRESS_NAMESPACE,
        ],
        description="System namespaces labeled for mesh sidecar injection",
    )
    ingress_type: str = Field(
        default='LoadBalancer', description="Service type of the ingress controller"
    )
    allow_shared_dependencies: bool = Field(
        default=False,
        description=(
            "Allow a dependency to be reached through more than one path in a single "
            "readiness walk. When False any revisit is reported as a dependency cycle."
        ),
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter='__',
        validate_assignment=True,
        extra='ignore',
        case_sensitive=False,
        env_file=None,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Init args, then env vars, then the project YAML file."""
        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls, project_file=_project_file_var.get()),
        )

    def model_post_init(self, __context: Any) -> None:
        """Fill in directory defaults and resolve relative paths against root_dir."""
        helm_config = self.root_dir / 'platform-operator' / 'helm_config'

        self.helm_charts_dir = self._resolve(self.helm_charts_dir, helm_config / 'charts')
        self.third_party_dir = self._resolve(
            self.third_party_dir, self.root_dir / 'platform-operator' / 'thirdparty' / 'charts'
        )
        self.helm_overrides_dir = self._resolve(self.helm_overrides_dir, helm_config / 'overrides')

    def _resolve(self, path: Path | None, default: Path) -> Path:
        if path is None:
            return default
        return path if path.is_absolute() else self.root_dir / path
