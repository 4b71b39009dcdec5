from __future__ import annotations

import platform
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from gitclient.constants import DEFAULT_REMOTE, GIT_EXECUTABLE, GIT_EXECUTABLE_WINDOWS
from gitclient.exceptions import ConfigError
from gitclient.logging import get_logger

__all__ = [
    "GitClientConfig",
    "PROJECT_CONFIG_FILENAME",
    "get_user_config_path",
    "load_config",
    "resolve_git_executable",
]

logger = get_logger(__name__)

PROJECT_CONFIG_FILENAME = "gitclient.yaml"

BackendName = Literal["cli", "library"]


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
                    if loaded is None:
                        logger.warning("config_file_empty", path=str(yaml_file))
                    elif isinstance(loaded, dict):
                        self._config_data = loaded
                    else:
                        raise ConfigError(
                            message=f"Config file {yaml_file} must contain a mapping",
                            field=None,
                            value=loaded,
                        )
            except yaml.YAMLError as e:
                raise ConfigError(
                    message=f"Invalid YAML in {yaml_file}: {e}",
                    field=None,
                    value=None,
                ) from e

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class GitClientConfig(BaseSettings):
    """Settings for selecting and constructing a git client.

    Attributes:
        backend: Backend used by the factory when none is requested.
        git_executable: Path or name of the git executable for the
            command-line backend. Blank means the platform default.
        working_dir: Directory the clients operate in. Defaults to the
            current directory at construction time.
        default_remote: Remote used by fetch, pull and push.
    """

    model_config = SettingsConfigDict(
        env_prefix="GITCLIENT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    backend: BackendName = "library"
    git_executable: str | None = None
    working_dir: Path | None = None
    default_remote: str = Field(default=DEFAULT_REMOTE, min_length=1)

    @field_validator("working_dir")
    @classmethod
    def check_working_dir_exists(cls, v: Path | None) -> Path | None:
        """Warn if working_dir doesn't exist."""
        if v is not None and not v.exists():
            logger.warning("working_dir_missing", working_dir=str(v))
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init arguments
        2. Environment variables (GITCLIENT_*)
        3. Project YAML config (./gitclient.yaml)
        4. User YAML config (~/.config/gitclient/config.yaml)
        5. Field defaults
        """
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, Path.cwd() / PROJECT_CONFIG_FILENAME),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/gitclient/config.yaml
    """
    return Path.home() / ".config" / "gitclient" / "config.yaml"


def resolve_git_executable(git_executable: str | None = None) -> str:
    """Resolve the git executable once, falling back to the platform default.

    Args:
        git_executable: Configured executable; None or blank for the default.

    Returns:
        ``git.exe`` on Windows, ``git`` elsewhere, or the configured value.
    """
    if git_executable and git_executable.strip():
        return git_executable.strip()
    if platform.system() == "Windows":
        return GIT_EXECUTABLE_WINDOWS
    return GIT_EXECUTABLE


def load_config(**overrides: Any) -> GitClientConfig:
    """Load configuration with hierarchy: defaults -> user -> project -> env.

    Args:
        **overrides: Explicit values that take precedence over every source.

    Returns:
        GitClientConfig instance with merged configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    try:
        return GitClientConfig(**overrides)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
