"""
Gateway configuration.

Settings come from (highest priority first) explicit arguments, a YAML or
JSON file passed to :meth:`GatewaySettings.from_file`, ``WINBASIC_*``
environment variables and the defaults below.
"""

import json
import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from winbasic.filesystem.config import FileSystemConfig
from winbasic.filesystem.roots import Root
from winbasic.shell.config import ShellConfig


class GatewaySettings(BaseSettings):
    """
    Complete gateway configuration.

    Environment variables use the ``WINBASIC_`` prefix and ``__`` for
    nesting, e.g. ``WINBASIC_SHELL__DEFAULT_TIMEOUT_MS=10000`` or
    ``WINBASIC_ROOTS='["C:/projects"]'``.

    Example:
        ```python
        settings = GatewaySettings(
            roots=["/srv/project", "file:///C:/work"],
            shell={"powershell_executable": "pwsh"},
        )
        registry = RootRegistry(settings.initial_roots())
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="WINBASIC_",
        env_nested_delimiter="__",
        extra="forbid",
    )

    server_name: str = Field(
        default="mcp-windows-basic",
        description="Name reported to clients during initialization",
    )
    roots: list[str] = Field(
        default_factory=list,
        description="Initial roots (paths or file: URIs); empty = unrestricted",
    )
    filesystem: FileSystemConfig = Field(
        default_factory=FileSystemConfig,
        description="File tool settings",
    )
    shell: ShellConfig = Field(
        default_factory=ShellConfig,
        description="Command tool settings",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level name",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the level name."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def initial_roots(self) -> list[Root]:
        """Convert the configured roots into Root entries."""
        return [Root.from_value(value) for value in self.roots]

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "GatewaySettings":
        """
        Load settings from a YAML or JSON file.

        File format (YAML):
            ```yaml
            roots:
              - C:/projects/app
            filesystem:
              max_matches_per_file: 5
            shell:
              default_timeout_ms: 30000
              powershell_executable: pwsh
            ```

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        path = Path(path).expanduser().resolve()

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text()

        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        elif path.suffix == ".json":
            data = json.loads(content)
        else:
            # Try YAML first, then JSON
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError:
                data = json.loads(content)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> "GatewaySettings":
        return cls(**data)
