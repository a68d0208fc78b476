"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click (``None`` means "not given")
  2. Env vars     — ``TELNETCTL_*`` prefix
  3. TOML file    — ``telnetctl.toml`` discovered via walk-up
  4. Code defaults — baked into the models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`telnetctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from telnetctl.config.discovery import find_config
from telnetctl.config.models import ConnectionConfig, RelayConfig
from telnetctl.domain.timeout import parse_timeout


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``telnetctl.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class TelnetSettings(BaseSettings):
    """Unified settings for one telnetctl run.

    Stored on the :class:`~telnetctl.commands._context.AppContext`.

    Attributes:
        config_path: The TOML file that was loaded, if any.
        timeout: Raw connect-timeout string; see :meth:`connect_timeout`.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TELNETCTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    timeout: str = "10s"
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    relay: RelayConfig = Field(default_factory=RelayConfig)

    @field_validator("timeout", mode="before")
    @classmethod
    def _timeout_as_text(cls, value: Any) -> Any:
        """Keep TOML numbers (``timeout = 5`` or ``2.5``) for the lenient parser."""
        if isinstance(value, int | float):
            return str(value)
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start_dir: Path | None = None,
        **cli_flags: Any,
    ) -> TelnetSettings:
        """Construct settings from a CLI invocation.

        Uses the explicit *config_path* when given, otherwise discovers
        ``telnetctl.toml`` by walking up from *start_dir*.  Flags passed as
        ``None`` are dropped so lower-priority sources can supply them.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start_dir)

        overrides = {key: value for key, value in cli_flags.items() if value is not None}

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            msg = f"Invalid configuration: {problems}"
            raise click.ClickException(msg) from exc
        finally:
            _tls.toml_path = None

    @property
    def connect_timeout(self) -> int:
        """Connect timeout in whole seconds (lenient, defaults to 10)."""
        return parse_timeout(self.timeout)

    def connection(self, host: str, port: int) -> ConnectionConfig:
        """Build the immutable per-run connection config."""
        return ConnectionConfig(host=host, port=port, connect_timeout=self.connect_timeout)
