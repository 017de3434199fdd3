"""
Environment configuration for the boot engine.

Values come from three layers, later overriding earlier:
1. A .env file (optional)
2. Process environment variables
3. Explicit overrides passed to EnvConfig.load()

Only keys starting with the prefix (HOSTBOOT_ by default) are kept.
"""

from typing import Any, Dict, Mapping, Optional
from pathlib import Path
import json
import logging
import os

from dotenv import dotenv_values


logger = logging.getLogger("hostboot.config")

PRODUCTION = "production"
STAGING = "staging"
DEVELOPMENT = "development"
LOCAL = "local"

_ENV_ALIASES = {
    "prod": PRODUCTION,
    "production": PRODUCTION,
    "stage": STAGING,
    "staging": STAGING,
    "dev": DEVELOPMENT,
    "develop": DEVELOPMENT,
    "development": DEVELOPMENT,
    "local": LOCAL,
}

DEFAULT_PLUGINS_SIGNAL = "plugins_loaded"
DEFAULT_LAST_BOOT_AT = "init"


class EnvConfig:
    """
    Read-only view over prefixed environment settings.

    Keys are looked up by their suffix, case-insensitively:
    get("debug") reads HOSTBOOT_DEBUG.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, prefix: str = "HOSTBOOT_"):
        self.prefix = prefix
        self._values: Dict[str, Any] = {}
        for key, value in (values or {}).items():
            self._values[self._normalize(key)] = value

    @classmethod
    def load(
        cls,
        env_file: Optional[str] = None,
        prefix: str = "HOSTBOOT_",
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "EnvConfig":
        """
        Load configuration from a .env file, the environment and overrides.

        Args:
            env_file: Path to .env file (skipped if missing)
            prefix: Prefix for environment variables
            overrides: Manual overrides (highest precedence)
            environ: Environment mapping, defaults to os.environ

        Returns:
            Configured EnvConfig instance
        """
        config = cls(prefix=prefix)

        if env_file:
            if Path(env_file).exists():
                config._merge(dotenv_values(env_file), parse=True)
            else:
                logger.debug(f"Env file {env_file} not found, skipping")

        config._merge(os.environ if environ is None else environ, parse=True)

        if overrides:
            config._merge(overrides, parse=False)

        return config

    def _merge(self, source: Mapping[str, Any], parse: bool) -> None:
        for key, value in source.items():
            if value is None:
                continue
            name = key.upper()
            if not name.startswith(self.prefix):
                if parse:
                    continue
                # overrides may omit the prefix
                name = self.prefix + name
            self._values[name[len(self.prefix):].lower()] = (
                self._parse_value(value) if parse and isinstance(value, str) else value
            )

    def _normalize(self, key: str) -> str:
        name = key.upper()
        if name.startswith(self.prefix):
            name = name[len(self.prefix):]
        return name.lower()

    @staticmethod
    def _parse_value(value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(self._normalize(key), default)

    def __contains__(self, key: str) -> bool:
        return self._normalize(key) in self._values

    @property
    def env(self) -> str:
        raw = str(self.get("env", PRODUCTION)).strip().lower()
        env = _ENV_ALIASES.get(raw)
        if env is None:
            logger.warning(f"Unknown environment {raw!r}, falling back to {PRODUCTION!r}")
            return PRODUCTION
        return env

    def is_env(self, env: str) -> bool:
        return self.env == _ENV_ALIASES.get(env.lower(), env.lower())

    @property
    def is_debug(self) -> bool:
        debug = self.get("debug")
        if debug is None:
            return self.env in (DEVELOPMENT, LOCAL)
        if isinstance(debug, str):
            return self._parse_value(debug) is True
        return bool(debug)

    @property
    def plugins_signal(self) -> str:
        return str(self.get("plugins_signal", DEFAULT_PLUGINS_SIGNAL))

    @property
    def last_boot_at(self) -> str:
        return str(self.get("last_boot_at", DEFAULT_LAST_BOOT_AT))

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"EnvConfig(env={self.env!r}, keys={sorted(self._values)})"
