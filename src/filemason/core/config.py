"""Layered configuration lookup.

Each key is looked up in these layers, first hit wins:

1. CLI overrides
2. FILEMASON_* environment variables
3. user YAML file (~/.config/filemason/config.yaml)
4. system YAML file (/etc/filemason/config.yaml)
5. built-in defaults
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from filemason.core.errors import ConfigError

ALLOWED_LOGGING_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
DEFAULT_LOGGING_LEVEL = "normal"

_ENV_PREFIX = "FILEMASON_"
_BOOL_WORDS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


class _KeyMissing(ConfigError):
    pass


@dataclass
class ConfigSource:
    """A resolved value and the layer that supplied it."""

    value: Any
    source: str  # cli, env, user_config, system_config or default


@dataclass(frozen=True)
class LoggingPolicy:
    """Validated logging settings, ready to apply."""

    level_name: str
    color: bool
    sources: dict[str, ConfigSource]


def default_settings() -> dict[str, Any]:
    return {
        "logging": {"level": DEFAULT_LOGGING_LEVEL, "color": True},
        "diagnostics": {
            "enabled": False,
            "dir": str(Path(tempfile.gettempdir()) / "filemason" / "diagnostics"),
        },
        "file_io": {
            "text_encoding": "utf-8",
            # 0 means unbounded
            "tree": {"max_depth": 0},
            "archives": {"compression": "optimal"},
            # empty temp_root means the system temporary directory
            "staging": {"temp_root": ""},
            "encoding": {"max_base64_bytes": 64 * 1024 * 1024},
        },
    }


def _leaf_keys(tree: dict[str, Any], parent: str = "") -> Iterator[str]:
    for name, node in tree.items():
        dotted = f"{parent}.{name}" if parent else str(name)
        if isinstance(node, dict):
            yield from _leaf_keys(node, dotted)
        else:
            yield dotted


def _dig(tree: Any, dotted: str) -> Any | None:
    """Walk ``tree`` along a dotted key, returning None on any miss."""
    node = tree
    for segment in dotted.split("."):
        if not isinstance(node, dict) or node.get(segment) is None:
            return None
        node = node[segment]
    return node


def coerce_bool(key: str, value: Any) -> bool:
    """Turn a resolved value into a bool; env values arrive as strings."""
    if isinstance(value, (bool, int)):
        return bool(value)
    word = str(value).strip().lower()
    if word not in _BOOL_WORDS:
        raise ConfigError(f"Config key '{key}' must be a bool, got {value!r}")
    return _BOOL_WORDS[word]


def coerce_int(key: str, value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ConfigError(f"Config key '{key}' must be an int, got {value!r}")


class ConfigResolver:
    """Look up dotted keys across CLI, environment, YAML files and defaults.

    >>> resolver = ConfigResolver(cli_args={"file_io": {"archives": {"compression": "fastest"}}})
    >>> resolver.resolve("file_io.archives.compression")
    ('fastest', 'cli')

    CLI overrides may be nested dicts or flat dotted keys. YAML files are read
    lazily and only once; a missing file is treated as empty.
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        self.cli_args = cli_args or {}
        self.user_config_path = user_config_path or Path.home() / ".config/filemason/config.yaml"
        self.system_config_path = system_config_path or Path("/etc/filemason/config.yaml")
        self.defaults = default_settings() if defaults is None else defaults
        self._file_cache: dict[str, dict[str, Any]] = {}

    @staticmethod
    def env_key(key: str) -> str:
        """Map ``file_io.tree.max_depth`` to ``FILEMASON_FILE_IO_TREE_MAX_DEPTH``."""
        return _ENV_PREFIX + key.upper().replace(".", "_")

    def resolve(self, key: str) -> tuple[Any, str]:
        """Return ``(value, source)`` for ``key`` from the highest layer that has it.

        Raises:
            ConfigError: no layer defines the key, or a YAML file is unreadable.
        """
        for source, lookup in (
            ("cli", self._from_cli),
            ("env", lambda k: os.environ.get(self.env_key(k))),
            ("user_config", lambda k: _dig(self._file_layer("user_config"), k)),
            ("system_config", lambda k: _dig(self._file_layer("system_config"), k)),
            ("default", lambda k: _dig(self.defaults, k)),
        ):
            value = lookup(key)
            if value is not None:
                return value, source
        raise _KeyMissing(f"Config key '{key}' not found in any source")

    def resolve_or(self, key: str, default: Any) -> Any:
        try:
            return self.resolve(key)[0]
        except _KeyMissing:
            return default

    def resolve_logging_policy(self) -> LoggingPolicy:
        """Validate ``logging.level`` and ``logging.color`` into a LoggingPolicy."""
        try:
            raw, source = self.resolve("logging.level")
        except _KeyMissing:
            raw, source = DEFAULT_LOGGING_LEVEL, "default"

        if not isinstance(raw, str) or not raw.strip():
            raise ConfigError("Config key 'logging.level' must be a non-empty string")
        level = raw.strip().lower()
        if level not in ALLOWED_LOGGING_LEVELS:
            raise ConfigError(
                f"Invalid 'logging.level': {raw!r}. "
                f"Allowed values: {', '.join(sorted(ALLOWED_LOGGING_LEVELS))}"
            )

        return LoggingPolicy(
            level_name=level,
            color=coerce_bool("logging.color", self.resolve_or("logging.color", True)),
            sources={"level_name": ConfigSource(level, source)},
        )

    def resolve_all(self) -> dict[str, ConfigSource]:
        """Resolve every key any layer except the environment knows about."""
        known = set(_leaf_keys(self.defaults)) | set(_leaf_keys(self.cli_args))
        known |= set(_leaf_keys(self._file_layer("user_config")))
        known |= set(_leaf_keys(self._file_layer("system_config")))
        resolved: dict[str, ConfigSource] = {}
        for key in sorted(known):
            try:
                resolved[key] = ConfigSource(*self.resolve(key))
            except _KeyMissing:
                # explicit nulls in a YAML file
                continue
        return resolved

    def _from_cli(self, key: str) -> Any | None:
        flat = self.cli_args.get(key)
        return flat if flat is not None else _dig(self.cli_args, key)

    def _file_layer(self, which: str) -> dict[str, Any]:
        if which not in self._file_cache:
            path = self.user_config_path if which == "user_config" else self.system_config_path
            self._file_cache[which] = self._read_yaml(Path(path).expanduser())
        return self._file_cache[which]

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e
        return loaded if isinstance(loaded, dict) else {}
