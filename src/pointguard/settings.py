"""Store settings: defaults, TOML config file, and environment overrides."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Final

from pointguard import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV: Final = "POINTGUARD_CONFIG"
DIR_ENV: Final = "POINTGUARD_DIR"
CLIP_TIME_ENV: Final = "POINTGUARD_CLIP_TIME"

DEFAULT_CONFIG_PATH: Final = "~/.config/pointguard/config.toml"
DEFAULT_DIR: Final = "~/.pointguard"
DEFAULT_CLIP_TIME: Final = 45
DEFAULT_GENERATED_LENGTH: Final = 25
DEFAULT_EDITOR: Final = "vim"


@dataclass(frozen=True, slots=True)
class Settings:
    """Configuration for one invocation.

    Attributes:
        dir: Root directory of the password store.
        clip_time: Seconds before the clipboard relay clears the clipboard.
        generated_length: Length of generated secrets.
        editor: Editor command used to edit secrets.
    """

    dir: Path
    clip_time: int = DEFAULT_CLIP_TIME
    generated_length: int = DEFAULT_GENERATED_LENGTH
    editor: str = DEFAULT_EDITOR

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> Settings:
        """Load settings from defaults, the config file, and the environment.

        Later sources win: defaults, then the TOML config file, then
        ``POINTGUARD_DIR`` / ``POINTGUARD_CLIP_TIME``.

        Args:
            config_path: Config file to read. Defaults to ``$POINTGUARD_CONFIG``
                or ``~/.config/pointguard/config.toml``. A missing file is
                not an error.
            env: Environment mapping. Defaults to ``os.environ``.

        Returns:
            Settings: Validated settings.

        Raises:
            ConfigError: If the config file is malformed or a value is invalid.
        """
        environ = os.environ if env is None else env
        if config_path is None:
            config_path = Path(environ.get(CONFIG_ENV, DEFAULT_CONFIG_PATH))

        values: dict[str, Any] = {
            "dir": DEFAULT_DIR,
            "clip_time": DEFAULT_CLIP_TIME,
            "generated_length": DEFAULT_GENERATED_LENGTH,
            "editor": environ.get("EDITOR") or DEFAULT_EDITOR,
        }
        values.update(_read_config_file(config_path.expanduser()))

        if DIR_ENV in environ:
            values["dir"] = environ[DIR_ENV]
        if CLIP_TIME_ENV in environ:
            values["clip_time"] = _parse_int(CLIP_TIME_ENV, environ[CLIP_TIME_ENV])

        return cls.from_mapping(values)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> Settings:
        """Validate raw values and build settings.

        Raises:
            ConfigError: If a value has the wrong type or range.
        """
        store_dir = values.get("dir", DEFAULT_DIR)
        if not isinstance(store_dir, (str, Path)) or not str(store_dir):
            raise ConfigError("'dir' must be a non-empty path")

        editor = values.get("editor", DEFAULT_EDITOR)
        if not isinstance(editor, str) or not editor:
            raise ConfigError("'editor' must be a non-empty string")

        return cls(
            dir=Path(store_dir).expanduser(),
            clip_time=_positive_int("clip_time", values.get("clip_time", DEFAULT_CLIP_TIME)),
            generated_length=_positive_int(
                "generated_length",
                values.get("generated_length", DEFAULT_GENERATED_LENGTH),
            ),
            editor=editor,
        )

    def with_overrides(self, **changes: Any) -> Settings:
        """Return a copy with non-``None`` ``changes`` applied."""
        applied = {k: v for k, v in changes.items() if v is not None}
        if not applied:
            return self
        if "dir" in applied:
            applied["dir"] = Path(applied["dir"]).expanduser()
        if "clip_time" in applied:
            applied["clip_time"] = _positive_int("clip_time", applied["clip_time"])
        return replace(self, **applied)


_KNOWN_KEYS: Final = frozenset({"dir", "clip_time", "generated_length", "editor"})


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError:
        logger.debug("No config file at %s", path)
        return {}
    except OSError as exc:
        raise ConfigError(f"cannot read config file '{path}': {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid config file '{path}': {exc}") from exc

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"unknown config keys in '{path}': {', '.join(unknown)}")

    logger.debug("Loaded config from %s", path)
    return data


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got '{raw}'") from exc


def _positive_int(name: str, value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{name}' must be an integer")
    if value < 1:
        raise ConfigError(f"'{name}' must be a positive integer")
    return value
