"""Configuration value object - Thresholds, overrides and platform limits."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .errors import ConfigError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{key} must be a boolean, got {raw!r}")


def _parse_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class PathLimits:
    """Maximum usable path length per platform family.

    Attributes:
        windows: Limit for Windows nodes (classic MAX_PATH)
        posix: Limit for everything else
    """

    windows: int = 260
    posix: int = 4096

    def __post_init__(self) -> None:
        if self.windows <= 0 or self.posix <= 0:
            raise ConfigError("Path limits must be positive")

    def for_platform(self, is_windows: bool) -> int:
        return self.windows if is_windows else self.posix


@dataclass(frozen=True)
class Settings:
    """shortwspath configuration.

    Built once at startup and passed to the locator and the prober.

    Attributes:
        build_path_length: Usable length below which shortening is attempted
        force_short_workspace: Always return the shortened candidate
        force_apply_to_controller: Also shorten workspaces on the controller
        limits: Platform path length limits used by the probe
        probe_timeout: Seconds to wait for a remote probe
    """

    build_path_length: int = 512
    force_short_workspace: bool = True
    force_apply_to_controller: bool = True
    limits: PathLimits = field(default_factory=PathLimits)
    probe_timeout: float = 30.0

    def __post_init__(self) -> None:
        """Validate numeric fields."""
        if self.build_path_length < 0:
            raise ConfigError("BUILD_PATH_LENGTH must not be negative")
        if self.probe_timeout <= 0:
            raise ConfigError("PROBE_TIMEOUT must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Load settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ

        Returns:
            Settings instance

        Raises:
            ConfigError: If a value is malformed
        """
        if environ is None:
            environ = os.environ

        return cls(
            build_path_length=_parse_int(environ, "BUILD_PATH_LENGTH", 512),
            force_short_workspace=_parse_bool(environ, "FORCE_SHORT_WS", True),
            force_apply_to_controller=_parse_bool(environ, "FORCE_MASTER", True),
            limits=PathLimits(
                windows=_parse_int(environ, "WINDOWS_PATH_LIMIT", 260),
                posix=_parse_int(environ, "POSIX_PATH_LIMIT", 4096),
            ),
            probe_timeout=float(_parse_int(environ, "PROBE_TIMEOUT", 30)),
        )
