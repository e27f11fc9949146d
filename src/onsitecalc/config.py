"""Centralized runtime configuration for onsitecalc.

:func:`get_settings` returns the limits, logging and interpreter settings used
by the CLI and the HTTP service. Values can be customized via environment
variables or by pointing ``ONSITECALC_CONFIG_FILE`` to a TOML/YAML document;
environment variables win over the file.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

try:  # Python 3.11+
    import tomllib  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover - safety for Python <3.11
    tomllib = None  # type: ignore[assignment]

import yaml

__all__ = ["CalculatorSettings", "get_settings", "reset_settings"]

_CONFIG_CACHE: Optional["CalculatorSettings"] = None
_CONFIG_SOURCE: Optional[Path] = None

_T = TypeVar("_T")


@dataclass(frozen=True)
class CalculatorSettings:
    """Resolved runtime settings."""

    max_expression_length: int = 300
    log_path: Optional[Path] = None
    log_level: str = "INFO"
    interpreter_endpoint: Optional[str] = None
    interpreter_model: Optional[str] = None
    interpreter_timeout: float = 30.0
    interpreter_max_retries: int = 2

    def as_dict(self) -> Dict[str, Any]:
        """Expose the settings as plain JSON-friendly values (useful for logging)."""

        return {
            "max_expression_length": self.max_expression_length,
            "log_path": str(self.log_path) if self.log_path else None,
            "log_level": self.log_level,
            "interpreter_endpoint": self.interpreter_endpoint,
            "interpreter_model": self.interpreter_model,
            "interpreter_timeout": self.interpreter_timeout,
            "interpreter_max_retries": self.interpreter_max_retries,
        }


def _load_config_file(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file '{path}' does not exist")
    suffix = path.suffix.lower()
    if suffix == ".toml":
        if tomllib is None:  # pragma: no cover - Python <3.11 fallback
            raise RuntimeError("TOML configuration requires Python 3.11 or tomllib")
        with path.open("rb") as handle:
            return tomllib.load(handle)
    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
            return loaded or {}
    raise ValueError(f"Unsupported config file format: '{suffix}'")


def _coalesce_mapping(source: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not isinstance(source, Mapping):
        return {}
    return source


def _resolve(
    env_name: str,
    section: Mapping[str, Any],
    key: str,
    default: _T,
    cast: Callable[[Any], _T],
) -> _T:
    raw = os.environ.get(env_name)
    if raw is None or raw == "":
        raw = section.get(key)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for {env_name} / '{key}': {raw!r}") from exc


def _optional_str(value: Any) -> Optional[str]:
    return str(value)


def _log_path(value: Any, *, base: Optional[Path]) -> Optional[Path]:
    candidate = Path(str(value)).expanduser()
    if not candidate.is_absolute() and base is not None:
        candidate = base / candidate
    return candidate


def _build_settings(config_file: Optional[Path]) -> CalculatorSettings:
    config_data: Mapping[str, Any] = {}
    config_dir: Optional[Path] = None
    if config_file is not None:
        config_file = config_file.expanduser().resolve()
        config_data = _load_config_file(config_file)
        config_dir = config_file.parent

    limits = _coalesce_mapping(config_data.get("limits"))
    logging_section = _coalesce_mapping(config_data.get("logging"))
    interpreter = _coalesce_mapping(config_data.get("interpreter"))

    max_length = _resolve("ONSITECALC_MAX_EXPRESSION_LENGTH", limits, "max_expression_length", 300, int)
    if max_length < 1:
        raise ValueError("max_expression_length must be a positive integer")

    return CalculatorSettings(
        max_expression_length=max_length,
        log_path=_resolve(
            "ONSITECALC_LOG_PATH",
            logging_section,
            "path",
            None,
            lambda value: _log_path(value, base=config_dir),
        ),
        log_level=_resolve("ONSITECALC_LOG_LEVEL", logging_section, "level", "INFO", lambda v: str(v).upper()),
        interpreter_endpoint=_resolve("ONSITECALC_INTERPRETER_ENDPOINT", interpreter, "endpoint", None, _optional_str),
        interpreter_model=_resolve("ONSITECALC_INTERPRETER_MODEL", interpreter, "model", None, _optional_str),
        interpreter_timeout=_resolve("ONSITECALC_INTERPRETER_TIMEOUT", interpreter, "timeout", 30.0, float),
        interpreter_max_retries=_resolve("ONSITECALC_INTERPRETER_MAX_RETRIES", interpreter, "max_retries", 2, int),
    )


def get_settings(*, refresh: bool = False, config_file: str | Path | None = None) -> CalculatorSettings:
    """Return the cached :class:`CalculatorSettings`.

    Parameters
    ----------
    refresh:
        When ``True`` the cached configuration is discarded and recomputed.
    config_file:
        Optional explicit path to the configuration document. When provided the
        returned instance is not cached globally, allowing callers (e.g. tests)
        to override settings temporarily.
    """

    global _CONFIG_CACHE, _CONFIG_SOURCE

    explicit_path = Path(config_file).expanduser() if config_file is not None else None

    if explicit_path is not None:
        return _build_settings(explicit_path)

    env_path = os.getenv("ONSITECALC_CONFIG_FILE")
    source_path = Path(env_path).expanduser() if env_path else None

    if refresh or _CONFIG_CACHE is None or _CONFIG_SOURCE != source_path:
        _CONFIG_CACHE = _build_settings(source_path)
        _CONFIG_SOURCE = source_path

    return _CONFIG_CACHE


def reset_settings() -> None:
    """Clear the cached configuration (mainly useful for tests)."""

    global _CONFIG_CACHE, _CONFIG_SOURCE
    _CONFIG_CACHE = None
    _CONFIG_SOURCE = None
