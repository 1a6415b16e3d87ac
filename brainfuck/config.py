import codecs
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional
import os

import yaml

from brainfuck.execution import DEFAULT_TAPE_SIZE

# Environment overrides, applied after the config file
TAPE_SIZE_ENV = "BF_TAPE_SIZE"
TRACE_ENV = "BF_TRACE"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    pass


@dataclass
class InterpreterConfig:
    tape_size: int = DEFAULT_TAPE_SIZE
    flush_output: bool = True
    encoding: str = "utf-8"
    trace: bool = False
    show_memory_range: int = 10

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            expected = type(getattr(InterpreterConfig, f.name))
            # bool is an int subclass; keep them apart
            if type(value) is not expected:
                raise ConfigError(f"{f.name} must be {expected.__name__}, got {value!r}")
        if self.tape_size < 1:
            raise ConfigError(f"tape_size must be at least 1, got {self.tape_size}")
        if self.show_memory_range < 1:
            raise ConfigError(f"show_memory_range must be at least 1, got {self.show_memory_range}")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ConfigError(f"encoding: unknown codec {self.encoding!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def default_tape_size() -> int:
    """Initial tape size, from BF_TAPE_SIZE when set."""
    size = _env_int(TAPE_SIZE_ENV, DEFAULT_TAPE_SIZE)
    if size < 1:
        raise ConfigError(f"{TAPE_SIZE_ENV} must be at least 1, got {size}")
    return size


def load_config(path: Optional[str] = None) -> InterpreterConfig:
    """Load interpreter settings from a YAML mapping, then the environment.

    Example file:

        tape_size: 65536
        flush_output: false
        trace: false
    """
    data: Dict[str, Any] = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"{path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{path}: expected a mapping, got {type(loaded).__name__}")
        known = {f.name for f in fields(InterpreterConfig)}
        unknown = sorted(set(loaded) - known)
        if unknown:
            raise ConfigError(f"{path}: unknown settings: {', '.join(map(str, unknown))}")
        data.update(loaded)

    config = InterpreterConfig(**data)
    config.tape_size = _env_int(TAPE_SIZE_ENV, config.tape_size)
    config.trace = _env_bool(TRACE_ENV, config.trace)
    # re-validate with the overrides applied
    return InterpreterConfig(**{f.name: getattr(config, f.name) for f in fields(config)})
