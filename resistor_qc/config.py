from __future__ import annotations

import dataclasses
import os
import pathlib
import sys
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .processing import DEFAULT_SAMPLE_SIZE, FORMULAS


DEFAULT_CONFIG_PATH = pathlib.Path(__file__).resolve().parents[1] / "config.yaml"
CONFIG_ENV_VAR = "RESISTOR_QC_CONFIG"

DEFAULT_SUPPLIERS = ["Farnell", "RSComponents", "Rapid Electronics", "DigiKey"]


@dataclasses.dataclass
class SampleConfig:
    size: int = DEFAULT_SAMPLE_SIZE
    formula: str = "population"  # population | legacy


@dataclasses.dataclass
class StoreConfig:
    directory: str = "logs"
    extension: str = ".csv"


@dataclasses.dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclasses.dataclass
class AppConfig:
    suppliers: List[str] = dataclasses.field(default_factory=lambda: list(DEFAULT_SUPPLIERS))
    sample: SampleConfig = dataclasses.field(default_factory=SampleConfig)
    store: StoreConfig = dataclasses.field(default_factory=StoreConfig)
    logging: LoggingConfig = dataclasses.field(default_factory=LoggingConfig)

    def validate(self) -> "AppConfig":
        if not self.suppliers or not all(isinstance(s, str) and s.strip() for s in self.suppliers):
            raise ConfigError("suppliers must be a non-empty list of names")
        if isinstance(self.sample.size, bool) or not isinstance(self.sample.size, int) or self.sample.size < 1:
            raise ConfigError(f"sample.size must be a positive integer, got {self.sample.size!r}")
        if self.sample.formula not in FORMULAS:
            raise ConfigError(f"sample.formula must be one of {', '.join(FORMULAS)}, got {self.sample.formula!r}")
        if str(self.logging.level).upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Unknown logging.level: {self.logging.level!r}")
        return self


def load_config(path: Optional[pathlib.Path] = None) -> AppConfig:
    cfg_path = pathlib.Path(path) if path else _resolve_config_path()
    if path and not cfg_path.exists():
        raise ConfigError(f"Config file not found: {cfg_path}")
    if cfg_path and cfg_path.exists():
        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                data: Dict[str, Any] = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {cfg_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{cfg_path}: top level must be a mapping")
        cfg = _from_dict(data)
    else:
        cfg = AppConfig()
    return cfg.validate()


def _resolve_config_path() -> Optional[pathlib.Path]:
    """Return the best config.yaml path.

    Priority:
    1) $RESISTOR_QC_CONFIG
    2) Frozen exe dir (PyInstaller): <exe_dir>/config.yaml
    3) Current working directory
    4) Project root (source checkout): repo/config.yaml
    """
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return pathlib.Path(env)

    candidates = []
    if getattr(sys, "frozen", False):
        candidates.append(pathlib.Path(sys.executable).resolve().parent / "config.yaml")
    candidates.append(pathlib.Path.cwd() / "config.yaml")
    candidates.append(DEFAULT_CONFIG_PATH)

    for p in candidates:
        if p.exists():
            return p
    return None


def _from_dict(d: Dict[str, Any]) -> AppConfig:
    known = {f.name for f in dataclasses.fields(AppConfig)}
    unknown = set(d) - known
    if unknown:
        raise ConfigError(f"Unknown config section(s): {', '.join(sorted(unknown))}")

    def section(name: str, cls):
        values = d.get(name) or {}
        if not isinstance(values, dict):
            raise ConfigError(f"Config section '{name}' must be a mapping")
        try:
            return cls(**{**dataclasses.asdict(cls()), **values})
        except TypeError as e:
            raise ConfigError(f"Config section '{name}': {e}") from e

    suppliers = d.get("suppliers") or list(DEFAULT_SUPPLIERS)
    if not isinstance(suppliers, list):
        raise ConfigError("suppliers must be a list of names")
    for s in suppliers:
        if not isinstance(s, str):
            raise ConfigError(f"supplier names must be text, got {s!r}")

    return AppConfig(
        suppliers=list(suppliers),
        sample=section("sample", SampleConfig),
        store=section("store", StoreConfig),
        logging=section("logging", LoggingConfig),
    )
