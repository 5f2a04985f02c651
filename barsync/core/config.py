"""Configuration loading for the synchronization engine.

Configuration lives in a YAML file with a single ``sync`` section:

    sync:
      symbols: [EURUSD, USDJPY, GBPUSD]
      timeframe: 60
      window_size: 5
      periodic_mode: false
      auto_calc: true
      max_bars: 5000
    monitoring:
      log_level: INFO
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .constants import DEFAULT_MAX_BARS, DEFAULT_TIMEFRAME_SECONDS, DEFAULT_WINDOW_SIZE
from .exceptions import ConfigValidationError, InvalidConfigError, MissingConfigError


@dataclass
class SyncConfig:
    """
    Validated engine configuration.

    Attributes:
        symbols: Symbol names, list position is the symbol index
        timeframe: Bucket width in seconds
        window_size: Buckets per window (or per period in periodic mode)
        periodic_mode: Accumulate per period instead of sliding
        auto_calc: Run calc() after every aligner update
        max_bars: Snapshot rows kept by the aligned store
        log_level: Logging level name
    """
    symbols: List[str] = field(default_factory=list)
    timeframe: int = DEFAULT_TIMEFRAME_SECONDS
    window_size: int = DEFAULT_WINDOW_SIZE
    periodic_mode: bool = False
    auto_calc: bool = True
    max_bars: int = DEFAULT_MAX_BARS
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate values."""
        if not self.symbols:
            raise MissingConfigError("At least one symbol is required")

        if len(set(self.symbols)) != len(self.symbols):
            raise InvalidConfigError("Duplicate symbol names", symbols=self.symbols)

        for name in ('timeframe', 'window_size', 'max_bars'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise InvalidConfigError(f"{name} must be a positive integer", value=value)

    @property
    def symbol_count(self) -> int:
        return len(self.symbols)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SyncConfig":
        """
        Build config from a parsed YAML document.

        Args:
            raw: Top-level mapping with ``sync`` and optional ``monitoring`` sections

        Returns:
            SyncConfig instance
        """
        if not isinstance(raw, dict):
            raise ConfigValidationError("Configuration root must be a mapping")

        sync = raw.get('sync')
        if sync is None:
            raise MissingConfigError("Missing 'sync' section")
        if not isinstance(sync, dict):
            raise ConfigValidationError("'sync' section must be a mapping")

        monitoring = raw.get('monitoring', {}) or {}
        if not isinstance(monitoring, dict):
            raise ConfigValidationError("'monitoring' section must be a mapping")

        symbols = sync.get('symbols', [])
        if not isinstance(symbols, list):
            raise ConfigValidationError("'sync.symbols' must be a list", symbols=symbols)

        return cls(
            symbols=[str(s) for s in symbols],
            timeframe=sync.get('timeframe', DEFAULT_TIMEFRAME_SECONDS),
            window_size=sync.get('window_size', DEFAULT_WINDOW_SIZE),
            periodic_mode=bool(sync.get('periodic_mode', False)),
            auto_calc=bool(sync.get('auto_calc', True)),
            max_bars=sync.get('max_bars', DEFAULT_MAX_BARS),
            log_level=str(monitoring.get('log_level', 'INFO')).upper()
        )


def load_config(config_file: Union[str, Path]) -> SyncConfig:
    """
    Load and validate a YAML configuration file.

    Args:
        config_file: Path to configuration file

    Returns:
        SyncConfig instance
    """
    path = Path(config_file)
    if not path.exists():
        raise MissingConfigError("Configuration file not found", path=str(path))

    with open(path, 'r') as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML: {e}", path=str(path)) from e

    return SyncConfig.from_dict(raw or {})
