from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional
import yaml
from pathlib import Path

from .cache.address import ADDRESS_BITS
from .cache.policy import Policy
from .utils.logging import get_logger

logger = get_logger(__name__)

MAX_SBITS = ADDRESS_BITS - 1
# Sets are allocated eagerly, so warn well before memory runs out.
LARGE_SBITS = 24


class ConfigError(ValueError):
    """Raised when a cache configuration cannot describe a valid cache."""


@dataclass(frozen=True)
class SimConfig:
    """Resolved configuration of one simulation run.

    Defaults match the classic `csim` tool: 256 sets, direct-mapped, 256-byte
    blocks, LRU.
    """
    # Cache geometry
    sbits: int = 8     # set index bits (S = 2**sbits)
    perset: int = 1    # lines per set (E)
    bbits: int = 8     # block offset bits (B = 2**bbits)

    # Eviction policy
    policy: Policy = Policy.LRU

    # Trace to replay
    trace: str = "traces/dave.trace"

    # Output
    verbose: bool = False
    report_dir: Optional[str] = None

    # Config file the values were loaded from, if any
    config_file: str = ""

    def __post_init__(self):
        try:
            object.__setattr__(self, "policy", Policy.parse(self.policy))
        except ValueError as e:
            raise ConfigError(str(e)) from None

        for name in ("sbits", "perset", "bbits"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}.")
        if self.sbits < 0:
            raise ConfigError("sbits must be non-negative.")
        if self.sbits > MAX_SBITS:
            raise ConfigError(f"sbits must be at most {MAX_SBITS}, got {self.sbits}.")
        if self.bbits < 0:
            raise ConfigError("bbits must be non-negative.")
        if self.perset < 1:
            raise ConfigError("perset (lines per set) must be at least 1.")
        if self.sbits + self.bbits > ADDRESS_BITS:
            raise ConfigError(
                f"sbits + bbits must not exceed {ADDRESS_BITS} (got {self.sbits} + {self.bbits})."
            )
        if self.sbits > LARGE_SBITS:
            logger.warning("sbits=%d allocates %d cache sets up front; this may exhaust memory.",
                           self.sbits, 1 << self.sbits)

    @property
    def num_sets(self) -> int:
        return 1 << self.sbits

    @property
    def block_size(self) -> int:
        return 1 << self.bbits

    @property
    def capacity_bytes(self) -> int:
        return self.num_sets * self.perset * self.block_size

    def to_dict(self) -> Dict[str, Any]:
        d = {f.name: getattr(self, f.name) for f in fields(self)}
        d["policy"] = str(self.policy)
        return d

    def with_overrides(self, **overrides: Any) -> SimConfig:
        """Returns a copy with the given non-None fields replaced."""
        known = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if v is not None and k in known}
        return replace(self, **changes) if changes else self

    @staticmethod
    def load_yaml(yaml_path: str) -> Dict[str, Any]:
        """Reads config fields from a YAML file, dropping unknown keys."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        if not isinstance(yaml_config, dict):
            raise ConfigError(f"Config file {yaml_path} must contain a mapping.")
        known = {f.name for f in fields(SimConfig)}
        values = {}
        for key, value in yaml_config.items():
            if key in known:
                values[key] = value
            else:
                logger.warning("Ignoring unknown config key %r in %s", key, yaml_path)
        return values

    @classmethod
    def from_yaml(cls, yaml_path: str) -> SimConfig:
        values = cls.load_yaml(yaml_path)
        values["config_file"] = yaml_path
        return cls(**values)

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        values: Dict[str, Any] = {}

        # 1. Load from YAML config file if provided
        if getattr(args, 'config', None):
            values["config_file"] = args.config
            if Path(args.config).exists():
                values.update(cls.load_yaml(args.config))
            else:
                logger.warning("Config file %s not found.", args.config)

        # 2. Override with command-line arguments
        known = {f.name for f in fields(cls)}
        for key, value in vars(args).items():
            if value is not None and key in known:
                values[key] = value

        return cls(**values)
