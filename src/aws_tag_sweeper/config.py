"""
Run configuration: compiled-in defaults, environment input and YAML overlay
"""
import logging
import os
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .exceptions import ConfigurationError
from .tagging.policy import TagMode

logger = logging.getLogger(__name__)

HOME_REGION_ENV_VAR = 'AWS_REGION'
DEFAULT_HOME_REGION = 'us-east-1'

# Tags applied to every discovered resource
DEFAULT_DESIRED_TAGS: Mapping[str, str] = MappingProxyType({
    'Owner': '',
    'ApplicationOwner': '',
    'CostAllocation': 'International',
    'CostRegion': 'International',
    'Environment': 'Production',
    'Product': '',
})

DEFAULT_REGION_BATCH_SIZE = 5
DEFAULT_INTER_OPERATION_DELAY = 0.1
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0


@dataclass
class TaggerConfig:
    """Settings for one tagging run"""
    desired_tags: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_DESIRED_TAGS))
    mode: TagMode = TagMode.UNION_OVERWRITE
    home_region: str = DEFAULT_HOME_REGION
    region_batch_size: int = DEFAULT_REGION_BATCH_SIZE
    inter_operation_delay: float = DEFAULT_INTER_OPERATION_DELAY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    regions: Optional[List[str]] = None
    dry_run: bool = False

    def __post_init__(self):
        if isinstance(self.mode, str):
            self.mode = _parse_mode(self.mode)
        if not isinstance(self.mode, TagMode):
            raise ConfigurationError(f"Unknown tag mode: {self.mode!r}")
        if not isinstance(self.dry_run, bool):
            raise ConfigurationError(f"dry_run must be true or false, got {self.dry_run!r}")
        if not isinstance(self.home_region, str) or not self.home_region:
            raise ConfigurationError(f"Invalid home_region: {self.home_region!r}")
        for name in ('region_batch_size', 'max_attempts'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        for name in ('inter_operation_delay', 'base_delay'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
        if not isinstance(self.desired_tags, Mapping):
            raise ConfigurationError("desired_tags must be a mapping of tag keys to values")
        for key, value in self.desired_tags.items():
            if not isinstance(key, str) or not key:
                raise ConfigurationError(f"Invalid desired tag key: {key!r}")
            if not isinstance(value, str):
                raise ConfigurationError(f"Desired tag {key} must have a string value")
        self.desired_tags = MappingProxyType(dict(self.desired_tags))
        if isinstance(self.regions, str):
            self.regions = [self.regions]
        if self.regions is not None:
            if not isinstance(self.regions, (list, tuple)) or not all(isinstance(r, str) for r in self.regions):
                raise ConfigurationError("regions must be a list of region names")
            self.regions = list(self.regions)

        if self.region_batch_size < 1:
            raise ConfigurationError("region_batch_size must be at least 1")
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.inter_operation_delay < 0 or self.base_delay < 0:
            raise ConfigurationError("Delays cannot be negative")

    @classmethod
    def from_env(cls, **overrides) -> 'TaggerConfig':
        """Build a config whose home region comes from the environment"""
        home_region = os.environ.get(HOME_REGION_ENV_VAR) or DEFAULT_HOME_REGION
        values = {'home_region': home_region}
        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **overrides) -> 'TaggerConfig':
        """Return a copy with the non-None overrides applied"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _parse_mode(value: str) -> TagMode:
    normalized = value.strip().lower().replace('-', '_')
    for mode in TagMode:
        if mode.value == normalized or mode.name.lower() == normalized:
            return mode
    raise ConfigurationError(f"Unknown tag mode: {value}")


def load_config(config_path: str, base: Optional[TaggerConfig] = None) -> TaggerConfig:
    """
    Load a YAML file and overlay it on the given (or environment) config

    Args:
        config_path: Path to a YAML file
        base: Config to overlay; defaults to TaggerConfig.from_env()

    Returns:
        The merged configuration
    """
    base = base or TaggerConfig.from_env()

    if not os.path.exists(config_path):
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")

    known = {f.name for f in fields(TaggerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {config_path}: {', '.join(unknown)}")

    overrides: Dict[str, Any] = {k: v for k, v in data.items() if k in known}
    if 'desired_tags' in overrides and isinstance(overrides['desired_tags'], dict):
        overrides['desired_tags'] = {
            str(k): '' if v is None else str(v)
            for k, v in overrides['desired_tags'].items()
        }

    try:
        config = replace(base, **overrides)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    logger.debug(f"Loaded configuration from {config_path}")
    return config
