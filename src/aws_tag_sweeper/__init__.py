__version__ = "0.1.0"

from .models import (
    GLOBAL_LOCALITY,
    ResourceKind,
    ResourceRecord,
    RunState,
    RunSummary,
    TaggingOutcome
)

from .exceptions import (
    TagSweeperError,
    ConfigurationError,
    RegionEnumerationError,
    FatalEnumerationError,
    DiscoveryError,
    TaggingError
)

from .config import TaggerConfig, load_config, DEFAULT_DESIRED_TAGS
from .context import RunContext

from .aggregation import aggregate, merge_localities
from .tagging import TagMode, compute_target, ResourceTagger, RetryExecutor
from .discovery import RegionEnumerator, GLOBAL_DISCOVERERS, REGIONAL_DISCOVERERS

from .orchestrator import TaggingOrchestrator

__all__ = [
    # Version
    '__version__',

    # Models
    'GLOBAL_LOCALITY',
    'ResourceKind',
    'ResourceRecord',
    'RunState',
    'RunSummary',
    'TaggingOutcome',

    # Errors
    'TagSweeperError',
    'ConfigurationError',
    'RegionEnumerationError',
    'FatalEnumerationError',
    'DiscoveryError',
    'TaggingError',

    # Configuration
    'TaggerConfig',
    'load_config',
    'DEFAULT_DESIRED_TAGS',
    'RunContext',

    # Pipeline
    'aggregate',
    'merge_localities',
    'TagMode',
    'compute_target',
    'ResourceTagger',
    'RetryExecutor',
    'RegionEnumerator',
    'GLOBAL_DISCOVERERS',
    'REGIONAL_DISCOVERERS',

    # Orchestration
    'TaggingOrchestrator'
]
