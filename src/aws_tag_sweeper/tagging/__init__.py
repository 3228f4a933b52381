"""Tagging module: tag policy, per-kind taggers and retry handling"""

from .policy import TagMode, compute_target, missing_keys
from .retry import AttemptResult, RetryExecutor
from .taggers import ResourceTagger, to_tag_list

__all__ = [
    'TagMode',
    'compute_target',
    'missing_keys',
    'AttemptResult',
    'RetryExecutor',
    'ResourceTagger',
    'to_tag_list'
]
