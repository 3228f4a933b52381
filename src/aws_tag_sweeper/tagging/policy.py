"""
Tag policy: computes the tag set a resource should end up with
"""
from enum import Enum
from typing import Dict, List, Mapping, Optional


class TagMode(Enum):
    """How desired tags are combined with a resource's existing tags"""
    UNION_OVERWRITE = "union_overwrite"
    SELECTIVE = "selective"


def missing_keys(existing: Mapping[str, str], desired: Mapping[str, str]) -> List[str]:
    """Desired tag keys that the resource does not carry yet"""
    return [key for key in desired if key not in existing]


def compute_target(existing: Mapping[str, str],
                   desired: Mapping[str, str],
                   mode: TagMode = TagMode.UNION_OVERWRITE) -> Optional[Dict[str, str]]:
    """
    Compute the target tag set for a resource

    Args:
        existing: Tags currently on the resource
        desired: Required tag keys and values
        mode: Merge policy

    Returns:
        A new tag mapping, or None when selective mode finds nothing to do.
        The inputs are never modified.
    """
    if mode is TagMode.SELECTIVE and not missing_keys(existing, desired):
        return None

    target = dict(existing)
    target.update(desired)
    return target
