"""
Aggregation of discoverer outputs into a de-duplicated inventory
"""
import logging
from typing import Dict, Iterable, Sequence

from .models import ResourceKind, ResourceRecord

logger = logging.getLogger(__name__)

Inventory = Dict[str, ResourceRecord]


def aggregate(layers: Iterable[Sequence[ResourceRecord]]) -> Inventory:
    """
    Merge discoverer outputs keyed by identity

    Args:
        layers: Discoverer outputs in precedence order; a later layer replaces
            an earlier record with the same identity

    Returns:
        Mapping identity -> record, in first-seen order
    """
    inventory: Inventory = {}
    for records in layers:
        for record in records:
            inventory[record.identity] = record
    return inventory


def merge_localities(inventories: Iterable[Inventory]) -> Inventory:
    """
    Concatenate per-locality inventories into the run-wide inventory

    The same identity can surface in two localities when a regional bulk
    listing reports a global resource (S3 buckets). The first position is
    kept, and a specific record replaces a generic one.
    """
    merged: Inventory = {}
    for inventory in inventories:
        for identity, record in inventory.items():
            existing = merged.get(identity)
            if existing is None:
                merged[identity] = record
            elif existing.kind is ResourceKind.GENERIC and record.kind is not ResourceKind.GENERIC:
                merged[identity] = record
            else:
                logger.debug(f"Keeping {existing.kind.value} record for {identity} found again in {record.locality}")
    return merged
