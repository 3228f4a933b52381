"""
Bulk discovery through the Resource Groups Tagging API
"""
import logging
from typing import List

from ..models import ResourceKind, ResourceRecord
from .base import Discoverer, extract_tags, iter_pages

logger = logging.getLogger(__name__)

# ARN service field -> kind, for services whose generic records need a native tagger
SERVICE_KINDS = {
    'sns': ResourceKind.SNS_TOPIC,
}


def infer_kind(arn: str) -> ResourceKind:
    """Guess a resource kind from the structure of its ARN"""
    parts = arn.split(':')
    service = parts[2] if len(parts) > 2 else ''
    return SERVICE_KINDS.get(service, ResourceKind.GENERIC)


class TaggingApiDiscoverer(Discoverer):
    """Every resource the tagging API knows about, with minimal enrichment"""

    name = 'tagging-api'
    service = 'resourcegroupstaggingapi'

    def _discover(self, locality: str) -> List[ResourceRecord]:
        client = self.client(locality)
        resources = []

        for page in iter_pages(client, 'get_resources'):
            for mapping in page.get('ResourceTagMappingList', []):
                arn = mapping.get('ResourceARN')
                if not arn:
                    continue
                resources.append(ResourceRecord(
                    identity=arn,
                    kind=infer_kind(arn),
                    locality=locality,
                    tags=extract_tags(mapping.get('Tags')),
                ))

        return resources
