"""
Lightsail discoverers: instances, databases, load balancers, disks and buckets
"""
import logging
from typing import List

from ..models import ResourceKind, ResourceRecord
from .base import Discoverer, extract_tags, iter_pages

logger = logging.getLogger(__name__)


class LightsailDiscoverer(Discoverer):
    """Template for Lightsail get_* listings, which embed lower-case key/value tags"""

    service = 'lightsail'
    kind: ResourceKind = None
    operation = None
    list_key = None

    def _discover(self, locality: str) -> List[ResourceRecord]:
        client = self.client(locality)
        resources = []

        for page in iter_pages(client, self.operation, 'pageToken', 'nextPageToken'):
            for item in page.get(self.list_key, []):
                name = item.get('name')
                arn = item.get('arn')
                if not name or not arn:
                    continue
                resources.append(ResourceRecord(
                    identity=arn,
                    kind=self.kind,
                    locality=locality,
                    tags=extract_tags(item.get('tags'), key_field='key', value_field='value'),
                    short_id=name,
                ))

        return resources


class LightsailInstanceDiscoverer(LightsailDiscoverer):
    name = 'lightsail-instances'
    kind = ResourceKind.LIGHTSAIL_INSTANCE
    operation = 'get_instances'
    list_key = 'instances'


class LightsailDatabaseDiscoverer(LightsailDiscoverer):
    name = 'lightsail-databases'
    kind = ResourceKind.LIGHTSAIL_DATABASE
    operation = 'get_relational_databases'
    list_key = 'relationalDatabases'


class LightsailLoadBalancerDiscoverer(LightsailDiscoverer):
    name = 'lightsail-load-balancers'
    kind = ResourceKind.LIGHTSAIL_LOAD_BALANCER
    operation = 'get_load_balancers'
    list_key = 'loadBalancers'


class LightsailDiskDiscoverer(LightsailDiscoverer):
    name = 'lightsail-disks'
    kind = ResourceKind.LIGHTSAIL_DISK
    operation = 'get_disks'
    list_key = 'disks'


class LightsailBucketDiscoverer(LightsailDiscoverer):
    name = 'lightsail-buckets'
    kind = ResourceKind.LIGHTSAIL_BUCKET
    operation = 'get_buckets'
    list_key = 'buckets'
