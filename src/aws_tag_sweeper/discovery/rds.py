"""
RDS discoverers: DB instances and Aurora clusters
"""
import logging
from typing import List

from ..models import ResourceKind, ResourceRecord
from .base import Discoverer, extract_tags, iter_pages

logger = logging.getLogger(__name__)


class RdsDiscoverer(Discoverer):
    """Template for RDS describe_* listings; tags come from list_tags_for_resource"""

    service = 'rds'
    kind: ResourceKind = None
    operation = None
    list_key = None
    id_field = None
    arn_field = None

    def _discover(self, locality: str) -> List[ResourceRecord]:
        client = self.client(locality)
        resources = []

        for page in iter_pages(client, self.operation):
            for item in page.get(self.list_key, []):
                identifier = item.get(self.id_field)
                arn = item.get(self.arn_field)
                if not identifier or not arn:
                    continue

                try:
                    response = client.list_tags_for_resource(ResourceName=arn)
                except Exception as e:
                    logger.error(f"Error getting tags for {self.kind.value} {identifier}: {e}")
                    continue

                resources.append(ResourceRecord(
                    identity=arn,
                    kind=self.kind,
                    locality=locality,
                    tags=extract_tags(response.get('TagList')),
                    short_id=identifier,
                ))

        return resources


class RdsInstanceDiscoverer(RdsDiscoverer):
    name = 'rds-instances'
    kind = ResourceKind.RDS_INSTANCE
    operation = 'describe_db_instances'
    list_key = 'DBInstances'
    id_field = 'DBInstanceIdentifier'
    arn_field = 'DBInstanceArn'


class RdsClusterDiscoverer(RdsDiscoverer):
    name = 'rds-clusters'
    kind = ResourceKind.RDS_CLUSTER
    operation = 'describe_db_clusters'
    list_key = 'DBClusters'
    id_field = 'DBClusterIdentifier'
    arn_field = 'DBClusterArn'
