"""
EC2 discoverers: instances and VPC networking resources
"""
import logging
from typing import Any, Dict, Iterator, List

from ..models import ResourceKind, ResourceRecord
from .base import Discoverer, extract_tags, iter_pages

logger = logging.getLogger(__name__)


class Ec2ResourceDiscoverer(Discoverer):
    """
    Template for EC2 describe_* listings

    Subclasses name the describe operation, the response list key, the id
    field and the ARN resource segment. EC2 responses carry no ARN, so one is
    built from the region and the account id.
    """

    service = 'ec2'
    kind: ResourceKind = None
    operation = None
    list_key = None
    id_field = None
    arn_segment = None

    def _items(self, page: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
        return iter(page.get(self.list_key, []))

    def _include(self, item: Dict[str, Any]) -> bool:
        return True

    def _discover(self, locality: str) -> List[ResourceRecord]:
        client = self.client(locality)
        account_id = self.context.account_id
        partition = self.context.partition(locality)
        resources = []

        for page in iter_pages(client, self.operation):
            for item in self._items(page):
                resource_id = item.get(self.id_field)
                if not resource_id or not self._include(item):
                    continue
                resources.append(ResourceRecord(
                    identity=f"arn:{partition}:ec2:{locality}:{account_id}:{self.arn_segment}/{resource_id}",
                    kind=self.kind,
                    locality=locality,
                    tags=extract_tags(item.get('Tags')),
                    short_id=resource_id,
                ))

        return resources


class Ec2InstanceDiscoverer(Ec2ResourceDiscoverer):
    name = 'ec2-instances'
    kind = ResourceKind.EC2_INSTANCE
    operation = 'describe_instances'
    list_key = 'Reservations'
    id_field = 'InstanceId'
    arn_segment = 'instance'

    def _items(self, page):
        for reservation in page.get('Reservations', []):
            yield from reservation.get('Instances', [])

    def _include(self, item):
        return item.get('State', {}).get('Name') != 'terminated'


class SecurityGroupDiscoverer(Ec2ResourceDiscoverer):
    name = 'security-groups'
    kind = ResourceKind.SECURITY_GROUP
    operation = 'describe_security_groups'
    list_key = 'SecurityGroups'
    id_field = 'GroupId'
    arn_segment = 'security-group'


class SubnetDiscoverer(Ec2ResourceDiscoverer):
    name = 'subnets'
    kind = ResourceKind.SUBNET
    operation = 'describe_subnets'
    list_key = 'Subnets'
    id_field = 'SubnetId'
    arn_segment = 'subnet'


class VpcDiscoverer(Ec2ResourceDiscoverer):
    name = 'vpcs'
    kind = ResourceKind.VPC
    operation = 'describe_vpcs'
    list_key = 'Vpcs'
    id_field = 'VpcId'
    arn_segment = 'vpc'
