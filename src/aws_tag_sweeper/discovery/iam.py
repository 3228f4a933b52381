"""
IAM discoverers (global): roles, users and customer-managed policies
"""
import logging
from typing import Any, Dict, List, Optional

from ..models import GLOBAL_LOCALITY, ResourceKind, ResourceRecord
from .base import Discoverer, extract_tags, iter_pages

logger = logging.getLogger(__name__)


class IamDiscoverer(Discoverer):
    """
    Template for IAM listings

    IAM list calls do not return tags, so each item needs a follow-up call.
    A failed follow-up skips that item only.
    """

    service = 'iam'
    is_global = True
    kind: ResourceKind = None
    operation = None
    list_key = None
    name_field = None
    list_kwargs: Dict[str, Any] = {}

    def _fetch_tags(self, client, item: Dict[str, Any]) -> Dict[str, str]:
        raise NotImplementedError

    def _discover(self, locality: str) -> List[ResourceRecord]:
        client = self.client(GLOBAL_LOCALITY)
        resources = []

        for page in iter_pages(client, self.operation, **self.list_kwargs):
            for item in page.get(self.list_key, []):
                record = self._build_record(client, item)
                if record:
                    resources.append(record)

        return resources

    def _build_record(self, client, item: Dict[str, Any]) -> Optional[ResourceRecord]:
        name = item.get(self.name_field)
        arn = item.get('Arn')
        if not name or not arn:
            return None

        try:
            tags = self._fetch_tags(client, item)
        except Exception as e:
            logger.error(f"Error getting tags for {self.kind.value} {name}: {e}")
            return None

        return ResourceRecord(
            identity=arn,
            kind=self.kind,
            locality=GLOBAL_LOCALITY,
            tags=tags,
            short_id=name,
        )


class IamRoleDiscoverer(IamDiscoverer):
    name = 'iam-roles'
    kind = ResourceKind.IAM_ROLE
    operation = 'list_roles'
    list_key = 'Roles'
    name_field = 'RoleName'

    def _fetch_tags(self, client, item):
        role = client.get_role(RoleName=item['RoleName']).get('Role', {})
        return extract_tags(role.get('Tags'))


class IamUserDiscoverer(IamDiscoverer):
    name = 'iam-users'
    kind = ResourceKind.IAM_USER
    operation = 'list_users'
    list_key = 'Users'
    name_field = 'UserName'

    def _fetch_tags(self, client, item):
        user = client.get_user(UserName=item['UserName']).get('User', {})
        return extract_tags(user.get('Tags'))


class IamPolicyDiscoverer(IamDiscoverer):
    name = 'iam-policies'
    kind = ResourceKind.IAM_POLICY
    operation = 'list_policies'
    list_key = 'Policies'
    name_field = 'PolicyName'
    # Local scope returns only customer-managed policies
    list_kwargs = {'Scope': 'Local'}

    def _fetch_tags(self, client, item):
        response = client.list_policy_tags(PolicyArn=item['Arn'])
        return extract_tags(response.get('Tags'))
