"""
Taggers: apply a computed tag set through each resource kind's native API
"""
import logging
from typing import Callable, Dict, List, Mapping

from ..context import RunContext
from ..exceptions import TaggingError
from ..models import ResourceKind, ResourceRecord

logger = logging.getLogger(__name__)

TagHandler = Callable[[ResourceRecord, Mapping[str, str]], None]


def to_tag_list(tags: Mapping[str, str], key_field: str = 'Key', value_field: str = 'Value') -> List[Dict[str, str]]:
    """Convert a tag mapping into the list-of-pairs shape most AWS APIs expect"""
    return [{key_field: key, value_field: value} for key, value in tags.items()]


class ResourceTagger:
    """Dispatches tag-apply calls by resource kind"""

    def __init__(self, context: RunContext):
        self.context = context

        self.handlers: Dict[ResourceKind, TagHandler] = {
            ResourceKind.EC2_INSTANCE: self._tag_ec2_resource,
            ResourceKind.SECURITY_GROUP: self._tag_ec2_resource,
            ResourceKind.SUBNET: self._tag_ec2_resource,
            ResourceKind.VPC: self._tag_ec2_resource,
            ResourceKind.IAM_ROLE: self._tag_iam_role,
            ResourceKind.IAM_USER: self._tag_iam_user,
            ResourceKind.IAM_POLICY: self._tag_iam_policy,
            ResourceKind.S3_BUCKET: self._tag_s3_bucket,
            ResourceKind.RDS_INSTANCE: self._tag_rds_resource,
            ResourceKind.RDS_CLUSTER: self._tag_rds_resource,
            ResourceKind.LAMBDA_FUNCTION: self._tag_lambda_function,
            ResourceKind.EKS_CLUSTER: self._tag_eks_cluster,
            ResourceKind.LIGHTSAIL_INSTANCE: self._tag_lightsail_resource,
            ResourceKind.LIGHTSAIL_DATABASE: self._tag_lightsail_resource,
            ResourceKind.LIGHTSAIL_LOAD_BALANCER: self._tag_lightsail_resource,
            ResourceKind.LIGHTSAIL_DISK: self._tag_lightsail_resource,
            ResourceKind.LIGHTSAIL_BUCKET: self._tag_lightsail_resource,
            ResourceKind.SNS_TOPIC: self._tag_sns_resource,
        }

    def apply_tags(self, record: ResourceRecord, tags: Mapping[str, str]) -> None:
        """
        Apply tags to one resource

        Kinds without a native handler go through the Resource Groups Tagging API.

        Raises:
            TaggingError, botocore errors: the call failed
        """
        handler = self.handlers.get(record.kind, self._tag_with_tagging_api)
        handler(record, tags)
        logger.info(f"Successfully tagged {record.label}: {record.identity}")

    def _require_short_id(self, record: ResourceRecord) -> str:
        if not record.short_id:
            raise TaggingError(record.identity, f"{record.kind.value} needs a resource id to be tagged")
        return record.short_id

    def _tag_ec2_resource(self, record, tags):
        """Instances, security groups, subnets and VPCs share CreateTags"""
        ec2 = self.context.client('ec2', record.locality)
        ec2.create_tags(Resources=[self._require_short_id(record)], Tags=to_tag_list(tags))

    def _tag_iam_role(self, record, tags):
        iam = self.context.client('iam')
        iam.tag_role(RoleName=self._require_short_id(record), Tags=to_tag_list(tags))

    def _tag_iam_user(self, record, tags):
        iam = self.context.client('iam')
        iam.tag_user(UserName=self._require_short_id(record), Tags=to_tag_list(tags))

    def _tag_iam_policy(self, record, tags):
        iam = self.context.client('iam')
        iam.tag_policy(PolicyArn=record.identity, Tags=to_tag_list(tags))

    def _tag_s3_bucket(self, record, tags):
        s3 = self.context.client('s3', record.locality)
        s3.put_bucket_tagging(
            Bucket=self._require_short_id(record),
            Tagging={'TagSet': to_tag_list(tags)}
        )

    def _tag_rds_resource(self, record, tags):
        rds = self.context.client('rds', record.locality)
        rds.add_tags_to_resource(ResourceName=record.identity, Tags=to_tag_list(tags))

    def _tag_lambda_function(self, record, tags):
        lambda_client = self.context.client('lambda', record.locality)
        lambda_client.tag_resource(Resource=record.identity, Tags=dict(tags))

    def _tag_eks_cluster(self, record, tags):
        eks = self.context.client('eks', record.locality)
        eks.tag_resource(resourceArn=record.identity, tags=dict(tags))

    def _tag_lightsail_resource(self, record, tags):
        """Lightsail addresses resources by name and uses lower-case key/value pairs"""
        lightsail = self.context.client('lightsail', record.locality)
        lightsail.tag_resource(
            resourceName=self._require_short_id(record),
            resourceArn=record.identity,
            tags=to_tag_list(tags, key_field='key', value_field='value')
        )

    def _tag_sns_resource(self, record, tags):
        sns = self.context.client('sns', record.locality)
        sns.tag_resource(ResourceArn=record.identity, Tags=to_tag_list(tags))

    def _tag_with_tagging_api(self, record, tags):
        tagging = self.context.client('resourcegroupstaggingapi', record.locality)
        response = tagging.tag_resources(ResourceARNList=[record.identity], Tags=dict(tags))

        failed = response.get('FailedResourcesMap') or {}
        if failed:
            details = failed.get(record.identity) or next(iter(failed.values()))
            message = details.get('ErrorMessage') or details.get('ErrorCode') or 'tagging API rejected the resource'
            raise TaggingError(record.identity, message)
