"""Discovery module for taggable AWS resources across regions"""

from .base import Discoverer, extract_tags, iter_pages
from .compute import EksClusterDiscoverer, LambdaFunctionDiscoverer
from .ec2 import Ec2InstanceDiscoverer, SecurityGroupDiscoverer, SubnetDiscoverer, VpcDiscoverer
from .iam import IamPolicyDiscoverer, IamRoleDiscoverer, IamUserDiscoverer
from .lightsail import (
    LightsailBucketDiscoverer,
    LightsailDatabaseDiscoverer,
    LightsailDiskDiscoverer,
    LightsailInstanceDiscoverer,
    LightsailLoadBalancerDiscoverer
)
from .rds import RdsClusterDiscoverer, RdsInstanceDiscoverer
from .regions import RegionEnumerator
from .s3 import S3BucketDiscoverer
from .tagging_api import TaggingApiDiscoverer, infer_kind

# Precedence order: bulk listing first so the specific discoverers overwrite it
GLOBAL_DISCOVERERS = [
    IamRoleDiscoverer,
    IamUserDiscoverer,
    IamPolicyDiscoverer,
    S3BucketDiscoverer,
]

REGIONAL_DISCOVERERS = [
    TaggingApiDiscoverer,
    Ec2InstanceDiscoverer,
    SecurityGroupDiscoverer,
    SubnetDiscoverer,
    VpcDiscoverer,
    RdsInstanceDiscoverer,
    RdsClusterDiscoverer,
    LambdaFunctionDiscoverer,
    EksClusterDiscoverer,
    LightsailInstanceDiscoverer,
    LightsailDatabaseDiscoverer,
    LightsailLoadBalancerDiscoverer,
    LightsailDiskDiscoverer,
    LightsailBucketDiscoverer,
]


def build_discoverers(context, discoverer_classes):
    """Instantiate discoverer classes against a run context"""
    return [cls(context) for cls in discoverer_classes]


__all__ = [
    'Discoverer',
    'RegionEnumerator',
    'TaggingApiDiscoverer',
    'Ec2InstanceDiscoverer',
    'SecurityGroupDiscoverer',
    'SubnetDiscoverer',
    'VpcDiscoverer',
    'IamRoleDiscoverer',
    'IamUserDiscoverer',
    'IamPolicyDiscoverer',
    'S3BucketDiscoverer',
    'RdsInstanceDiscoverer',
    'RdsClusterDiscoverer',
    'LambdaFunctionDiscoverer',
    'EksClusterDiscoverer',
    'LightsailInstanceDiscoverer',
    'LightsailDatabaseDiscoverer',
    'LightsailLoadBalancerDiscoverer',
    'LightsailDiskDiscoverer',
    'LightsailBucketDiscoverer',
    'GLOBAL_DISCOVERERS',
    'REGIONAL_DISCOVERERS',
    'build_discoverers',
    'extract_tags',
    'infer_kind',
    'iter_pages',
]
