"""
Data models shared by discovery, aggregation and tagging
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

GLOBAL_LOCALITY = 'global'
RESERVED_TAG_PREFIX = 'aws:'


class ResourceKind(Enum):
    """Resource types with a native tagging operation"""
    EC2_INSTANCE = "ec2-instance"
    SECURITY_GROUP = "security-group"
    SUBNET = "subnet"
    VPC = "vpc"
    IAM_ROLE = "iam-role"
    IAM_USER = "iam-user"
    IAM_POLICY = "iam-policy"
    S3_BUCKET = "s3-bucket"
    RDS_INSTANCE = "rds-instance"
    RDS_CLUSTER = "rds-cluster"
    LAMBDA_FUNCTION = "lambda-function"
    EKS_CLUSTER = "eks-cluster"
    LIGHTSAIL_INSTANCE = "lightsail-instance"
    LIGHTSAIL_DATABASE = "lightsail-database"
    LIGHTSAIL_LOAD_BALANCER = "lightsail-load-balancer"
    LIGHTSAIL_DISK = "lightsail-disk"
    LIGHTSAIL_BUCKET = "lightsail-bucket"
    SNS_TOPIC = "sns-topic"
    GENERIC = "generic"


class RunState(Enum):
    """States of a single tagging run"""
    INIT = "init"
    ENUMERATING_REGIONS = "enumerating_regions"
    DISCOVERING_GLOBAL = "discovering_global"
    DISCOVERING_REGIONS = "discovering_regions"
    AGGREGATING = "aggregating"
    APPLYING_POLICY = "applying_policy"
    TAGGING = "tagging"
    SUMMARIZING = "summarizing"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class ResourceRecord:
    """A discovered resource and the tags it currently carries"""
    identity: str
    kind: ResourceKind
    locality: str
    tags: Dict[str, str] = field(default_factory=dict)
    short_id: Optional[str] = None

    @property
    def service(self) -> str:
        """Service field of the ARN, e.g. 'ec2' for arn:aws:ec2:..."""
        parts = self.identity.split(':')
        return parts[2] if len(parts) > 2 and parts[2] else 'unknown'

    @property
    def label(self) -> str:
        if self.kind is ResourceKind.GENERIC:
            return self.service
        return self.kind.value

    @property
    def display_name(self) -> str:
        return self.short_id or self.identity


@dataclass
class TaggingOutcome:
    """Result of tagging one resource"""
    identity: str
    kind: ResourceKind
    attempted: bool
    succeeded: bool
    attempt_count: int = 0
    last_error: Optional[str] = None


@dataclass
class RunSummary:
    """Consolidated results of a tagging run"""
    success_count: int
    failure_count: int
    skipped_count: int
    discovered_count: int
    elapsed_seconds: float
    failed_identities: List[str] = field(default_factory=list)
    outcomes: List[TaggingOutcome] = field(default_factory=list)
