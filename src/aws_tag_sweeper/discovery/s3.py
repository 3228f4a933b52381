"""
S3 bucket discoverer (global listing, per-bucket region)
"""
import logging
from typing import List, Optional

from botocore.exceptions import ClientError

from ..models import GLOBAL_LOCALITY, ResourceKind, ResourceRecord
from .base import Discoverer, extract_tags, iter_pages

logger = logging.getLogger(__name__)


class S3BucketDiscoverer(Discoverer):
    """S3 buckets, each recorded under the region it lives in"""

    name = 's3-buckets'
    service = 's3'
    is_global = True

    def _discover(self, locality: str) -> List[ResourceRecord]:
        s3 = self.client(GLOBAL_LOCALITY)
        resources = []

        for page in iter_pages(s3, 'list_buckets', 'ContinuationToken', 'ContinuationToken'):
            for bucket in page.get('Buckets', []):
                bucket_name = bucket.get('Name')
                if not bucket_name:
                    continue
                record = self._build_record(bucket_name)
                if record:
                    resources.append(record)

        return resources

    def _bucket_region(self, bucket_name: str) -> str:
        s3 = self.client(GLOBAL_LOCALITY)
        try:
            location = s3.get_bucket_location(Bucket=bucket_name)
        except Exception as e:
            logger.error(f"Error getting bucket location for {bucket_name}: {e}")
            return self.context.home_region

        # us-east-1 buckets report no location constraint
        region = location.get('LocationConstraint')
        if not region or region == 'null':
            return self.context.home_region
        return region

    def _build_record(self, bucket_name: str) -> Optional[ResourceRecord]:
        region = self._bucket_region(bucket_name)
        s3_regional = self.context.client('s3', region)

        try:
            response = s3_regional.get_bucket_tagging(Bucket=bucket_name)
            tags = extract_tags(response.get('TagSet'))
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') != 'NoSuchTagSet':
                # put_bucket_tagging replaces the whole set; skip buckets whose tags are unknown
                logger.error(f"Error getting tags for bucket {bucket_name}: {e}")
                return None
            tags = {}
        except Exception as e:
            logger.error(f"Error getting tags for bucket {bucket_name}: {e}")
            return None

        return ResourceRecord(
            identity=f"arn:aws:s3:::{bucket_name}",
            kind=ResourceKind.S3_BUCKET,
            locality=region,
            tags=tags,
            short_id=bucket_name,
        )
