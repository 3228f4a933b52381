"""
Lambda function and EKS cluster discoverers
"""
import logging
from typing import List

from ..models import ResourceKind, ResourceRecord
from .base import Discoverer, extract_tags, iter_pages

logger = logging.getLogger(__name__)


class LambdaFunctionDiscoverer(Discoverer):
    name = 'lambda-functions'
    service = 'lambda'

    def _discover(self, locality: str) -> List[ResourceRecord]:
        client = self.client(locality)
        resources = []

        for page in iter_pages(client, 'list_functions'):
            for function in page.get('Functions', []):
                function_name = function.get('FunctionName')
                function_arn = function.get('FunctionArn')
                if not function_name or not function_arn:
                    continue

                try:
                    response = client.list_tags(Resource=function_arn)
                except Exception as e:
                    logger.error(f"Error getting tags for Lambda function {function_name}: {e}")
                    continue

                resources.append(ResourceRecord(
                    identity=function_arn,
                    kind=ResourceKind.LAMBDA_FUNCTION,
                    locality=locality,
                    tags=extract_tags(response.get('Tags')),
                    short_id=function_name,
                ))

        return resources


class EksClusterDiscoverer(Discoverer):
    name = 'eks-clusters'
    service = 'eks'

    def _discover(self, locality: str) -> List[ResourceRecord]:
        client = self.client(locality)
        resources = []

        for page in iter_pages(client, 'list_clusters'):
            for cluster_name in page.get('clusters', []):
                try:
                    cluster = client.describe_cluster(name=cluster_name).get('cluster')
                except Exception as e:
                    logger.error(f"Error getting details for EKS cluster {cluster_name}: {e}")
                    continue
                if not cluster:
                    continue

                cluster_arn = cluster.get('arn') or (
                    f"arn:{self.context.partition(locality)}:eks:{locality}:"
                    f"{self.context.account_id}:cluster/{cluster_name}"
                )
                resources.append(ResourceRecord(
                    identity=cluster_arn,
                    kind=ResourceKind.EKS_CLUSTER,
                    locality=locality,
                    tags=extract_tags(cluster.get('tags')),
                    short_id=cluster_name,
                ))

        return resources
